"""
Collinear line unification.

Removes duplicate lines and merges collinear lines that overlap or touch
within a tolerance into single lines. The collinear merge runs on an
OverlapIndex with zero-thickness items.
"""

from fatlines.errors import InvalidInputError
from fatlines.geometry.canonical import coerce_line, direction_basis
from fatlines.models import Line
from fatlines.overlap_index import OverlapIndex
from fatlines.tracer import get_tracer, trace


def remove_duplicate_lines(lines, tolerance=1e-4):
    """
    Drop lines equal to an earlier line within tolerance, either direction.

    Keeps the first occurrence and the input order.
    """
    unique = []
    for line in lines:
        line = coerce_line(line)
        if not any(line.is_almost_equal(kept, tolerance) for kept in unique):
            unique.append(line)
    return unique


@trace(label="unify_lines")
def unify_lines(lines, tolerance=1e-4, angle_tolerance=1e-3):
    """
    Deduplicate lines, then merge collinear lines that overlap or are
    within tolerance of each other along their axis.

    Each merged line spans the group's full extent and sits on the
    carrier line of the group's first member. Output order follows the
    groups of the index. Lines the index rejects, such as zero-length
    ones, are skipped with a warning.
    """
    tracer = get_tracer()

    deduped = remove_duplicate_lines(lines, tolerance)

    index = OverlapIndex(angle_tolerance=angle_tolerance, long_tolerance=tolerance)
    for i, line in enumerate(deduped):
        try:
            index.add_item(i, line, 0.0)
        except InvalidInputError as e:
            tracer.event(f"Skipped line {i}: {e}", level="WARN")

    merged = [
        _span_line(group.records)
        for group in index.get_overlap_groups(thickness_tolerance=tolerance)
    ]

    tracer.event(f"Unified {len(deduped)} unique lines into {len(merged)}")
    return merged


def _span_line(records):
    base = records[0]
    u, n = direction_basis(base.angle)
    s0 = min(r.min_s for r in records)
    s1 = max(r.max_s for r in records)
    return Line.from_points(u * s0 + n * base.offset, u * s1 + n * base.offset)
