"""
Fat-line construction for one overlap group.

The union of the members' [min_s, max_s] intervals is cut at every member
endpoint. Each elementary slot gets the perpendicular envelope of the
members covering it, and contiguous slots with the same envelope are
merged into one FatLine.
"""

import numpy as np

from fatlines.geometry.canonical import direction_basis
from fatlines.models import EPSILON, FatLine, Line
from fatlines.tracer import get_tracer


def build_fat_lines(records, epsilon=EPSILON):
    """
    Compute the ordered FatLine sequence enveloping a group.

    All records are expected to share one direction bucket; the basis is
    taken from the first record. Zero-length slots and slices that collapse
    to a point are skipped. A slot no member covers is skipped and ends the
    current slice, so fat lines never bridge a gap. Returns an empty list
    when nothing of positive length remains.
    """
    if not records:
        return []

    tracer = get_tracer()

    min_s = np.array([r.min_s for r in records])
    max_s = np.array([r.max_s for r in records])
    lows = np.array([r.offset - r.perp_tol for r in records])
    highs = np.array([r.offset + r.perp_tol for r in records])

    # sorted and de-duplicated
    cuts = np.unique(np.concatenate([min_s, max_s]))
    u, n = direction_basis(records[0].angle)

    fat_lines = []
    pending = None  # [start, end, thickness, center]

    for s0, s1 in zip(cuts[:-1], cuts[1:]):
        if s1 - s0 < epsilon:
            continue

        active = (min_s <= s0 + epsilon) & (max_s >= s1 - epsilon)
        if not active.any():
            tracer.event(f"No member covers slot [{s0:.6f}, {s1:.6f}]", level="DEBUG")
            # a gap closes the pending slice
            if pending is not None:
                fat_lines.append(_to_fat_line(*pending[:3]))
                pending = None
            continue

        low = lows[active].min()
        high = highs[active].max()
        thickness = float(high - low)
        center = 0.5 * (low + high)

        start = u * s0 + n * center
        end = u * s1 + n * center
        if np.linalg.norm(end - start) < epsilon:
            continue

        if (
            pending is not None
            and abs(thickness - pending[2]) < epsilon
            and abs(center - pending[3]) < epsilon
        ):
            pending[1] = end
        else:
            if pending is not None:
                fat_lines.append(_to_fat_line(*pending[:3]))
            pending = [start, end, thickness, center]

    if pending is not None:
        fat_lines.append(_to_fat_line(*pending[:3]))

    return fat_lines


def _to_fat_line(start, end, thickness):
    return FatLine(
        centerline=Line.from_points(start, end),
        thickness=max(thickness, 0.0),
    )
