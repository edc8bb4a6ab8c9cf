"""
Validation rules for overlap groups.

Checks that the fat lines of every group cover exactly the members'
extent, are ordered along the axis and carry the true perpendicular
envelope of the members they span.
"""

import numpy as np

from fatlines.geometry.canonical import project_point
from fatlines.models import CheckResult, Severity, ValidationReport
from fatlines.tracer import get_tracer, trace


MAX_EVIDENCE = 20


@trace(label="run_validation")
def run_validation(groups, config, rejected=()):
    """
    Run all validation checks on a list of OverlapMergeGroup.

    Returns ValidationReport with all check results.
    """
    tracer = get_tracer()

    tolerance = config.validation.tolerance
    epsilon = config.overlap.epsilon

    checks = [
        check_coverage(groups, tolerance, epsilon),
        check_fat_line_order(groups, tolerance),
        check_envelope(groups, tolerance, epsilon),
        check_inputs_accepted(rejected),
    ]

    report = ValidationReport(checks=checks)
    tracer.event(f"Validation complete: {report.error_count} errors, {report.warning_count} warnings")

    return report


def fat_line_intervals(group):
    """
    (s0, s1, offset0, offset1) of each fat line in the basis of the group.
    """
    if not group.records:
        return []
    angle = group.records[0].angle
    intervals = []
    for fat_line in group.fat_lines:
        s0, off0 = project_point(fat_line.centerline.start, angle)
        s1, off1 = project_point(fat_line.centerline.end, angle)
        intervals.append((s0, s1, off0, off1))
    return intervals


def merge_intervals(intervals, tolerance):
    """Union of [a, b] intervals, joining pieces closer than tolerance."""
    merged = []
    for a, b in sorted(intervals):
        if merged and a <= merged[-1][1] + tolerance:
            merged[-1][1] = max(merged[-1][1], b)
        else:
            merged.append([a, b])
    return [tuple(m) for m in merged]


def check_coverage(groups, tolerance, epsilon):
    """
    The union of fat-line intervals equals the union of member intervals.
    """
    bad = []
    for idx, group in enumerate(groups):
        members = merge_intervals([(r.min_s, r.max_s) for r in group.records], tolerance)
        members = [m for m in members if m[1] - m[0] >= epsilon]
        covered = merge_intervals([(s0, s1) for s0, s1, _, _ in fat_line_intervals(group)], tolerance)

        matches = len(members) == len(covered) and all(
            abs(m[0] - c[0]) <= tolerance and abs(m[1] - c[1]) <= tolerance
            for m, c in zip(members, covered)
        )
        if not matches:
            bad.append({"group": idx, "members": members, "fat_lines": covered})

    if bad:
        return CheckResult(
            rule_id="coverage_complete",
            severity=Severity.ERROR,
            passed=False,
            message=f"{len(bad)} groups whose fat lines do not cover their members exactly",
            evidence={"groups": bad[:MAX_EVIDENCE]},
        )

    return CheckResult(
        rule_id="coverage_complete",
        severity=Severity.ERROR,
        passed=True,
        message="Fat lines cover every group exactly",
        evidence={"groups_checked": len(groups)},
    )


def check_fat_line_order(groups, tolerance):
    """
    Fat lines run in increasing s and do not overlap each other.
    """
    bad = []
    for idx, group in enumerate(groups):
        previous_end = float("-inf")
        for s0, s1, _, _ in fat_line_intervals(group):
            if s1 <= s0 or s0 < previous_end - tolerance:
                bad.append(idx)
                break
            previous_end = s1

    return CheckResult(
        rule_id="fat_lines_ordered",
        severity=Severity.ERROR,
        passed=not bad,
        message=(
            f"{len(bad)} groups with unordered or overlapping fat lines" if bad
            else "Fat lines are ordered and disjoint in every group"
        ),
        evidence={"groups": bad[:MAX_EVIDENCE]},
    )


def check_envelope(groups, tolerance, epsilon):
    """
    Every elementary slot under a fat line has the fat line's thickness
    and centre equal to the envelope of the members active there.
    """
    bad = []
    for idx, group in enumerate(groups):
        if not group.records:
            continue
        min_s = np.array([r.min_s for r in group.records])
        max_s = np.array([r.max_s for r in group.records])
        lows = np.array([r.offset - r.perp_tol for r in group.records])
        highs = np.array([r.offset + r.perp_tol for r in group.records])
        cuts = np.unique(np.concatenate([min_s, max_s]))

        for line_idx, (fat_line, (a, b, off_a, off_b)) in enumerate(zip(group.fat_lines, fat_line_intervals(group))):
            inner = cuts[(cuts > a + epsilon) & (cuts < b - epsilon)]
            points = np.concatenate([[a], inner, [b]])
            for s0, s1 in zip(points[:-1], points[1:]):
                if s1 - s0 < epsilon:
                    continue
                active = (min_s <= s0 + epsilon) & (max_s >= s1 - epsilon)
                if not active.any():
                    bad.append({"group": idx, "fat_line": line_idx, "slot": [float(s0), float(s1)], "reason": "uncovered"})
                    break
                low = lows[active].min()
                high = highs[active].max()

                t = 0.5 * (s0 + s1 - 2 * a) / (b - a)
                center = off_a + t * (off_b - off_a)
                if abs((high - low) - fat_line.thickness) > tolerance or abs(0.5 * (low + high) - center) > tolerance:
                    bad.append({
                        "group": idx,
                        "fat_line": line_idx,
                        "slot": [float(s0), float(s1)],
                        "expected_thickness": float(high - low),
                        "thickness": fat_line.thickness,
                    })
                    break

    return CheckResult(
        rule_id="envelope_exact",
        severity=Severity.ERROR,
        passed=not bad,
        message=(
            f"{len(bad)} fat lines deviate from their members' envelope" if bad
            else "Every fat line matches its members' envelope"
        ),
        evidence={"fat_lines": bad[:MAX_EVIDENCE]},
    )


def check_inputs_accepted(rejected):
    """
    Warn when input segments were refused by the index.
    """
    rejected = list(rejected)
    return CheckResult(
        rule_id="inputs_accepted",
        severity=Severity.WARN,
        passed=not rejected,
        message=(
            f"{len(rejected)} input segments were rejected" if rejected
            else "All input segments were accepted"
        ),
        evidence={"rejected": [r.model_dump() for r in rejected[:MAX_EVIDENCE]]},
    )
