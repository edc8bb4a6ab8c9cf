"""
Longitudinal grouping.

A perpendicular cluster is split wherever there is a gap along the shared
direction axis. Every resulting run of contiguous members is one overlap
group, singletons included.
"""


def split_longitudinal_groups(cluster, long_tolerance=1e-6):
    """
    Split a cluster into groups of records whose [min_s, max_s] intervals
    chain together.

    A record joins the current group when its min_s is at most
    long_tolerance past the furthest max_s seen so far.
    """
    ordered = sorted(cluster, key=lambda r: r.min_s)

    groups = []
    current = []
    current_max = float("-inf")

    for record in ordered:
        if current and record.min_s <= current_max + long_tolerance:
            current.append(record)
            current_max = max(current_max, record.max_s)
        else:
            if current:
                groups.append(current)
            current = [record]
            current_max = record.max_s

    if current:
        groups.append(current)

    return groups
