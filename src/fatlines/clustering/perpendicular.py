"""
Perpendicular-band clustering.

Inside one direction bucket every record covers the 1-D band
[offset - perp_tol, offset + perp_tol] on the normal axis. Sorting bands
by their low edge and sweeping once yields the connected components of
the overlap relation.
"""


def cluster_perpendicular_bands(records, thickness_tolerance=0.0):
    """
    Split one direction bucket into chains of overlapping fat strips.

    thickness_tolerance widens each band on both sides, so strips that
    almost touch are still chained. Returns a list of clusters, each a
    list of records in ascending low-edge order.
    """
    ordered = sorted(records, key=lambda r: r.band(thickness_tolerance)[0])

    clusters = []
    current = []
    current_high = float("-inf")

    for record in ordered:
        low, high = record.band(thickness_tolerance)
        if current and low <= current_high:
            current.append(record)
            current_high = max(current_high, high)
        else:
            if current:
                clusters.append(current)
            current = [record]
            current_high = high

    if current:
        clusters.append(current)

    return clusters
