"""
Direction bucketing.

Canonical angles are quantized to round(angle / angle_tolerance); only
records sharing a key are compared further. Two angles closer than the
tolerance can still straddle a bucket boundary and never meet.
"""


def direction_key(angle, angle_tolerance):
    """Bucket key of a canonical angle."""
    return int(round(angle / angle_tolerance))


def bucket_by_direction(records, angle_tolerance):
    """
    Partition records into direction buckets.

    Returns a dict of key -> list of records. Buckets keep first-seen
    order and records keep insertion order within a bucket.
    """
    buckets = {}
    for record in records:
        buckets.setdefault(direction_key(record.angle, angle_tolerance), []).append(record)
    return buckets
