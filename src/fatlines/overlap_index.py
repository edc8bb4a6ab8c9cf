"""
Overlap index: groups payloads carried by 2-D segments into overlap groups.

A group is a connected component of segments that are
- (anti-)parallel within the angular bucket tolerance,
- overlapping on the normal axis once each segment's thickness is
  accounted for,
- overlapping or touching along their shared direction.

Records are accumulated in an append-only list; groups are recomputed
from scratch on every query, so queries never change the index.
"""

from fatlines.clustering.direction import bucket_by_direction
from fatlines.clustering.longitudinal import split_longitudinal_groups
from fatlines.clustering.perpendicular import cluster_perpendicular_bands
from fatlines.config import OverlapConfig, validate_overlap_config
from fatlines.errors import ConfigError, InvalidInputError
from fatlines.fatline_builder import build_fat_lines
from fatlines.geometry.canonical import canonicalize
from fatlines.models import EPSILON, OverlapMergeGroup
from fatlines.tracer import get_tracer, trace


class OverlapIndex:
    """
    Accumulates (payload, line, thickness) items and computes overlap groups.

    Not safe for concurrent mutation; separate instances share no state.
    """

    def __init__(self, angle_tolerance=1e-3, long_tolerance=1e-6, epsilon=EPSILON):
        validate_overlap_config(OverlapConfig(
            angle_tolerance=angle_tolerance,
            long_tolerance=long_tolerance,
            epsilon=epsilon,
        ))
        self.angle_tolerance = angle_tolerance
        self.long_tolerance = long_tolerance
        self.epsilon = epsilon
        self._records = []

    @classmethod
    def from_config(cls, overlap_config):
        """Build an index from an OverlapConfig."""
        return cls(
            angle_tolerance=overlap_config.angle_tolerance,
            long_tolerance=overlap_config.long_tolerance,
            epsilon=overlap_config.epsilon,
        )

    def __len__(self):
        return len(self._records)

    @property
    def records(self):
        """Canonical records in insertion order."""
        return tuple(self._records)

    def add_item(self, payload, line, thickness):
        """
        Add one segment and its payload.

        line may be a Line, a two-point LineString or a pair of points; z
        is ignored. thickness is the full width of the fat line. Raises
        InvalidInputError for degenerate lines or negative thickness and
        leaves the index unchanged.
        """
        try:
            half_thickness = float(thickness) * 0.5
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Thickness must be a number, got {thickness!r}", payload) from e

        record = canonicalize(payload, line, half_thickness)
        self._records.append(record)
        return record

    @trace(label="get_overlap_groups")
    def get_overlap_groups(self, thickness_tolerance=0.0):
        """
        Compute all overlap groups.

        thickness_tolerance is the extra gap tolerated between two strips
        that almost touch; 0 is strict. Singleton groups are included.
        """
        if thickness_tolerance < 0:
            raise ConfigError(f"thickness_tolerance must be non-negative, got {thickness_tolerance}")

        tracer = get_tracer()

        buckets = bucket_by_direction(self._records, self.angle_tolerance)

        groups = []
        cluster_count = 0
        for bucket in buckets.values():
            for cluster in cluster_perpendicular_bands(bucket, thickness_tolerance):
                cluster_count += 1
                for members in split_longitudinal_groups(cluster, self.long_tolerance):
                    groups.append(self._make_group(members))

        tracer.event(
            f"{len(self._records)} segments -> {len(buckets)} direction buckets, "
            f"{cluster_count} strip clusters, {len(groups)} groups"
        )
        return groups

    def _make_group(self, members):
        return OverlapMergeGroup(
            items=[r.payload for r in members],
            fat_lines=build_fat_lines(members, self.epsilon),
            records=members,
        )
