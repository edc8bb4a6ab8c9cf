"""
Pydantic data models for the fatlines engine.

Geometry, engine output and pipeline documents all flow through these
models. Geometry models are frozen: once the builder has produced a
FatLine or a group it is never mutated.
"""

import hashlib
import math
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field
from shapely.geometry import LineString
from shapely.ops import unary_union


# Slice/merge epsilon in source units
EPSILON = 1e-5


class Severity(str, Enum):
    """Severity levels for validation checks."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"


class Line(BaseModel):
    """A finite 2-D line segment. A third coordinate is carried but ignored."""
    start: Tuple[float, ...] = Field(..., min_length=2, max_length=3)
    end: Tuple[float, ...] = Field(..., min_length=2, max_length=3)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @classmethod
    def from_points(cls, start, end):
        """Build a line from two coordinate sequences."""
        return cls(
            start=tuple(float(c) for c in start),
            end=tuple(float(c) for c in end),
        )

    @property
    def length(self):
        """Planar length of the segment."""
        return math.hypot(self.end[0] - self.start[0], self.end[1] - self.start[1])

    def to_linestring(self):
        """Convert to a 2-D shapely LineString."""
        return LineString([self.start[:2], self.end[:2]])

    def is_almost_equal(self, other, tolerance=EPSILON, ignore_direction=True):
        """
        Check whether two lines share endpoints within tolerance.

        With ignore_direction, a reversed copy of a line counts as equal.
        """
        if _points_close(self.start, other.start, tolerance) and _points_close(self.end, other.end, tolerance):
            return True
        if ignore_direction:
            return _points_close(self.start, other.end, tolerance) and _points_close(self.end, other.start, tolerance)
        return False


def _points_close(p, q, tolerance):
    return math.hypot(p[0] - q[0], p[1] - q[1]) <= tolerance


class FatLine(BaseModel):
    """A centerline with the merged envelope thickness of one slice."""
    centerline: Line
    thickness: float = Field(..., ge=0.0)

    model_config = ConfigDict(frozen=True, extra="forbid")

    def to_polygon(self):
        """Rectangle covered by this fat line, as a shapely Polygon."""
        return self.centerline.to_linestring().buffer(self.thickness / 2.0, cap_style="flat")


class CanonicalRecord(BaseModel):
    """Direction-normalized form of one input segment."""
    payload: Any = None
    angle: float         # [0, pi)
    offset: float        # signed distance of the carrier line from the origin
    min_s: float
    max_s: float
    perp_tol: float      # half thickness

    model_config = ConfigDict(frozen=True)

    def band(self, extra=0.0):
        """Perpendicular interval (low, high) covered by the fat strip."""
        return (
            self.offset - self.perp_tol - extra,
            self.offset + self.perp_tol + extra,
        )


class OverlapMergeGroup(BaseModel):
    """
    A connected set of overlapping segments and the fat lines obtained
    by slicing and merging them along their shared axis.
    """
    items: List[Any] = Field(default_factory=list)
    fat_lines: List[FatLine] = Field(default_factory=list)
    records: List[CanonicalRecord] = Field(default_factory=list, exclude=True, repr=False)

    model_config = ConfigDict(frozen=True)

    @property
    def is_singleton(self):
        return len(self.items) == 1

    def footprint(self):
        """Union of all fat-line rectangles of the group."""
        return unary_union([fl.to_polygon() for fl in self.fat_lines])


class SegmentInput(BaseModel):
    """One segment as read from a segments file."""
    id: str
    start: List[float] = Field(..., min_length=2, max_length=3)
    end: List[float] = Field(..., min_length=2, max_length=3)
    thickness: float = 0.0
    properties: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    def to_line(self):
        return Line.from_points(self.start, self.end)


class RejectedSegment(BaseModel):
    """An input segment the index refused."""
    segment_id: str
    reason: str

    model_config = ConfigDict(extra="forbid")


class CheckResult(BaseModel):
    """Result of a single validation check."""
    rule_id: str
    severity: Severity
    passed: bool
    message: str
    evidence: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class ValidationReport(BaseModel):
    """Collection of validation check results."""
    checks: List[CheckResult] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @property
    def has_errors(self):
        """Check if any errors exist."""
        return any(c.severity == Severity.ERROR and not c.passed for c in self.checks)

    @property
    def error_count(self):
        """Count of failed error-level checks."""
        return sum(1 for c in self.checks if c.severity == Severity.ERROR and not c.passed)

    @property
    def warning_count(self):
        """Count of failed warning-level checks."""
        return sum(1 for c in self.checks if c.severity == Severity.WARN and not c.passed)


class MergeDocument(BaseModel):
    """Output of a merge run: groups keyed by segment ids plus validation."""
    doc_id: str
    created_at: str = Field(default_factory=lambda: datetime.now().isoformat())
    source_path: str = ""
    segment_count: int = 0
    groups: List[OverlapMergeGroup] = Field(default_factory=list)
    rejected: List[RejectedSegment] = Field(default_factory=list)
    validation: ValidationReport = Field(default_factory=ValidationReport)

    model_config = ConfigDict(extra="forbid")


class UnifyDocument(BaseModel):
    """Output of a unify run."""
    doc_id: str
    created_at: str = Field(default_factory=lambda: datetime.now().isoformat())
    source_path: str = ""
    input_count: int = 0
    lines: List[Line] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


def generate_doc_id(source_path, kind="merge"):
    """
    Generate deterministic document ID from the input path.
    """
    data = f"{kind}:{source_path}"
    h = hashlib.sha256(data.encode()).hexdigest()[:16]
    return f"doc_{h}"
