"""
Canonical form of line segments.

Every segment is reduced to a direction angle folded into [0, pi), the
signed offset of its carrier line along the unit normal, its extent along
the unit direction and its half thickness. Anti-parallel segments on the
same carrier line end up with identical angle and offset.
"""

import math

import numpy as np
from shapely.geometry import LineString

from fatlines.errors import InvalidInputError
from fatlines.models import CanonicalRecord, Line


MIN_LINE_LENGTH = 1e-12


def coerce_line(line, payload=None):
    """
    Accept a Line, a two-point shapely LineString or a pair of points.
    """
    if isinstance(line, Line):
        return line
    try:
        if isinstance(line, LineString):
            coords = list(line.coords)
            if len(coords) != 2:
                raise InvalidInputError(
                    f"LineString must have exactly 2 points, got {len(coords)}", payload
                )
            return Line.from_points(coords[0], coords[1])
        start, end = line
        return Line.from_points(start, end)
    except InvalidInputError:
        raise
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Cannot interpret {line!r} as a line: {e}", payload) from e


def direction_basis(angle):
    """Unit direction and unit normal for a canonical angle."""
    cos = math.cos(angle)
    sin = math.sin(angle)
    return np.array([cos, sin]), np.array([-sin, cos])


def project_point(point, angle):
    """Return (s, offset) of a point in the basis of a canonical angle."""
    u, n = direction_basis(angle)
    p = np.asarray(point[:2], dtype=float)
    return float(u @ p), float(n @ p)


def canonical_angle(dx, dy):
    """
    Fold a direction into [0, pi) so anti-parallel vectors share an angle.

    Expects a unit vector.
    """
    if dx < 0 or (abs(dx) < MIN_LINE_LENGTH and dy < 0):
        dx, dy = -dx, -dy
    angle = math.atan2(dy, dx)
    if angle < 0:
        angle += math.pi
    if angle == 0 or angle >= math.pi - MIN_LINE_LENGTH:
        angle = 0.0
    return angle


def canonicalize(payload, line, half_thickness):
    """
    Convert a segment into a CanonicalRecord.

    Raises InvalidInputError for lines shorter than MIN_LINE_LENGTH and
    for negative or non-finite thickness.
    """
    line = coerce_line(line, payload)

    if not math.isfinite(half_thickness) or half_thickness < 0:
        raise InvalidInputError(f"Thickness must be a non-negative number, got {2 * half_thickness}", payload)

    p0 = np.asarray(line.start[:2], dtype=float)
    p1 = np.asarray(line.end[:2], dtype=float)
    if not (np.all(np.isfinite(p0)) and np.all(np.isfinite(p1))):
        raise InvalidInputError("Line has non-finite coordinates", payload)

    d = p1 - p0
    length = float(np.hypot(d[0], d[1]))
    if length < MIN_LINE_LENGTH:
        raise InvalidInputError("Zero-length line", payload)

    angle = canonical_angle(d[0] / length, d[1] / length)

    # regenerate the basis from the angle so records with equal angles
    # share bit-identical directions
    u, n = direction_basis(angle)
    s0 = float(u @ p0)
    s1 = float(u @ p1)

    return CanonicalRecord(
        payload=payload,
        angle=angle,
        offset=float(n @ p0),
        min_s=min(s0, s1),
        max_s=max(s0, s1),
        perp_tol=float(half_thickness),
    )
