"""Pytest fixtures for fatlines tests."""

import json
import os
import tempfile

import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def default_config():
    """Create default engine configuration."""
    from fatlines.config import EngineConfig
    return EngineConfig()


@pytest.fixture
def index():
    """Empty overlap index with default tolerances."""
    from fatlines.overlap_index import OverlapIndex
    return OverlapIndex()


@pytest.fixture
def room_segments():
    """
    Two adjacent rooms drawn as closed loops; the shared wall of the
    second room is thicker than the rest.
    """
    lines = [
        ((-11.551756, -0.472737), (-7.760806, -0.472737)),
        ((-7.760806, -0.472737), (-7.760806, 3.318213)),
        ((-7.760806, 3.318213), (-11.551756, 3.318213)),
        ((-11.551756, 3.318213), (-11.551756, -0.472737)),
        ((-7.598881, -0.472737), (-3.646006, -0.472737)),
        ((-3.646006, -0.472737), (-3.646006, 3.318213)),
        ((-3.646006, 3.318213), (-7.598881, 3.318213)),
        ((-7.598881, 3.318213), (-7.598881, -0.472737)),
    ]
    thickness = [0.13335] * 7 + [0.4572]
    return list(zip(lines, thickness))


@pytest.fixture
def segments_file(temp_dir, room_segments):
    """Write the room segments, plus one degenerate segment, to a JSON file."""
    segments = [
        {"id": f"wall_{i}", "start": list(p0), "end": list(p1), "thickness": t}
        for i, ((p0, p1), t) in enumerate(room_segments)
    ]
    segments.append({"id": "dot", "start": [1.0, 1.0], "end": [1.0, 1.0], "thickness": 0.1})

    path = os.path.join(temp_dir, "segments.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump({"segments": segments}, f)
    return path
