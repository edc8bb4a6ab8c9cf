"""
Segment file loading.

A segments file is JSON: either a list of segment objects or an object
with a "segments" list. Each segment has an id, start and end points and
a full thickness, plus optional free-form properties.
"""

import json
import os

from pydantic import ValidationError

from fatlines.models import SegmentInput
from fatlines.tracer import get_tracer, trace


@trace(label="load_segments")
def load_segments(path):
    """
    Load and validate segments from a JSON file.

    Raises FileNotFoundError if path does not exist.
    Raises ValueError if the file is not a valid segments document.
    """
    tracer = get_tracer()

    if not os.path.exists(path):
        raise FileNotFoundError(f"Segments file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("segments")
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of segments or an object with a 'segments' list")

    segments = []
    for i, raw in enumerate(data):
        try:
            segments.append(SegmentInput.model_validate(raw))
        except ValidationError as e:
            raise ValueError(f"{path}: segment #{i} is invalid: {e}") from e

    ids = [s.id for s in segments]
    if len(set(ids)) != len(ids):
        raise ValueError(f"{path}: segment ids are not unique")

    tracer.event(f"Loaded {len(segments)} segments from {path}")
    return segments
