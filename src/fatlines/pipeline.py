"""
Pipeline orchestration for fatlines.

Reads a segments file, runs the overlap index or the line unifier and
writes the results, plus a validation report for merge runs.
"""

import os

from fatlines.config import load_config
from fatlines.errors import InvalidInputError
from fatlines.io.load_segments import load_segments
from fatlines.io.save_artifacts import ensure_dir, save_json
from fatlines.models import MergeDocument, RejectedSegment, UnifyDocument, generate_doc_id
from fatlines.overlap_index import OverlapIndex
from fatlines.tracer import get_tracer, trace
from fatlines.unify import unify_lines
from fatlines.validate.report import generate_report
from fatlines.validate.rules import run_validation


@trace(label="run_merge")
def run_merge(input_path, out_dir, config=None, config_path=None):
    """
    Group the segments of a file and write their fat lines.

    Args:
        input_path: segments JSON file
        out_dir: output directory
        config: EngineConfig object (optional)
        config_path: path to YAML config file (optional)

    Returns:
        MergeDocument whose group items are segment ids
    """
    tracer = get_tracer()

    if config is None:
        config = load_config(config_path)

    segments = load_segments(input_path)
    ensure_dir(out_dir)

    document = MergeDocument(
        doc_id=generate_doc_id(input_path, "merge"),
        source_path=input_path,
        segment_count=len(segments),
    )

    with tracer.span("build_index", module="pipeline"):
        index = OverlapIndex.from_config(config.overlap)
        for segment in segments:
            try:
                index.add_item(segment.id, segment.to_line(), segment.thickness)
            except InvalidInputError as e:
                tracer.event(f"Rejected segment {segment.id}: {e}", level="WARN")
                document.rejected.append(RejectedSegment(segment_id=segment.id, reason=str(e)))

    with tracer.span("group", module="pipeline"):
        groups = index.get_overlap_groups(config.overlap.thickness_tolerance)
        document.groups.extend(groups)

    if config.validation.enabled:
        with tracer.span("validate", module="pipeline"):
            document.validation = run_validation(groups, config, document.rejected)
            generate_report(document.validation, out_dir)

    save_json(document, os.path.join(out_dir, "groups.json"))

    tracer.event(
        f"Merge complete: {len(segments)} segments, {len(groups)} groups, "
        f"{len(document.rejected)} rejected"
    )

    return document


@trace(label="run_unify")
def run_unify(input_path, out_dir, config=None, config_path=None):
    """
    Deduplicate and merge collinear segments of a file, ignoring thickness.

    Returns:
        UnifyDocument with the merged lines
    """
    tracer = get_tracer()

    if config is None:
        config = load_config(config_path)

    segments = load_segments(input_path)
    ensure_dir(out_dir)

    lines = unify_lines(
        [s.to_line() for s in segments],
        tolerance=config.unify.tolerance,
        angle_tolerance=config.overlap.angle_tolerance,
    )

    document = UnifyDocument(
        doc_id=generate_doc_id(input_path, "unify"),
        source_path=input_path,
        input_count=len(segments),
        lines=lines,
    )
    save_json(document, os.path.join(out_dir, "unified_lines.json"))

    tracer.event(f"Unify complete: {len(segments)} segments -> {len(lines)} lines")

    return document
