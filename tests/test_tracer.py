"""Tests for the tracer module."""

import numpy as np
import pytest


class TestSummarize:
    """Tests for object summarization."""

    def test_numpy_array_summary(self):
        """Test that numpy arrays are summarized with shape and type."""
        from fatlines.tracer import summarize

        summary = summarize(np.zeros((10, 2), dtype=np.float64))

        assert "ndarray" in summary
        assert "10x2" in summary
        assert "float64" in summary

    def test_summary_capped_length(self):
        """Test that summary never exceeds max length."""
        from fatlines.tracer import summarize

        large_dict = {f"key_{i}": f"value_{i}" for i in range(100)}

        assert len(summarize(large_dict, max_len=20)) <= 20

    def test_list_summary(self):
        """Test list summarization."""
        from fatlines.tracer import summarize

        summary = summarize([1, 2, 3, 4, 5])

        assert "list" in summary
        assert "len=5" in summary

    def test_none_summary(self):
        """Test None summarization."""
        from fatlines.tracer import summarize

        assert summarize(None) == "None"

    def test_shapely_summary(self):
        """Test that shapely geometries show their bounds."""
        from shapely.geometry import LineString
        from fatlines.tracer import summarize

        summary = summarize(LineString([(0, 0), (2, 1)]))

        assert summary.startswith("LineString(bounds=")

    def test_engine_model_summary(self):
        """Test compact summaries of lines, fat lines and groups."""
        from fatlines.models import FatLine, Line, OverlapMergeGroup
        from fatlines.tracer import summarize

        line = Line.from_points((0, 0), (3, 4))
        fat_line = FatLine(centerline=line, thickness=0.2)
        group = OverlapMergeGroup(items=["a", "b"], fat_lines=[fat_line])

        assert summarize(line).startswith("Line(")
        assert "len=5.000" in summarize(fat_line)
        assert summarize(group) == "OverlapMergeGroup(items=2,fat_lines=1)"

    def test_pydantic_model_summary(self):
        """Test generic Pydantic model summarization."""
        from fatlines.models import RejectedSegment
        from fatlines.tracer import summarize

        summary = summarize(RejectedSegment(segment_id="s", reason="r"))

        assert "RejectedSegment" in summary


class TestTracerSpan:
    """Tests for tracer span functionality."""

    def test_span_nesting(self, capsys):
        """Test that spans and events are written with indentation."""
        from fatlines.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        tracer = get_tracer()
        try:
            with tracer.span("outer", module="test"):
                with tracer.span("inner", module="test"):
                    tracer.event("inside")
        finally:
            configure_tracer(enabled=False)

        lines = capsys.readouterr().err.strip().split("\n")

        assert len(lines) == 5
        assert "test:inner  start" in lines[1]
        assert "    test:inner  inside" in lines[2]

    def test_level_filtering(self, capsys):
        """Test that DEBUG events are hidden at INFO level."""
        from fatlines.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        try:
            get_tracer().event("hidden", level="DEBUG")
            get_tracer().event("shown", level="WARN")
        finally:
            configure_tracer(enabled=False)

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err

    def test_span_failure_logged(self, capsys):
        """Test that an exception inside a span is logged and re-raised."""
        from fatlines.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        try:
            with pytest.raises(RuntimeError):
                with get_tracer().span("boom", module="test"):
                    raise RuntimeError("bad")
        finally:
            configure_tracer(enabled=False)

        assert "failed" in capsys.readouterr().err

    def test_tracer_disabled_no_output(self, capsys):
        """Test that disabled tracer produces no output."""
        from fatlines.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=False)
        tracer = get_tracer()

        with tracer.span("test", module="test"):
            tracer.event("should not appear")

        assert capsys.readouterr().err == ""

    def test_trace_file(self, temp_dir):
        """Test that trace lines are mirrored to a file."""
        import os
        from fatlines.overlap_index import OverlapIndex
        from fatlines.tracer import configure_tracer

        path = os.path.join(temp_dir, "trace.log")
        configure_tracer(enabled=True, level="INFO", file_path=path)
        try:
            index = OverlapIndex()
            index.add_item(1, ((0, 0), (1, 0)), 0.1)
            index.get_overlap_groups()
        finally:
            configure_tracer(enabled=False)

        with open(path, encoding="utf-8") as f:
            content = f.read()
        assert "get_overlap_groups" in content
        assert "1 groups" in content


class TestTraceDecorator:
    """Tests for the @trace decorator."""

    def test_decorator_runs_function(self):
        """Test that decorated function executes normally."""
        from fatlines.tracer import configure_tracer, trace

        configure_tracer(enabled=False)

        @trace(label="test_func")
        def my_func(x):
            return x * 2

        assert my_func(5) == 10

    def test_decorator_with_exception(self):
        """Test that decorator lets exceptions through."""
        from fatlines.tracer import configure_tracer, trace

        configure_tracer(enabled=False)

        @trace(label="failing_func")
        def failing_func():
            raise ValueError("test error")

        with pytest.raises(ValueError):
            failing_func()
