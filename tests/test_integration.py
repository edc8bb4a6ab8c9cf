"""Integration tests for the pipeline and the CLI."""

import json
import os

import pytest


class TestMergePipeline:
    """Tests for run_merge."""

    def test_merge_outputs(self, segments_file, temp_dir, default_config):
        """Test that a merge run writes groups and reports."""
        from fatlines.pipeline import run_merge

        out_dir = os.path.join(temp_dir, "out")
        document = run_merge(segments_file, out_dir, config=default_config)

        assert os.path.exists(os.path.join(out_dir, "groups.json"))
        assert os.path.exists(os.path.join(out_dir, "validation_report.json"))
        assert os.path.exists(os.path.join(out_dir, "validation_summary.txt"))

        assert document.segment_count == 9
        assert len(document.groups) == 7
        assert [r.segment_id for r in document.rejected] == ["dot"]
        assert not document.validation.has_errors
        assert document.validation.warning_count == 1

    def test_groups_json_contents(self, segments_file, temp_dir, default_config):
        """Test that the written document holds ids and fat lines but no records."""
        from fatlines.pipeline import run_merge

        out_dir = os.path.join(temp_dir, "out")
        run_merge(segments_file, out_dir, config=default_config)

        with open(os.path.join(out_dir, "groups.json"), encoding="utf-8") as f:
            data = json.load(f)

        pair = next(g for g in data["groups"] if len(g["items"]) == 2)
        assert set(pair["items"]) == {"wall_1", "wall_7"}
        assert "records" not in pair
        assert pair["fat_lines"][0]["thickness"] > 0.4

    def test_validation_can_be_disabled(self, segments_file, temp_dir, default_config):
        """Test that disabling validation skips the report."""
        from fatlines.pipeline import run_merge

        default_config.validation.enabled = False
        out_dir = os.path.join(temp_dir, "out")
        document = run_merge(segments_file, out_dir, config=default_config)

        assert document.validation.checks == []
        assert not os.path.exists(os.path.join(out_dir, "validation_report.json"))

    def test_missing_input(self, temp_dir, default_config):
        """Test that a missing segments file raises FileNotFoundError."""
        from fatlines.pipeline import run_merge

        with pytest.raises(FileNotFoundError):
            run_merge(os.path.join(temp_dir, "missing.json"), temp_dir, config=default_config)

    def test_malformed_input(self, temp_dir, default_config):
        """Test that a malformed segment raises ValueError."""
        from fatlines.pipeline import run_merge

        path = os.path.join(temp_dir, "bad.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump([{"id": "a", "start": [0, 0]}], f)

        with pytest.raises(ValueError):
            run_merge(path, temp_dir, config=default_config)


class TestUnifyPipeline:
    """Tests for run_unify."""

    def test_unify_outputs(self, temp_dir, default_config):
        """Test that a unify run merges collinear segments."""
        from fatlines.pipeline import run_unify

        path = os.path.join(temp_dir, "lines.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump([
                {"id": "a", "start": [0, 0], "end": [2, 0]},
                {"id": "b", "start": [3, 0], "end": [1, 0]},
                {"id": "c", "start": [0, 5], "end": [1, 5]},
            ], f)

        out_dir = os.path.join(temp_dir, "out")
        document = run_unify(path, out_dir, config=default_config)

        assert document.input_count == 3
        assert len(document.lines) == 2
        assert os.path.exists(os.path.join(out_dir, "unified_lines.json"))

    def test_unify_skips_degenerate_segment(self, temp_dir, default_config):
        """Test that a zero-length segment does not abort a unify run."""
        from fatlines.pipeline import run_unify

        path = os.path.join(temp_dir, "lines.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump([
                {"id": "a", "start": [0, 0], "end": [1, 0]},
                {"id": "dot", "start": [1, 1], "end": [1, 1]},
            ], f)

        document = run_unify(path, os.path.join(temp_dir, "out"), config=default_config)

        assert document.input_count == 2
        assert len(document.lines) == 1


class TestCli:
    """Tests for the command-line entry point."""

    def test_merge_command(self, segments_file, temp_dir, capsys):
        """Test the merge subcommand end to end."""
        from fatlines.cli import main

        out_dir = os.path.join(temp_dir, "cli_out")
        exit_code = main(["merge", "--input", segments_file, "--out", out_dir])

        assert exit_code == 0
        assert "Groups: 7 (6 singletons)" in capsys.readouterr().out

    def test_merge_command_failure(self, temp_dir, capsys):
        """Test that a missing input exits with status 1."""
        from fatlines.cli import main

        exit_code = main(["merge", "-i", os.path.join(temp_dir, "none.json"), "-o", temp_dir])

        assert exit_code == 1
        assert "Error:" in capsys.readouterr().err

    def test_init_config(self, temp_dir):
        """Test that init-config writes a loadable file."""
        from fatlines.cli import main
        from fatlines.config import EngineConfig, load_config

        path = os.path.join(temp_dir, "fatlines.yaml")

        assert main(["init-config", "--out", path]) == 0
        assert load_config(path) == EngineConfig()

    def test_no_command_prints_help(self, capsys):
        """Test that running without a command prints usage."""
        from fatlines.cli import main

        assert main([]) == 0
        assert "usage" in capsys.readouterr().out
