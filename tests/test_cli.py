"""
CLI tests: argument handling, text and JSON output, exit codes.
"""
import json
import os

import pytest

from fastscan.cli import CLIApplication


def run_cli(argv):
    CLIApplication().run(argv)


class TestArgumentParsing:

    def test_defaults(self):
        args = CLIApplication.parse_args(["--input", "/tmp"])
        assert args.max_concurrency == 200
        assert args.batch_size == 50
        assert args.hash is False
        assert args.hash_threshold == "10KB"
        assert args.sample_size == "2KB"
        assert args.algorithm == "xxh64"
        assert args.timeout is None

    def test_input_is_required(self):
        with pytest.raises(SystemExit):
            CLIApplication.parse_args([])

    def test_params_from_args(self):
        app = CLIApplication()
        args = app.parse_args(["-i", "/tmp", "--hash", "--hash-threshold", "64KB",
                               "--sample-size", "4KB", "-c", "8", "-b", "5", "--timeout", "2.5"])
        params = app.create_params(args)
        assert params.enable_hash is True
        assert params.hash_threshold == 64 * 1024
        assert params.hash_sample_size == 4 * 1024
        assert params.max_concurrency == 8
        assert params.batch_size == 5
        assert params.io_timeout == 2.5

    def test_invalid_size_exits(self, capsys):
        app = CLIApplication()
        args = app.parse_args(["-i", "/tmp", "--hash-threshold", "huge"])
        with pytest.raises(SystemExit) as exc_info:
            app.create_params(args)
        assert exc_info.value.code == 1
        assert "Parameter error" in capsys.readouterr().err


class TestRun:

    def test_text_summary(self, test_files, temp_dir, capsys):
        run_cli(["-i", str(temp_dir), "--hash", "--show-duplicates"])
        out = capsys.readouterr().out

        assert "Files: 4" in out
        assert "Duplicates: 2 files in 1 groups" in out
        assert "small.bin" in out
        assert os.path.join("sub", "small_copy.bin") in out

    def test_json_output(self, test_files, temp_dir, capsys):
        run_cli(["-i", str(temp_dir), "--hash", "--json"])
        data = json.loads(capsys.readouterr().out)

        assert data["total_files"] == 4
        assert data["hash_stats"]["sampled_hashed"] == 1
        assert len(data["duplicate_groups"]) == 1

    def test_quiet_prints_nothing(self, test_files, temp_dir, capsys):
        run_cli(["-i", str(temp_dir), "--quiet"])
        assert capsys.readouterr().out == ""

    def test_missing_directory_exits_with_error(self, temp_dir, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run_cli(["-i", str(temp_dir / "nope"), "--quiet"])
        assert exc_info.value.code == 1
        assert "does not exist" in capsys.readouterr().err
