"""
Test the algoviz command-line interface.
"""

import json
import shlex
import sys

import pytest

from algoviz.cli import EXIT_ENGINE_FAILURE, EXIT_OK, EXIT_USAGE, main

ECHO_ENGINE = f"{shlex.quote(sys.executable)} -c 'import sys; sys.stdout.write(sys.stdin.read())'"
FAILING_ENGINE = f"{shlex.quote(sys.executable)} -c 'import sys; sys.exit(1)'"


def _exit_code(argv):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code


@pytest.fixture
def history_file(tmp_path, history_json):
    def build(count):
        path = tmp_path / f"history_{count}.json"
        path.write_text(history_json(count), encoding="utf-8")
        return str(path)
    return build


class TestShow:
    def test_prints_every_frame(self, history_file, capsys):
        assert _exit_code(["show", history_file(3)]) == EXIT_OK

        out = capsys.readouterr().out
        assert "--- frame 1/3 ---" in out
        assert "--- frame 3/3 ---" in out
        assert "arr (vector)" in out
        assert "2:[2:active]" in out

    def test_single_frame(self, history_file, capsys):
        assert _exit_code(["show", history_file(3), "--frame", "1"]) == EXIT_OK

        out = capsys.readouterr().out
        assert "--- frame 2/3 ---" in out
        assert "frame 1/3" not in out

    def test_frame_out_of_range(self, history_file, capsys):
        assert _exit_code(["show", history_file(2), "--frame", "2"]) == EXIT_USAGE
        assert "outside 0..1" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert _exit_code(["show", str(tmp_path / "nope.json")]) == EXIT_USAGE
        assert "File not found" in capsys.readouterr().err

    def test_malformed_history(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text('{"message": "not an array"}', encoding="utf-8")

        assert _exit_code(["show", str(path)]) == EXIT_ENGINE_FAILURE
        assert "ENGINE_MALFORMED_OUTPUT" in capsys.readouterr().err


class TestRun:
    def test_runs_engine_command(self, capsys):
        payload = json.dumps([{
            "message": "hello",
            "objects": {
                "x": {"type": "scalar", "data": 1},
                "s": {"type": "stack", "data": [1, 2], "highlights": {"top": "active"}},
            }
        }])

        assert _exit_code(["run", "--input", payload, "--engine-command", ECHO_ENGINE]) == EXIT_OK

        out = capsys.readouterr().out
        assert "hello" in out
        assert "x (scalar)" in out
        assert "[2:active]" in out

    def test_engine_failure_exit_code(self, capsys):
        assert _exit_code(["run", "--input", "x", "--engine-command", FAILING_ENGINE]) == EXIT_ENGINE_FAILURE
        assert "ENGINE_FAILURE" in capsys.readouterr().err

    def test_missing_input_file(self, tmp_path):
        argv = ["run", "--input-file", str(tmp_path / "in.txt"), "--engine-command", ECHO_ENGINE]

        assert _exit_code(argv) == EXIT_USAGE

    def test_input_source_required(self):
        assert _exit_code(["run"]) != EXIT_OK


class TestPlay:
    def test_plays_each_frame_once(self, history_file, capsys):
        assert _exit_code(["play", history_file(3), "--interval-ms", "1"]) == EXIT_OK

        out = capsys.readouterr().out
        for i in (1, 2, 3):
            assert out.count(f"--- frame {i}/3 ---") == 1

    def test_single_frame_history(self, history_file, capsys):
        assert _exit_code(["play", history_file(1), "--interval-ms", "1"]) == EXIT_OK
        assert capsys.readouterr().out.count("--- frame 1/1 ---") == 1

    def test_missing_file(self, tmp_path):
        assert _exit_code(["play", str(tmp_path / "nope.json")]) == EXIT_USAGE
