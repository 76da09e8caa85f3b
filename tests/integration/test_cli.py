#!/usr/bin/env python3
"""
Tests for the command line / streaming adapter (`python -m unarrow`).
"""

import io
import json

import pytest

from unarrow.__main__ import main

pytestmark = pytest.mark.integration


class _Stdin:
    """Stand-in for sys.stdin exposing a byte buffer"""

    def __init__(self, data: bytes):
        self.buffer = io.BytesIO(data)


class TestCommandLine:

    def test_file_to_stdout(self, tmp_path, capsys):
        source = tmp_path / "in.js"
        source.write_text("var f = x => x;", encoding="utf-8")
        assert main([str(source)]) == 0
        assert capsys.readouterr().out == "var f = function(x) {\n  return x;\n};\n"

    def test_stdin_to_stdout(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", _Stdin("alert(() => this);".encode("utf-8")))
        assert main([]) == 0
        assert capsys.readouterr().out == "alert((function() {\n  return this;\n}).bind(this));\n"

    def test_output_file_and_source_map(self, tmp_path):
        source = tmp_path / "in.js"
        source.write_text("var f = x => x;", encoding="utf-8")
        output = tmp_path / "build" / "out.js"
        assert main([str(source), "-o", str(output), "--source-map-name", "out.js.map",
                     "--source-file-name", "in.js"]) == 0
        assert output.read_text(encoding="utf-8").startswith("var f = function(x)")
        source_map = json.loads((tmp_path / "build" / "out.js.map").read_text(encoding="utf-8"))
        assert source_map["sources"] == ["in.js"]
        assert source_map["file"] == "out.js.map"

    def test_source_map_without_output_warns(self, tmp_path, capsys):
        source = tmp_path / "in.js"
        source.write_text("x => x;", encoding="utf-8")
        assert main([str(source), "--source-map-name", "out.map"]) == 0
        assert "source map requested without -o" in capsys.readouterr().err

    def test_syntax_error_exit_status(self, tmp_path, capsys):
        source = tmp_path / "bad.js"
        source.write_text("var = 1;", encoding="utf-8")
        assert main([str(source)]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "error[E0001]" in captured.err

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.js")]) == 1
        assert "file not found" in capsys.readouterr().err

    def test_directory_is_rejected(self, tmp_path, capsys):
        assert main([str(tmp_path)]) == 1
        assert "not a file" in capsys.readouterr().err

    def test_warning_printed_but_succeeds(self, tmp_path, capsys):
        source = tmp_path / "top.js"
        source.write_text("var f = () => arguments;", encoding="utf-8")
        assert main([str(source)]) == 0
        captured = capsys.readouterr()
        assert "warning[W0001]" in captured.err
        assert "arguments" in captured.out

    def test_strict_flag(self, tmp_path, capsys):
        source = tmp_path / "top.js"
        source.write_text("var f = () => arguments;", encoding="utf-8")
        assert main([str(source), "--strict"]) == 1
        assert "error[E0002]" in capsys.readouterr().err

    def test_dump_ast(self, tmp_path, capsys):
        source = tmp_path / "in.js"
        source.write_text("x => x;", encoding="utf-8")
        assert main([str(source), "--dump-ast"]) == 0
        assert "After ArrowFreeValidationPass:" in capsys.readouterr().err
