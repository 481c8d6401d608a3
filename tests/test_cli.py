"""
Tests for the command line entry point.
"""

import io
import json

import pytest

import main


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run from an empty directory so only built-in defaults apply."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("MATHCHAT_CONFIG_OVERRIDES", raising=False)


class TestSegmentOutput:
    """Test segment listing formats."""

    def test_text_listing(self, capsys):
        """Test the human-readable listing."""
        assert main.main(["$a$ and $b$"]) == 0

        out = capsys.readouterr().out
        assert "1. inline_math: 'a'" in out
        assert "2. plain_text: ' and '" in out
        assert "Total: 3 segments" in out

    def test_json_records(self, capsys):
        """Test JSON segment records."""
        assert main.main(["-f", "json", r"$$x^2$$ and (\ce{H2O})"]) == 0

        records = json.loads(capsys.readouterr().out)
        assert records[0] == {"kind": "block_math", "content": "x^2", "original_match": "$$x^2$$"}
        assert records[1] == {"kind": "plain_text", "content": " and "}
        assert records[2]["command"] == "ce"

    def test_stdin_input(self, capsys, monkeypatch):
        """Test reading the answer from stdin."""
        monkeypatch.setattr("sys.stdin", io.StringIO("¥[y¥]"))

        assert main.main(["-f", "json", "-"]) == 0

        records = json.loads(capsys.readouterr().out)
        assert records == [{"kind": "block_math", "content": "y", "original_match": r"\[y\]"}]

    def test_file_input(self, capsys, tmp_path):
        """Test reading the answer from a file."""
        path = tmp_path / "answer.md"
        path.write_text("Plain words only", encoding="utf-8")

        assert main.main(["--file", str(path)]) == 0

        assert "plain_text" in capsys.readouterr().out

    def test_missing_file(self, capsys, tmp_path):
        """Test that an unreadable file is reported."""
        assert main.main(["--file", str(tmp_path / "missing.md")]) == 1

        assert "Could not read" in capsys.readouterr().err


class TestRenderOutput:
    """Test HTML output formats."""

    def test_html_fragment_mathjax(self, capsys):
        """Test rendering a fragment with the MathJax backend."""
        assert main.main(["-f", "html", "--backend", "mathjax", "Area $\\pi r^2$"]) == 0

        out = capsys.readouterr().out
        assert r"\(\pi r^2\)" in out
        assert "latex-inline-container" in out

    def test_page_includes_mathjax(self, capsys):
        """Test that a MathJax page loads the MathJax script."""
        assert main.main(["-f", "page", "--backend", "mathjax", "--scheme", "user", "$$x$$"]) == 0

        out = capsys.readouterr().out
        assert out.startswith("<!DOCTYPE html>")
        assert "MathJax-script" in out
        assert "answer--user" in out

    def test_failures_reported_on_stderr(self, capsys):
        """Test that failed expressions still render and are counted."""
        assert main.main(["-f", "html", "--backend", "mathjax", "ok $\\sqrt{x$ ok"]) == 0

        captured = capsys.readouterr()
        assert "latex-error" in captured.out
        assert "1 expression(s) could not be typeset" in captured.err


class TestConfigHandling:
    """Test configuration errors at the CLI."""

    def test_missing_config(self, capsys, tmp_path):
        """Test that a missing config file exits with an error."""
        assert main.main(["--config", str(tmp_path / "none.yaml"), "x"]) == 1

        assert "Config file not found" in capsys.readouterr().err

    def test_config_whitelist_applies(self, capsys, tmp_path):
        """Test that the segmenter whitelist comes from the config file."""
        path = tmp_path / "c.yaml"
        path.write_text("segmenter:\n  named_commands: [mathrm]\n", encoding="utf-8")

        assert main.main(["--config", str(path), "-f", "json", r"(\ce{O2})"]) == 0

        records = json.loads(capsys.readouterr().out)
        assert records == [{"kind": "plain_text", "content": r"(\ce{O2})"}]

    def test_version(self, capsys):
        """Test the version flag."""
        with pytest.raises(SystemExit):
            main.main(["--version"])

        assert "0.1.0" in capsys.readouterr().out
