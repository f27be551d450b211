"""Tests for lineedit.cli -- the interactive demo loop."""

from __future__ import annotations

import pytest

from lineedit import cli
from lineedit.cli import ShellWordsInterpreter, parse_args, run_repl
from lineedit.session import LineEditor
from lineedit.terminal import BytesInput
from tests.virtual_terminal import RecordingRenderer


@pytest.fixture
def scripted_stdin(monkeypatch: pytest.MonkeyPatch):
    """Replace the demo's stdin source with scripted bytes."""

    def install(data: bytes) -> None:
        monkeypatch.setattr(cli, "FileInput", lambda: BytesInput(data))

    return install


class TestShellWordsInterpreter:
    def test_splits_words(self) -> None:
        assert ShellWordsInterpreter().interpret("echo 'a b' c") == "echo 'a b' c"

    def test_unbalanced_quote(self) -> None:
        with pytest.raises(ValueError):
            ShellWordsInterpreter().interpret("echo 'oops")

    def test_blank_line(self) -> None:
        with pytest.raises(ValueError):
            ShellWordsInterpreter().interpret("   ")


class TestParseArgs:
    def test_defaults(self) -> None:
        args = parse_args([])
        assert args.prompt is None
        assert args.history_size is None
        assert args.log_level == "WARNING"
        assert not args.quiet

    def test_options(self) -> None:
        args = parse_args(["--prompt", "$ ", "--history-size", "5", "-q", "--log-level", "DEBUG"])
        assert args.prompt == "$ "
        assert args.history_size == 5
        assert args.quiet
        assert args.log_level == "DEBUG"


class TestRunRepl:
    def test_echoes_and_parses_lines(
        self, scripted_stdin, capsys: pytest.CaptureFixture[str]
    ) -> None:
        scripted_stdin(b"ls -la\recho 'open\r\x04")
        editor = LineEditor(renderer=RecordingRenderer())

        accepted = run_repl(editor, ShellWordsInterpreter(), quiet=True)

        out = capsys.readouterr().out
        assert accepted == 2
        assert 'You entered: "ls -la"' in out
        assert "Parsed as: ls -la" in out
        assert "(Could not parse)" in out
        assert out.rstrip().endswith("Goodbye!")
        assert editor.history.entries == ["ls -la", "echo 'open"]

    def test_empty_line_is_skipped(
        self, scripted_stdin, capsys: pytest.CaptureFixture[str]
    ) -> None:
        scripted_stdin(b"\r\x03")
        editor = LineEditor(renderer=RecordingRenderer())
        assert run_repl(editor, ShellWordsInterpreter(), quiet=True) == 1
        assert "You entered" not in capsys.readouterr().out

    def test_banner(self, scripted_stdin, capsys: pytest.CaptureFixture[str]) -> None:
        scripted_stdin(b"")
        editor = LineEditor(renderer=RecordingRenderer())
        assert run_repl(editor, ShellWordsInterpreter()) == 0
        out = capsys.readouterr().out
        assert "Line Editor Example" in out
        assert "Ctrl+R" in out

    def test_history_carries_across_reads(
        self, scripted_stdin, capsys: pytest.CaptureFixture[str]
    ) -> None:
        scripted_stdin(b"make test\r\x1b[A\r")
        editor = LineEditor(renderer=RecordingRenderer())
        assert run_repl(editor, ShellWordsInterpreter(), quiet=True) == 2
        assert capsys.readouterr().out.count('You entered: "make test"') == 2
