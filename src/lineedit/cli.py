"""Interactive demo: read lines with the editor and hand them to an interpreter."""

from __future__ import annotations

import argparse
import logging
import os
import shlex
import sys
from typing import Protocol

from lineedit.history import HistoryStore
from lineedit.session import LineEditor
from lineedit.settings import SettingsManager
from lineedit.terminal import FileInput

logger = logging.getLogger(__name__)

HELP_TEXT = """\
Keys:
  Ctrl+A      Beginning of line
  Ctrl+E      End of line
  Ctrl+K      Kill to end of line
  Ctrl+U      Kill entire line
  Ctrl+R      Reverse history search
  Up/Down     Browse history
  Backspace   Delete char before cursor
  Delete      Delete char at cursor
  Left/Right  Move cursor
  Enter       Accept line
  Ctrl+C/D    Quit
"""


class CommandInterpreter(Protocol):
    """Consumes a finished line. Raises ValueError when it cannot be parsed."""

    def interpret(self, line: str) -> str: ...


class ShellWordsInterpreter:
    """Splits a line into shell words and describes the result."""

    def interpret(self, line: str) -> str:
        words = shlex.split(line)
        if not words:
            raise ValueError("empty command")
        return " ".join(shlex.quote(w) for w in words)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="lineedit",
        description="Interactive line editor with history and reverse search",
    )
    parser.add_argument("--prompt", help="Prompt string (default from settings, else '> ')")
    parser.add_argument("--history-size", type=int, help="Maximum number of history entries")
    parser.add_argument("--cwd", default=os.getcwd(), help="Directory to look for project settings in")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for diagnostics on stderr",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Don't print the key help banner")
    return parser.parse_args(argv)


def run_repl(editor: LineEditor, interpreter: CommandInterpreter, *, quiet: bool = False) -> int:
    """Read lines until the user cancels; returns the number of lines accepted."""
    if not quiet:
        print("Line Editor Example")
        print("===================\n")
        print(HELP_TEXT)

    source = FileInput()
    accepted = 0
    while True:
        result = editor.read_line(source)
        if not result.accepted:
            break
        accepted += 1
        line = result.text
        if not line:
            continue
        print(f'You entered: "{line}"')
        try:
            print(f"Parsed as: {interpreter.interpret(line)}")
        except ValueError as exc:
            logger.debug("interpreter rejected %r: %s", line, exc)
            print("(Could not parse)")

    print("\nGoodbye!")
    return accepted


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), stream=sys.stderr)

    manager = SettingsManager.create(args.cwd)
    overrides: dict[str, object] = {}
    if args.prompt is not None:
        overrides["prompt"] = args.prompt
    if args.history_size is not None:
        overrides["historySize"] = args.history_size
    manager.apply_overrides(overrides)

    settings = manager.to_editor_settings()
    try:
        editor = LineEditor(HistoryStore(settings.history_size), settings=settings)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    run_repl(editor, ShellWordsInterpreter(), quiet=args.quiet)


if __name__ == "__main__":
    main()
