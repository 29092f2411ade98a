"""
Command-line entry point for moquery.

Reads SQL buffers from -c, -f or standard input and hands each one to the
QueryDispatcher. A buffer ends at the first line whose text ends with ';'.

    moquery -c "select * from nation;"
    moquery -f report.sql
    moquery            # interactive; \\q quits, \\reconnect reopens the session
"""

import argparse
import sys
from typing import Callable, Iterable, Iterator, List, Optional

from pydantic import ValidationError

from .config import get_settings
from .constants import STATEMENT_TERMINATOR
from .dependencies import build_container
from .domain.errors import ConfigurationError, MoQueryException
from .utils.logging import configure_logging, get_module_logger

QUIT_COMMAND = "\\q"
RECONNECT_COMMAND = "\\reconnect"

PROMPT = "moquery> "
CONTINUATION_PROMPT = "      -> "


def split_buffers(lines: Iterable[str]) -> Iterator[str]:
    """
    Group input lines into query buffers.

    A buffer is complete when a line ends with ';'. Meta commands (lines
    starting with a backslash) outside a buffer are yielded on their own.
    A trailing unterminated buffer is yielded at end of input.
    """
    pending: List[str] = []
    for raw_line in lines:
        line = raw_line.rstrip("\r\n")
        if not pending and line.strip().startswith("\\"):
            yield line.strip()
            continue
        if not pending and not line.strip():
            continue
        pending.append(line)
        if line.rstrip().endswith(STATEMENT_TERMINATOR):
            yield "\n".join(pending)
            pending = []
    if pending and any(line.strip() for line in pending):
        yield "\n".join(pending)


def _interactive_lines(read: Callable[[str], str]) -> Iterator[str]:
    prompt = PROMPT
    while True:
        try:
            line = read(prompt)
        except EOFError:
            return
        yield line
        prompt = PROMPT if line.rstrip().endswith(STATEMENT_TERMINATOR) or line.strip().startswith("\\") else CONTINUATION_PROMPT


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="moquery",
        description="SQL shell with --!text2sql and --!gnuplot directives",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("-c", "--command", dest="command", default=None, help="Run the given buffer and exit")
    source.add_argument("-f", "--file", dest="file", default=None, help="Run every buffer in a file and exit")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        error = ConfigurationError(f"Invalid configuration: {e}")
        print(f"{error.error_code}: {error.message}", file=sys.stderr)
        return 2

    configure_logging()
    logger = get_module_logger()

    container = build_container(settings)
    try:
        container.connect_clients()
    except MoQueryException as e:
        print(f"{e.error_code}: {e.message}", file=sys.stderr)
        return 1

    if args.command is not None:
        lines: Iterable[str] = args.command.split("\n")
    elif args.file is not None:
        with open(args.file, encoding="utf-8") as handle:
            lines = handle.read().split("\n")
    elif sys.stdin.isatty():
        lines = _interactive_lines(input)
    else:
        lines = sys.stdin

    interactive = args.command is None and args.file is None and sys.stdin.isatty()
    exit_code = 0

    try:
        for buffer in split_buffers(lines):
            if buffer == QUIT_COMMAND:
                break
            if buffer == RECONNECT_COMMAND:
                try:
                    container.dispatcher.reconnect()
                except MoQueryException as e:
                    print(f"{e.error_code}: {e.message}", file=sys.stderr)
                    exit_code = 1
                continue
            try:
                container.dispatcher.handle(buffer, stream=sys.stdout)
            except MoQueryException as e:
                print(f"{e.error_code}: {e.message}", file=sys.stderr)
                exit_code = 1
                if not interactive:
                    break
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        container.close_clients()

    return 0 if interactive else exit_code


if __name__ == "__main__":
    sys.exit(main())
