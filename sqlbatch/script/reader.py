"""
Turn the lines of a SQL script into complete statements.

Rules, per line:

* a line whose first two characters are ``//`` is a comment and is skipped;
* a line that is empty after stripping whitespace (full‑width spaces
  included) is skipped;
* any other line is appended to the current statement.  If it contains a
  ``;`` anywhere, the statement is complete and is yielded; otherwise a
  newline is appended and the statement continues on the next line.

Terminator detection is a plain substring test, so a ``;`` inside a quoted
literal also ends the statement.  Text left over after the last ``;`` is
dropped.
"""
from __future__ import annotations
import logging
import pathlib
import typing as t

from sqlbatch.constants import COMMENT_PREFIX, DEFAULT_ENCODING, TERMINATOR

logger = logging.getLogger(__name__)


class ScriptError(RuntimeError):
    """The SQL script could not be opened or read."""


def is_comment(line: str) -> bool:
    return line[:2] == COMMENT_PREFIX


def is_blank(line: str) -> bool:
    # str.strip() also removes U+3000 (ideographic space)
    return not line.strip()


def contains_terminator(line: str) -> bool:
    return TERMINATOR in line


class StatementAssembler:
    """Accumulates content lines until a terminator line completes them."""

    def __init__(self) -> None:
        self._buf: list[str] = []

    @property
    def pending(self) -> str:
        return "".join(self._buf)

    def reset(self) -> None:
        self._buf.clear()

    def feed(self, line: str) -> str | None:
        """Consume one line; return the finished statement if this line ends one."""
        if is_comment(line) or is_blank(line):
            return None

        if contains_terminator(line):
            self._buf.append(line)
            stmt = "".join(self._buf)
            self._buf.clear()
            return stmt

        self._buf.append(line)
        self._buf.append("\n")
        return None


def _strip_eol(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def statements(lines: t.Iterable[str]) -> t.Iterator[str]:
    """Lazily yield complete statements assembled from *lines*."""
    asm = StatementAssembler()
    for line in lines:
        stmt = asm.feed(_strip_eol(line))
        if stmt is not None:
            yield stmt

    if asm.pending:
        logger.debug("Unterminated SQL at end of script ignored:%s", asm.pending)
        asm.reset()


def read_lines(
    path: pathlib.Path | str, encoding: str = DEFAULT_ENCODING
) -> t.Iterator[str]:
    """Yield the lines of *path* one at a time."""
    path = pathlib.Path(path)
    try:
        fh = path.open("r", encoding=encoding)
    except FileNotFoundError as exc:
        raise ScriptError(f"SQL script {path} not found") from exc
    except OSError as exc:
        raise ScriptError(f"Cannot open SQL script {path}: {exc}") from exc
    except LookupError as exc:
        raise ScriptError(f"Unknown encoding {encoding!r} for {path}") from exc

    with fh:
        try:
            yield from fh
        except (OSError, UnicodeDecodeError) as exc:
            raise ScriptError(f"Cannot read SQL script {path}: {exc}") from exc


def iter_script(
    path: pathlib.Path | str, encoding: str = DEFAULT_ENCODING
) -> t.Iterator[str]:
    return statements(read_lines(path, encoding))
