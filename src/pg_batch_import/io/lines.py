from __future__ import annotations

import os
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from pg_batch_import.errors import MalformedLine

LineSource = Union[str, "os.PathLike[str]", Iterable[str]]


def _strip_terminator(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n") or line.endswith("\r"):
        return line[:-1]
    return line


def _decoded(line: str, n: int, label: str) -> str:
    # undecodable bytes arrive as lone surrogates (errors="surrogateescape")
    try:
        line.encode("utf-8")
    except UnicodeEncodeError as e:
        raise MalformedLine(
            f"not valid UTF-8 at character {e.start + 1}",
            source=label,
            line_number=n,
        ) from e
    return line


def iter_lines(source: LineSource, label: Optional[str] = None) -> Iterator[Tuple[int, str]]:
    """
    Stream `(line_number, text)` pairs from a file path or an iterable.

    Paths are opened as UTF-8 (a leading BOM is dropped). Line terminators
    are removed; line numbers are 1-based physical line numbers. Empty
    lines are yielded too, so callers can decide how to treat them.

    Args:
        source (LineSource): File path, or any iterable of strings.
        label (Optional[str]): Name used in errors; defaults to the path.

    Returns:
        Iterator[Tuple[int, str]]: Numbered lines in file order.

    Raises:
        MalformedLine: If a line of a file is not valid UTF-8.
    """
    if isinstance(source, (str, bytes, os.PathLike)):
        label = label or os.fsdecode(source)
        with open(source, "r", encoding="utf-8-sig", errors="surrogateescape", newline="") as f:
            for n, line in enumerate(f, start=1):
                yield n, _strip_terminator(_decoded(line, n, label))
    else:
        for n, line in enumerate(source, start=1):
            yield n, _strip_terminator(line)


def source_label(source: Optional[LineSource], default: str) -> str:
    """Name used for a source in error messages and warnings."""
    if isinstance(source, (str, os.PathLike)):
        return os.fspath(source)
    return default


class NonEmptyLines:
    """
    Iterator over the non-empty lines of a source.

    Empty lines are skipped. Interior ones (followed by more content) are
    reported in `skipped`; trailing ones are dropped silently.
    """

    def __init__(self, source: LineSource, label: Optional[str] = None):
        self._it = iter_lines(source, label)
        self._pending: List[int] = []
        self.skipped: List[int] = []

    def __iter__(self) -> "NonEmptyLines":
        return self

    def __next__(self) -> Tuple[int, str]:
        for n, text in self._it:
            if text == "":
                self._pending.append(n)
                continue
            if self._pending:
                self.skipped.extend(self._pending)
                self._pending = []
            return n, text
        raise StopIteration

    def close(self) -> None:
        """Release the underlying file, if any."""
        self._it.close()
