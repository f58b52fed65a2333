"""Reading whitespace-separated kernel statistics files."""

import os
import re
from typing import Iterator, Union

PathLike = Union[str, "os.PathLike[str]"]

_WHITESPACE = " \t\n\v\f\r"
_WHITESPACE_RUN = re.compile(r"[ \t\n\v\f\r]+")


def _split_fields(line: str) -> list[str]:
    """Split a line into words; trailing whitespace yields a final empty field."""
    words = [word for word in _WHITESPACE_RUN.split(line) if word]
    if line[-1] in _WHITESPACE:
        words.append("")
    return words


def read_fields(path: PathLike) -> Iterator[list[str]]:
    """Yield the words of each line of ``path``.

    Reading stops at the first empty line and at a final line that has no
    terminating newline. A line with trailing whitespace ends with an empty
    field.
    """
    with open(path, "rb") as handle:
        for raw in handle:
            if not raw.endswith(b"\n"):
                return
            line = raw[:-1].decode("utf-8", errors="replace")
            if not line:
                return
            yield _split_fields(line)


def stats_lines(path: PathLike, line_count: int) -> list[str]:
    """Return up to ``line_count`` leading lines of ``path``, stopping at an empty one."""
    lines: list[str] = []
    with open(path, "rb") as handle:
        for _ in range(line_count):
            raw = handle.readline()
            line = raw[:-1] if raw.endswith(b"\n") else raw
            if not line:
                break
            lines.append(line.decode("utf-8", errors="replace"))
    return lines


def elapsed_seconds(later: float, earlier: float) -> float:
    """Seconds between two monotonic time points."""
    return float(later - earlier)