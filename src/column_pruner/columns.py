"""Column reference helpers — ``"AA"`` <-> ``26`` and comma-separated label lists."""

from __future__ import annotations

import re

# Excel's last column is XFD.
MAX_COLUMN_INDEX = 16383

_LABEL_RE = re.compile(r"^[A-Za-z]+$")


def column_letter_to_index(label: str) -> int:
    """Convert a column label (``"A"``, ``"AA"`` …) to a zero-based index.

    Bijective base-26: ``A`` = 1 … ``Z`` = 26, so ``"A"`` -> 0,
    ``"Z"`` -> 25, ``"AA"`` -> 26.

    Raises
    ------
    ValueError
        If *label* is empty, contains anything but ASCII letters, or lies
        beyond column ``XFD``.
    """
    if not isinstance(label, str):
        raise TypeError("column label must be a string")
    token = label.strip()
    if not _LABEL_RE.fullmatch(token):
        raise ValueError(f"Invalid column label: {label!r} (expected letters like G or AC)")

    col = 0
    for ch in token.upper():
        col = col * 26 + (ord(ch) - ord("A") + 1)
    index = col - 1
    if index > MAX_COLUMN_INDEX:
        raise ValueError(f"Column label {label!r} is beyond the last Excel column (XFD)")
    return index


def column_index_to_letter(index: int) -> str:
    """Inverse of :func:`column_letter_to_index` (``26`` -> ``"AA"``)."""
    if isinstance(index, bool) or not isinstance(index, int):
        raise TypeError("column index must be an integer")
    if index < 0:
        raise ValueError("column index must be >= 0")

    letters: list[str] = []
    n = index + 1
    while n:
        n, rem = divmod(n - 1, 26)
        letters.append(chr(ord("A") + rem))
    return "".join(reversed(letters))


def parse_column_list(raw: str) -> list[int]:
    """Parse ``"G, K,O"`` into ``[6, 10, 14]``.

    Labels are trimmed and converted independently; empty items are skipped.
    Order and duplicates are kept as given.
    """
    indices: list[int] = []
    for item in raw.split(","):
        token = item.strip()
        if not token:
            continue
        indices.append(column_letter_to_index(token))
    return indices
