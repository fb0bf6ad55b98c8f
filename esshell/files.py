"""Opening files in the modes that redirections use."""

from __future__ import annotations

import enum
import os


class OpenKind(enum.Enum):
    """How a redirection opens its file."""

    OPEN = "r"
    CREATE = "w"
    APPEND = "a"
    READ_WRITE = "r+"
    READ_CREATE = "w+"
    READ_APPEND = "a+"


_FLAGS = {
    OpenKind.OPEN: os.O_RDONLY,
    OpenKind.CREATE: os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
    OpenKind.APPEND: os.O_WRONLY | os.O_CREAT | os.O_APPEND,
    OpenKind.READ_WRITE: os.O_RDWR | os.O_CREAT,
    OpenKind.READ_CREATE: os.O_RDWR | os.O_CREAT | os.O_TRUNC,
    OpenKind.READ_APPEND: os.O_RDWR | os.O_CREAT | os.O_APPEND,
}


def open_kind(mode: str) -> OpenKind:
    """The open kind named by an %openfile mode such as ``r`` or ``a+``."""
    try:
        return OpenKind(mode)
    except ValueError:
        raise ValueError(f"bad %openfile mode: {mode}") from None


def eopen(name: str, kind: OpenKind) -> int:
    """Open a file with the flags for ``kind``; return the descriptor."""
    return os.open(name, _FLAGS[kind], 0o666)