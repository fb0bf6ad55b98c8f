"""Splitting strings into words at separator characters."""

from __future__ import annotations

from typing import Iterable, Optional


class Splitter:
    """Incrementally splits text into words.

    With ``coalesce``, runs of separators count as one and leading or
    trailing separators produce no empty words.  Without it, every
    separator ends a word, and an empty separator set splits text into
    single characters.  The NUL character always separates.
    """

    def __init__(self, sep: str, coalesce: bool) -> None:
        self._seps = frozenset(sep) | {"\0"}
        self._coalesce = coalesce
        self._splitchars = not coalesce and sep == ""
        self._words: list[str] = []
        self._buffer: Optional[list[str]] = None

    def feed(self, data: str, endword: bool = False) -> None:
        """Split ``data``; with ``endword`` the last partial word is closed."""
        if self._splitchars:
            self._words.extend(data.split("\0", 1)[0])
            return

        buf = self._buffer
        if not self._coalesce and buf is None:
            buf = []
        for ch in data:
            if buf is not None:
                if ch in self._seps:
                    self._words.append("".join(buf))
                    buf = None if self._coalesce else []
                else:
                    buf.append(ch)
            elif ch not in self._seps:
                buf = [ch]
        if endword and buf is not None:
            self._words.append("".join(buf))
            buf = None
        self._buffer = buf

    def finish(self) -> list[str]:
        """Close any pending word and return all words split so far."""
        if self._buffer is not None:
            self._words.append("".join(self._buffer))
            self._buffer = None
        words, self._words = self._words, []
        return words


def fsplit(sep: str, words: Iterable[str], coalesce: bool) -> list[str]:
    """Split each of ``words`` at the characters of ``sep``."""
    splitter = Splitter(sep, coalesce)
    for word in words:
        splitter.feed(word, True)
    return splitter.finish()