"""Wildcard pattern matching with per-character quoting.

A quoting is either :data:`QUOTED` (the whole pattern is literal),
:data:`UNQUOTED` (every character may be a wildcard), or a string as long
as the pattern holding ``'q'`` for a quoted character and ``'r'`` for a
raw one.
"""

from __future__ import annotations

import enum
from typing import Iterable, Optional, Sequence, Union

from esshell.term import Term


class _Whole(enum.Enum):
    QUOTED = "quoted"
    UNQUOTED = "unquoted"


QUOTED = _Whole.QUOTED
UNQUOTED = _Whole.UNQUOTED

Quote = Union[str, _Whole]
Word = Union[str, Term]

_RANGE_FAIL = -1
_RANGE_ERROR = -2


def _isquoted(quote: Quote, n: int) -> bool:
    if quote is QUOTED:
        return True
    if quote is UNQUOTED:
        return False
    return n < len(quote) and quote[n] == "q"


def _israw(quote: Quote, n: int) -> bool:
    if quote is UNQUOTED:
        return True
    if quote is QUOTED:
        return False
    return n < len(quote) and quote[n] == "r"


def _tail(quote: Quote, n: int) -> Quote:
    return quote if isinstance(quote, _Whole) else quote[n:]


def _ch(text: str, n: int) -> str:
    return text[n] if n < len(text) else ""


def _text(word: Word) -> str:
    return word.string if isinstance(word, Term) else word


def _rangematch(pattern: str, quote: Quote, c: str) -> int:
    """Match ``c`` against the class that starts ``pattern`` (after ``[``).

    Returns the offset just past the closing bracket, or a negative code.
    """
    i = 0
    neg = False
    matched = False
    if _ch(pattern, i) == "~" and not _isquoted(quote, i):
        i += 1
        neg = True
    if _ch(pattern, i) == "]" and not _isquoted(quote, i):
        i += 1
        matched = c == "]"
    while _ch(pattern, i) != "]" or _isquoted(quote, i):
        if i >= len(pattern):
            return _RANGE_ERROR
        after = _ch(pattern, i + 2)
        if (
            _ch(pattern, i + 1) == "-"
            and not _isquoted(quote, i + 1)
            and (after not in ("", "]") or _isquoted(quote, i + 2))
        ):
            # a range such as a-z, but not a trailing "-"
            if pattern[i] <= c <= after:
                matched = True
            i += 2
        elif pattern[i] == c:
            matched = True
        i += 1
    return i + 1 if matched != neg else _RANGE_FAIL


def match(subject: str, pattern: str, quote: Quote = UNQUOTED) -> bool:
    """Match a single subject string against a single pattern."""
    if quote is QUOTED:
        return subject == pattern
    si = 0
    i = 0
    while True:
        if i >= len(pattern):
            return si >= len(subject)
        c = pattern[i]
        i += 1
        if _israw(quote, i - 1):
            if c == "?":
                if si >= len(subject):
                    return False
                si += 1
            elif c == "*":
                while i < len(pattern) and pattern[i] == "*" and _israw(quote, i):
                    i += 1
                if i >= len(pattern):
                    return True
                rest, tail = pattern[i:], _tail(quote, i)
                return any(
                    match(subject[start:], rest, tail)
                    for start in range(si, len(subject))
                )
            elif c == "[":
                if si >= len(subject):
                    return False
                j = _rangematch(pattern[i:], _tail(quote, i), subject[si])
                if j == _RANGE_FAIL:
                    return False
                if j == _RANGE_ERROR:
                    if subject[si] != "[":
                        return False
                else:
                    i += j
                si += 1
            else:
                if si >= len(subject) or c != subject[si]:
                    return False
                si += 1
        else:
            if si >= len(subject) or c != subject[si]:
                return False
            si += 1


def haswild(pattern: str, quote: Quote = UNQUOTED) -> bool:
    """True if the pattern holds an unquoted wildcard character."""
    if quote is QUOTED:
        return False
    return any(c in "*?[" and _israw(quote, n) for n, c in enumerate(pattern))


def _quotes(quotes: Optional[Iterable[Quote]], count: int) -> list[Quote]:
    if quotes is None:
        return [UNQUOTED] * count
    result = list(quotes)
    if len(result) < count:
        raise ValueError("fewer quotings than patterns")
    return result


def listmatch(
    subjects: Sequence[Word],
    patterns: Sequence[Word],
    quotes: Optional[Iterable[Quote]] = None,
) -> bool:
    """True if any pattern matches any subject.

    An empty subject list matches an empty pattern list, or any pattern
    made only of unquoted stars.
    """
    quoting = _quotes(quotes, len(patterns))
    if not subjects:
        if not patterns:
            return True
        for pattern, quote in zip(patterns, quoting):
            word = _text(pattern)
            if word and quote is not QUOTED and all(
                c == "*" and _israw(quote, n) for n, c in enumerate(word)
            ):
                return True
        return False
    words = [_text(subject) for subject in subjects]
    return any(
        match(word, _text(pattern), quote)
        for pattern, quote in zip(patterns, quoting)
        for word in words
    )


def _extract_single(subject: str, pattern: str, quote: Quote) -> Optional[list[str]]:
    """The parts of ``subject`` matched by the wildcards of ``pattern``."""
    if not haswild(pattern, quote) or not match(subject, pattern, quote):
        return None
    result: list[str] = []
    si = 0
    i = 0
    while i < len(pattern):
        if _isquoted(quote, i):
            i += 1
        else:
            c = pattern[i]
            i += 1
            if c == "*":
                if i >= len(pattern):
                    result.append(subject[si:])
                    return result
                rest, tail = pattern[i:], _tail(quote, i)
                for end in range(si, len(subject) + 1):
                    if match(subject[end:], rest, tail):
                        result.append(subject[si:end])
                        if haswild(rest, tail):
                            result.extend(_extract_single(subject[end:], rest, tail) or ())
                        return result
                raise AssertionError("matched pattern lost its match")
            if c == "[":
                j = _rangematch(pattern[i:], _tail(quote, i), subject[si])
                if j != _RANGE_ERROR:
                    i += j
                    result.append(subject[si])
            elif c == "?":
                result.append(subject[si])
        si += 1
    return result


def extractmatches(
    subjects: Sequence[Word],
    patterns: Sequence[Word],
    quotes: Optional[Iterable[Quote]] = None,
) -> list[str]:
    """For each subject, the wildcarded parts matched by the first pattern that matches."""
    quoting = _quotes(quotes, len(patterns))
    result: list[str] = []
    for subject in subjects:
        word = _text(subject)
        for pattern, quote in zip(patterns, quoting):
            parts = _extract_single(word, _text(pattern), quote)
            if parts:
                result.extend(parts)
                break
    return result