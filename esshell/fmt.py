"""Formatted printing with an extensible table of conversions."""

from __future__ import annotations

import enum
import operator
import os
from typing import Any, Callable, Iterable, Optional

_DIGITS = (
    "0123456789abcdefghijklmnopqrstuvwxyz",
    "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ",
)


class FormatError(Exception):
    """A malformed format string or a missing argument."""


class FormatFlag(enum.IntFlag):
    """Modifiers collected between ``%`` and the conversion character."""

    LONG = 1
    SHORT = 2
    UNSIGNED = 4
    ZEROPAD = 8
    LEFTSIDE = 16
    ALTFORM = 32
    F1SET = 64
    F2SET = 128


class Format:
    """The state of one formatting run: arguments, modifiers and output."""

    def __init__(self, args: Iterable[Any] = ()) -> None:
        self._args = iter(args)
        self._out: list[str] = []
        self.flags = FormatFlag(0)
        self.f1 = 0
        self.f2 = 0
        self.invoker = ""

    def next_arg(self) -> Any:
        """Consume and return the next argument."""
        try:
            return next(self._args)
        except StopIteration:
            raise FormatError(f"missing argument for %{self.invoker}") from None

    def put(self, text: str) -> None:
        """Append text to the output."""
        self._out.append(text)

    def pad(self, count: int, char: str = " ") -> None:
        """Append ``count`` copies of ``char``; nothing if count is not positive."""
        if count > 0:
            self._out.append(char * count)

    def getvalue(self) -> str:
        """The text produced so far."""
        return "".join(self._out)

    def printfmt(self, fmt: str) -> int:
        """Interpret ``fmt``; return the length of the output so far."""
        chars = iter(fmt)
        for c in chars:
            if c != "%":
                self.put(c)
                continue
            self.flags = FormatFlag(0)
            self.f1 = self.f2 = 0
            while True:
                self.invoker = next(chars, "")
                if not _lookup(self.invoker)(self):
                    break
        return len(self.getvalue())


Conversion = Callable[[Format], bool]


def _flag(flag: FormatFlag) -> Conversion:
    def conv(fmt: Format) -> bool:
        fmt.flags |= flag
        return True
    return conv


def _digitconv(fmt: Format) -> bool:
    digit = int(fmt.invoker)
    if fmt.flags & FormatFlag.F2SET:
        fmt.f2 = 10 * fmt.f2 + digit
    else:
        fmt.flags |= FormatFlag.F1SET
        fmt.f1 = 10 * fmt.f1 + digit
    return True


def _zeroconv(fmt: Format) -> bool:
    if fmt.flags & (FormatFlag.F1SET | FormatFlag.F2SET):
        return _digitconv(fmt)
    fmt.flags |= FormatFlag.ZEROPAD
    return True


def _sconv(fmt: Format) -> bool:
    text = str(fmt.next_arg())
    if not fmt.flags & FormatFlag.F1SET:
        fmt.put(text)
    else:
        width = fmt.f1 - len(text)
        if fmt.flags & FormatFlag.LEFTSIDE:
            fmt.put(text)
            fmt.pad(width)
        else:
            fmt.pad(width)
            fmt.put(text)
    return False


def _utostr(value: int, radix: int, digits: str) -> str:
    out = []
    while True:
        value, rem = divmod(value, radix)
        out.append(digits[rem])
        if value == 0:
            return "".join(reversed(out))


def _wrap(value: int, bits: int) -> int:
    half = 1 << (bits - 1)
    return (value + half) % (1 << bits) - half


def _intconv(fmt: Format, radix: int, upper: int, altform: str) -> None:
    if radix > 36:
        return
    flags = fmt.flags
    n = operator.index(fmt.next_arg())
    n = _wrap(n, 64 if flags & FormatFlag.LONG else 32)

    prefix = ""
    if flags & FormatFlag.UNSIGNED or n >= 0:
        u = n % (1 << 64)
    else:
        prefix = "-"
        u = -n
    if flags & FormatFlag.ALTFORM:
        prefix += altform

    number = _utostr(u, radix, _DIGITS[upper])
    zeroes = fmt.f2 - len(number) if flags & FormatFlag.F2SET and fmt.f2 > len(number) else 0
    width = len(prefix) + zeroes + len(number)
    padding = fmt.f1 - width if flags & FormatFlag.F1SET and fmt.f1 > width else 0

    padchar = " "
    if padding > 0 and flags & FormatFlag.ZEROPAD:
        padchar = "0"
        if not flags & FormatFlag.LEFTSIDE:
            zeroes += padding
            padding = 0

    if not flags & FormatFlag.LEFTSIDE:
        fmt.pad(padding, padchar)
    fmt.put(prefix)
    fmt.pad(zeroes, "0")
    fmt.put(number)
    if flags & FormatFlag.LEFTSIDE:
        fmt.pad(padding, padchar)


def _cconv(fmt: Format) -> bool:
    value = fmt.next_arg()
    fmt.put(value if isinstance(value, str) else chr(value))
    return False


def _dconv(fmt: Format) -> bool:
    _intconv(fmt, 10, 0, "")
    return False


def _oconv(fmt: Format) -> bool:
    _intconv(fmt, 8, 0, "0")
    return False


def _xconv(fmt: Format) -> bool:
    _intconv(fmt, 16, 0, "0x")
    return False


def _pctconv(fmt: Format) -> bool:
    fmt.put("%")
    return False


def _badconv(fmt: Format) -> bool:
    raise FormatError(f"bad conversion character in printfmt: %{fmt.invoker}")


_table: dict[str, Conversion] = {
    "s": _sconv,
    "c": _cconv,
    "d": _dconv,
    "o": _oconv,
    "x": _xconv,
    "%": _pctconv,
    "u": _flag(FormatFlag.UNSIGNED),
    "h": _flag(FormatFlag.SHORT),
    "l": _flag(FormatFlag.LONG),
    "#": _flag(FormatFlag.ALTFORM),
    "-": _flag(FormatFlag.LEFTSIDE),
    ".": _flag(FormatFlag.F2SET),
    "0": _zeroconv,
    **{digit: _digitconv for digit in "123456789"},
}


def _lookup(char: str) -> Conversion:
    return _table.get(char, _badconv)


def install_conversion(char: str, conv: Optional[Conversion]) -> Conversion:
    """Install ``conv`` for ``%char`` and return the previous conversion.

    A conversion returns True when it only changed modifiers and the next
    character continues the same directive.  Passing None only queries.
    """
    if len(char) != 1:
        raise ValueError("a conversion is named by a single character")
    old = _lookup(char)
    if conv is not None:
        _table[char] = conv
    return old


def sprint(fmt: str, *args: Any) -> str:
    """Format ``args`` according to ``fmt`` and return the string."""
    state = Format(args)
    state.printfmt(fmt)
    return state.getvalue()


def fprint(fd: int, fmt: str, *args: Any) -> int:
    """Format to a file descriptor; return the number of bytes written."""
    data = sprint(fmt, *args).encode("utf-8", "surrogateescape")
    view = memoryview(data)
    while view:
        written = os.write(fd, view)
        view = view[written:]
    return len(data)