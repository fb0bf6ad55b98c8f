"""Exit statuses: truth of status lists and decoding of wait statuses."""

from __future__ import annotations

import re
from typing import Optional, Sequence

from esshell.signals import sigmessage, signame
from esshell.term import Term, mkstr

TRUE_STATUS: tuple[Term, ...] = (mkstr("0"),)
FALSE_STATUS: tuple[Term, ...] = (mkstr("1"),)

_INTEGER = re.compile(r"\s*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")


def istrue(status: Optional[Sequence[Term]]) -> bool:
    """True if every element of the status is empty or ``0``."""
    for term in status or ():
        if term.is_closure():
            return False
        if term.string not in ("", "0"):
            return False
    return True


def _strtol(text: str) -> tuple[int, str]:
    """Parse a leading C-style integer; return it and the unparsed rest."""
    found = _INTEGER.match(text)
    if found is None:
        return 0, text
    sign, digits = found.groups()
    if digits[:2] in ("0x", "0X"):
        value = int(digits[2:], 16)
    elif digits.startswith("0"):
        value = int(digits, 8) if len(digits) > 1 else 0
    else:
        value = int(digits)
    return (-value if sign == "-" else value), text[found.end():]


def exitstatus(status: Optional[Sequence[Term]]) -> int:
    """Turn a status list into a process exit code."""
    if not status:
        return 0
    if len(status) > 1:
        return 0 if istrue(status) else 1
    term = status[0]
    if term.is_closure():
        return 1
    text = term.string
    if text == "":
        return 0
    value, rest = _strtol(text)
    if rest or not 0 <= value <= 255:
        return 1
    return value


def _decode(status: int) -> tuple[Optional[int], bool, int]:
    """Split a wait status into (terminating signal, core dumped, exit code)."""
    termsig = status & 0x7F
    signaled = termsig != 0 and termsig != 0x7F
    return (termsig if signaled else None), bool(status & 0x80), (status >> 8) & 0xFF


def mkstatus(status: int) -> str:
    """Turn a wait status into the shell's status string."""
    sig, core, code = _decode(status)
    if sig is not None:
        name = signame(sig)
        return f"{name}+core" if core else name
    return str(code)


def status_message(pid: int, status: int) -> Optional[str]:
    """The message to report for a wait status, or None if there is none."""
    sig, core, _ = _decode(status)
    if sig is None:
        return None
    msg = sigmessage(sig)
    tail = ""
    if core:
        tail = "--core dumped" if msg else "core dumped"
    if not msg and not tail:
        return None
    return f"{msg}{tail}" if pid == 0 else f"{pid}: {msg}{tail}"