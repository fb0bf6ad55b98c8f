"""Signal names, messages and the table of per-signal effects."""

from __future__ import annotations

import enum
import re
import signal
import sys
from typing import Callable, Iterable, Mapping, Optional

NSIG = signal.NSIG

_NAMES: dict[int, str] = {int(s.value): s.name.lower() for s in signal.Signals}
_NUMBERS: dict[str, int] = {name: sig for sig, name in _NAMES.items()}

_NUMERIC = re.compile(r"\s*[+-]?[0-9]+")

_UNCATCHABLE = frozenset(
    int(s) for s in (getattr(signal, "SIGKILL", None), getattr(signal, "SIGSTOP", None))
    if s is not None
)


class SigEffect(enum.Enum):
    """What the shell does when a signal arrives."""

    NOCHANGE = "nochange"
    CATCH = "catch"
    DEFAULT = "default"
    IGNORE = "ignore"
    NOOP = "noop"
    SPECIAL = "special"


_PREFIXES = {
    SigEffect.CATCH: "",
    SigEffect.IGNORE: "-",
    SigEffect.NOOP: "/",
    SigEffect.SPECIAL: ".",
}

_SPEC_EFFECTS = {"-": SigEffect.IGNORE, "/": SigEffect.NOOP, ".": SigEffect.SPECIAL}


def signumber(name: str) -> Optional[int]:
    """Return the number of a signal named like ``sigint`` or ``sig5``."""
    if not name.startswith("sig"):
        return None
    if name in _NUMBERS:
        return _NUMBERS[name]
    digits = name[3:]
    if not _NUMERIC.fullmatch(digits):
        return None
    sig = int(digits)
    return sig if 0 < sig < NSIG else None


def signame(sig: int) -> str:
    """Return the shell's name for a signal number."""
    return _NAMES.get(sig, f"sig{sig}")


def sigmessage(sig: int) -> str:
    """Return a human-readable description of a signal."""
    if sig not in _NAMES:
        return f"unknown signal {sig}"
    try:
        return signal.strsignal(sig) or ""
    except ValueError:
        return ""


def parse_signal_specs(specs: Iterable[str]) -> dict[int, SigEffect]:
    """Parse names such as ``sigint``, ``-sigterm``, ``/sigquit`` or ``.sigint``.

    Later entries for the same signal override earlier ones.
    """
    effects: dict[int, SigEffect] = {}
    for spec in specs:
        effect = _SPEC_EFFECTS.get(spec[:1], SigEffect.CATCH)
        name = spec[1:] if effect is not SigEffect.CATCH else spec
        sig = signumber(name)
        if sig is None:
            raise ValueError(f"$&setsignals: unknown signal: {name}")
        effects[sig] = effect
    return effects


def _stderr_report(message: str) -> None:
    print(message, file=sys.stderr)


class SignalTable:
    """The effect the shell has chosen for each signal.

    Requests that cannot be honoured are reported through ``report`` and
    leave the effect unchanged.
    """

    def __init__(self, report: Optional[Callable[[str], None]] = None) -> None:
        self._effects: dict[int, SigEffect] = {}
        self._report = report or _stderr_report

    @classmethod
    def from_process(
        cls,
        interactive: bool,
        allowdumps: bool,
        report: Optional[Callable[[str], None]] = None,
    ) -> "SignalTable":
        """Build a table from the current process's handlers."""
        table = cls(report)
        for sig in signal.valid_signals():
            sig = int(sig)
            if not 0 < sig < NSIG:
                continue
            try:
                handler = signal.getsignal(sig)
            except (ValueError, OSError):
                continue
            if handler is signal.SIG_IGN:
                table._effects[sig] = SigEffect.IGNORE
        sigint = int(signal.SIGINT)
        if interactive or table[sigint] is SigEffect.DEFAULT:
            table.set_effect(sigint, SigEffect.SPECIAL)
        if not allowdumps:
            if interactive:
                table.set_effect(int(signal.SIGTERM), SigEffect.NOOP)
            sigquit = getattr(signal, "SIGQUIT", None)
            if sigquit is not None and (interactive or table[int(sigquit)] is SigEffect.DEFAULT):
                table.set_effect(int(sigquit), SigEffect.NOOP)
        return table

    @staticmethod
    def _check(sig: int) -> None:
        if not 0 < sig < NSIG:
            raise ValueError(f"signal number out of range: {sig}")

    def __getitem__(self, sig: int) -> SigEffect:
        self._check(sig)
        return self._effects.get(sig, SigEffect.DEFAULT)

    @property
    def effects(self) -> dict[int, SigEffect]:
        """The signals whose effect is not the default."""
        return dict(self._effects)

    def set_effect(self, sig: int, effect: SigEffect) -> SigEffect:
        """Change one signal's effect and return the previous one."""
        old = self[sig]
        if effect is SigEffect.NOCHANGE or effect is old:
            return old
        if effect is SigEffect.IGNORE and sig in _UNCATCHABLE:
            self._report(f"$&setsignals: cannot ignore {signame(sig)}")
            return old
        if effect is SigEffect.SPECIAL and sig != int(signal.SIGINT):
            self._report(f"$&setsignals: special handler not defined for {signame(sig)}")
            return old
        if effect in (SigEffect.CATCH, SigEffect.NOOP, SigEffect.SPECIAL) and sig in _UNCATCHABLE:
            self._report(f"$&setsignals: cannot catch {signame(sig)}")
            return old
        if effect is SigEffect.DEFAULT:
            self._effects.pop(sig, None)
        else:
            self._effects[sig] = effect
        return old

    def set_effects(self, effects: Mapping[int, SigEffect]) -> None:
        """Set every signal's effect; signals not mentioned revert to default."""
        for sig in effects:
            self._check(sig)
        for sig in range(1, NSIG):
            self.set_effect(sig, effects.get(sig, SigEffect.DEFAULT))

    def set_defaults(self) -> None:
        """Restore the default for every caught signal, as a child does."""
        for sig, effect in list(self._effects.items()):
            if effect in (SigEffect.CATCH, SigEffect.NOOP, SigEffect.SPECIAL):
                self.set_effect(sig, SigEffect.DEFAULT)

    def siglist(self) -> list[str]:
        """The non-default effects as prefixed signal names, by number."""
        return [
            _PREFIXES[self._effects[sig]] + signame(sig)
            for sig in sorted(self._effects)
        ]