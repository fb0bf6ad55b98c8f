"""Option parsing for primitives."""

from __future__ import annotations

from typing import Optional, Sequence

from esshell.term import Term, mkstr


class OptionError(Exception):
    """A bad option or a missing option argument."""

    def __init__(self, caller: str, message: str) -> None:
        super().__init__(f"{caller}: {message}")
        self.caller = caller
        self.message = message


class OptionParser:
    """Walks the leading ``-x`` options of an argument list.

    When ``throws`` is false, errors are reported by returning ``"?"``
    (unknown option) or ``":"`` (missing argument) instead of raising.
    """

    def __init__(self, args: Sequence[Term], caller: str, usage: str, throws: bool = True) -> None:
        self._args = list(args)
        self._pos = 0
        self._nextchar = 0
        self._caller = caller
        self._usage = usage
        self._throws = throws
        self._optarg: Optional[Term] = None

    def next_option(self, options: str) -> Optional[str]:
        """Return the next option letter, or None when options are done.

        A letter followed by ``:`` in ``options`` takes an argument,
        available afterwards from :meth:`argument`.
        """
        if self._nextchar == 0:
            if self._pos >= len(self._args):
                return None
            arg = self._args[self._pos].string
            if not arg.startswith("-") or arg == "-":
                return None
            if arg == "--":
                self._pos += 1
                return None
            self._nextchar = 1
        else:
            arg = self._args[self._pos].string

        c = arg[self._nextchar]
        self._nextchar += 1
        where = options.find(c) if c != ":" else -1
        if where < 0:
            self._args = []
            self._pos = 0
            self._nextchar = 0
            if self._throws:
                raise OptionError(self._caller, f"illegal option: -{c} -- usage: {self._usage}")
            return "?"

        if self._nextchar >= len(arg):
            self._nextchar = 0
            self._pos += 1

        if options[where + 1:where + 2] == ":":
            if self._pos >= len(self._args):
                if self._throws:
                    raise OptionError(
                        self._caller,
                        f"option -{c} expects an argument -- usage: {self._usage}",
                    )
                return ":"
            if self._nextchar == 0:
                self._optarg = self._args[self._pos]
            else:
                self._optarg = mkstr(arg[self._nextchar:])
            self._nextchar = 0
            self._pos += 1
        return c

    def argument(self) -> Term:
        """Return (and consume) the argument of the last option."""
        if self._optarg is None:
            raise LookupError("no option argument pending")
        term, self._optarg = self._optarg, None
        return term

    def rest(self) -> list[Term]:
        """Return the arguments left after the options."""
        result = self._args[self._pos:]
        self._args = []
        self._pos = 0
        return result