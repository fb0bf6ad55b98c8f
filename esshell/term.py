"""Terms: the values held in es lists, either strings or closures."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from esshell.tree import Tree


@dataclass
class Binding:
    """One link in a chain of lexical variable bindings."""

    name: str
    defn: Optional[list["Term"]]
    next: Optional["Binding"] = None

    def __iter__(self) -> Iterator["Binding"]:
        binding: Optional[Binding] = self
        while binding is not None:
            yield binding
            binding = binding.next

    def lookup(self, name: str) -> Optional["Binding"]:
        """Return the innermost binding of ``name`` in this chain, if any."""
        return next((b for b in self if b.name == name), None)


@dataclass
class Closure:
    """A parse tree together with the bindings it closes over."""

    tree: Tree
    binding: Optional[Binding] = None


@dataclass
class Term:
    """A single value: exactly one of a string or a closure."""

    text: Optional[str] = None
    closure: Optional[Closure] = None

    def __post_init__(self) -> None:
        if (self.text is None) == (self.closure is None):
            raise ValueError("a term holds exactly one of a string or a closure")

    @property
    def string(self) -> str:
        """The string form of the term."""
        if self.text is None:
            raise TypeError("closure term has no string form")
        return self.text

    def equals(self, text: str) -> bool:
        """True if the term is a string equal to ``text``."""
        return self.text is not None and self.text == text

    def is_closure(self) -> bool:
        return self.closure is not None


def mkstr(text: str) -> Term:
    """Make a string term."""
    return Term(text=text)


def termcat(first: Optional[Term], second: Optional[Term]) -> Optional[Term]:
    """Concatenate two terms as strings; a missing term yields the other."""
    if first is None:
        return second
    if second is None:
        return first
    return mkstr(first.string + second.string)