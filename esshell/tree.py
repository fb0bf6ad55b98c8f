"""Parse-tree nodes."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


class NodeKind(enum.Enum):
    """The kinds of parse-tree node."""

    ASSIGN = "assign"
    CALL = "call"
    CLOSURE = "closure"
    CONCAT = "concat"
    FOR = "for"
    LAMBDA = "lambda"
    LET = "let"
    LIST = "list"
    LOCAL = "local"
    MATCH = "match"
    EXTRACT = "extract"
    PRIM = "prim"
    QWORD = "qword"
    THUNK = "thunk"
    VAR = "var"
    VARSUB = "varsub"
    WORD = "word"
    # only appear while a tree is being built
    REDIR = "redir"
    PIPE = "pipe"


_STRING_KINDS = frozenset({NodeKind.WORD, NodeKind.QWORD, NodeKind.PRIM})
_ONE_TREE_KINDS = frozenset({NodeKind.CALL, NodeKind.THUNK, NodeKind.VAR})
_TWO_TREE_KINDS = frozenset({
    NodeKind.ASSIGN, NodeKind.CONCAT, NodeKind.CLOSURE, NodeKind.FOR,
    NodeKind.LAMBDA, NodeKind.LET, NodeKind.LIST, NodeKind.LOCAL,
    NodeKind.VARSUB, NodeKind.MATCH, NodeKind.EXTRACT, NodeKind.REDIR,
})


@dataclass
class Tree:
    """A parse-tree node with up to two slots.

    Word-like nodes hold a string in ``car``; pipe nodes hold two file
    descriptors; every other node holds subtrees (or ``None``).
    """

    kind: NodeKind
    car: Any = None
    cdr: Any = None

    @property
    def arity(self) -> int:
        """Number of slots this kind of node uses."""
        return 1 if self.kind in _STRING_KINDS or self.kind in _ONE_TREE_KINDS else 2


def mk(kind: NodeKind, *args: Any) -> Tree:
    """Make a new node of the given kind from its slot values."""
    if not isinstance(kind, NodeKind):
        raise ValueError(f"mk: bad node kind {kind!r}")
    if kind in _STRING_KINDS:
        if len(args) != 1:
            raise ValueError(f"mk: {kind.name} takes one string")
        if not isinstance(args[0], str):
            raise TypeError(f"mk: {kind.name} needs a string, not {type(args[0]).__name__}")
        return Tree(kind, args[0])
    if kind in _ONE_TREE_KINDS:
        if len(args) != 1:
            raise ValueError(f"mk: {kind.name} takes one subtree")
        return Tree(kind, args[0])
    if kind in _TWO_TREE_KINDS:
        if len(args) != 2:
            raise ValueError(f"mk: {kind.name} takes two subtrees")
        return Tree(kind, args[0], args[1])
    if len(args) != 2 or not all(isinstance(a, int) for a in args):
        raise ValueError("mk: PIPE takes two file descriptors")
    return Tree(kind, args[0], args[1])