"""Rewriting rules that turn parsed constructs into primitive calls."""

from __future__ import annotations

import itertools
from typing import Callable, Optional

from esshell.tree import NodeKind, Tree, mk

# marks where the command goes in a queued redirection
PLACEHOLDER = Tree(NodeKind.REDIR)

# returned when a redirection cannot be completed
ERROR_NODE = Tree(NodeKind.LIST)

_devfd_ids = itertools.count()


def treecons(car: Optional[Tree], cdr: Optional[Tree]) -> Optional[Tree]:
    """Make a new list cell, collapsing empty and single-list cases."""
    if cdr is not None and cdr.kind is not NodeKind.LIST:
        raise ValueError("treecons: tail is not a list")
    if car is None:
        return cdr
    if cdr is None and car.kind is NodeKind.LIST:
        return car
    return mk(NodeKind.LIST, car, cdr)


def treeappend(head: Optional[Tree], tail: Optional[Tree]) -> Optional[Tree]:
    """Destructively append ``tail`` to the list ``head``."""
    if head is None:
        return tail
    node = head
    while True:
        if node.kind not in (NodeKind.LIST, NodeKind.REDIR):
            raise ValueError("treeappend: not a list")
        if node.cdr is None:
            node.cdr = tail
            return head
        node = node.cdr


def treeconsend(head: Optional[Tree], tail: Optional[Tree]) -> Optional[Tree]:
    """Destructively add a node at the end of a list."""
    if tail is None:
        if head is not None and head.kind not in (NodeKind.LIST, NodeKind.REDIR):
            raise ValueError("treeconsend: not a list")
        return head
    return treeappend(head, treecons(tail, None))


def thunkify(tree: Optional[Tree]) -> Tree:
    """Wrap a tree in thunk braces unless it already is a thunk."""
    node = tree
    while node is not None and node.kind is NodeKind.LIST and node.cdr is None:
        node = node.car
    if node is not None and node.kind is NodeKind.THUNK:
        return tree
    return mk(NodeKind.THUNK, tree)


def _firstis(tree: Optional[Tree], word: str) -> bool:
    """True if the first element of a literal command is the given word."""
    if tree is None or tree.kind is not NodeKind.LIST:
        return False
    first = tree.car
    return first is not None and first.kind is NodeKind.WORD and first.car == word


def prefix(word: str, tree: Optional[Tree]) -> Optional[Tree]:
    """Put a word in front of a tree list."""
    return treecons(mk(NodeKind.WORD, word), tree)


def flatten(tree: Optional[Tree], sep: str) -> Tree:
    """Call %flatten on the tree so it yields a single element."""
    return mk(
        NodeKind.CALL,
        prefix("%flatten", treecons(mk(NodeKind.QWORD, sep), treecons(tree, None))),
    )


def backquote(ifs: Optional[Tree], body: Optional[Tree]) -> Tree:
    """Make a %backquote command."""
    return mk(
        NodeKind.CALL,
        prefix("%backquote", treecons(flatten(ifs, ""), treecons(body, None))),
    )


def fnassign(name: Optional[Tree], defn: Optional[Tree]) -> Tree:
    """Turn a function definition into an assignment to ``fn-name``."""
    return mk(NodeKind.ASSIGN, mk(NodeKind.CONCAT, mk(NodeKind.WORD, "fn-"), name), defn)


def mklambda(params: Optional[Tree], body: Optional[Tree]) -> Tree:
    """Make a lambda node."""
    return mk(NodeKind.LAMBDA, params, body)


def mkseq(op: str, first: Optional[Tree], second: Optional[Tree]) -> Optional[Tree]:
    """Destructively join two commands under the operator ``op``."""
    if op == "%seq":
        if first is None:
            return second
        if second is None:
            return first
    sametail = _firstis(second, op)
    tail = second.cdr if sametail else treecons(thunkify(second), None)
    if _firstis(first, op):
        return treeappend(first, tail)
    first = thunkify(first)
    if sametail:
        second.cdr = treecons(first, tail)
        return second
    return prefix(op, treecons(first, tail))


def mkpipe(first: Optional[Tree], outfd: int, infd: int, second: Optional[Tree]) -> Optional[Tree]:
    """Destructively assemble a %pipe from its commands."""
    pipetail = _firstis(second, "%pipe")
    tail = prefix(
        str(outfd),
        prefix(str(infd), second.cdr if pipetail else treecons(thunkify(second), None)),
    )
    if _firstis(first, "%pipe"):
        return treeappend(first, tail)
    first = thunkify(first)
    if pipetail:
        second.cdr = treecons(first, tail)
        return second
    return prefix("%pipe", treecons(first, tail))


def redirect(
    tree: Optional[Tree],
    heredocs: Optional[Callable[[Tree], bool]] = None,
) -> Optional[Tree]:
    """Rewrite queued redirections so they wrap the command they apply to.

    ``heredocs`` is called with each ``%heredoc`` redirection and returns
    False if it cannot be queued, in which case :data:`ERROR_NODE` results.
    """
    if tree is None:
        return None
    if tree.kind is not NodeKind.REDIR:
        return tree
    redir = tree.car
    rest = tree.cdr
    while redir.kind is NodeKind.REDIR:
        rest = treeappend(rest, redir.car)
        redir = redir.cdr
    slot = redir
    while slot.car is not PLACEHOLDER:
        if slot.cdr is None or slot.kind is not NodeKind.LIST:
            raise ValueError("redirect: no placeholder in redirection")
        slot = slot.cdr
    if _firstis(redir, "%heredoc"):
        if heredocs is None:
            raise ValueError("redirect: heredoc with no queue for it")
        if not heredocs(redir):
            return ERROR_NODE
    slot.car = thunkify(redirect(rest, heredocs))
    return redir


def mkredircmd(cmd: str, fd: int) -> Optional[Tree]:
    """Start a redirection command for the given descriptor."""
    return prefix(cmd, prefix(str(fd), None))


def mkredir(cmd: Optional[Tree], file: Optional[Tree]) -> Optional[Tree]:
    """Complete a redirection with its file and a command placeholder."""
    word = None
    if file is not None and file.kind is NodeKind.THUNK:
        if _firstis(cmd, "%open"):
            op = "%readfrom"
        elif _firstis(cmd, "%create"):
            op = "%writeto"
        else:
            raise ValueError("bad /dev/fd redirection")
        var = mk(NodeKind.WORD, f"_devfd{next(_devfd_ids)}")
        cmd = treecons(mk(NodeKind.WORD, op), treecons(var, None))
        word = treecons(mk(NodeKind.VAR, var), None)
    elif not _firstis(cmd, "%heredoc") and not _firstis(cmd, "%here"):
        file = mk(NodeKind.CALL, prefix("%one", treecons(file, None)))
    cmd = treeappend(cmd, treecons(file, treecons(PLACEHOLDER, None)))
    if word is not None:
        cmd = mk(NodeKind.REDIR, word, cmd)
    return cmd


def mkclose(fd: int) -> Optional[Tree]:
    """Make a %close redirection with a placeholder."""
    return prefix("%close", prefix(str(fd), treecons(PLACEHOLDER, None)))


def mkdup(fd0: int, fd1: int) -> Optional[Tree]:
    """Make a %dup redirection with a placeholder."""
    return prefix("%dup", prefix(str(fd0), prefix(str(fd1), treecons(PLACEHOLDER, None))))


def redirappend(tree: Optional[Tree], redirs: Tree) -> Tree:
    """Destructively add a redirection after any others, before other nodes."""
    while redirs.kind is NodeKind.REDIR:
        tree = treeappend(tree, redirs.car)
        redirs = redirs.cdr
    if redirs.kind is not NodeKind.LIST:
        raise ValueError("redirappend: redirection is not a list")
    if tree is None or tree.kind is not NodeKind.REDIR:
        return mk(NodeKind.REDIR, redirs, tree)
    node = tree
    while node.cdr is not None and node.cdr.kind is NodeKind.REDIR:
        node = node.cdr
    node.cdr = mk(NodeKind.REDIR, redirs, node.cdr)
    return tree


def firstprepend(first: Optional[Tree], args: Optional[Tree]) -> Optional[Tree]:
    """Insert a command word before its arguments but after any redirections."""
    if first is None:
        return args
    if args is None or args.kind is not NodeKind.REDIR:
        return treecons(first, args)
    node = args
    while node.cdr is not None and node.cdr.kind is NodeKind.REDIR:
        node = node.cdr
    node.cdr = treecons(first, node.cdr)
    return args


def mkmatch(subject: Optional[Tree], cases: Optional[Tree]) -> Tree:
    """Rewrite a match statement as an ``if`` over ``~`` tests.

    The subject is evaluated once, into a local variable.
    """
    if cases is None:
        return thunkify(None)
    varname = "matchexpr"
    assignment = treecons(mk(NodeKind.ASSIGN, mk(NodeKind.WORD, varname), subject), None)
    subjvar = mk(NodeKind.VAR, mk(NodeKind.WORD, varname))
    matches = None
    while cases is not None:
        pattlist = cases.car.car
        cmd = cases.car.cdr
        if pattlist is not None and pattlist.kind is not NodeKind.LIST:
            pattlist = treecons(pattlist, None)
        test = treecons(
            thunkify(mk(NodeKind.MATCH, subjvar, pattlist)),
            treecons(cmd, None),
        )
        matches = treeappend(matches, test)
        cases = cases.cdr
    return mk(NodeKind.LOCAL, assignment, thunkify(prefix("if", matches)))