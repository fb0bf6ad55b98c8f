"""The lexical analyser: turns shell source text into tokens."""

from __future__ import annotations

import enum
import string
from dataclasses import dataclass
from typing import Iterator, Optional

from esshell.syntax import mkclose, mkdup, mkredircmd
from esshell.tree import NodeKind, Tree, mk

EOF = ""

CLOSED = -1
DEFAULT = -2

# characters that end a word
_NONWORD = frozenset("\0\t\n !#$&'();<=>\\^`{|}")
# characters that may appear in a variable name right after "$"
_VARNAME = frozenset(string.ascii_letters + string.digits + "%*-_")

_ESCAPES = {
    "a": "\a", "b": "\b", "e": "\x1b", "f": "\f",
    "n": "\n", "r": "\r", "t": "\t",
}


class TokenKind(enum.Enum):
    """The kinds of token the lexer produces."""

    WORD = "word"
    QWORD = "qword"
    FN = "fn"
    FOR = "for"
    LOCAL = "local"
    LET = "let"
    EXTRACT = "~~"
    CLOSURE = "%closure"
    MATCH = "match"
    AT = "@"
    TILDE = "~"
    BANG = "!"
    EQUALS = "="
    BACKQUOTE = "`"
    BACKBACK = "``"
    BFLAT = "`^"
    BBFLAT = "``^"
    DOLLAR = "$"
    COUNT = "$#"
    FLAT = "$^"
    PRIM = "$&"
    CARET = "^"
    SUB = "sub("
    LPAREN = "("
    RPAREN = ")"
    SEMI = ";"
    LBRACE = "{"
    RBRACE = "}"
    AMP = "&"
    ANDAND = "&&"
    OROR = "||"
    PIPE = "|"
    REDIR = "redir"
    DUP = "dup"
    CALL = "<="
    NL = "newline"
    ENDFILE = "eof"
    CHAR = "char"


_KEYWORDS = {
    "@": TokenKind.AT,
    "~": TokenKind.TILDE,
    "fn": TokenKind.FN,
    "for": TokenKind.FOR,
    "local": TokenKind.LOCAL,
    "let": TokenKind.LET,
    "~~": TokenKind.EXTRACT,
    "%closure": TokenKind.CLOSURE,
    "match": TokenKind.MATCH,
}

_PUNCTUATION = {
    ";": TokenKind.SEMI,
    "^": TokenKind.CARET,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
}


@dataclass
class Token:
    """One token: its kind, its text, and for pipes and redirections a tree."""

    kind: TokenKind
    text: Optional[str] = None
    tree: Optional[Tree] = None


class LexError(Exception):
    """A lexical error; the rest of the offending line has been skipped."""

    def __init__(self, message: str, lineno: int) -> None:
        super().__init__(f"line {lineno}: {message}")
        self.message = message
        self.lineno = lineno


class _State(enum.Enum):
    NONWORD = "nonword"
    REALWORD = "realword"
    KEYWORD = "keyword"


def _isdigit(c: str) -> bool:
    return c != EOF and c in string.digits


def _isnonword(c: str) -> bool:
    return c in _NONWORD


def _isnonvarname(c: str) -> bool:
    return c not in _VARNAME


class Lexer:
    """Splits source text into tokens, inserting free carets between words."""

    def __init__(self, text: str, lineno: int = 1) -> None:
        self._text = text
        self._pos = 0
        self._pushback: list[str] = []
        self.lineno = lineno
        self._w = _State.NONWORD
        self._dollar = False
        self._goterror = False

    def _getc(self) -> str:
        if self._pushback:
            return self._pushback.pop()
        if self._pos >= len(self._text):
            return EOF
        c = self._text[self._pos]
        self._pos += 1
        return c

    def _ungetc(self, c: str) -> None:
        self._pushback.append(c)

    def _error(self, c: str, message: str) -> LexError:
        while c not in ("\n", EOF):
            c = self._getc()
        self._goterror = True
        return LexError(message, self.lineno)

    def _free_caret(self, c: str) -> Optional[Token]:
        if self._w is not _State.NONWORD:
            self._w = _State.NONWORD
            self._ungetc(c)
            return Token(TokenKind.CARET, "^")
        return None

    def next_token(self) -> Token:
        """Return the next token; raise :class:`LexError` on bad input."""
        if self._goterror:
            self._goterror = False
            return Token(TokenKind.NL)
        meta = _isnonvarname if self._dollar else _isnonword
        self._dollar = False
        while True:
            c = self._getc()
            while c in (" ", "\t"):
                self._w = _State.NONWORD
                c = self._getc()
            if c == EOF:
                return Token(TokenKind.ENDFILE)
            if not meta(c):
                return self._word(c, meta)
            if c == "\\":
                following = self._getc()
                if following == "\n":
                    self.lineno += 1
                    self._ungetc(" ")
                    continue
                return self._escape(following)
            return self._special(c)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            if token.kind is TokenKind.ENDFILE:
                return
            yield token

    def _word(self, c: str, meta) -> Token:
        caret = self._free_caret(c)
        if caret is not None:
            return caret
        chars = [c]
        while (c := self._getc()) != EOF and not meta(c):
            chars.append(c)
        self._ungetc(c)
        word = "".join(chars)
        self._w = _State.KEYWORD
        keyword = _KEYWORDS.get(word)
        if keyword is not None:
            return Token(keyword, word)
        self._w = _State.REALWORD
        return Token(TokenKind.WORD, word)

    def _escape(self, c: str) -> Token:
        if c == EOF:
            self._ungetc(EOF)
            raise self._error(c, "bad backslash escape")
        self._ungetc(c)
        caret = self._free_caret("\\")
        if caret is not None:
            return caret
        self._w = _State.REALWORD
        c = self._getc()
        if c in _ESCAPES:
            ch = _ESCAPES[c]
        elif c in ("x", "X"):
            n = 0
            while True:
                c = self._getc()
                if c == EOF or c not in string.hexdigits:
                    break
                n = (n << 4) | int(c, 16)
            if n == 0:
                raise self._error(c, "bad backslash escape")
            self._ungetc(c)
            ch = chr(n & 0xFF)
        elif c in "01234567":
            n = 0
            while True:
                n = (n << 3) | int(c)
                c = self._getc()
                if c == EOF or not "0" <= c < "8":
                    break
            if n == 0:
                raise self._error(c, "bad backslash escape")
            self._ungetc(c)
            ch = chr(n & 0xFF)
        elif c.isascii() and c.isalnum():
            raise self._error(c, "bad backslash escape")
        else:
            ch = c
        # a byte that truncates to zero ends the string at once
        return Token(TokenKind.QWORD, "" if ch == "\0" else ch)

    def _quoted(self) -> Token:
        self._w = _State.REALWORD
        chars = []
        while True:
            c = self._getc()
            if c == "'":
                c = self._getc()
                if c != "'":
                    break
            if c == EOF:
                self._w = _State.NONWORD
                raise self._error(c, "eof in quoted string")
            chars.append(c)
            if c == "\n":
                self.lineno += 1
        self._ungetc(c)
        return Token(TokenKind.QWORD, "".join(chars))

    def _newline(self) -> Token:
        self.lineno += 1
        self._w = _State.NONWORD
        return Token(TokenKind.NL)

    def _special(self, c: str) -> Token:
        if c in "`!$'=":
            caret = self._free_caret(c)
            if caret is not None:
                return caret
            if c in "!=":
                self._w = _State.KEYWORD
        if c == "!":
            return Token(TokenKind.BANG, c)
        if c == "=":
            return Token(TokenKind.EQUALS, c)
        if c == "`":
            c = self._getc()
            if c == "`":
                c = self._getc()
                if c == "^":
                    return Token(TokenKind.BBFLAT, "``^")
                self._ungetc(c)
                return Token(TokenKind.BACKBACK, "``")
            if c == "^":
                return Token(TokenKind.BFLAT, "`^")
            self._ungetc(c)
            return Token(TokenKind.BACKQUOTE, "`")
        if c == "$":
            self._dollar = True
            c = self._getc()
            if c == "#":
                return Token(TokenKind.COUNT, "$#")
            if c == "^":
                return Token(TokenKind.FLAT, "$^")
            if c == "&":
                return Token(TokenKind.PRIM, "$&")
            self._ungetc(c)
            return Token(TokenKind.DOLLAR, "$")
        if c == "'":
            return self._quoted()
        if c == "#":
            while (c := self._getc()) != "\n":
                if c == EOF:
                    return Token(TokenKind.ENDFILE)
            return self._newline()
        if c == "\n":
            return self._newline()
        if c == "(":
            kind = TokenKind.SUB if self._w is _State.REALWORD else TokenKind.LPAREN
            self._w = _State.NONWORD
            return Token(kind, "(")
        if c in _PUNCTUATION:
            self._w = _State.NONWORD
            return Token(_PUNCTUATION[c], c)
        if c == "&":
            self._w = _State.NONWORD
            c = self._getc()
            if c == "&":
                return Token(TokenKind.ANDAND, "&&")
            self._ungetc(c)
            return Token(TokenKind.AMP, "&")
        if c == "|":
            return self._pipe()
        if c in "<>":
            return self._redirection(c)
        self._w = _State.NONWORD
        if c == "\0":
            raise self._error(c, "null character in input")
        return Token(TokenKind.CHAR, c)

    def _getfds(self, c: str, default0: int, default1: int) -> tuple[int, int]:
        """Scan ``[n]``, ``[n=m]`` or ``[n=]`` after a redirection operator."""
        if c != "[":
            self._ungetc(c)
            return default0, default1
        c = self._getc()
        if not _isdigit(c):
            raise self._error(c, "expected digit after '['")
        n = int(c)
        while _isdigit(c := self._getc()):
            n = n * 10 + int(c)
        first = n
        if c == "=":
            c = self._getc()
            if not _isdigit(c):
                if c != "]":
                    raise self._error(c, "expected digit or ']' after '='")
                return first, CLOSED
            n = int(c)
            while _isdigit(c := self._getc()):
                n = n * 10 + int(c)
            if c != "]":
                raise self._error(c, "expected ']' after digit")
            return first, n
        if c == "]":
            return first, default1
        raise self._error(c, "expected '=' or ']' after digit")

    def _pipe(self) -> Token:
        self._w = _State.NONWORD
        c = self._getc()
        if c == "|":
            return Token(TokenKind.OROR, "||")
        outfd, infd = self._getfds(c, 1, 0)
        if infd == CLOSED:
            raise self._error(c, "expected digit after '='")
        return Token(TokenKind.PIPE, "|", mk(NodeKind.PIPE, outfd, infd))

    def _redirection(self, c: str) -> Token:
        if c == "<":
            fd = 0
            c = self._getc()
            if c == ">":
                c = self._getc()
                if c == ">":
                    c = self._getc()
                    cmd = "%open-append"
                else:
                    cmd = "%open-write"
            elif c == "<":
                c = self._getc()
                if c == "<":
                    c = self._getc()
                    cmd = "%here"
                else:
                    cmd = "%heredoc"
            elif c == "=":
                return Token(TokenKind.CALL, "<=")
            else:
                cmd = "%open"
        else:
            fd = 1
            c = self._getc()
            if c == ">":
                c = self._getc()
                if c == "<":
                    c = self._getc()
                    cmd = "%open-append"
                else:
                    cmd = "%append"
            elif c == "<":
                c = self._getc()
                cmd = "%open-create"
            else:
                cmd = "%create"
        self._w = _State.NONWORD
        fd0, fd1 = self._getfds(c, fd, DEFAULT)
        if fd1 != DEFAULT:
            tree = mkclose(fd0) if fd1 == CLOSED else mkdup(fd0, fd1)
            return Token(TokenKind.DUP, cmd, tree)
        return Token(TokenKind.REDIR, cmd, mkredircmd(cmd, fd0))


def tokenize(text: str) -> list[Token]:
    """All the tokens of ``text``, up to but not including end of file."""
    return list(Lexer(text))