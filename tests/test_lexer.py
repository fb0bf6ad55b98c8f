import pytest

from esshell.lexer import LexError, Lexer, TokenKind, tokenize
from esshell.syntax import mkclose, mkdup, mkredircmd
from esshell.tree import NodeKind, mk


def kinds(text):
    return [token.kind for token in tokenize(text)]


def test_words():
    tokens = tokenize("echo hello")
    assert [(t.kind, t.text) for t in tokens] == [
        (TokenKind.WORD, "echo"),
        (TokenKind.WORD, "hello"),
    ]


def test_null_character_in_script_is_rejected():
    # the script printed by the "0" command of the test helper
    with pytest.raises(LexError) as info:
        tokenize("re\0sult 6\n")
    assert "null" in info.value.message


def test_null_character_skips_rest_of_line():
    lexer = Lexer("re\0sult 6\nnext")
    assert lexer.next_token().text == "re"
    with pytest.raises(LexError):
        lexer.next_token()
    assert lexer.next_token().kind is TokenKind.NL
    assert lexer.next_token().text == "next"


@pytest.mark.parametrize(
    "word, kind",
    [
        ("fn", TokenKind.FN),
        ("for", TokenKind.FOR),
        ("local", TokenKind.LOCAL),
        ("let", TokenKind.LET),
        ("match", TokenKind.MATCH),
        ("~~", TokenKind.EXTRACT),
        ("%closure", TokenKind.CLOSURE),
        ("@", TokenKind.AT),
        ("~", TokenKind.TILDE),
    ],
)
def test_keywords(word, kind):
    assert kinds(word) == [kind]


def test_keyword_prefix_is_a_word():
    assert [(t.kind, t.text) for t in tokenize("fnord")] == [(TokenKind.WORD, "fnord")]


def test_free_caret_before_quote():
    tokens = tokenize("a'b'")
    assert [t.kind for t in tokens] == [TokenKind.WORD, TokenKind.CARET, TokenKind.QWORD]
    assert tokens[2].text == "b"


def test_doubled_quote():
    assert [(t.kind, t.text) for t in tokenize("'it''s'")] == [(TokenKind.QWORD, "it's")]


def test_unterminated_quote():
    with pytest.raises(LexError) as info:
        tokenize("'abc")
    assert info.value.message == "eof in quoted string"


def test_quoted_newline_counts_lines():
    lexer = Lexer("'a\nb'")
    assert lexer.next_token().text == "a\nb"
    assert lexer.lineno == 2


@pytest.mark.parametrize(
    "text, kind",
    [
        ("$x", TokenKind.DOLLAR),
        ("$#x", TokenKind.COUNT),
        ("$^x", TokenKind.FLAT),
        ("$&x", TokenKind.PRIM),
    ],
)
def test_dollar_forms(text, kind):
    tokens = tokenize(text)
    assert [t.kind for t in tokens] == [kind, TokenKind.WORD]
    assert tokens[1].text == "x"


def test_variable_name_stops_at_dot():
    tokens = tokenize("$x.y")
    assert [t.kind for t in tokens] == [
        TokenKind.DOLLAR, TokenKind.WORD, TokenKind.CARET, TokenKind.WORD,
    ]
    assert [tokens[1].text, tokens[3].text] == ["x", ".y"]


def test_odd_character_after_dollar():
    tokens = tokenize("$.")
    assert [(t.kind, t.text) for t in tokens] == [
        (TokenKind.DOLLAR, "$"),
        (TokenKind.CHAR, "."),
    ]


@pytest.mark.parametrize(
    "text, first",
    [
        ("`{ls}", TokenKind.BACKQUOTE),
        ("``{ls}", TokenKind.BACKBACK),
        ("`^{ls}", TokenKind.BFLAT),
        ("``^{ls}", TokenKind.BBFLAT),
    ],
)
def test_backquotes(text, first):
    assert kinds(text) == [first, TokenKind.LBRACE, TokenKind.WORD, TokenKind.RBRACE]


def test_sub_versus_paren():
    assert kinds("f(x)") == [TokenKind.WORD, TokenKind.SUB, TokenKind.WORD, TokenKind.RPAREN]
    assert kinds("(x)") == [TokenKind.LPAREN, TokenKind.WORD, TokenKind.RPAREN]


def test_assignment_with_spaces():
    assert kinds("a = b") == [TokenKind.WORD, TokenKind.EQUALS, TokenKind.WORD]


@pytest.mark.parametrize(
    "text, outfd, infd",
    [("a|b", 1, 0), ("a|[2]b", 2, 0), ("a|[2=3]b", 2, 3)],
)
def test_pipes(text, outfd, infd):
    tokens = tokenize(text)
    assert [t.kind for t in tokens] == [TokenKind.WORD, TokenKind.PIPE, TokenKind.WORD]
    assert tokens[1].tree == mk(NodeKind.PIPE, outfd, infd)


def test_pipe_cannot_close():
    with pytest.raises(LexError) as info:
        tokenize("a|[2=]b")
    assert info.value.message == "expected digit after '='"


@pytest.mark.parametrize(
    "text, cmd, fd",
    [
        (">f", "%create", 1),
        (">>f", "%append", 1),
        ("<f", "%open", 0),
        ("<>f", "%open-write", 0),
        ("<>>f", "%open-append", 0),
        ("><f", "%open-create", 1),
        (">><f", "%open-append", 1),
        ("<<f", "%heredoc", 0),
        ("<<<f", "%here", 0),
        (">[2]f", "%create", 2),
    ],
)
def test_redirections(text, cmd, fd):
    tokens = tokenize(text)
    assert [t.kind for t in tokens] == [TokenKind.REDIR, TokenKind.WORD]
    assert tokens[0].tree == mkredircmd(cmd, fd)
    assert tokens[1].text == "f"


def test_call():
    assert kinds("<={x}") == [TokenKind.CALL, TokenKind.LBRACE, TokenKind.WORD, TokenKind.RBRACE]


def test_dup_and_close():
    dup = tokenize(">[2=1]")
    assert [t.kind for t in dup] == [TokenKind.DUP]
    assert dup[0].tree == mkdup(2, 1)
    closed = tokenize(">[2=]")
    assert closed[0].tree == mkclose(2)


@pytest.mark.parametrize(
    "text, message",
    [
        (">[x]", "expected digit after '['"),
        (">[2x]", "expected '=' or ']' after digit"),
        (">[2=x]", "expected digit or ']' after '='"),
        (">[2=1x", "expected ']' after digit"),
    ],
)
def test_bad_descriptors(text, message):
    with pytest.raises(LexError) as info:
        tokenize(text)
    assert info.value.message == message


def test_error_recovery():
    lexer = Lexer(">[x]\nfoo")
    with pytest.raises(LexError):
        lexer.next_token()
    assert lexer.next_token().kind is TokenKind.NL
    token = lexer.next_token()
    assert (token.kind, token.text) == (TokenKind.WORD, "foo")


@pytest.mark.parametrize(
    "text, value",
    [
        ("\\n", "\n"),
        ("\\t", "\t"),
        ("\\e", "\x1b"),
        ("\\x41", "A"),
        ("\\101", "A"),
        ("\\$", "$"),
    ],
)
def test_escapes(text, value):
    assert [(t.kind, t.text) for t in tokenize(text)] == [(TokenKind.QWORD, value)]


@pytest.mark.parametrize("text", ["\\q", "\\xg", "\\0", "\\"])
def test_bad_escapes(text):
    with pytest.raises(LexError) as info:
        tokenize(text)
    assert info.value.message == "bad backslash escape"


def test_escape_after_word_gets_caret():
    tokens = tokenize("a\\n")
    assert [t.kind for t in tokens] == [TokenKind.WORD, TokenKind.CARET, TokenKind.QWORD]


def test_line_continuation():
    lexer = Lexer("a\\\nb")
    assert [t.text for t in lexer] == ["a", "b"]
    assert lexer.lineno == 2


def test_newlines_and_comments():
    lexer = Lexer("x # note\ny")
    assert [t.kind for t in lexer] == [TokenKind.WORD, TokenKind.NL, TokenKind.WORD]
    assert lexer.lineno == 2


def test_comment_to_end_of_file():
    assert tokenize("# nothing") == []


def test_endfile_repeats():
    lexer = Lexer("")
    assert lexer.next_token().kind is TokenKind.ENDFILE
    assert lexer.next_token().kind is TokenKind.ENDFILE