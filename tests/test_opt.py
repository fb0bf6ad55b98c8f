import pytest

from esshell.opt import OptionError, OptionParser
from esshell.term import mkstr

USAGE = ". [-einvx] file [arg ...]"


def _parser(*words, throws=True):
    return OptionParser([mkstr(w) for w in words], "$&dot", USAGE, throws)


def _drain(parser, options):
    found = []
    while (c := parser.next_option(options)) is not None:
        found.append(c)
    return found


def test_separate_and_clustered_flags():
    parser = _parser("-e", "-iv", "file", "arg")
    assert _drain(parser, "einvx") == ["e", "i", "v"]
    assert [t.string for t in parser.rest()] == ["file", "arg"]


def test_double_dash_ends_options():
    parser = _parser("-x", "--", "-n")
    assert _drain(parser, "einvx") == ["x"]
    assert [t.string for t in parser.rest()] == ["-n"]


def test_no_options():
    parser = _parser("file")
    assert parser.next_option("einvx") is None
    assert [t.string for t in parser.rest()] == ["file"]


def test_empty_list():
    parser = _parser()
    assert parser.next_option("a") is None
    assert parser.rest() == []


def test_argument_in_next_word():
    parser = _parser("-f", "name", "rest")
    assert parser.next_option("f:") == "f"
    assert parser.argument().string == "name"
    assert parser.next_option("f:") is None
    assert [t.string for t in parser.rest()] == ["rest"]


def test_argument_attached():
    parser = _parser("-fname")
    assert parser.next_option("f:") == "f"
    assert parser.argument().string == "name"
    assert parser.rest() == []


def test_argument_consumed_once():
    parser = _parser("-f", "x")
    parser.next_option("f:")
    parser.argument()
    with pytest.raises(LookupError):
        parser.argument()


def test_illegal_option_raises():
    parser = _parser("-q")
    with pytest.raises(OptionError) as info:
        parser.next_option("einvx")
    assert info.value.caller == "$&dot"
    assert USAGE in info.value.message


def test_illegal_option_without_throwing():
    parser = _parser("-q", "file", throws=False)
    assert parser.next_option("einvx") == "?"
    assert parser.rest() == []


def test_missing_argument():
    with pytest.raises(OptionError):
        _parser("-f").next_option("f:")
    assert _parser("-f", throws=False).next_option("f:") == ":"