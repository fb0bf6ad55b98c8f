import signal

import pytest

from esshell.signals import (
    NSIG,
    SigEffect,
    SignalTable,
    parse_signal_specs,
    sigmessage,
    signame,
    signumber,
)


def test_signame_sigint():
    assert signame(signal.SIGINT) == "sigint"


def test_signumber_by_name():
    assert signumber("sigint") == signal.SIGINT
    assert signumber("sigterm") == signal.SIGTERM


def test_name_number_round_trip():
    for sig in range(1, NSIG):
        assert signumber(signame(sig)) == sig


def test_signumber_numeric():
    assert signumber(f"sig{int(signal.SIGHUP)}") == signal.SIGHUP


@pytest.mark.parametrize("name", ["int", "sig0", f"sig{NSIG}", "sig5x", "sig", "sigbogus"])
def test_signumber_unknown(name):
    assert signumber(name) is None


def test_unknown_signal_name_and_message():
    sig = NSIG + 5
    assert signame(sig) == f"sig{sig}"
    assert sigmessage(sig) == f"unknown signal {sig}"


def test_sigmessage_known_matches_system():
    assert sigmessage(signal.SIGTERM) == signal.strsignal(signal.SIGTERM)


def test_parse_signal_specs_prefixes():
    effects = parse_signal_specs(["sighup", "-sigterm", "/sigquit", ".sigint"])
    assert effects == {
        signal.SIGHUP: SigEffect.CATCH,
        signal.SIGTERM: SigEffect.IGNORE,
        signal.SIGQUIT: SigEffect.NOOP,
        signal.SIGINT: SigEffect.SPECIAL,
    }


def test_parse_signal_specs_later_wins():
    assert parse_signal_specs(["sigint", "-sigint"]) == {signal.SIGINT: SigEffect.IGNORE}


def test_parse_signal_specs_unknown():
    with pytest.raises(ValueError, match="unknown signal: sigbogus"):
        parse_signal_specs(["-sigbogus"])


def test_set_effect_returns_old_and_lists():
    table = SignalTable(report=lambda m: None)
    assert table.set_effect(signal.SIGINT, SigEffect.CATCH) is SigEffect.DEFAULT
    assert table.set_effect(signal.SIGINT, SigEffect.IGNORE) is SigEffect.CATCH
    assert table.siglist() == ["-" + signame(signal.SIGINT)]


def test_siglist_ordered_by_number_with_prefixes():
    table = SignalTable(report=lambda m: None)
    table.set_effect(signal.SIGTERM, SigEffect.NOOP)
    table.set_effect(signal.SIGHUP, SigEffect.CATCH)
    table.set_effect(signal.SIGINT, SigEffect.SPECIAL)
    result = table.siglist()
    assert sorted(result, key=lambda s: signumber(s.lstrip("-/."))) == result
    assert set(result) == {"sighup", ".sigint", "/sigterm"}


def test_special_only_for_sigint():
    messages = []
    table = SignalTable(report=messages.append)
    assert table.set_effect(signal.SIGTERM, SigEffect.SPECIAL) is SigEffect.DEFAULT
    assert table[signal.SIGTERM] is SigEffect.DEFAULT
    assert messages == ["$&setsignals: special handler not defined for sigterm"]


def test_cannot_ignore_sigkill():
    messages = []
    table = SignalTable(report=messages.append)
    table.set_effect(signal.SIGKILL, SigEffect.IGNORE)
    assert table.siglist() == []
    assert messages == ["$&setsignals: cannot ignore sigkill"]


def test_nochange_keeps_effect():
    table = SignalTable(report=lambda m: None)
    table.set_effect(signal.SIGHUP, SigEffect.IGNORE)
    assert table.set_effect(signal.SIGHUP, SigEffect.NOCHANGE) is SigEffect.IGNORE
    assert table[signal.SIGHUP] is SigEffect.IGNORE


def test_set_effects_resets_unmentioned():
    table = SignalTable(report=lambda m: None)
    table.set_effect(signal.SIGHUP, SigEffect.CATCH)
    table.set_effects(parse_signal_specs(["-sigterm"]))
    assert table[signal.SIGHUP] is SigEffect.DEFAULT
    assert table.effects == {signal.SIGTERM: SigEffect.IGNORE}


def test_set_defaults_keeps_ignored():
    table = SignalTable(report=lambda m: None)
    table.set_effects(parse_signal_specs(["sighup", "-sigterm", ".sigint"]))
    table.set_defaults()
    assert table.effects == {signal.SIGTERM: SigEffect.IGNORE}


def test_out_of_range_signal():
    table = SignalTable(report=lambda m: None)
    with pytest.raises(ValueError):
        table.set_effect(0, SigEffect.CATCH)
    with pytest.raises(ValueError):
        table[NSIG]