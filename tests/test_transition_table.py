from simulator.classic_parser import parse_classic
from simulator.transition_table import TransitionTable


def make_table(source, blank="_"):
    return TransitionTable(parse_classic(source).rules, blank=blank)


def test_exact_match_wins_over_blank_fallback():
    table = make_table("q0, _ -> q9, _, R\nq0, 1 -> q1, 1, R")

    assert table.lookup("q0", "1").next_state == "q1"


def test_blank_rule_is_the_fallback_for_its_state():
    table = make_table("q0, _ -> q9, _, R\nq1, 0 -> q1, 0, R")

    assert table.lookup("q0", "z").next_state == "q9"
    assert table.lookup("q1", "z") is None, "fallback must not leak across states"


def test_first_duplicate_wins():
    table = make_table("q0, 0 -> first, 0, R\nq0, 0 -> second, 0, R")

    assert table.lookup("q0", "0").next_state == "first"
    assert len(table) == 2


def test_custom_blank_symbol_is_the_wildcard():
    table = make_table("s, . -> t, ., L", blank=".")

    assert table.lookup("s", "x").next_state == "t"


def test_unknown_state_is_not_found():
    assert make_table("q0, 0 -> q0, 0, R").lookup("nowhere", "0") is None


def test_grouping_and_listing():
    table = make_table("q0, 0 -> q1, 1, R\nq1, 1 -> q2, 0, L\nq0, 1 -> q0, 1, R")

    assert [r.read_symbol for r in table.rules_for("q0")] == ["0", "1"]
    assert table.rules_for("q2") == ()
    assert table.states() == ["q0", "q1", "q2"]
    assert table.symbols() == ["0", "1"]
    assert list(table) == list(table.rules)
