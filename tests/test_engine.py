import pytest

from simulator.classic_parser import parse_classic
from simulator.engine import initialize, iter_steps, run, step, tape_to_string
from simulator.loader import parse_machine
from simulator.machine import (
    EmptyTransitionSet,
    MachineConfiguration,
    Status,
    TransitionNotFound,
)
from simulator.presets import BINARY_INCREMENT, PALINDROME, STRUCTURED_INCREMENT
from simulator.transition_table import TransitionTable

SCENARIO_A = """q0,0->q0,0,R
q0,1->q0,1,R
q0,_->q1,_,L
q1,0->q2,1,N
q1,1->q1,0,L
q1,_->q2,1,N
"""


def run_source(source, tape=None, max_steps=1000, write_blank=False):
    definition = parse_machine(source)
    table = TransitionTable.from_definition(definition)
    config = initialize(definition)
    if tape is not None:
        config = MachineConfiguration(state=config.state, tape=tuple(tape))
    return run(config, table, max_steps=max_steps, write_blank=write_blank), definition


def test_scenario_binary_increment():
    config, definition = run_source(SCENARIO_A, tape=["0", "0", "0", "1"])

    assert config.status is Status.HALTED
    assert tape_to_string(config.tape, definition.blank) == "0010"
    assert config.state == "q2"
    assert config.step_count == 7


def test_scenario_missing_transition():
    table = TransitionTable(parse_classic("q1, 0 -> q1, 0, R").rules)
    config = MachineConfiguration(state="q1", tape=("z",))

    result = step(config, table)

    assert result.status is Status.ERRORED
    assert result.error == TransitionNotFound("q1", "z")
    assert result.step_count == 0
    assert "q1" in str(result.error) and "'z'" in str(result.error)


def test_scenario_structured_increment():
    config, definition = run_source(STRUCTURED_INCREMENT)

    assert config.status is Status.HALTED
    assert config.state == "done"
    assert tape_to_string(config.tape, definition.blank) == "1100"


def test_initialize():
    definition = parse_classic(BINARY_INCREMENT)
    config = initialize(definition)

    assert config == MachineConfiguration(state="q0", tape=("0", "0", "0", "1"), head=0,
                                          step_count=0, status=Status.RUNNING)


def test_initialize_refuses_empty_definition():
    with pytest.raises(EmptyTransitionSet):
        initialize(parse_classic("# no rules"))


def test_terminal_configurations_are_sticky():
    table = TransitionTable(parse_classic("q0, 0 -> q0, 0, R").rules)
    halted = MachineConfiguration(state="q0", tape=("0",), status=Status.HALTED)
    errored = MachineConfiguration(state="q0", tape=("x",), status=Status.ERRORED,
                                   error=TransitionNotFound("q0", "x"))

    assert step(halted, table) is halted
    assert step(errored, table) is errored
    assert step(step(halted, table), table) == halted


def test_right_move_grows_tape_by_one_blank():
    table = TransitionTable(parse_classic("q0, 1 -> q0, 1, R\nq0, _ -> q0, _, R").rules)
    config = MachineConfiguration(state="q0", tape=("1",))

    for expected_length in (2, 3, 4):
        config = step(config, table)
        assert len(config.tape) == expected_length
        assert config.tape[-1] == "_"
        assert config.head == expected_length - 1


def test_left_move_clamps_at_zero():
    table = TransitionTable(parse_classic("q0, 1 -> q0, 1, L").rules)
    config = MachineConfiguration(state="q0", tape=("1", "1"))

    config = step(config, table)
    assert config.head == 0
    config = step(config, table)
    assert config.head == 0
    assert config.tape == ("1", "1")
    assert config.status is Status.RUNNING


def test_blank_writes_are_suppressed_by_default():
    table = TransitionTable(parse_classic("q0, 1 -> q1, _, N").rules)
    config = MachineConfiguration(state="q0", tape=("1",))

    assert step(config, table).tape == ("1",)
    assert step(config, table, write_blank=True).tape == ("_",)


def test_blank_fallback_leaves_the_cell_untouched():
    table = TransitionTable(parse_classic("q0, _ -> q1, _, N").rules)
    config = MachineConfiguration(state="q0", tape=("x",))

    result = step(config, table)

    assert result.status is Status.HALTED
    assert result.tape == ("x",)


def test_passthrough_never_writes_even_with_write_blank():
    definition = parse_machine("table:\n  s:\n    _: {N: t}\n")
    table = TransitionTable.from_definition(definition)
    config = MachineConfiguration(state="s", tape=("x",))

    assert step(config, table, write_blank=True).tape == ("x",)


def test_step_does_not_mutate_its_input():
    table = TransitionTable(parse_classic("q0, 0 -> q0, 1, R").rules)
    config = MachineConfiguration(state="q0", tape=("0",))

    step(config, table)

    assert config == MachineConfiguration(state="q0", tape=("0",))


def test_step_is_deterministic():
    definition = parse_classic(PALINDROME)
    table = TransitionTable.from_definition(definition)
    config = initialize(definition)

    assert [c for c in iter_steps(config, table)] == [c for c in iter_steps(config, table)]


@pytest.mark.parametrize("word, verdict", [
    ("abba", "accept"),
    ("aba", "accept"),
    ("a", "accept"),
    ("ab", "reject"),
    ("abab", "reject"),
])
def test_palindrome_checker(word, verdict):
    config, _ = run_source(PALINDROME, tape=word)

    assert config.status is Status.HALTED
    assert config.state == verdict, f"{word!r}: expected {verdict}, halted in {config.state}"


def test_run_respects_max_steps():
    table = TransitionTable(parse_classic("q0, _ -> q0, _, R").rules)
    config = run(MachineConfiguration(state="q0", tape=("_",)), table, max_steps=25)

    assert config.status is Status.RUNNING
    assert config.step_count == 25
    assert len(config.tape) == 26


def test_iter_steps_ends_with_terminal_configuration():
    definition = parse_classic(BINARY_INCREMENT)
    history = list(iter_steps(initialize(definition), TransitionTable.from_definition(definition)))

    assert history[-1].status is Status.HALTED
    assert all(c.status is Status.RUNNING for c in history[:-1])
    assert [c.step_count for c in history] == list(range(1, len(history) + 1))
