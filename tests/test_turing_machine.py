import pytest

from simulator.machine import EmptyTransitionSet, Status
from simulator.presets import BINARY_INCREMENT, STRUCTURED_INCREMENT
from simulator.turing_machine import TuringMachine


def test_run_to_halt():
    machine = TuringMachine.from_source(BINARY_INCREMENT)

    steps = machine.run(max_steps=100)

    assert machine.halted
    assert steps == 7
    assert machine.tape_string() == "0010"


def test_run_stops_at_step_cap():
    machine = TuringMachine.from_source("q0, _ -> q0, _, R\nInitial tape: _")

    steps = machine.run(max_steps=50)

    assert steps == 50
    assert not machine.finished
    assert machine.config.step_count == 50


def test_errored_machine_reports_pair():
    machine = TuringMachine.from_source("q0, 0 -> q1, 0, R\nInitial tape: 01")

    machine.run()

    assert machine.errored
    assert machine.config.error.state == "q1"
    assert machine.config.error.symbol == "1"
    assert "No transition defined for state 'q1' reading symbol '1'" in machine.render()


def test_step_after_halt_is_a_no_op():
    machine = TuringMachine.from_source(BINARY_INCREMENT)
    machine.run()
    final = machine.config

    assert machine.step() is final


def test_reset_restores_initial_configuration():
    machine = TuringMachine.from_source(STRUCTURED_INCREMENT, keep_history=True)
    machine.run()
    assert len(machine.history) == machine.config.step_count + 1

    machine.reset()

    assert machine.config.status is Status.RUNNING
    assert machine.config.step_count == 0
    assert machine.config.state == "right"
    assert machine.history == [machine.config]


def test_on_step_callback_sees_every_configuration():
    seen = []
    machine = TuringMachine.from_source(BINARY_INCREMENT)

    machine.run(on_step=seen.append)

    assert [c.step_count for c in seen] == list(range(1, 8))


def test_empty_machine_is_refused():
    with pytest.raises(EmptyTransitionSet):
        TuringMachine.from_source("nothing parses here")


def test_render_marks_the_head():
    machine = TuringMachine.from_source(BINARY_INCREMENT)
    machine.step()

    tape_line, head_line, status_line = machine.render(window=2).splitlines()

    assert tape_line == "0 0 0 1"
    assert head_line == "  ^"
    assert status_line == "State: q0, Step: 1, Status: running"


def test_history_rows_follow_the_head():
    machine = TuringMachine.from_source("q0, 1 -> q1, 1, R\nq1, 0, 0, N\nInitial tape: 10", keep_history=True)
    machine.run()

    assert machine.history_rows() == [
        (0, "q0", 0, "1", "running"),
        (1, "q1", 1, "0", "running"),
        (2, "q1", 1, "0", "halted"),
    ]


def test_enabling_history_mid_run_starts_from_current_configuration():
    machine = TuringMachine.from_source(BINARY_INCREMENT)
    machine.step()
    machine.step()

    machine.set_keep_history(True)
    machine.step()

    assert [c.step_count for c in machine.history] == [2, 3]

    machine.set_keep_history(False)
    assert machine.history == []
