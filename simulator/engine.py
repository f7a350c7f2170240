from dataclasses import replace

from simulator.machine import (
    Direction,
    EmptyTransitionSet,
    MachineConfiguration,
    Status,
    TransitionNotFound,
)


def initialize(definition):
    """Starting configuration for a parsed machine."""
    if definition.is_empty:
        raise EmptyTransitionSet(definition)
    tape = tuple(definition.initial_tape) or (definition.blank,)
    return MachineConfiguration(
        state=definition.initial_state,
        tape=tape,
        head=0,
        step_count=0,
        status=Status.RUNNING,
    )


def step(config, table, write_blank=False):
    """
    Advance one transition. Pure: returns a new configuration.

    Halted and errored configurations are returned unchanged. Writing the blank
    symbol is suppressed unless write_blank is set, so a blank-keyed fallback
    rule never erases the cell it matched.
    """
    if config.status is not Status.RUNNING:
        return config

    symbol = config.tape[config.head]
    rule = table.lookup(config.state, symbol)
    if rule is None:
        return replace(config, status=Status.ERRORED,
                       error=TransitionNotFound(config.state, symbol))

    tape = list(config.tape)
    if not rule.passthrough and (write_blank or rule.write_symbol != table.blank):
        tape[config.head] = rule.write_symbol

    head = config.head
    status = Status.RUNNING
    if rule.direction is Direction.LEFT:
        head = max(0, head - 1)
    elif rule.direction is Direction.RIGHT:
        head += 1
        if head >= len(tape):
            tape.append(table.blank)
    else:
        status = Status.HALTED

    return MachineConfiguration(
        state=rule.next_state,
        tape=tuple(tape),
        head=head,
        step_count=config.step_count + 1,
        status=status,
    )


def iter_steps(config, table, write_blank=False):
    """Yield each configuration after config until a terminal one."""
    while config.status is Status.RUNNING:
        config = step(config, table, write_blank=write_blank)
        yield config


def run(config, table, max_steps=None, write_blank=False):
    """Step until the machine halts or errors, or max_steps transitions were taken."""
    steps = 0
    while config.status is Status.RUNNING:
        if max_steps is not None and steps >= max_steps:
            break
        config = step(config, table, write_blank=write_blank)
        steps += 1
    return config


def tape_to_string(tape, blank="_"):
    """Tape contents with trailing blanks removed."""
    text = "".join(tape)
    return text.rstrip(blank) if blank else text
