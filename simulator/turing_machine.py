from simulator.engine import initialize, step, tape_to_string
from simulator.loader import parse_machine
from simulator.machine import Status
from simulator.transition_table import TransitionTable


class TuringMachine:
    """
    Host-side driver around the pure engine.

    Holds the current configuration and threads it through engine.step, so
    callers get the familiar step/run/reset surface. Scheduling (timers, delays)
    stays with whoever calls step().
    """

    def __init__(self, definition, write_blank=False, keep_history=False):
        self.definition = definition
        self.table = TransitionTable.from_definition(definition)
        self.write_blank = write_blank
        self.keep_history = keep_history
        self.config = initialize(definition)
        self.history = [self.config] if keep_history else []

    @classmethod
    def from_source(cls, source, **kwargs):
        return cls(parse_machine(source), **kwargs)

    @property
    def halted(self):
        return self.config.status is Status.HALTED

    @property
    def errored(self):
        return self.config.status is Status.ERRORED

    @property
    def finished(self):
        return self.config.is_terminal

    def step(self):
        self.config = step(self.config, self.table, write_blank=self.write_blank)
        if self.keep_history:
            self.history.append(self.config)
        return self.config

    def run(self, max_steps=10000, visualize=False, on_step=None):
        """Step until terminal or max_steps; returns the number of steps taken."""
        steps = 0
        while not self.finished and steps < max_steps:
            if visualize:
                self.visualize()
            self.step()
            steps += 1
            if on_step is not None:
                on_step(self.config)
        if visualize:
            self.visualize()
        return steps

    def reset(self):
        self.config = initialize(self.definition)
        self.history = [self.config] if self.keep_history else []

    def set_keep_history(self, enabled):
        """Turn history on or off; recording starts from the current configuration."""
        if enabled and not self.keep_history:
            self.history = [self.config]
        elif not enabled:
            self.history = []
        self.keep_history = enabled

    def history_rows(self):
        """(step, state, head, symbol under head, status) for each recorded configuration."""
        return [(c.step_count, c.state, c.head, c.symbol, c.status.value) for c in self.history]

    def tape_string(self):
        return tape_to_string(self.config.tape, self.definition.blank)

    def render(self, window=10):
        """Tape window around the head, a caret under the head, and a status line."""
        config = self.config
        start = max(0, config.head - window)
        end = config.head + window + 1
        cells = [config.tape[pos] if pos < len(config.tape) else self.definition.blank
                 for pos in range(start, end)]
        width = max(len(cell) for cell in cells)
        tape_str = " ".join(cell.ljust(width) for cell in cells)
        head_str = " ".join(("^" if pos == config.head else " ").ljust(width)
                            for pos in range(start, end))

        status_line = f"State: {config.state}, Step: {config.step_count}, Status: {config.status.value}"
        if config.error is not None:
            status_line += f" ({config.error})"
        return "\n".join([tape_str.rstrip(), head_str.rstrip(), status_line])

    def visualize(self, window=10):
        print(self.render(window))
