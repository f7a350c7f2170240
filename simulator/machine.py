from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

DEFAULT_BLANK = "_"
DEFAULT_TAPE = ("0", "0", "0")  # used when a source declares no input
CLASSIC_START_STATE = "q0"
STRUCTURED_FALLBACK_START_STATE = "right"


# === Errors ===
class SimulatorError(Exception):
    """Base class for every error raised by the simulator package."""


class EmptyTransitionSet(SimulatorError):
    def __init__(self, definition=None):
        self.definition = definition
        message = "Machine has no transition rules; nothing to run."
        if definition is not None and definition.issues:
            message += f" ({len(definition.issues)} lines could not be parsed)"
        super().__init__(message)


# === Vocabulary ===
class Direction(Enum):
    LEFT = "L"
    RIGHT = "R"
    NONE = "N"

    @classmethod
    def parse(cls, token):
        """Return the Direction for an L/R/N token, or None if it is not one."""
        if token is None:
            return None
        token = token.strip().upper()
        for direction in cls:
            if direction.value == token:
                return direction
        return None

    @property
    def halts(self):
        return self is Direction.NONE


class Syntax(Enum):
    CLASSIC = "classic"
    STRUCTURED = "structured"


class Status(Enum):
    RUNNING = "running"
    HALTED = "halted"
    ERRORED = "errored"


# === Rules ===
@dataclass(frozen=True)
class TransitionRule:
    current_state: str
    read_symbol: str
    next_state: str
    write_symbol: str
    direction: Direction
    passthrough: bool = False
    line_number: Optional[int] = None

    def describe(self):
        return (f"{self.current_state}, {self.read_symbol} -> "
                f"{self.next_state}, {self.write_symbol}, {self.direction.value}")


@dataclass(frozen=True)
class TransitionNotFound:
    state: str
    symbol: str

    def __str__(self):
        return f"No transition defined for state '{self.state}' reading symbol '{self.symbol}'"


# === Configuration ===
@dataclass(frozen=True)
class MachineConfiguration:
    state: str
    tape: Tuple[str, ...]
    head: int = 0
    step_count: int = 0
    status: Status = Status.RUNNING
    error: Optional[TransitionNotFound] = None

    @property
    def symbol(self):
        return self.tape[self.head]

    @property
    def is_terminal(self):
        return self.status is not Status.RUNNING


# === Parse results ===
@dataclass(frozen=True)
class ParseIssue:
    line_number: int
    text: str
    reason: str

    def __str__(self):
        return f"line {self.line_number}: {self.reason}: {self.text!r}"


@dataclass(frozen=True)
class MachineDefinition:
    """
    Canonical result of parsing either notation.

    Every default (start state, blank, fallback tape) is resolved by the parser
    that built the definition, so consumers never apply their own.
    """
    syntax: Syntax
    rules: Tuple[TransitionRule, ...]
    initial_tape: Tuple[str, ...]
    initial_state: str
    blank: str = DEFAULT_BLANK
    issues: Tuple[ParseIssue, ...] = field(default_factory=tuple)

    @property
    def rule_count(self):
        return len(self.rules)

    @property
    def is_empty(self):
        return not self.rules

    def summary(self):
        text = f"{self.rule_count} rules parsed"
        if self.issues:
            text += f", {len(self.issues)} lines skipped"
        return text
