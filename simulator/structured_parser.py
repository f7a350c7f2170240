"""
Parser for the declarative block notation:

    input: '101'
    blank: '_'
    start state: right
    table:
      right:
        [0,1]: {R: right}
        _: {L: carry}
      carry:
        1: {write: 0, L: carry}
        [0, _]: {write: 1, N: done}
      done:

Lines are scanned one at a time, indentation is ignored. The part of a line
after the metadata keys is tokenized and parsed by a small recursive-descent
parser:

    line    := key ':' [action]
    key     := symbol | '[' symbol (',' symbol)* ']'
    action  := DIRECTION | '{' [entry (',' entry)*] '}'
    entry   := WORD [':' value]
    symbol  := WORD | STRING
"""
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from simulator.machine import (
    DEFAULT_BLANK,
    DEFAULT_TAPE,
    STRUCTURED_FALLBACK_START_STATE,
    Direction,
    MachineDefinition,
    ParseIssue,
    SimulatorError,
    Syntax,
    TransitionRule,
)

METADATA_PATTERN = re.compile(r"^(input|blank|start state)\s*:(.*)$")
TABLE_MARKER = "table:"
WRITE_KEY = "write"
DIRECTION_KEYS = ("L", "R", "N")

# Token kinds
WORD = "WORD"
STRING = "STRING"
PUNCTUATION = "{}[],:"


class StructuredSyntaxError(SimulatorError):
    """A single line of structured source could not be parsed."""


# === Model ===
@dataclass(frozen=True)
class StructuredAction:
    write: Optional[str]
    direction: Direction
    next_state: str
    line_number: Optional[int] = None


@dataclass
class StructuredMachine:
    initial_state: str
    blank: str
    input: str
    transitions: Dict[str, Dict[str, StructuredAction]]
    states: List[str] = field(default_factory=list)
    issues: List[ParseIssue] = field(default_factory=list)


@dataclass(frozen=True)
class Token:
    kind: str
    value: str


# === Lexing ===
def strip_comment(line):
    """Drop a '#' comment that is outside quotes and starts a word."""
    quote = None
    for index, char in enumerate(line):
        if quote:
            if char == quote:
                quote = None
        elif char in "'\"":
            quote = char
        elif char == "#" and (index == 0 or line[index - 1].isspace()):
            return line[:index].rstrip()
    return line


def tokenize(text):
    tokens = []
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char.isspace():
            index += 1
        elif char in PUNCTUATION:
            tokens.append(Token(char, char))
            index += 1
        elif char in "'\"":
            end = text.find(char, index + 1)
            if end == -1:
                raise StructuredSyntaxError("unterminated quoted symbol")
            tokens.append(Token(STRING, text[index + 1:end]))
            index = end + 1
        else:
            start = index
            while index < length and not text[index].isspace() and text[index] not in PUNCTUATION + "'\"":
                index += 1
            tokens.append(Token(WORD, text[start:index]))
    return tokens


# === Recursive descent ===
class _LineParser:
    def __init__(self, tokens):
        self.tokens = tokens
        self.position = 0

    def peek(self):
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def advance(self):
        token = self.peek()
        if token is None:
            raise StructuredSyntaxError("unexpected end of line")
        self.position += 1
        return token

    def expect(self, kind):
        token = self.advance()
        if token.kind != kind:
            raise StructuredSyntaxError(f"expected '{kind}' but found '{token.value}'")
        return token

    def at_end(self):
        return self.position >= len(self.tokens)

    def symbol(self):
        token = self.advance()
        if token.kind not in (WORD, STRING):
            raise StructuredSyntaxError(f"expected a symbol but found '{token.value}'")
        return token.value

    def key(self):
        token = self.peek()
        if token is not None and token.kind == "[":
            self.advance()
            symbols = [self.symbol()]
            while self.peek() is not None and self.peek().kind == ",":
                self.advance()
                symbols.append(self.symbol())
            self.expect("]")
            return symbols
        return [self.symbol()]

    def action(self, state):
        token = self.peek()
        if token is None:
            raise StructuredSyntaxError("missing action")
        if token.kind == WORD and token.value in DIRECTION_KEYS:
            self.advance()
            return None, Direction.parse(token.value), state

        self.expect("{")
        entries = []
        if self.peek() is not None and self.peek().kind != "}":
            entries.append(self.entry())
            while self.peek() is not None and self.peek().kind == ",":
                self.advance()
                entries.append(self.entry())
        self.expect("}")
        return self.resolve(entries, state)

    def entry(self):
        name = self.expect(WORD).value
        value = None
        if self.peek() is not None and self.peek().kind == ":":
            self.advance()
            value = self.symbol()
        return name, value

    @staticmethod
    def resolve(entries, state):
        # Direction entries are settled first; 'write' only ever names a symbol
        directions = [(name, value) for name, value in entries if name in DIRECTION_KEYS]
        if len(directions) != 1:
            raise StructuredSyntaxError("action needs exactly one of L, R or N")
        name, next_state = directions[0]
        direction = Direction.parse(name)

        write = None
        for entry_name, value in entries:
            if entry_name in DIRECTION_KEYS:
                continue
            if entry_name != WRITE_KEY:
                raise StructuredSyntaxError(f"unknown action key '{entry_name}'")
            if value is None:
                raise StructuredSyntaxError("'write' needs a symbol")
            write = value
        return write, direction, next_state if next_state else state


def parse_line(text, state):
    """
    Parse the table part of a line.

    Returns ("state", name) for a block header or ("transition", symbols, action)
    for a transition line under `state`.
    """
    parser = _LineParser(tokenize(text))
    symbols = parser.key()
    parser.expect(":")
    if parser.at_end():
        if len(symbols) != 1 or text.lstrip().startswith("["):
            raise StructuredSyntaxError("a state header cannot be a symbol list")
        return ("state", symbols[0])
    if state is None:
        raise StructuredSyntaxError("transition outside of a state block")
    write, direction, next_state = parser.action(state)
    if not parser.at_end():
        raise StructuredSyntaxError(f"unexpected '{parser.peek().value}' after action")
    return ("transition", symbols, (write, direction, next_state))


def _metadata_value(raw):
    tokens = tokenize(raw)
    if len(tokens) != 1 or tokens[0].kind not in (WORD, STRING):
        raise StructuredSyntaxError("expected a single value")
    return tokens[0].value


# === Public API ===
def parse_structured(source):
    """Scan structured source into a StructuredMachine. Bad lines become issues."""
    input_string = ""
    blank = DEFAULT_BLANK
    start_state = None
    current_state = None
    states = []
    raw_transitions = []
    issues = []

    for line_number, raw_line in enumerate(source.splitlines(), start=1):
        line = strip_comment(raw_line.strip())
        if not line:
            continue
        if line == TABLE_MARKER:
            continue

        try:
            metadata = METADATA_PATTERN.match(line)
            if metadata:
                name, raw_value = metadata.groups()
                value = _metadata_value(raw_value)
                if name == "input":
                    input_string = value
                elif name == "blank":
                    blank = value
                else:
                    start_state = value
                continue

            parsed = parse_line(line, current_state)
        except StructuredSyntaxError as exc:
            issues.append(ParseIssue(line_number, raw_line.strip(), str(exc)))
            continue

        if parsed[0] == "state":
            current_state = parsed[1]
            if current_state not in states:
                states.append(current_state)
            continue

        _, symbols, (write, direction, next_state) = parsed
        for symbol in symbols:
            action = StructuredAction(write, direction, next_state, line_number)
            raw_transitions.append((current_state, symbol, action, raw_line.strip()))

    transitions = {}
    for state, symbol, action, text in raw_transitions:
        read_symbol = symbol if symbol != "" else blank
        state_map = transitions.setdefault(state, {})
        if read_symbol in state_map:
            issues.append(ParseIssue(action.line_number, text,
                                     f"duplicate rule for ({state}, {read_symbol}); first one kept"))
            continue
        state_map[read_symbol] = action

    if start_state is None:
        start_state = states[0] if states else STRUCTURED_FALLBACK_START_STATE

    issues.sort(key=lambda issue: issue.line_number)
    return StructuredMachine(
        initial_state=start_state,
        blank=blank,
        input=input_string,
        transitions=transitions,
        states=states,
        issues=issues,
    )


def flatten(machine):
    """Canonical rule sequence for a StructuredMachine, in declaration order."""
    rules = []
    for state, state_map in machine.transitions.items():
        for read_symbol, action in state_map.items():
            passthrough = action.write is None
            write = action.write if action.write != "" else machine.blank
            rules.append(TransitionRule(
                current_state=state,
                read_symbol=read_symbol,
                next_state=action.next_state,
                write_symbol=read_symbol if passthrough else write,
                direction=action.direction,
                passthrough=passthrough,
                line_number=action.line_number,
            ))
    return tuple(rules)


def load_structured(source):
    machine = parse_structured(source)
    return MachineDefinition(
        syntax=Syntax.STRUCTURED,
        rules=flatten(machine),
        initial_tape=tuple(machine.input) if machine.input else DEFAULT_TAPE,
        initial_state=machine.initial_state,
        blank=machine.blank,
        issues=tuple(machine.issues),
    )
