import re

from simulator.machine import (
    CLASSIC_START_STATE,
    DEFAULT_BLANK,
    DEFAULT_TAPE,
    Direction,
    MachineDefinition,
    ParseIssue,
    Syntax,
    TransitionRule,
)

INITIAL_TAPE_PATTERN = re.compile(r"^initial tape:\s*(.+)$", re.IGNORECASE)
ARROW = "->"
# A "#" opens a comment at the start of a word, unless it is itself a field (followed by "," or "->")
COMMENT_PATTERN = re.compile(r"(?:^|(?<=\s))#(?!\s*(?:,|->))")


def strip_comment(line):
    match = COMMENT_PATTERN.search(line)
    if match:
        line = line[:match.start()]
    return line.strip()


def _split_fields(text):
    return [part.strip() for part in text.split(",")]


def parse_rule_line(line, line_number=None):
    """
    Parse one classic rule line (comment already removed).

    Returns (rule, None) on success or (None, reason) when the line is malformed.
    """
    if ARROW in line:
        left, right = line.split(ARROW, 1)
        if ARROW in right:
            return None, "more than one '->'"
        left_fields = _split_fields(left)
        right_fields = _split_fields(right)
        if len(left_fields) != 2 or len(right_fields) != 3:
            return None, "expected '<state>, <symbol> -> <state>, <symbol>, <direction>'"
        state, read_symbol = left_fields
        next_state, write_symbol, direction_token = right_fields
    else:
        # Halt shorthand: the machine stays in its own state
        fields = _split_fields(line)
        if len(fields) != 4:
            return None, "expected '<state>, <symbol>, <symbol>, <direction>'"
        state, read_symbol, write_symbol, direction_token = fields
        next_state = state

    if not all((state, read_symbol, next_state, write_symbol)):
        return None, "empty field"

    direction = Direction.parse(direction_token)
    if direction is None:
        return None, f"unknown direction '{direction_token}'"

    rule = TransitionRule(
        current_state=state,
        read_symbol=read_symbol,
        next_state=next_state,
        write_symbol=write_symbol,
        direction=direction,
        line_number=line_number,
    )
    return rule, None


def parse_classic(source):
    """Parse a line-oriented rule list into a MachineDefinition."""
    rules = []
    issues = []
    initial_tape = None

    for line_number, raw_line in enumerate(source.splitlines(), start=1):
        stripped = raw_line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        line = strip_comment(stripped)
        tape_match = INITIAL_TAPE_PATTERN.match(line)
        if tape_match:
            initial_tape = tuple("".join(tape_match.group(1).split()))
            continue

        rule, reason = parse_rule_line(line, line_number)
        if rule is None:
            issues.append(ParseIssue(line_number, stripped, reason))
            continue
        rules.append(rule)

    return MachineDefinition(
        syntax=Syntax.CLASSIC,
        rules=tuple(rules),
        initial_tape=initial_tape or DEFAULT_TAPE,
        initial_state=CLASSIC_START_STATE,
        blank=DEFAULT_BLANK,
        issues=tuple(issues),
    )


def format_classic(rules, header="# Converted from structured format"):
    """Render rules as classic-syntax source text."""
    lines = [header] if header else []
    for rule in rules:
        lines.append(rule.describe())
    return "\n".join(lines) + "\n"
