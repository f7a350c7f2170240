"""Bundled example machines, usable from the app and the tools by name."""

BINARY_INCREMENT = """\
# Binary increment
Initial tape: 0001
q0, 0 -> q0, 0, R
q0, 1 -> q0, 1, R
q0, _ -> q1, _, L
q1, 0 -> q2, 1, N
q1, 1 -> q1, 0, L
q1, _ -> q2, 1, N
q2, _, _, N # Halt
"""

PALINDROME = """\
# Palindrome checker over {a, b}; halts in 'accept' or 'reject'
Initial tape: abba
q0, a -> q1, X, R
q0, b -> q2, X, R
q0, X -> accept, X, N
q0, _ -> accept, _, N # empty input
# carry an 'a' to the right end
q1, a -> q1, a, R
q1, b -> q1, b, R
q1, X -> q3, X, L
q1, _ -> q3, _, L
# carry a 'b' to the right end
q2, a -> q2, a, R
q2, b -> q2, b, R
q2, X -> q4, X, L
q2, _ -> q4, _, L
# last unmarked symbol must match
q3, a -> q5, X, L
q3, b -> reject, b, N
q3, X -> accept, X, N
q4, b -> q5, X, L
q4, a -> reject, a, N
q4, X -> accept, X, N
# return to the leftmost unmarked symbol
q5, a -> q5, a, L
q5, b -> q5, b, L
q5, X -> q0, X, R
accept, _, _, N
reject, _, _, N
"""

STRUCTURED_INCREMENT = """\
# Adds 1 to a binary number
input: '1011'
blank: '_'
start state: right
table:
  # scan to the rightmost digit
  right:
    [0,1]: {R: right}
    _: {L: carry}
  # then carry the 1
  carry:
    1: {write: 0, L}
    [0, _]: {write: 1, N: done}
  done:
"""

EXAMPLES = {
    "binary-increment": BINARY_INCREMENT,
    "palindrome": PALINDROME,
    "structured-increment": STRUCTURED_INCREMENT,
}


def get_example(name):
    if name not in EXAMPLES:
        raise ValueError(f"Unknown example '{name}'. Choose one of: {', '.join(EXAMPLES)}")
    return EXAMPLES[name]
