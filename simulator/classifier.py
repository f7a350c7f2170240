from simulator.machine import Syntax

STRUCTURED_MARKERS = ("start state:", "table:", "input:")


def classify(source):
    """Pick the grammar for a machine source. Anything without a structured marker is classic."""
    if any(marker in source for marker in STRUCTURED_MARKERS):
        return Syntax.STRUCTURED
    return Syntax.CLASSIC
