from simulator.machine import DEFAULT_BLANK


class TransitionTable:
    """
    Ordered, read-only collection of TransitionRules grouped by current state.

    lookup() resolves an exact (state, symbol) match first, in file order, and
    falls back to the state's rule keyed on the blank symbol. A miss is None.
    """

    def __init__(self, rules, blank=DEFAULT_BLANK):
        self._rules = tuple(rules)
        self._blank = blank
        self._by_state = {}
        self._exact = {}
        for rule in self._rules:
            self._by_state.setdefault(rule.current_state, []).append(rule)
            # First definition wins for duplicate keys
            self._exact.setdefault((rule.current_state, rule.read_symbol), rule)

    @classmethod
    def from_definition(cls, definition):
        return cls(definition.rules, blank=definition.blank)

    @property
    def rules(self):
        return self._rules

    @property
    def blank(self):
        return self._blank

    def __len__(self):
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules)

    def lookup(self, state, symbol):
        rule = self._exact.get((state, symbol))
        if rule is not None:
            return rule
        return self._exact.get((state, self._blank))

    def rules_for(self, state):
        return tuple(self._by_state.get(state, ()))

    def states(self):
        """Every state named by the table, in order of first appearance."""
        seen = {}
        for rule in self._rules:
            seen.setdefault(rule.current_state, None)
            seen.setdefault(rule.next_state, None)
        return list(seen)

    def symbols(self):
        seen = {}
        for rule in self._rules:
            seen.setdefault(rule.read_symbol, None)
            seen.setdefault(rule.write_symbol, None)
        return list(seen)
