import argparse

from simulator.classic_parser import format_classic
from simulator.loader import load_machine_file, parse_machine
from simulator.presets import get_example
from simulator.transition_table import TransitionTable


def transition_grid(table):
    """Rows of [state, action per symbol...] with '-' where no rule exists."""
    symbols = sorted({rule.read_symbol for rule in table})
    rows = []
    for state in table.states():
        row = [state]
        for symbol in symbols:
            rule = next((r for r in table.rules_for(state) if r.read_symbol == symbol), None)
            if rule is None:
                row.append("-")
            elif rule.direction.halts and rule.next_state == state:
                row.append("HALT")
            else:
                row.append(f"{rule.write_symbol} {rule.direction.value} {rule.next_state}")
        rows.append(row)
    return symbols, rows


def pretty_print_table(definition):
    """Print the transition table as a state x symbol grid, plain and as LaTeX."""
    table = TransitionTable.from_definition(definition)
    symbols, rows = transition_grid(table)

    # === Terminal Human-Readable Table ===
    print("\n=== Transition Table ===")
    print("\t".join(["State"] + symbols))
    for row in rows:
        print("\t".join(row))

    # === LaTeX Table Output ===
    print("\n=== LaTeX Table ===")
    print(r"\begin{array}{c|" + "c" * len(symbols) + "}")
    print("State/Symbol & " + " & ".join([f"\\text{{{s}}}" for s in symbols]) + r" \\ \hline")
    for row in rows:
        print(" & ".join(row) + r" \\")
    print(r"\end{array}")


def main():
    parser = argparse.ArgumentParser(description="Turing machine definition inspector")
    parser.add_argument("--machine", help="Path to a machine source file")
    parser.add_argument("--example", help="Name of a bundled example, e.g., binary-increment")
    parser.add_argument("--classic", action="store_true", help="Also print the machine in classic syntax")
    args = parser.parse_args()

    if args.machine:
        definition = load_machine_file(args.machine)
        label = args.machine
    elif args.example:
        definition = parse_machine(get_example(args.example))
        label = args.example
    else:
        raise ValueError("You must specify either --machine or --example.")

    print(f"[INFO] Machine {label}")
    print(f"  Syntax: {definition.syntax.value}")
    print(f"  Start state: {definition.initial_state}")
    print(f"  Blank: {definition.blank!r}")
    print(f"  Initial tape: {''.join(definition.initial_tape)}")
    print(f"  {definition.summary()}")
    for issue in definition.issues:
        print(f"  [WARNING] {issue}")

    if definition.is_empty:
        print("[ERROR] No transition rules found.")
        return

    pretty_print_table(definition)

    if args.classic:
        print("\n=== Classic Syntax ===")
        print(format_classic(definition.rules), end="")


if __name__ == "__main__":
    main()
