# app.py

import argparse
import time

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt, IntPrompt, FloatPrompt, Confirm
from rich.table import Table

from config.config_loader import DEFAULT_CONFIG_PATH, load_config, save_config, validate_config
from logger.logger import JSONLogger, run_record
from simulator.loader import find_machine_files, load_machine_file, parse_machine
from simulator.machine import EmptyTransitionSet, Status
from simulator.presets import EXAMPLES, get_example
from simulator.turing_machine import TuringMachine

console = Console()

STATUS_COLORS = {
    Status.RUNNING: "cyan",
    Status.HALTED: "green",
    Status.ERRORED: "red",
}


# === Utilities ===
def build_machine(definition, config):
    """Report parse problems and build a driver, or return None if there is nothing to run."""
    for issue in definition.issues:
        console.print(f"[yellow]Skipped {escape(str(issue))}[/yellow]")
    console.print(f"[cyan]{definition.summary()} ({definition.syntax.value} syntax).[/cyan]")
    try:
        return TuringMachine(definition, write_blank=config["write_blank"],
                             keep_history=config["show_history"])
    except EmptyTransitionSet as e:
        console.print(f"[red]{e}[/red]")
        return None


def show_machine(machine, config):
    color = STATUS_COLORS[machine.config.status]
    console.print(machine.render(config["tape_window"]), style=color, markup=False)


def show_transition_table(machine):
    table = Table(show_header=True, header_style="bold magenta", title="Transition Table")
    table.add_column("Line", justify="right")
    table.add_column("State", justify="center")
    table.add_column("Read", justify="center")
    table.add_column("Write", justify="center")
    table.add_column("Move", justify="center")
    table.add_column("Next", justify="center")

    for rule in machine.table:
        current = rule.current_state == machine.config.state
        style = "bold yellow" if current else None
        write = f"({rule.write_symbol})" if rule.passthrough else rule.write_symbol
        cells = [rule.current_state, rule.read_symbol, write, rule.direction.value, rule.next_state]
        table.add_row(str(rule.line_number or ""), *[escape(cell) for cell in cells], style=style)

    console.print(table)


def show_history(machine):
    if not machine.history:
        console.print("[yellow]No history recorded. Enable 'Keep step history' in Edit Config.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta", title="Step History")
    table.add_column("Step", justify="right")
    table.add_column("State", justify="center")
    table.add_column("Head", justify="right")
    table.add_column("Symbol", justify="center")
    table.add_column("Status", justify="center")

    for step_count, state, head, symbol, status in machine.history_rows():
        table.add_row(str(step_count), escape(state), str(head), escape(symbol), status)

    console.print(table)


def apply_config(machine, config):
    """Carry edited runtime settings over to an already loaded machine."""
    machine.write_blank = config["write_blank"]
    machine.set_keep_history(config["show_history"])


def run_machine(machine, config, logger=None, name="machine", delay=None):
    """Timer-style host loop: one step per tick until terminal or the step cap."""
    delay = config["step_delay"] if delay is None else delay
    steps = 0
    try:
        while not machine.finished and steps < config["max_steps"]:
            machine.step()
            steps += 1
            if delay:
                show_machine(machine, config)
                time.sleep(delay)
    except KeyboardInterrupt:
        console.print("[yellow]Paused.[/yellow]")

    show_machine(machine, config)
    if machine.config.status is Status.RUNNING and steps >= config["max_steps"]:
        console.print(f"[yellow]Stopped after {steps:,} steps (max_steps reached).[/yellow]")
    elif machine.halted:
        console.print(f"[green]Halted in state '{machine.config.state}'. Tape: {escape(machine.tape_string())}[/green]")

    if logger is not None:
        logger.log(run_record(name, machine.definition, machine.config))
    return steps


def show_main_menu(machine_name):
    console.print("\n[bold cyan]Turing Tape Simulator[/bold cyan]"
                  + (f" [dim]({machine_name})[/dim]" if machine_name else ""))
    console.print("[1] Load Machine File")
    console.print("[2] Load Example")
    console.print("[3] Show Transition Table")
    console.print("[4] Step")
    console.print("[5] Run")
    console.print("[6] Reset")
    console.print("[7] Show History")
    console.print("[8] Edit Config")
    console.print("[9] Exit")


def handle_load_file(config):
    files = find_machine_files(config["machines_directory"])
    if files:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Index", justify="center")
        table.add_column("Machine File")
        for idx, path in enumerate(files):
            table.add_row(str(idx), path.name)
        console.print(table)

    choice = Prompt.ask("Index or path of the machine file")
    if choice.isdigit() and int(choice) < len(files):
        path = files[int(choice)]
    else:
        path = choice

    try:
        definition = load_machine_file(path)
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]{e}[/red]")
        return None, None
    return build_machine(definition, config), str(path)


def handle_load_example(config):
    name = Prompt.ask("Example", choices=list(EXAMPLES), default="binary-increment")
    return build_machine(parse_machine(get_example(name)), config), name


def handle_edit_config(config, config_path):
    console.print("\n[bold]Edit Configuration[/bold]")

    max_steps = IntPrompt.ask("Max Steps", default=config.get("max_steps", 10000))
    step_delay = FloatPrompt.ask("Delay between steps in run mode (seconds)", default=config.get("step_delay", 0.2))
    tape_window = IntPrompt.ask("Tape cells shown either side of the head", default=config.get("tape_window", 10))
    write_blank = Confirm.ask("Allow rules to write the blank symbol?", default=config.get("write_blank", False))
    keep_history = Confirm.ask("Keep step history?", default=config.get("show_history", False))
    machines_directory = Prompt.ask("Machines directory", default=config.get("machines_directory", "machines/"))

    updated = dict(config)
    updated.update({
        "max_steps": max_steps,
        "step_delay": step_delay,
        "tape_window": tape_window,
        "write_blank": write_blank,
        "show_history": keep_history,
        "machines_directory": machines_directory,
    })

    try:
        save_config(updated, config_path)
    except (ValueError, TypeError) as e:
        console.print(f"[red]Configuration not saved: {e}[/red]")
        return config

    console.print("[green]Configuration updated successfully.[/green]")
    return updated


def interactive_main(config, config_path, machine=None, machine_name=None):
    logger = JSONLogger(config["output_directory"], config["log_file_prefix"])

    while True:
        show_main_menu(machine_name)
        choice = Prompt.ask("\nChoose an option", choices=[str(i) for i in range(1, 10)], default="9")

        if choice in ("3", "4", "5", "6", "7") and machine is None:
            console.print("[red]Load a machine first.[/red]")
            continue

        if choice == "1":
            loaded, name = handle_load_file(config)
            if loaded is not None:
                machine, machine_name = loaded, name
                show_machine(machine, config)
        elif choice == "2":
            loaded, name = handle_load_example(config)
            if loaded is not None:
                machine, machine_name = loaded, name
                show_machine(machine, config)
        elif choice == "3":
            show_transition_table(machine)
        elif choice == "4":
            if machine.finished:
                console.print("[yellow]Machine has stopped. Reset to run it again.[/yellow]")
                continue
            machine.step()
            show_machine(machine, config)
        elif choice == "5":
            run_machine(machine, config, logger=logger, name=machine_name)
        elif choice == "6":
            machine.reset()
            show_machine(machine, config)
        elif choice == "7":
            show_history(machine)
        elif choice == "8":
            config = handle_edit_config(config, config_path)
            if machine is not None:
                apply_config(machine, config)
        elif choice == "9":
            console.print("[bold green]Goodbye![/bold green]")
            break


# === CLI Mode for Automation ===
def cli_main(args, config):
    if args.max_steps is not None:
        config = dict(config, max_steps=args.max_steps)
        try:
            validate_config(config)
        except (ValueError, TypeError) as e:
            console.print(f"[red]{escape(str(e))}[/red]")
            return 1

    if args.machine:
        try:
            definition, name = load_machine_file(args.machine), args.machine
        except (OSError, UnicodeDecodeError) as e:
            console.print(f"[red]{escape(str(e))}[/red]")
            return 1
    else:
        definition, name = parse_machine(get_example(args.example)), args.example

    machine = build_machine(definition, config)
    if machine is None:
        return 1

    if not args.run:
        interactive_main(config, args.config, machine, name)
        return 0

    logger = JSONLogger(config["output_directory"], config["log_file_prefix"])
    run_machine(machine, config, logger=logger, name=name, delay=0)
    return 0 if machine.halted else 2


def main():
    parser = argparse.ArgumentParser(description="Turing Tape Simulator")
    parser.add_argument("--machine", help="Machine source file to load")
    parser.add_argument("--example", choices=list(EXAMPLES), help="Bundled example to load")
    parser.add_argument("--run", action="store_true", help="Run to completion immediately and exit")
    parser.add_argument("--max-steps", type=int, help="Override max_steps from the configuration")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to runtime_config.json")
    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except FileNotFoundError:
        console.print(f"[yellow]{args.config} not found, using defaults.[/yellow]")
        config = load_config(None)

    if args.machine or args.example:
        raise SystemExit(cli_main(args, config))
    interactive_main(config, args.config)


if __name__ == "__main__":
    main()
