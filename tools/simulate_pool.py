# tools/simulate_pool.py

import argparse
import json
import os
from pathlib import Path

from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn, TimeElapsedColumn

from logger.logger import JSONLogger, run_record
from simulator.engine import initialize, run
from simulator.loader import find_machine_files, load_machine_file
from simulator.machine import Status
from simulator.transition_table import TransitionTable


# === Simulation ===
def simulate_machine(path, max_steps=10000, write_blank=False):
    """
    Run one machine file to a terminal status or the step cap.

    Returns (definition, config); config is None when the file has no rules.
    """
    definition = load_machine_file(path)
    if definition.is_empty:
        return definition, None
    table = TransitionTable.from_definition(definition)
    config = run(initialize(definition), table, max_steps=max_steps, write_blank=write_blank)
    return definition, config


# === Promotion for Long-Runners ===
def promote_long_runner(machine_path, pool_file="pools/long_runners.txt"):
    Path(pool_file).parent.mkdir(parents=True, exist_ok=True)
    with open(pool_file, "a", encoding="utf-8") as f:
        f.write(str(machine_path) + "\n")


# === Utility Loaders ===
def load_machine_pool(machine_pool):
    """A pool is either a directory of machine files or a text file of paths, one per line."""
    pool_path = Path(machine_pool)
    if pool_path.is_dir():
        return [str(p) for p in find_machine_files(pool_path)]
    with open(pool_path, "r", encoding="utf-8") as f:
        machines = [line.strip() for line in f if line.strip()]
    return machines


def load_checkpoint(checkpoint_path):
    if checkpoint_path.exists():
        with open(checkpoint_path, "r", encoding="utf-8") as f:
            checkpoint = json.load(f)
        return checkpoint.get("completed", [])
    return []


def save_checkpoint(completed, checkpoint_path):
    with open(checkpoint_path, "w", encoding="utf-8") as f:
        json.dump({"completed": completed}, f, indent=4)


def console_message(msg):
    print(f"[{Path(os.getcwd()).name}] {msg}")


# === Main Simulation Runner ===
def simulate_pool(machine_pool, output_name="results", results_root="results", batch_size=64,
                  max_steps=10000, write_blank=False, logger=None, long_runner_pool="pools/long_runners.txt"):
    pool_name = Path(machine_pool).stem
    results_folder = Path(results_root) / pool_name
    results_folder.mkdir(parents=True, exist_ok=True)
    results_file = results_folder / f"{output_name}.jsonl"
    checkpoint_file = results_folder / f"{output_name}_checkpoint.json"

    all_machines = load_machine_pool(machine_pool)
    completed = load_checkpoint(checkpoint_file)

    pending_machines = [m for m in all_machines if m not in completed]
    console_message(f"Loaded {len(all_machines):,} total machines. {len(pending_machines):,} pending.")

    all_results = []
    with open(results_file, "a", encoding="utf-8") as results_fh:
        for batch_start in range(0, len(pending_machines), batch_size):
            batch = pending_machines[batch_start:batch_start + batch_size]
            console_message(f"Processing batch {batch_start // batch_size + 1} with {len(batch):,} machines...")

            with Progress(
                    SpinnerColumn(),
                    BarColumn(),
                    "[progress.percentage]{task.percentage:>3.0f}%",
                    TextColumn("[progress.completed]/[progress.total] Machines"),
                    TimeElapsedColumn()
            ) as progress:

                task = progress.add_task("[cyan]Simulating...", total=len(batch))

                batch_results = []  # <--- buffer

                for machine_path in batch:
                    try:
                        definition, config = simulate_machine(machine_path, max_steps=max_steps,
                                                              write_blank=write_blank)
                        if config is None:
                            console_message(f"[WARNING] {machine_path} has no transition rules, skipped.")
                        else:
                            batch_results.append(run_record(machine_path, definition, config))

                            # === Auto-Promote Long Runners ===
                            if config.status is Status.RUNNING:
                                promote_long_runner(machine_path, long_runner_pool)

                        completed.append(machine_path)

                    except (OSError, UnicodeDecodeError) as e:
                        console_message(f"[WARNING] Failed to simulate {machine_path}: {e}")

                    progress.update(task, advance=1)

                # === BULK WRITE once per batch ===
                for entry in batch_results:
                    results_fh.write(json.dumps(entry) + "\n")
                results_fh.flush()

                if logger is not None:
                    logger.log_by_status(batch_results)

                save_checkpoint(completed, checkpoint_file)
                all_results.extend(batch_results)
                console_message("[INFO] Batch completed. Checkpoint saved.")

    console_message("[SUCCESS] All machines simulated. Results saved.")
    return all_results


# === CLI ===
def main():
    parser = argparse.ArgumentParser(description="Run a pool of Turing machine files with checkpointing.")
    parser.add_argument("--pool", required=True, help="Directory of machine files, or a file listing one path per line")
    parser.add_argument("--output", default="results", help="Output result file name (default: results)")
    parser.add_argument("--batch_size", type=int, default=64, help="Batch size per save/checkpoint")
    parser.add_argument("--max_steps", type=int, default=10000, help="Maximum steps before a machine is cut off")
    parser.add_argument("--write_blank", action="store_true", help="Allow rules to write the blank symbol")
    parser.add_argument("--log_dir", default="logs/", help="Directory for halted/errored/unfinished logs")
    args = parser.parse_args()

    simulate_pool(
        args.pool,
        args.output,
        batch_size=args.batch_size,
        max_steps=args.max_steps,
        write_blank=args.write_blank,
        logger=JSONLogger(output_directory=args.log_dir),
    )


if __name__ == "__main__":
    main()
