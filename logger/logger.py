import json
import os
from datetime import datetime, timezone

from simulator.engine import tape_to_string


class JSONLogger:
    def __init__(self, output_directory="logs/", log_file_prefix="turingtape_"):
        self.output_directory = output_directory
        self.log_file_prefix = log_file_prefix
        os.makedirs(self.output_directory, exist_ok=True)
        self.today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        self.current_log = self._get_log_filename()

    def _get_log_filename(self):
        filename = f"{self.log_file_prefix}{self.today}.jsonl"  # JSON lines format
        return os.path.join(self.output_directory, filename)

    def _log_to_file(self, filename, entries):
        path = os.path.join(self.output_directory, filename)
        with open(path, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(entry) + "\n")

    def log(self, entry: dict):
        """Log a single entry to the main run log."""
        with open(self.current_log, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry) + "\n")

    def log_batch(self, entries: list):
        """Log a batch of entries to the main run log."""
        with open(self.current_log, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(entry) + "\n")

    def log_halting(self, entries: list):
        """Log runs that reached a halting transition."""
        self._log_to_file(f"halted_{self.today}.jsonl", entries)

    def log_errored(self, entries: list):
        """Log runs that stopped on a missing transition."""
        self._log_to_file(f"errored_{self.today}.jsonl", entries)

    def log_unfinished(self, entries: list):
        """Log runs cut off by the step cap."""
        self._log_to_file(f"unfinished_{self.today}.jsonl", entries)

    def log_by_status(self, entries: list):
        """Route run records to the halted/errored/unfinished files by their status."""
        routes = {
            "halted": self.log_halting,
            "errored": self.log_errored,
            "running": self.log_unfinished,
        }
        for status, write in routes.items():
            selected = [entry for entry in entries if entry.get("status") == status]
            if selected:
                write(selected)


def run_record(name, definition, config):
    """Standard JSON-serializable record for one machine run."""
    return {
        "machine": name,
        "syntax": definition.syntax.value,
        "rules": definition.rule_count,
        "skipped_lines": len(definition.issues),
        "initial_state": definition.initial_state,
        "final_state": config.state,
        "status": config.status.value,
        "steps": config.step_count,
        "head": config.head,
        "tape": tape_to_string(config.tape, definition.blank),
        "error": str(config.error) if config.error is not None else None,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
