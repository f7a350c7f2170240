import json

from logger.logger import JSONLogger, run_record
from simulator.presets import BINARY_INCREMENT
from simulator.turing_machine import TuringMachine


def read_lines(path):
    with open(path, "r", encoding="utf-8") as f:
        return [json.loads(line) for line in f]


def test_log_appends_json_lines(tmp_path):
    logger = JSONLogger(output_directory=str(tmp_path), log_file_prefix="run_")

    logger.log({"a": 1})
    logger.log_batch([{"b": 2}, {"c": 3}])

    assert read_lines(logger.current_log) == [{"a": 1}, {"b": 2}, {"c": 3}]
    assert logger.current_log.endswith(f"run_{logger.today}.jsonl")


def test_run_record_for_halted_machine():
    machine = TuringMachine.from_source(BINARY_INCREMENT)
    machine.run()

    record = run_record("increment", machine.definition, machine.config)

    assert record["machine"] == "increment"
    assert record["syntax"] == "classic"
    assert record["status"] == "halted"
    assert record["steps"] == 7
    assert record["tape"] == "0010"
    assert record["error"] is None
    json.dumps(record)


def test_records_are_routed_by_status(tmp_path):
    logger = JSONLogger(output_directory=str(tmp_path))
    entries = [
        {"machine": "a", "status": "halted"},
        {"machine": "b", "status": "errored"},
        {"machine": "c", "status": "running"},
        {"machine": "d", "status": "halted"},
    ]

    logger.log_by_status(entries)

    assert [e["machine"] for e in read_lines(tmp_path / f"halted_{logger.today}.jsonl")] == ["a", "d"]
    assert [e["machine"] for e in read_lines(tmp_path / f"errored_{logger.today}.jsonl")] == ["b"]
    assert [e["machine"] for e in read_lines(tmp_path / f"unfinished_{logger.today}.jsonl")] == ["c"]
