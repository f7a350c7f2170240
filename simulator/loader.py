from pathlib import Path

from simulator.classic_parser import parse_classic
from simulator.classifier import classify
from simulator.machine import Syntax
from simulator.structured_parser import load_structured

MACHINE_SUFFIXES = (".tm", ".txt", ".yaml", ".yml")


def parse_machine(source, syntax=None):
    """Parse source text in either notation. Pass syntax to skip classification."""
    syntax = syntax or classify(source)
    if syntax is Syntax.STRUCTURED:
        return load_structured(source)
    return parse_classic(source)


def load_machine_file(path, syntax=None):
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Machine file not found at: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return parse_machine(f.read(), syntax=syntax)


def find_machine_files(directory):
    directory = Path(directory)
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix in MACHINE_SUFFIXES)
