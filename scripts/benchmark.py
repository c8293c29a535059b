#!/usr/bin/env python3
"""
StoreWatch Performance Benchmarks

Measures how long one transition takes through a watcher as the number of
watched paths, selectors and handlers grows, and prints the results as a
rich table.

Usage:
    python scripts/benchmark.py                # Run all benchmarks
    python scripts/benchmark.py --transitions 500
    python scripts/benchmark.py --help

Configuration:
    Adjust the constants at the top of the file to change benchmark parameters.
"""

import argparse
import sys
import time
from dataclasses import dataclass
from typing import Callable, List

# Add the project root to the Python path
sys.path.insert(0, ".")

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from storewatch import create_watcher

WATCH_COUNTS = [10, 100, 1000]
DEFAULT_TRANSITIONS = 200


class BenchStore:
    """Bare container: replaces state and notifies, nothing else."""

    def __init__(self, state):
        self._state = state
        self._listeners = []

    def get_state(self):
        return self._state

    def subscribe(self, listener):
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def dispatch(self, record):
        pass

    def set_state(self, state):
        self._state = state
        for listener in list(self._listeners):
            listener()


@dataclass
class BenchmarkResult:
    name: str
    watches: int
    transitions: int
    seconds: float
    notifications: int

    @property
    def per_transition_us(self) -> float:
        return self.seconds / max(self.transitions, 1) * 1e6


def _make_state(size: int, step: int) -> dict:
    return {"slots": {f"k{i}": {"value": step if i % 10 == 0 else 0} for i in range(size)}}


def run_paths(size: int, transitions: int) -> BenchmarkResult:
    """One path watch per slot; a tenth of the slots change every transition."""
    store = BenchStore(_make_state(size, 0))
    watcher = create_watcher(store)
    hits = [0]

    def on_change(*args):
        hits[0] += 1

    for i in range(size):
        watcher.watch(f"slots.k{i}.value", on_change)

    start = time.perf_counter()
    for step in range(1, transitions + 1):
        store.set_state(_make_state(size, step))
    elapsed = time.perf_counter() - start
    watcher.remove()
    return BenchmarkResult("Path watches", size, transitions, elapsed, hits[0])


def run_shared_selector(size: int, transitions: int) -> BenchmarkResult:
    """Many handlers on a single selector; the selector runs once per transition."""
    store = BenchStore({"counter": 0})
    watcher = create_watcher(store)
    hits = [0]

    def on_change(*args):
        hits[0] += 1

    for _ in range(size):
        watcher.watch("counter", on_change)

    start = time.perf_counter()
    for step in range(1, transitions + 1):
        store.set_state({"counter": step})
    elapsed = time.perf_counter() - start
    watcher.remove()
    return BenchmarkResult("Shared selector", size, transitions, elapsed, hits[0])


def run_unchanged(size: int, transitions: int) -> BenchmarkResult:
    """Selector watches whose values never change: pure detection overhead."""
    state = {"items": list(range(size))}
    store = BenchStore(state)
    watcher = create_watcher(store)

    for i in range(size):
        watcher.watch(lambda s, i=i: s["items"][i], lambda *args: None, name=f"item{i}")

    start = time.perf_counter()
    for _ in range(transitions):
        store.set_state({"items": state["items"]})
    elapsed = time.perf_counter() - start
    watcher.remove()
    return BenchmarkResult("Unchanged selectors", size, transitions, elapsed, 0)


BENCHMARKS: List[Callable[[int, int], BenchmarkResult]] = [
    run_paths,
    run_shared_selector,
    run_unchanged,
]


class StoreWatchBenchmark:
    """Rich-formatted display for storewatch benchmarking."""

    def __init__(self, transitions: int):
        self.console = Console()
        self.transitions = transitions
        self.results: List[BenchmarkResult] = []

    def run_benchmarks(self):
        self.console.print(
            Panel(
                Align.center("StoreWatch Performance Benchmark Suite"),
                title="storewatch benchmarks",
                border_style="blue",
            )
        )
        for bench in BENCHMARKS:
            for size in WATCH_COUNTS:
                result = bench(size, self.transitions)
                self.results.append(result)
                self.console.print(
                    f"[green]✓[/green] {result.name} ({size} watches): "
                    f"{result.per_transition_us:,.1f}μs/transition"
                )
        self._display_results()

    def _display_results(self):
        table = Table(title="Results")
        table.add_column("Benchmark", style="cyan", no_wrap=True)
        table.add_column("Watches", style="magenta", justify="right")
        table.add_column("μs / transition", style="green", justify="right")
        table.add_column("Notifications", style="yellow", justify="right")
        for result in self.results:
            table.add_row(
                result.name,
                str(result.watches),
                f"{result.per_transition_us:,.1f}",
                f"{result.notifications:,}",
            )
        self.console.print()
        self.console.print(table)


def main():
    parser = argparse.ArgumentParser(description="storewatch performance benchmarks")
    parser.add_argument(
        "--transitions",
        type=int,
        default=DEFAULT_TRANSITIONS,
        help=f"Transitions per benchmark (default {DEFAULT_TRANSITIONS})",
    )
    args = parser.parse_args()
    StoreWatchBenchmark(args.transitions).run_benchmarks()


if __name__ == "__main__":
    main()
