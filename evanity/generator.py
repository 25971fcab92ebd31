"""
Generator orchestrator: manages multiprocessing workers and result collection.
"""

import os
import time
from multiprocessing import Process, Queue, Event, Value
from dataclasses import dataclass
from queue import Empty
from typing import Callable, Optional

from evanity.difficulty import estimate_work_units
from evanity.matcher import MatchInfo, rarity_of
from evanity.problems import Problem, validate_problems
from evanity.worker import search_worker


@dataclass
class GeneratorResult:
    """A single vanity address match."""
    private_key: bytes
    address: str
    problem: Problem
    match_info: MatchInfo
    elapsed: float
    total_checked: int
    rate: float


@dataclass
class GeneratorStats:
    """Live stats during generation."""
    total_checked: int = 0
    elapsed: float = 0.0
    rate: float = 0.0
    is_running: bool = False
    results_found: int = 0


class VanityGenerator:
    """Orchestrates a parallel local search for an address matching any problem.

    Usage:
        gen = VanityGenerator([Problem.user_prefix("0xcafe00")])
        gen.on_progress = lambda stats: print(f"{stats.rate:.0f} keys/sec")
        gen.on_result = lambda result: print(f"Found: {result.address}")
        gen.start()
        # ... poll periodically ...
        gen.stop()
    """

    def __init__(
        self,
        problems: list[Problem],
        num_workers: int = 0,
        validate: bool = True,
    ):
        self.problems = list(problems)
        if validate:
            validate_problems(self.problems)
        elif not self.problems:
            raise ValueError("Select at least one problem")

        self.num_workers = num_workers if num_workers > 0 else max(1, (os.cpu_count() or 2) - 1)

        # Callbacks
        self.on_progress: Optional[Callable[[GeneratorStats], None]] = None
        self.on_result: Optional[Callable[[GeneratorResult], None]] = None
        self.on_complete: Optional[Callable[[], None]] = None

        # Internal state
        self._workers: list[Process] = []
        self._result_queue: Optional[Queue] = None
        self._stop_event: Optional[Event] = None
        self._counter: Optional[Value] = None
        self._start_time: float = 0
        self._results: list[GeneratorResult] = []
        self._is_running = False

    def get_difficulty(self) -> int:
        """Expected keys to check before any problem matches."""
        return estimate_work_units(self.problems)

    def start(self) -> None:
        """Start worker processes (non-blocking)."""
        if self._is_running:
            raise RuntimeError("Generator is already running")

        self._result_queue = Queue()
        self._stop_event = Event()
        self._counter = Value("Q", 0)
        self._start_time = time.time()
        self._results = []
        self._is_running = True

        for i in range(self.num_workers):
            p = Process(
                target=search_worker,
                args=(
                    self.problems,
                    self._result_queue,
                    self._stop_event,
                    self._counter,
                ),
                daemon=True,
                name=f"evanity-worker-{i}",
            )
            p.start()
            self._workers.append(p)

    def _make_result(self, prv_bytes: bytes, address: str, index: int) -> GeneratorResult:
        elapsed = time.time() - self._start_time
        total = self._counter.value if self._counter else 0
        problem = self.problems[index]
        return GeneratorResult(
            private_key=prv_bytes,
            address=address,
            problem=problem,
            match_info=rarity_of(address, problem),
            elapsed=elapsed,
            total_checked=total,
            rate=total / elapsed if elapsed > 0 else 0,
        )

    def _drain(self, notify: bool) -> None:
        while True:
            try:
                prv_bytes, address, index = self._result_queue.get_nowait()
            except Empty:
                break
            result = self._make_result(prv_bytes, address, index)
            self._results.append(result)
            if notify and self.on_result:
                self.on_result(result)

    def poll(self) -> GeneratorStats:
        """Poll for progress and results. Call periodically from the CLI."""
        stats = GeneratorStats()

        if not self._is_running:
            stats.is_running = False
            return stats

        self._drain(notify=True)

        elapsed = time.time() - self._start_time
        total = self._counter.value

        stats.total_checked = total
        stats.elapsed = elapsed
        stats.rate = total / elapsed if elapsed > 0 else 0
        stats.is_running = self._is_running
        stats.results_found = len(self._results)

        if self.on_progress:
            self.on_progress(stats)

        # Check if workers have finished (stop_event was set by a worker finding a match)
        if self._stop_event.is_set() and all(not w.is_alive() for w in self._workers):
            self._is_running = False
            if self.on_complete:
                self.on_complete()

        return stats

    def stop(self) -> list[GeneratorResult]:
        """Stop all workers and return collected results."""
        if self._stop_event:
            self._stop_event.set()

        for w in self._workers:
            w.join(timeout=2.0)
            if w.is_alive():
                w.terminate()

        # Final drain of result queue
        if self._result_queue:
            self._drain(notify=False)

        self._workers = []
        self._is_running = False
        return self._results

    @property
    def results(self) -> list[GeneratorResult]:
        return list(self._results)

    @property
    def is_running(self) -> bool:
        return self._is_running

    def run_blocking(self, progress_interval: float = 0.5) -> list[GeneratorResult]:
        """Run synchronously with periodic progress callbacks. For CLI use."""
        self.start()
        try:
            while self._is_running:
                time.sleep(progress_interval)
                self.poll()
        except KeyboardInterrupt:
            pass
        return self.stop()
