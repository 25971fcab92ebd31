"""
Multiprocessing worker for vanity address search.

IMPORTANT: This module must contain only top-level importable functions.
On macOS/Windows, multiprocessing uses 'spawn' which requires worker
targets to be importable by name from a module.
"""

from evanity.core import generate_and_hash
from evanity.matcher import match_first
from evanity.problems import Problem


def search_worker(
    problems: list[Problem],
    result_queue,
    stop_event,
    counter,
    batch_size: int = 500,
):
    """Worker process: generate keys in a tight loop and check for matches.

    Runs until a match is found or stop_event is set.

    Args:
        problems: Ordered problems; the first one an address satisfies wins.
        result_queue: multiprocessing.Queue — push (prv_bytes, address, problem_index) on match.
        stop_event: multiprocessing.Event — signals all workers to stop.
        counter: multiprocessing.Value('Q') — shared total-keys-checked counter.
        batch_size: Keys to generate between stop_event checks.
    """
    local_count = 0

    while not stop_event.is_set():
        for _ in range(batch_size):
            prv_bytes, address = generate_and_hash()
            local_count += 1

            problem = match_first(address, problems)
            if problem is not None:
                result_queue.put((prv_bytes, address, problems.index(problem)))
                stop_event.set()
                with counter.get_lock():
                    counter.value += local_count
                return

        with counter.get_lock():
            counter.value += local_count
        local_count = 0

    if local_count > 0:
        with counter.get_lock():
            counter.value += local_count
