"""Worker-side state and tasks for the parallel solver."""

from dataclasses import dataclass
from multiprocessing.sharedctypes import Synchronized
from multiprocessing.synchronize import Event

from hashagram.phrase_config import PhraseConfig
from hashagram.solver.search import AnagramSearch, ChosenKeys
from hashagram.solver.task_args import TaskArgs


@dataclass(kw_only=True)
class WorkerState:
    """Global state maintained by each worker process."""

    worker_idx: int
    """Index of the worker process."""

    search: AnagramSearch
    """Search object built once per worker from the shared task arguments."""


worker_state: WorkerState | None = None
"""Global state for each worker process."""


def build_search(task_args: TaskArgs, stop_event: Event | None = None) -> AnagramSearch:
    """Build the search object described by `task_args` (no progress output)."""
    phrase_config = PhraseConfig.from_dict(task_args.phrase_config)
    return AnagramSearch(
        phrase=phrase_config.phrase,
        checksum=phrase_config.checksum,
        words=task_args.words,
        max_word_count=phrase_config.max_word_count,
        stop_event=stop_event,
    )


def init_worker_globals(
    worker_ctr: Synchronized, task_args: TaskArgs, stop_event: Event | None = None
) -> None:
    """Initialize global variables for worker processes.

    Args:
        worker_ctr (Synchronized): Shared counter for workers.
        task_args (TaskArgs): Phrase configuration and reduced word list.
        stop_event (Event | None): Set by the parent once an answer is found, so that
            running tasks abandon their subtrees.
    """
    global worker_state  # noqa: PLW0603
    with worker_ctr.get_lock():
        # Get and set the shared worker counter atomically, using the obtained value
        # as the worker index
        worker_idx = worker_ctr.value
        worker_ctr.value += 1

    worker_state = WorkerState(
        worker_idx=worker_idx, search=build_search(task_args, stop_event=stop_event)
    )
    print(f"Worker {worker_state.worker_idx} initialized.", flush=True)


def worker_task(first_keys: ChosenKeys, word_limit: int) -> str | None:
    """Search the subtree below `first_keys` for a single word limit.

    Args:
        first_keys (ChosenKeys): Leading canonical keys fixed for this task.
        word_limit (int): Maximum number of words in the phrase.

    Returns:
        The matching phrase if found, else None.
    """
    if not worker_state:
        raise RuntimeError("Worker state not initialized. Call init_worker_globals first.")
    return worker_state.search.search_from(tuple(first_keys), word_limit)
