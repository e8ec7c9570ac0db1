"""Implementation of the parallel solver: task distribution and worker management."""

import os
import traceback
from concurrent.futures import Future, ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from multiprocessing import Value
from multiprocessing.sharedctypes import Synchronized
from multiprocessing.synchronize import Event
from typing import Literal, TextIO

from hashagram.solver.config import config as solver_config
from hashagram.solver.search import AnagramSearch, ChosenKeys
from hashagram.solver.task_args import TaskArgs
from hashagram.solver.worker import init_worker_globals, worker_task


def get_executor(
    *,
    n_workers: int | None = None,
    task_args: TaskArgs,
    stop_event: Event | None = None,
) -> ProcessPoolExecutor:
    """Get a ProcessPoolExecutor whose workers each hold a ready-built search.

    Args:
        n_workers (int | None): Number of worker processes to create.  If None,
            defaults to number of CPU cores minus one.
        task_args (TaskArgs): Phrase configuration and reduced word list for the workers.
        stop_event (Event | None): Shared event that tells running tasks to give up.

    Returns:
        A ProcessPoolExecutor instance for worker processes.
    """
    worker_ctr: Synchronized = Value("i", 0)

    cpus = os.cpu_count() or 1  # Fallback to 1 if os.cpu_count() is None
    if n_workers is None:
        n_workers = max(1, cpus - 1)  # Leave one core free
    if n_workers > cpus:
        raise ValueError(
            f"Requested number of workers ({n_workers}) exceeds CPU count ({cpus})",
        )
    return ProcessPoolExecutor(
        max_workers=n_workers,
        initializer=init_worker_globals,
        initargs=(worker_ctr, task_args, stop_event),
    )


@dataclass
class Result:
    """Wrapper for worker task results."""

    first_keys: ChosenKeys
    status: Literal["success", "no_solution", "error"]
    result: str | None
    err_msg: str | None = None


def _worker_task(first_keys: ChosenKeys, word_limit: int) -> Result:
    """Worker task wrapper that turns exceptions into an error Result."""
    try:
        ret = worker_task(first_keys, word_limit)
        return Result(
            first_keys=first_keys,
            status="success" if ret is not None else "no_solution",
            result=ret,
        )
    except Exception as e:
        return Result(
            first_keys=first_keys,
            status="error",
            result=None,
            err_msg=f"Worker encountered an error: {str(e)}\n{traceback.format_exc()}",
        )


class ParallelSearchError(RuntimeError):
    """Raised when worker tasks failed, so an exhausted search cannot be called not-found."""

    def __init__(self, failed_keys: list[ChosenKeys]) -> None:
        self.failed_keys = failed_keys
        names = "; ".join(",".join(keys) for keys in failed_keys)
        super().__init__(f"{len(failed_keys)} worker task(s) failed for classes: {names}")


def _stop_workers(executor: ProcessPoolExecutor, stop_event: Event | None) -> None:
    if stop_event is not None:
        stop_event.set()
    executor.shutdown(wait=False, cancel_futures=True)


def solve_in_parallel(
    executor: ProcessPoolExecutor,
    search: AnagramSearch,
    logf: TextIO,
    *,
    max_word_count: int | None = None,
    stop_event: Event | None = None,
) -> str | None:
    """Run the word-limit loop, spreading the top-level class choices over the executor.

    In deterministic mode, results are read in submission order so the answer is the one the
    sequential search would return, and the first failed task aborts the search.  Otherwise
    the first result to arrive wins, and failed tasks are only reported once every word
    limit is exhausted without a match.

    Args:
        executor (ProcessPoolExecutor): Executor from `get_executor`.
        search (AnagramSearch): Search built from the same task arguments as the workers.
        logf: File object to log the solving process.
        max_word_count (int | None): Overrides `search.max_word_count`.
        stop_event (Event | None): The event given to `get_executor`; set once the search
            ends early so running tasks stop.

    Returns:
        The matching phrase, or None if every task finished without one.

    Raises:
        ParallelSearchError: If a worker task failed and no match was returned.
    """
    if search.target.length == 0:
        # Nothing to split: the only candidate is the empty phrase
        return search.search(max_word_count)

    failed_keys: list[ChosenKeys] = []
    limit = search.max_word_count if max_word_count is None else max_word_count
    for word_limit in range(1, limit + 1):
        tasks = list(search.extensions((), 0, word_limit))
        print(
            f"Word limit {word_limit}: dispatching {len(tasks)} top-level classes...",
            file=logf,
            flush=True,
        )
        futures: dict[Future[Result], ChosenKeys] = {
            executor.submit(_worker_task, first_keys, word_limit): first_keys
            for first_keys in tasks
        }
        ordered = list(futures) if solver_config.deterministic else as_completed(futures)
        for future in ordered:
            try:
                result = future.result()
            except Exception as e:
                print(f"Error retrieving worker result: {str(e)}", flush=True)
                print(traceback.format_exc(), file=logf, flush=True)
                result = Result(
                    first_keys=futures[future], status="error", result=None, err_msg=str(e)
                )

            if result.status == "error":
                print(
                    f"Worker for classes '{','.join(result.first_keys)}' encountered an error:",
                    flush=True,
                )
                print(result.err_msg, file=logf, flush=True)
                failed_keys.append(result.first_keys)
                if solver_config.deterministic:
                    # A later subtree's answer would not be the sequential answer
                    _stop_workers(executor, stop_event)
                    raise ParallelSearchError(failed_keys)
            elif result.status == "success" and result.result is not None:
                print("Terminating remaining workers...", file=logf, flush=True)
                _stop_workers(executor, stop_event)
                return result.result

    if failed_keys:
        raise ParallelSearchError(failed_keys)
    print("All top-level classes processed, no solution found.", file=logf, flush=True)
    return None
