"""Main solver module for hashagram phrases."""

import re
import sys
from datetime import datetime
from multiprocessing import Event
from pathlib import Path
from pprint import pprint
from time import time
from typing import TextIO

from hashagram.phrase_config import PhraseConfig
from hashagram.solver.config import config as solver_config
from hashagram.solver.parallel import get_executor, solve_in_parallel
from hashagram.solver.search import AnagramSearch
from hashagram.solver.task_args import TaskArgs
from hashagram.solver.utils import TIMESTAMP_FMT, int_comma, is_hex_digest, time_str
from hashagram.wordlist import load_word_list

UNSAFE_FILENAME_CHARS = re.compile(r"[^0-9A-Za-z]+")


def log_path_for(config: PhraseConfig) -> Path:
    """Return the log file path for a phrase configuration."""
    slug = UNSAFE_FILENAME_CHARS.sub("_", config.phrase).strip("_")[:40] or "phrase"
    return Path(solver_config.log_dir) / f"{slug}-{config.checksum[:8].lower()}.log"


def run(config: PhraseConfig) -> str | None:
    """Run the solver on the given configuration.

    Args:
        config (PhraseConfig): The phrase to solve.

    Returns:
        The matching phrase, or None if no match was found.
    """
    print(f"config: {config}")

    logfile = log_path_for(config)
    print(f"Log file: {logfile}")
    logfile.parent.mkdir(parents=True, exist_ok=True)

    with open(logfile, "w", encoding="utf-8") as logf:
        try:
            answer = solve_one(config, logf=logf)
        except KeyboardInterrupt:
            print("Solver interrupted by user.", file=logf, flush=True)
            print("Solver interrupted by user.")
            sys.exit(1)

    if answer is not None:
        print("-----------")
        print(f'Got "{answer}" as a match.')
    else:
        print("Could not find anagram!")
    print()
    return answer


def solve_one(phrase_config: PhraseConfig, *, logf: TextIO) -> str | None:
    """Attempt to find the phrase matching a configuration's checksum.

    Args:
        phrase_config (PhraseConfig): The phrase to solve.
        logf: File object to log the solving process.

    Returns:
        The matching phrase, or None if no match was found.
    """
    print(f"Target phrase: {phrase_config.phrase}", file=logf, flush=True)
    print(f"Checksum: {phrase_config.checksum}", file=logf, flush=True)
    print(f"Maximum word count: {phrase_config.max_word_count}", file=logf, flush=True)
    print("Solver config:", file=logf, flush=True)
    pprint(solver_config.model_dump(), stream=logf, width=120)

    if not is_hex_digest(phrase_config.checksum.strip(), solver_config.checksum_algorithm):
        print(
            f"Warning: checksum is not a {solver_config.checksum_algorithm} hex digest, "
            "no phrase will match.",
            file=logf,
            flush=True,
        )

    print("Generating a list of candidate words...", file=logf, flush=True)
    words = load_word_list(phrase_config.word_list_path)
    print(f"Got {int_comma(len(words))} words from file.", file=logf, flush=True)

    task_args = TaskArgs(config=phrase_config, words=words)
    print("Solver initialized with:", file=logf, flush=True)
    pprint(task_args.summary(), stream=logf, width=120)

    start_time_str = (
        datetime.fromtimestamp(task_args.start_time).astimezone().strftime(TIMESTAMP_FMT)
    )
    print(f"Start time: {start_time_str}", file=logf, flush=True)

    search = AnagramSearch(
        phrase=phrase_config.phrase,
        checksum=phrase_config.checksum,
        words=task_args.words,
        max_word_count=phrase_config.max_word_count,
        out=logf,
    )

    if solver_config.use_parallel:
        print("Using parallel solver...", file=logf, flush=True)
        stop_event = Event()
        with get_executor(
            n_workers=solver_config.max_workers, task_args=task_args, stop_event=stop_event
        ) as executor:
            try:
                answer = solve_in_parallel(executor, search, logf, stop_event=stop_event)
            except BaseException:
                stop_event.set()
                executor.shutdown(wait=False, cancel_futures=True)
                raise
    else:
        answer = search.search()
        print(
            f"Search nodes visited: {int_comma(search.stats.nodes_visited)}, "
            f"combinations verified: {int_comma(search.stats.combinations_verified)}, "
            f"search time: {time_str(time() - search.stats.start_time)}",
            file=logf,
            flush=True,
        )

    print(f"Time taken: {time_str(time() - task_args.start_time)}", file=logf, flush=True)
    if answer is not None:
        print(f'Solution found: "{answer}"', file=logf, flush=True)
    else:
        print("No solution found.", file=logf, flush=True)
    return answer
