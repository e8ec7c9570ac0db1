"""Task arguments shared with worker processes."""

from datetime import datetime
from time import time

from hashagram.phrase_config import PhraseConfig
from hashagram.solver.index import TargetSpec, reduce_words
from hashagram.solver.utils import TIMESTAMP_FMT


class TaskArgs:
    """Wrapper for task arguments for the solver.

    Pickleable, so that it can be used with multiprocessing (passed to worker processes).
    """

    def __init__(self, *, config: PhraseConfig, words: list[str]) -> None:
        """Initialize the task arguments with the given configuration and word list.

        Args:
            config (PhraseConfig): The phrase to solve.
            words (list[str]): Candidate words in dictionary order.
        """
        self.phrase_config = config.to_dict()
        """dict representing the phrase configuration."""

        self.words = reduce_words(words, TargetSpec.from_phrase(config.phrase))
        """Candidate words that fit inside the target's letters, in dictionary order."""

        self.start_time = time()
        """Timestamp when the solver started, in seconds since the epoch."""

    def summary(self) -> dict[str, object]:
        """Return a dictionary-based summary of the task arguments."""
        return {
            "phrase_config": dict(self.phrase_config),
            "words_count": len(self.words),
            "start_time": datetime.fromtimestamp(self.start_time)
            .astimezone()
            .strftime(TIMESTAMP_FMT),
        }
