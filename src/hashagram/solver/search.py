"""Backtracking search for a checksum-matching anagram of a phrase."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from multiprocessing.synchronize import Event
from time import time
from typing import TextIO

from hashagram.solver.config import config as solver_config
from hashagram.solver.index import CanonicalIndex, TargetSpec
from hashagram.solver.utils import int_comma, normalize_checksum
from hashagram.solver.verifier import verify

ChosenKeys = tuple[str, ...]
"""Canonical keys chosen so far, in the order they were appended.

Tuples are immutable, so every recursive call works on its own sequence.
"""


@dataclass
class SearchStats:
    """Diagnostic counters collected during a search.  Never used for control flow."""

    nodes_visited: int = 0
    """Number of calls to `AnagramSearch.grow`."""

    combinations_verified: int = 0
    """Number of key combinations handed to the verifier."""

    start_time: float = field(default_factory=time)
    """Timestamp when the search object was created."""


class AnagramSearch:
    """Find a phrase whose letters are an anagram of a target and whose checksum matches.

    Words are grouped into canonical classes (words sharing a sorted-letter key), and the
    search picks classes, never individual words, until their letters add up to the target
    length.  Only then are the concrete words expanded and hashed.

    Keys are appended in a fixed order (longest class first, then classes in dictionary
    order) and the verifier never reorders them: a word order is only hashed if the
    traversal itself produces that sequence of keys within the word limit.
    """

    def __init__(
        self,
        *,
        phrase: str | None,
        checksum: str | None,
        words: Iterable[str] | None,
        max_word_count: int | None = None,
        algorithm: str | None = None,
        out: TextIO | None = None,
        stop_event: Event | None = None,
    ) -> None:
        """Validate the inputs and build the canonical index.

        Args:
            phrase (str | None): The target phrase.
            checksum (str | None): Hex digest the answer must reproduce.
            words (Iterable[str] | None): Normalized candidate words, in dictionary order.
            max_word_count (int | None): Ceiling on the number of words in the answer.
                Defaults to `solver_config.max_word_count`.
            algorithm (str | None): hashlib digest name. Defaults to
                `solver_config.checksum_algorithm`.
            out: Optional stream for progress narration.
            stop_event: Optional event shared with sibling searches; once set, every branch
                gives up and `grow` returns None.

        Raises:
            ValueError: If the phrase or checksum is missing, the word source is missing,
                or `max_word_count` is not positive.
        """
        if not phrase:
            raise ValueError("AnagramSearch expects a target phrase.")
        if not checksum:
            raise ValueError("AnagramSearch expects a checksum.")
        if words is None:
            raise ValueError("AnagramSearch expects a word list.")
        if max_word_count is None:
            max_word_count = solver_config.max_word_count
        if max_word_count < 1:
            raise ValueError(f"max_word_count must be positive, got {max_word_count}.")

        self.phrase = phrase
        self.checksum = normalize_checksum(checksum)
        self.max_word_count = max_word_count
        self.algorithm = algorithm or solver_config.checksum_algorithm
        self.out = out
        self.stats = SearchStats()
        self.stop_event = stop_event

        self.target = TargetSpec.from_phrase(phrase)
        self.index = CanonicalIndex.from_words(words, self.target)

        if out is not None:
            print(
                f"Reduced the dictionary list to {int_comma(len(self.index.words))}...",
                file=out,
                flush=True,
            )
            print(
                f"Reduced the search space to {int_comma(len(self.index.classes))}...",
                file=out,
                flush=True,
            )

    def can_be_anagram(self, phrase: str) -> bool:
        """Check whether the letters of `phrase` still fit inside the target's letters.

        A necessary but not sufficient condition: the phrase may still be impossible to
        complete.  The empty phrase always passes.
        """
        if not phrase:
            return True
        return self.target.admits(phrase)

    def search(self, max_word_count: int | None = None) -> str | None:
        """Run the search with an increasing word limit.

        Args:
            max_word_count (int | None): Overrides the ceiling given at construction.

        Returns:
            The first matching phrase, or None if none was found within the word limit.
        """
        limit = self.max_word_count if max_word_count is None else max_word_count
        for word_limit in range(1, limit + 1):
            result = self.grow((), 0, word_limit)
            if result is not None:
                return result
        return None

    def grow(self, chosen_keys: ChosenKeys, words_so_far: int, word_limit: int) -> str | None:
        """Extend `chosen_keys` depth-first until a verified phrase is found.

        Args:
            chosen_keys (ChosenKeys): Keys chosen so far.
            words_so_far (int): Number of keys in `chosen_keys`.
            word_limit (int): Maximum number of words for this pass.

        Returns:
            A matching phrase, or None if this branch is exhausted.
        """
        self._report_progress(chosen_keys)
        self.stats.nodes_visited += 1

        if self.stop_event is not None and self.stop_event.is_set():
            return None

        current_length = sum(len(key) for key in chosen_keys)
        if current_length == self.target.length:
            return self.verify(chosen_keys)

        if words_so_far == word_limit:
            return None

        for candidate in self.extensions(chosen_keys, words_so_far, word_limit):
            result = self.grow(candidate, words_so_far + 1, word_limit)
            if result is not None:
                return result
        return None

    def extensions(
        self, chosen_keys: ChosenKeys, words_so_far: int, word_limit: int
    ) -> Iterator[ChosenKeys]:
        """Yield the feasible one-key extensions of `chosen_keys`, in search order.

        Lengths run from the remaining letter count down to 1, or only the remaining count
        when the next word is the last one allowed.  Within a length, keys come in
        dictionary order.
        """
        remaining = self.target.length - sum(len(key) for key in chosen_keys)
        shortest = remaining if word_limit - words_so_far == 1 else 1
        for length in self.index.lengths_between(shortest, remaining):
            for key in self.index.keys_of_length(length):
                candidate = chosen_keys + (key,)
                if self.can_be_anagram("".join(candidate)):
                    yield candidate

    def search_from(self, first_keys: ChosenKeys, word_limit: int) -> str | None:
        """Explore only the subtree below `first_keys` for a single word limit."""
        if not self.can_be_anagram("".join(first_keys)):
            return None
        return self.grow(first_keys, len(first_keys), word_limit)

    def verify(self, chosen_keys: ChosenKeys) -> str | None:
        """Expand `chosen_keys` into phrases and return the one matching the checksum."""
        self.stats.combinations_verified += 1
        return verify(chosen_keys, self.index.classes, self.checksum, self.algorithm)

    def _report_progress(self, chosen_keys: ChosenKeys) -> None:
        if self.out is None:
            return
        if self.stats.nodes_visited % solver_config.report_interval == 0:
            print(f"Testing {','.join(chosen_keys)}", file=self.out, flush=True)
