"""Dictionary reduction, canonical classes and the length index."""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from sortedcontainers import SortedDict

from hashagram.solver.utils import canonical_key, get_char_counter, is_playable, normalize


@dataclass(frozen=True)
class TargetSpec:
    """Letter inventory of the target phrase."""

    char_counts: Counter[str]
    """Occurrences of each letter in the target phrase (punctuation and whitespace excluded)."""

    length: int
    """Total number of letters in the target phrase."""

    @classmethod
    def from_phrase(cls, phrase: str) -> "TargetSpec":
        """Build the target inventory from a raw phrase."""
        char_counts, length = normalize(phrase)
        return cls(char_counts=char_counts, length=length)

    def admits(self, text: str) -> bool:
        """Whether the letters of `text` fit inside the target's letters."""
        return is_playable(get_char_counter(text), self.char_counts)


def reduce_words(words: Iterable[str], target: TargetSpec) -> list[str]:
    """Drop every word that cannot be part of an anagram of the target.

    A word is kept when it has at least one letter and none of its letters occur more often
    than in the target.  Source order is preserved.
    """
    return [w for w in words if get_char_counter(w) and target.admits(w)]


def build_classes(words: Iterable[str]) -> dict[str, list[str]]:
    """Group words by canonical key.

    Keys appear in first-seen order and each class lists its words in source order,
    duplicates included.
    """
    classes: dict[str, list[str]] = {}
    for word in words:
        classes.setdefault(canonical_key(word), []).append(word)
    return classes


@dataclass
class CanonicalIndex:
    """Canonical classes of the reduced dictionary, partitioned by key length."""

    target: TargetSpec
    """Target the dictionary was reduced against."""

    words: list[str]
    """Words that survived reduction, in source order."""

    classes: dict[str, list[str]]
    """Mapping of canonical key to the words sharing it."""

    by_length: SortedDict = field(default_factory=SortedDict)
    """Mapping of key length to the keys of that length, in first-seen order."""

    @classmethod
    def from_words(cls, words: Iterable[str], target: TargetSpec) -> "CanonicalIndex":
        """Reduce `words` against `target` and index the surviving classes."""
        reduced = reduce_words(words, target)
        classes = build_classes(reduced)
        by_length: SortedDict = SortedDict()
        for key in classes:
            by_length.setdefault(len(key), []).append(key)
        return cls(target=target, words=reduced, classes=classes, by_length=by_length)

    def keys_of_length(self, length: int) -> tuple[str, ...]:
        """All canonical keys with exactly `length` letters (empty if there are none)."""
        return tuple(self.by_length.get(length, ()))

    def lengths_between(self, low: int, high: int) -> list[int]:
        """Non-empty key lengths in `[low, high]`, longest first."""
        if high < low:
            return []
        return list(self.by_length.irange(low, high, reverse=True))
