"""Expand chosen canonical classes into concrete phrases and check their checksums."""

from collections.abc import Iterator, Mapping, Sequence
from itertools import product

from hashagram.solver.utils import compute_checksum, normalize_checksum


def candidate_phrases(
    chosen_keys: Sequence[str], classes: Mapping[str, Sequence[str]]
) -> Iterator[tuple[str, ...]]:
    """Iterate over every concrete word pick for `chosen_keys`, in key order.

    The last key varies fastest, which is the order of a depth-first walk over the classes.
    """
    return product(*(classes[key] for key in chosen_keys))


def verify(
    chosen_keys: Sequence[str],
    classes: Mapping[str, Sequence[str]],
    checksum: str,
    algorithm: str = "md5",
) -> str | None:
    """Return the first phrase built from `chosen_keys` whose checksum matches.

    Words are joined by a single space, in the order of `chosen_keys`; the keys are never
    reordered.

    Args:
        chosen_keys (Sequence[str]): Canonical keys chosen by the search.
        classes (Mapping[str, Sequence[str]]): Mapping of canonical key to its words.
        checksum (str): Expected hex digest (compared case-insensitively).
        algorithm (str): hashlib digest name.

    Returns:
        The matching phrase, or None if no combination matches.
    """
    expected = normalize_checksum(checksum)
    for words in candidate_phrases(chosen_keys, classes):
        phrase = " ".join(words)
        if compute_checksum(phrase, algorithm) == expected:
            return phrase
    return None
