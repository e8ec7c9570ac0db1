"""Utility functions for the hashagram solver."""

import hashlib
from collections import Counter
from functools import lru_cache

TIMESTAMP_FMT = "%Y-%m-%d %H:%M:%S.%f %Z%z"

HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def strip_punctuation(text: str) -> str:
    """Return the lowercased letters of `text`, dropping whitespace, digits and punctuation."""
    return "".join(ch for ch in text.lower() if ch.isalpha())


@lru_cache(maxsize=300_000)
def get_char_counter(text: str) -> Counter[str]:
    """Return a cached Counter of the letters in `text` (punctuation removed).

    This is the hotspot of the feasibility check during the search.

    Note: the returned Counter must be treated as immutable.
    """
    return Counter(strip_punctuation(text))


def normalize(text: str) -> tuple[Counter[str], int]:
    """Return the letter counts of `text` and the total number of letters.

    Args:
        text (str): Any string: a target phrase, a dictionary word, or a partial phrase.

    Returns:
        A tuple `(char_counts, length)` with `sum(char_counts.values()) == length`.
    """
    char_counts = Counter(get_char_counter(text))
    return char_counts, char_counts.total()


def canonical_key(word: str) -> str:
    """Canonical sorted-letter key of a word, identifying its anagram class."""
    return "".join(sorted(strip_punctuation(word)))


def is_playable(to_play: Counter[str], letters: Counter[str]) -> bool:
    """Returns whether `to_play` is a sub-multiset of `letters`.

    Args:
        to_play (Counter[str]): A counter of the letters needed.
        letters (Counter[str]): A counter of the available letters.
    """
    return all(to_play[ch] <= letters[ch] for ch in to_play)


def compute_checksum(phrase: str, algorithm: str = "md5") -> str:
    """Return the lowercase hex digest of the UTF-8 bytes of `phrase`."""
    return hashlib.new(algorithm, phrase.encode("utf-8")).hexdigest()


def normalize_checksum(checksum: str) -> str:
    """Lowercase and trim a hex checksum for case-insensitive comparison."""
    return checksum.strip().lower()


def is_hex_digest(checksum: str, algorithm: str = "md5") -> bool:
    """Check whether `checksum` looks like a hex digest produced by `algorithm`."""
    expected_len = hashlib.new(algorithm).digest_size * 2
    return len(checksum) == expected_len and all(ch in HEX_DIGITS for ch in checksum)


def time_str(seconds: float) -> str:
    """Convert a time duration in seconds to a human-readable string.

    Args:
        seconds: Time duration in seconds.

    Returns:
        A string formatted as "HH:MM:SS.ss".
    """
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{int(hours):02}:{int(minutes):02}:{secs:05.2f}"


def int_comma(n: int) -> str:
    """Format an integer with commas as thousands separators."""
    return f"{n:,}"
