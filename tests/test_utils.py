import hashlib
from collections import Counter
from itertools import permutations

from hashagram.solver.utils import (
    canonical_key,
    compute_checksum,
    int_comma,
    is_hex_digest,
    is_playable,
    normalize,
    strip_punctuation,
    time_str,
)


def test_strip_punctuation_keeps_only_letters() -> None:
    assert strip_punctuation("poultry outwits ants") == "poultryoutwitsants"
    assert strip_punctuation("can't-stop, won't stop!") == "cantstopwontstop"
    assert strip_punctuation("R2-D2 & C3PO") == "rdcpo"
    assert strip_punctuation("  \t\n") == ""


def test_normalize_counts_letters() -> None:
    counts, length = normalize("a b, ba!")
    assert counts == Counter({"a": 2, "b": 2})
    assert length == 4
    assert sum(counts.values()) == length


def test_normalize_empty_string() -> None:
    counts, length = normalize("")
    assert counts == Counter()
    assert length == 0


def test_canonical_key_is_permutation_invariant() -> None:
    keys = {canonical_key("".join(p)) for p in permutations("listen")}
    assert keys == {"eilnst"}


def test_canonical_key_ignores_punctuation() -> None:
    assert canonical_key("it's") == canonical_key("sit") == "ist"


def test_is_playable() -> None:
    target = Counter("poultryoutwitsants")
    assert is_playable(Counter("trout"), target)
    assert is_playable(Counter(), target)
    assert not is_playable(Counter("zoo"), target)
    assert not is_playable(Counter("ppp"), target)


def test_compute_checksum_matches_hashlib() -> None:
    assert compute_checksum("act cat") == hashlib.md5(b"act cat").hexdigest()
    assert compute_checksum("act cat", "sha256") == hashlib.sha256(b"act cat").hexdigest()


def test_is_hex_digest() -> None:
    digest = hashlib.md5(b"cat").hexdigest()
    assert is_hex_digest(digest)
    assert is_hex_digest(digest.upper())
    assert not is_hex_digest(digest[:-1])
    assert not is_hex_digest("z" * 32)
    assert not is_hex_digest(digest, "sha256")


def test_formatting_helpers() -> None:
    assert int_comma(1234567) == "1,234,567"
    assert time_str(3725.5) == "01:02:05.50"
