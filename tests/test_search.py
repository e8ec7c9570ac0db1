import hashlib
import io
import multiprocessing
from collections import Counter
from time import time

import pytest

from hashagram.solver.config import config as solver_config
from hashagram.solver.search import AnagramSearch
from hashagram.solver.utils import strip_punctuation


def md5(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest()


POULTRY_WORDS = [
    "pills",
    "stout",
    "tout",
    "yawls",
    "printout",
    "ty",
    "a",
    "outwits",
    "poultry",
    "ants",
    "zebra",
]


def test_single_word_match() -> None:
    search = AnagramSearch(
        phrase="tac", checksum=md5("cat"), words=["cat", "act", "dog"], max_word_count=1
    )
    assert search.search() == "cat"


def test_two_word_match() -> None:
    search = AnagramSearch(
        phrase="tac tca", checksum=md5("act cat"), words=["cat", "act", "dog"], max_word_count=2
    )
    assert search.search() == "act cat"


def test_no_feasible_words() -> None:
    search = AnagramSearch(
        phrase="tac", checksum=md5("cat"), words=["dog", "pig"], max_word_count=1
    )
    assert search.index.classes == {}
    assert search.search() is None


def test_empty_word_list_is_not_found() -> None:
    search = AnagramSearch(phrase="tac", checksum=md5("cat"), words=[])
    assert search.search() is None


def test_checksum_of_no_combination_is_not_found() -> None:
    search = AnagramSearch(
        phrase="tac", checksum=md5("cat dog"), words=["cat", "act", "at", "c"], max_word_count=3
    )
    assert search.search() is None


def test_multi_word_phrase_with_distractors() -> None:
    answer = "printout stout yawls"
    search = AnagramSearch(
        phrase="poultry outwits ants", checksum=md5(answer), words=POULTRY_WORDS
    )
    result = search.search()
    assert result == answer
    assert Counter(strip_punctuation(result)) == search.target.char_counts
    assert md5(result) == search.checksum


def test_checksum_comparison_is_case_insensitive() -> None:
    search = AnagramSearch(
        phrase="tac", checksum=" " + md5("act").upper() + "\n", words=["cat", "act"]
    )
    assert search.search() == "act"


def test_malformed_checksum_is_not_an_error() -> None:
    search = AnagramSearch(phrase="tac", checksum="not-hex", words=["cat", "act"])
    assert search.search() is None


def test_word_limit_bounds_the_phrase() -> None:
    words = ["a", "b", "c", "ab"]
    checksum = md5("a b c")
    assert AnagramSearch(phrase="abc", checksum=checksum, words=words).search(2) is None
    assert AnagramSearch(phrase="abc", checksum=checksum, words=words).search(3) == "a b c"


def test_word_order_produced_by_traversal_is_found() -> None:
    search = AnagramSearch(phrase="abc", checksum=md5("c ab"), words=["ab", "c"])
    assert search.search() == "c ab"


def test_punctuated_words_are_matched_on_letters() -> None:
    search = AnagramSearch(phrase="its tis", checksum=md5("it's sit"), words=["sit", "it's"])
    assert search.search() == "it's sit"


def test_increasing_max_word_count_keeps_the_match() -> None:
    answer = "printout stout yawls"
    narrow = AnagramSearch(phrase="poultry outwits ants", checksum=md5(answer), words=POULTRY_WORDS)
    wide = AnagramSearch(phrase="poultry outwits ants", checksum=md5(answer), words=POULTRY_WORDS)
    assert narrow.search(3) == answer
    assert wide.search(6) == answer


def test_search_is_idempotent() -> None:
    search = AnagramSearch(
        phrase="tac tca", checksum=md5("act cat"), words=["cat", "act", "dog"], max_word_count=2
    )
    first = search.search()
    assert search.search() == first == "act cat"


def test_can_be_anagram() -> None:
    search = AnagramSearch(phrase="dormitory", checksum=md5("dirty room"), words=[])
    assert search.can_be_anagram("")
    assert search.can_be_anagram("dirty")
    assert search.can_be_anagram("dirty room")
    assert search.can_be_anagram("mod")
    assert not search.can_be_anagram("dirtyx")
    assert not search.can_be_anagram("ddd")


def test_can_be_anagram_accepts_every_partial_answer() -> None:
    answer = "printout stout yawls".split()
    search = AnagramSearch(phrase="poultry outwits ants", checksum=md5("x"), words=[])
    for end in range(len(answer) + 1):
        assert search.can_be_anagram("".join(answer[:end]))


def test_search_from_explores_one_subtree() -> None:
    search = AnagramSearch(
        phrase="tac tca", checksum=md5("act cat"), words=["cat", "act", "dog"], max_word_count=2
    )
    assert search.search_from(("act",), 2) == "act cat"
    assert search.search_from(("act",), 1) is None
    assert search.search_from(("dgo",), 2) is None


def test_extensions_are_longest_first_then_dictionary_order() -> None:
    search = AnagramSearch(
        phrase="abcd", checksum=md5("x"), words=["cd", "ab", "abc", "d", "a"]
    )
    assert list(search.extensions((), 0, 2)) == [("abc",), ("cd",), ("ab",), ("d",), ("a",)]
    assert list(search.extensions((), 0, 1)) == []
    assert list(search.extensions(("ab",), 1, 2)) == [("ab", "cd")]


def test_progress_is_narrated_to_out(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(solver_config, "report_interval", 1)
    out = io.StringIO()
    search = AnagramSearch(
        phrase="tac", checksum=md5("act"), words=["cat", "act", "dog"], out=out
    )
    assert search.search() == "act"
    log = out.getvalue()
    assert "Reduced the dictionary list to 2..." in log
    assert "Reduced the search space to 1..." in log
    assert "Testing act" in log
    assert search.stats.nodes_visited == 2
    assert search.stats.combinations_verified == 1


def _exploding_words():
    raise AssertionError("word list must not be read")
    yield  # pragma: no cover


@pytest.mark.parametrize(
    "kwargs",
    [
        {"phrase": None, "checksum": md5("cat")},
        {"phrase": "", "checksum": md5("cat")},
        {"phrase": "tac", "checksum": None},
        {"phrase": "tac", "checksum": ""},
        {"phrase": "tac", "checksum": md5("cat"), "max_word_count": 0},
    ],
)
def test_invalid_construction_fails_before_indexing(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        AnagramSearch(words=_exploding_words(), **kwargs)


def test_missing_word_list_is_an_error() -> None:
    with pytest.raises(ValueError, match="word list"):
        AnagramSearch(phrase="tac", checksum=md5("cat"), words=None)


def test_set_stop_event_abandons_the_search() -> None:
    stop_event = multiprocessing.Event()
    search = AnagramSearch(
        phrase="tac tca", checksum=md5("act cat"), words=["cat", "act", "dog"],
        max_word_count=2, stop_event=stop_event,
    )
    assert search.search_from(("act",), 2) == "act cat"

    stop_event.set()
    nodes_before = search.stats.nodes_visited
    assert search.search() is None
    assert search.search_from(("act",), 2) is None
    assert search.stats.combinations_verified == 1
    # Only the entry node of each grow pass is counted
    assert search.stats.nodes_visited == nodes_before + 3


def test_search_stats_record_start_time() -> None:
    search = AnagramSearch(phrase="tac", checksum=md5("cat"), words=["cat"])
    assert 0 < search.stats.start_time <= time()
