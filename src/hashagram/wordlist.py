"""Module for word list management in hashagram."""

from os import PathLike
from pathlib import Path

from hashagram.solver.config import config as solver_config


def normalize_word(line: str) -> str:
    """Lowercase and trim a raw dictionary line."""
    return line.strip().lower()


def load_word_list(path: str | PathLike[str] | None = None) -> list[str]:
    """Load the word list from a dictionary file.

    Lines are lowercased and trimmed; empty lines are dropped.  Order and duplicates are kept,
    since the solver resolves ties between anagram words by dictionary order.

    Args:
        path: Dictionary file to read.  Defaults to `solver_config.word_list_path`.

    Returns:
        The list of candidate words.
    """
    word_list_path = Path(path if path is not None else solver_config.word_list_path)
    if not word_list_path.is_file():
        raise FileNotFoundError(f"Word list file not found: {word_list_path}")

    with word_list_path.open("r", encoding="utf-8", errors="ignore") as f:
        return [word for line in f if (word := normalize_word(line))]
