"""Loader for phrase configuration files."""

import json
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path

from hashagram.solver.config import config as solver_config

KEY_ALIASES = {
    "anagram": "phrase",
    "md5Checksum": "checksum",
    "maximumWordCount": "max_word_count",
    "wordListFilePath": "word_list_path",
}
"""Key names accepted for compatibility with older configuration files."""


@dataclass
class PhraseConfig:
    """A phrase to solve."""

    phrase: str
    """The target phrase whose letters the answer must use."""

    checksum: str
    """Hex digest of the answer phrase."""

    max_word_count: int = field(default_factory=lambda: solver_config.max_word_count)
    """Maximum number of words in the answer."""

    word_list_path: str = field(default_factory=lambda: solver_config.word_list_path)
    """Dictionary file to draw candidate words from."""

    def __post_init__(self) -> None:
        """Validate the configuration."""
        if not self.phrase:
            raise ValueError("phrase is a required configuration!")
        if not self.checksum:
            raise ValueError("checksum is a required configuration!")
        if not self.word_list_path:
            raise ValueError("word_list_path is a required configuration!")
        if self.max_word_count < 1:
            raise ValueError(f"max_word_count must be positive, got {self.max_word_count}.")

    def __str__(self) -> str:
        """Return a string representation of the PhraseConfig."""
        return f'"{self.phrase}" ({self.checksum}, up to {self.max_word_count} words)'

    def to_dict(self) -> dict:
        """Return a dictionary representation of the PhraseConfig.

        Used to supply the configuration to child processes via `multiprocessing`.
        """
        return {
            "phrase": self.phrase,
            "checksum": self.checksum,
            "max_word_count": self.max_word_count,
            "word_list_path": self.word_list_path,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PhraseConfig":
        """Create a PhraseConfig from a dictionary, accepting the legacy key names."""
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}.")
        kwargs = {KEY_ALIASES.get(key, key): value for key, value in data.items()}
        unknown = set(kwargs) - {"phrase", "checksum", "max_word_count", "word_list_path"}
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        if kwargs.get("max_word_count") is None:
            kwargs.pop("max_word_count", None)
        kwargs.setdefault("phrase", "")
        kwargs.setdefault("checksum", "")
        return cls(**kwargs)


def load_configs(configs_path: PathLike | str) -> list[PhraseConfig]:
    """Load phrase configurations from a JSON file.

    The file holds either one configuration object or a list of them.  Relative word list
    paths are resolved against the configuration file's directory.

    Args:
        configs_path (PathLike | str): Path to the configuration file.
    """
    path = Path(configs_path).resolve()
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from None

    entries = data if isinstance(data, list) else [data]
    configs = []
    for entry in entries:
        config = PhraseConfig.from_dict(entry)
        # Only paths written in the file are relative to it
        from_file = any(KEY_ALIASES.get(key, key) == "word_list_path" for key in entry)
        if from_file and not Path(config.word_list_path).is_absolute():
            config.word_list_path = str(path.parent / config.word_list_path)
        configs.append(config)
    return configs
