"""Hashagram solver configuration."""

import hashlib

from dotenv import find_dotenv
from pydantic import PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine the environment file path, or None if not found
ENV_FILE = find_dotenv() or None


class SolverConfig(BaseSettings):
    """Configuration settings for the hashagram solver."""

    deterministic: bool = True
    """Whether parallel results are consumed in submission order, so that the answer matches
    the sequential search. Default: True."""

    use_parallel: bool = False
    """Whether to spread top-level class choices over worker processes. Default: False."""

    max_workers: PositiveInt | None = None
    """Maximum number of worker processes to use. If None (default), uses os.cpu_count() - 1."""

    report_interval: PositiveInt = 10_000
    """Interval (in number of search nodes) at which to report progress. Default: 10000."""

    max_word_count: PositiveInt = 10
    """Default ceiling on the number of words in the answer phrase. Default: 10."""

    word_list_path: str = "wordlist"
    """Default dictionary file, one word per line."""

    checksum_algorithm: str = "md5"
    """Name of the hashlib digest used for the checksum. Default: "md5".

    Must be a fixed-length digest available in hashlib (not shake_128 or shake_256).
    """

    log_dir: str = "logs"
    """Directory where per-run log files are written."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        env_prefix="HASHAGRAM_",
        extra="ignore",
        validate_assignment=True,
    )

    @field_validator("checksum_algorithm")
    @classmethod
    def check_checksum_algorithm(cls, value: str) -> str:
        """Reject digests hashlib does not provide or whose length is not fixed."""
        name = value.strip().lower()
        if name not in hashlib.algorithms_available:
            raise ValueError(f"Unknown hashlib algorithm: {value!r}")
        if hashlib.new(name).digest_size == 0:
            raise ValueError(f"Algorithm {value!r} has no fixed digest length.")
        return name


config = SolverConfig()
