"""Hashagram: checksum-guided multi-word anagram search.

Finds a sequence of dictionary words whose letters form an anagram of a target phrase and
whose space-joined text hashes to a given checksum.  Words are grouped by sorted-letter key,
and a backtracking search with letter-count pruning picks keys until the target length is
reached, then expands them into concrete phrases and checks each digest.
"""

from sys import argv, exit

from .phrase_config import load_configs
from .solver import solver


def main() -> None:
    """Main entry point for the hashagram solver."""
    # Expect a single argument: path to the configuration file
    if len(argv) != 2:
        print("Usage: python -m hashagram <path_to_config_file>")
        exit(1)
    config_path = argv[1]
    configs = load_configs(config_path)

    answers = [solver.run(config) for config in configs]
    if any(answer is None for answer in answers):
        exit(1)
