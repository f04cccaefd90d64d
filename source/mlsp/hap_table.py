"""
HAPsets for every supported league size.

A HAPset file holds league_size rows of 2*(league_size-1) tokens, "H" for a
home game and "A" for an away game. The sets are complementary: every round
has exactly league_size/2 home slots.
"""
import logging
import os

from .config import SUPPORTED_LEAGUE_SIZES
from .errors import InputFormatError, UnsupportedLeagueSizeError

logger = logging.getLogger(__name__)

HAPSET_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "hapsets")


def hapset_filename(league_size):
    return f"HAPset_for_{league_size}.txt"


def hap_problems(U, league_size):
    """
    Check that the rows of U are pairwise distinct and complementary.

    Returns:
        list of messages, empty when every round has league_size/2 home slots
        and no two HAPs are equal
    """
    problems = []
    if len(set(U)) != len(U):
        problems.append("HAPs are not pairwise distinct")
    num_rounds = len(U[0]) if U else 0
    for r in range(num_rounds):
        homes = sum(row[r] for row in U)
        if homes != league_size // 2:
            problems.append(f"round {r + 1} has {homes} home HAPs, expected {league_size // 2}")
    return problems


def parse_hapset(text, league_size, source="<string>"):
    """
    Turn the content of a HAPset file into the U matrix.

    Args:
        text: content of the file
        league_size: number of HAP slots expected
        source: name used in error messages

    Returns:
        tuple of rows, U[h][r] = 1 if HAP h plays at home in round r
    """
    num_rounds = 2 * (league_size - 1)
    tokens = text.split()
    if len(tokens) != league_size * num_rounds:
        raise InputFormatError(
            f"{source}: expected {league_size * num_rounds} tokens, found {len(tokens)}")

    U = []
    for h in range(league_size):
        row = []
        for r in range(num_rounds):
            letter = tokens[h * num_rounds + r]
            if letter == "H":
                row.append(1)
            elif letter == "A":
                row.append(0)
            else:
                raise InputFormatError(f"{source}: unexpected token {letter!r} (HAP {h + 1}, round {r + 1})")
        U.append(tuple(row))

    problems = hap_problems(U, league_size)
    if problems:
        raise InputFormatError(f"{source}: {problems[0]}")
    return tuple(U)


class HAPTable:
    """
    Lookup of HAP matrices by league size, read lazily from a directory.
    """

    def __init__(self, directory=None, supported=SUPPORTED_LEAGUE_SIZES):
        self.directory = directory or HAPSET_DIR
        self.supported = tuple(supported)
        self._cache = {}

    def __contains__(self, league_size):
        return league_size in self.supported

    def lookup(self, league_size):
        if league_size not in self.supported:
            raise UnsupportedLeagueSizeError(league_size, self.supported)
        if league_size not in self._cache:
            path = os.path.join(self.directory, hapset_filename(league_size))
            logger.debug(f"Reading HAPset for league size {league_size} from {path}")
            try:
                with open(path, "r") as f:
                    text = f.read()
            except OSError as e:
                raise InputFormatError(f"Cannot read HAPset file {path}: {e}") from e
            self._cache[league_size] = parse_hapset(text, league_size, source=path)
        return self._cache[league_size]
