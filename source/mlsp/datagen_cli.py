#!/usr/bin/env python3
import argparse
import logging
import os
import random
import sys

from .config import DATA_DIR
from .errors import MLSPError
from .generator import generate
from .instance_io import write_instance

logger = logging.getLogger(__name__)

PROMPTS = {
    "league_size": "How many teams should every league contain?",
    "num_leagues": "How many leagues should there be?",
    "num_clubs": "How many clubs should there be? (More than number of teams per league)",
    "version": "What is the version of this file? (A,B,C,... etc)",
}


def instance_filename(league_size, num_leagues, num_clubs, version):
    return f"{league_size}-{num_leagues}-{num_clubs}-{version}.txt"


def ask(key, convert=str):
    print(PROMPTS[key])
    answer = input().strip()
    try:
        return convert(answer)
    except ValueError:
        raise ValueError(f"Invalid answer {answer!r}") from None


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Random instance generator for the Multi-League Sports Scheduling Problem",
        epilog="Missing values are asked for interactively.",
    )
    parser.add_argument('-l', '--league-size', type=int, help='Teams per league (4, 6, ..., 16)')
    parser.add_argument('-n', '--num-leagues', type=int, help='Number of leagues')
    parser.add_argument('-c', '--num-clubs', type=int, help='Number of clubs (more than the league size)')
    parser.add_argument('-V', '--version', dest='version', help='Version label of the file (A, B, C, ...)')
    parser.add_argument('--seed', type=int, help='Seed for a reproducible instance')
    parser.add_argument('--data-dir', default=DATA_DIR, help='Directory to write the instance to')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(levelname)s: %(message)s')

    try:
        league_size = args.league_size if args.league_size is not None else ask("league_size", int)
        num_leagues = args.num_leagues if args.num_leagues is not None else ask("num_leagues", int)
        num_clubs = args.num_clubs if args.num_clubs is not None else ask("num_clubs", int)
        version = args.version if args.version is not None else ask("version")
    except ValueError as e:
        logger.error(str(e))
        return 1

    rng = random.Random(args.seed)
    try:
        instance = generate(league_size, num_leagues, num_clubs, rng)
    except MLSPError as e:
        logger.error(str(e))
        return 1

    path = os.path.join(args.data_dir, instance_filename(league_size, num_leagues, num_clubs, version))
    write_instance(instance, path)
    print(f"Instance written to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
