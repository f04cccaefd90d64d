"""
Random instance generator for the multi-league scheduling problem.

Assumptions, as in the MLSP literature:
- every league plays a double round robin tournament in the minimum number of
  consecutive rounds, so the number of rounds follows from the league size;
- every league has the same even number of teams;
- a club cannot hold two teams of the same league;
- the HAPsets are complementary and feasible, one per even league size.

Every random draw goes through the random.Random passed by the caller, so a
seeded generator always produces the same instance.
"""
import logging

from .config import MAX_CLUB_DRAWS
from .errors import GenerationConstraintError
from .hap_table import HAPTable
from .instance import Club, Instance, capacity_bounds

logger = logging.getLogger(__name__)


def generate_leagues(league_size, num_leagues, rng):
    """
    Randomly assign teams to leagues until all leagues are full.

    Each team draws a league uniformly and keeps drawing while the league it
    hit is already full.

    Returns:
        list of num_leagues lists of league_size team ids
    """
    num_teams = league_size * num_leagues
    leagues = [[] for _ in range(num_leagues)]

    for t in range(num_teams):
        while True:
            l = rng.randrange(num_leagues)
            # only accept a league that still has an open slot
            if len(leagues[l]) < league_size:
                leagues[l].append(t)
                break
    return leagues


def generate_clubs(leagues, num_clubs, rng, max_draws=MAX_CLUB_DRAWS):
    """
    Randomly assign teams to clubs so that no club holds two teams of one league.

    Leagues are processed one at a time. Every team of the league draws a club
    that this league has not used yet; after max_draws rejected draws the team
    picks uniformly among the free clubs instead.

    Returns:
        list of num_clubs lists of team ids
    """
    league_size = len(leagues[0]) if leagues else 0
    if num_clubs <= league_size:
        raise GenerationConstraintError(
            f"The number of clubs ({num_clubs}) must be greater than the league size ({league_size})")

    clubs = [[] for _ in range(num_clubs)]
    fallbacks = 0
    for league in leagues:
        used = [False] * num_clubs    # reset for every league
        for t in league:
            c = None
            for _ in range(max_draws):
                draw = rng.randrange(num_clubs)
                if not used[draw]:
                    c = draw
                    break
            if c is None:
                c = rng.choice([k for k in range(num_clubs) if not used[k]])
                fallbacks += 1
            clubs[c].append(t)
            used[c] = True

    if fallbacks:
        logger.debug(f"{fallbacks} teams were placed by the fallback after {max_draws} draws")
    return clubs


def sample_capacity(size, rng):
    """Uniform capacity in the admissible range for a club of `size` teams"""
    lower, upper = capacity_bounds(size)
    return rng.randint(lower, upper)


def generate(league_size, num_leagues, num_clubs, rng, hap_table=None, max_draws=MAX_CLUB_DRAWS):
    """
    Build a random, structurally valid MLSP instance.

    Args:
        league_size: teams per league, must have a HAPset
        num_leagues: number of leagues
        num_clubs: number of clubs, must exceed league_size
        rng: random.Random instance, the only source of randomness
        hap_table: HAPTable to take U from (default: the shipped HAPsets)
        max_draws: rejected club draws per team before the fallback

    Returns:
        Instance

    Raises:
        GenerationConstraintError: the parameters cannot give a valid instance
        UnsupportedLeagueSizeError: no HAPset for league_size
    """
    hap_table = hap_table or HAPTable()

    # all checks happen before the first draw
    U = hap_table.lookup(league_size)
    if num_leagues < 1:
        raise GenerationConstraintError(f"At least one league is needed, got {num_leagues}")
    if num_clubs <= league_size:
        raise GenerationConstraintError(
            f"The number of clubs ({num_clubs}) must be greater than the league size ({league_size})")

    leagues = generate_leagues(league_size, num_leagues, rng)
    club_teams = generate_clubs(leagues, num_clubs, rng, max_draws=max_draws)

    clubs = []
    for c, teams in enumerate(club_teams):
        if not teams:
            raise GenerationConstraintError(
                f"Club {c + 1} is empty, try again or reduce the number of clubs")
        clubs.append(Club(tuple(teams), sample_capacity(len(teams), rng)))

    instance = Instance(league_size=league_size, leagues=leagues, clubs=clubs, U=U)
    logger.info(
        f"Generated instance: {instance.num_teams} teams, {num_leagues} leagues, "
        f"{num_clubs} clubs, {instance.num_rounds} rounds")
    return instance
