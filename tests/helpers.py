import itertools
import random

from mlsp.errors import GenerationConstraintError
from mlsp.generator import generate


def violations(instance, hap_of):
    return sum(
        max(0, instance.home_games(c, r, hap_of) - club.capacity)
        for c, club in enumerate(instance.clubs)
        for r in instance.rounds
    )


def brute_force_optimum(instance):
    """Smallest total violation over every bijection of teams to HAPs in each league"""
    best = None
    per_league = [list(itertools.permutations(instance.haps)) for _ in instance.leagues]
    for perms in itertools.product(*per_league):
        hap_of = {}
        for league, perm in zip(instance.leagues, perms):
            for t, h in zip(league, perm):
                hap_of[t] = h
        total = violations(instance, hap_of)
        if best is None or total < best:
            best = total
    return best


def generate_valid(league_size, num_leagues, num_clubs, seed):
    """Generated instance for the first seed from `seed` on that leaves no club empty"""
    for s in range(seed, seed + 100):
        try:
            return generate(league_size, num_leagues, num_clubs, random.Random(s))
        except GenerationConstraintError:
            continue
    raise AssertionError("no valid instance in 100 seeds")
