"""
Data model of the Multi-League Sports Scheduling Problem.

Teams are numbered 0..num_teams-1. An Instance holds the league partition,
the club partition (with capacities) and the HAP matrix U, where U[h][r] is 1
when the team on HAP slot h plays at home in round r. A Solution holds the
assignment of teams to HAP slots found by an optimizer.
"""
from dataclasses import dataclass, field

from .errors import InputFormatError
from .hap_table import hap_problems
from .optimizer import SolveStatus


def capacity_bounds(size):
    """
    Range of admissible capacities for a club with `size` teams.

    The range is the one used by Li et al. (2022) "Multi-league sports
    scheduling with different league sizes".
    """
    lower = max(size // 2 - 2, 1)
    upper = min(size // 2 + 2, size)
    return lower, upper


@dataclass(frozen=True)
class Club:
    teams: tuple
    capacity: int

    @property
    def size(self):
        return len(self.teams)


@dataclass(frozen=True)
class Instance:
    """
    A complete MLSP instance.

    Args:
        league_size: number of teams in every league (even)
        leagues: one tuple of team ids per league
        clubs: tuple of Club objects
        U: league_size x num_rounds matrix of 0/1 values
    """
    league_size: int
    leagues: tuple
    clubs: tuple
    U: tuple
    num_rounds: int = field(init=False)

    def __post_init__(self):
        # normalise nested lists so the instance cannot be changed afterwards
        object.__setattr__(self, "leagues", tuple(tuple(l) for l in self.leagues))
        clubs = [c if isinstance(c, Club) else Club(*c) for c in self.clubs]
        object.__setattr__(self, "clubs", tuple(Club(tuple(c.teams), int(c.capacity)) for c in clubs))
        object.__setattr__(self, "U", tuple(tuple(int(v) for v in row) for row in self.U))
        object.__setattr__(self, "num_rounds", 2 * (self.league_size - 1))
        self._check_structure()

    @property
    def num_teams(self):
        return self.league_size * len(self.leagues)

    @property
    def num_leagues(self):
        return len(self.leagues)

    @property
    def num_clubs(self):
        return len(self.clubs)

    @property
    def teams(self):
        return range(self.num_teams)

    @property
    def rounds(self):
        return range(self.num_rounds)

    @property
    def haps(self):
        return range(self.league_size)

    def league_of(self, team):
        return self._league_index[team]

    def club_of(self, team):
        return self._club_index[team]

    def _check_structure(self):
        if self.league_size < 2 or self.league_size % 2:
            raise InputFormatError(f"League size must be even and at least 2, got {self.league_size}")
        if not self.leagues:
            raise InputFormatError("An instance needs at least one league")

        n = self.num_teams
        league_index = {}
        for l, league in enumerate(self.leagues):
            if len(league) != self.league_size:
                raise InputFormatError(
                    f"League {l + 1} has {len(league)} teams, expected {self.league_size}")
            for t in league:
                if not 0 <= t < n:
                    raise InputFormatError(f"Team {t + 1} of league {l + 1} is out of range")
                if t in league_index:
                    raise InputFormatError(f"Team {t + 1} appears in more than one league slot")
                league_index[t] = l

        club_index = {}
        for c, club in enumerate(self.clubs):
            if club.capacity < 0:
                raise InputFormatError(f"Club {c + 1} has a negative capacity")
            for t in club.teams:
                if not 0 <= t < n:
                    raise InputFormatError(f"Team {t + 1} of club {c + 1} is out of range")
                if t in club_index:
                    raise InputFormatError(f"Team {t + 1} appears in more than one club slot")
                club_index[t] = c
        if len(club_index) != n:
            missing = sorted(set(range(n)) - set(club_index))
            raise InputFormatError(f"Teams without a club: {[t + 1 for t in missing]}")

        if len(self.U) != self.league_size:
            raise InputFormatError(f"U has {len(self.U)} rows, expected {self.league_size}")
        for h, row in enumerate(self.U):
            if len(row) != self.num_rounds:
                raise InputFormatError(
                    f"HAP {h + 1} has {len(row)} rounds, expected {self.num_rounds}")
            if any(v not in (0, 1) for v in row):
                raise InputFormatError(f"HAP {h + 1} contains values other than 0 and 1")
        problems = hap_problems(self.U, self.league_size)
        if problems:
            raise InputFormatError(f"U is not a HAPset: {problems[0]}")

        object.__setattr__(self, "_league_index", league_index)
        object.__setattr__(self, "_club_index", club_index)

    def invariant_violations(self):
        """
        List the generator invariants this instance breaks.

        Returns:
            list of human readable messages, empty for a valid instance
        """
        problems = []
        for c, club in enumerate(self.clubs):
            leagues = [self.league_of(t) for t in club.teams]
            if len(set(leagues)) != len(leagues):
                problems.append(f"club {c + 1} holds two teams of the same league")
            if not club.teams:
                problems.append(f"club {c + 1} is empty")
                continue
            lower, upper = capacity_bounds(club.size)
            if not lower <= club.capacity <= upper:
                problems.append(
                    f"club {c + 1} capacity {club.capacity} outside [{lower}, {upper}]")
        return problems

    def home_games(self, club, rnd, hap_of):
        """Number of home games club `club` hosts in round `rnd` for a team->HAP mapping"""
        return sum(self.U[hap_of[t]][rnd] for t in self.clubs[club].teams)


@dataclass(frozen=True)
class Solution:
    """
    Result of one solve.

    x[t][h] is 1 when team t plays HAP slot h, z[c][r] is the number of home
    games club c hosts above its capacity in round r.
    """
    x: tuple
    z: tuple
    objective: float
    running_time: float     # seconds
    status: object
    backend: str = ""

    @property
    def optimal(self):
        return self.status is SolveStatus.OPTIMAL

    @property
    def total_violations(self):
        return sum(sum(row) for row in self.z)

    def hap_of(self, team):
        return self.x[team].index(1)

    def assignment(self):
        """HAP slot of every team, in team order"""
        return [self.hap_of(t) for t in range(len(self.x))]
