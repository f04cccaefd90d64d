"""
Reading and writing MLSP instances, solution reports and json summaries.

Instance file (tokens separated by whitespace, team ids 1-indexed):

    numTeams numLeagues numClubs leagueSize

    clubSize capacity team_id ...          one line per club

    leagueIndex team_id ...                one line per league

    U[h][0] ... U[h][numRounds-1]          one line per HAP
"""
import json
import logging
import os

from .config import RESULTS_DIR
from .errors import InputFormatError
from .instance import Club, Instance

logger = logging.getLogger(__name__)


class _Tokens:
    """Sequential reader over the whitespace separated tokens of a file"""

    def __init__(self, text, source):
        self.tokens = text.split()
        self.pos = 0
        self.source = source

    def next_int(self, what):
        if self.pos >= len(self.tokens):
            raise InputFormatError(f"{self.source}: unexpected end of file while reading {what}")
        token = self.tokens[self.pos]
        self.pos += 1
        try:
            return int(token)
        except ValueError:
            raise InputFormatError(f"{self.source}: expected an integer for {what}, found {token!r}") from None

    def finish(self):
        if self.pos != len(self.tokens):
            raise InputFormatError(
                f"{self.source}: {len(self.tokens) - self.pos} unexpected tokens after the HAPset")


def parse_instance(text, source="<string>"):
    """
    Build an Instance from the content of an instance file.

    Raises:
        InputFormatError: the content does not describe a consistent instance
    """
    tokens = _Tokens(text, source)
    num_teams = tokens.next_int("the number of teams")
    num_leagues = tokens.next_int("the number of leagues")
    num_clubs = tokens.next_int("the number of clubs")
    league_size = tokens.next_int("the league size")
    if league_size < 2 or num_leagues < 1 or num_clubs < 1:
        raise InputFormatError(f"{source}: invalid header {num_teams} {num_leagues} {num_clubs} {league_size}")
    if num_teams != league_size * num_leagues:
        raise InputFormatError(
            f"{source}: {num_teams} teams do not fill {num_leagues} leagues of {league_size}")
    num_rounds = 2 * (league_size - 1)

    # the numbering of teams is shifted to 0..numTeams-1
    clubs = []
    for c in range(num_clubs):
        size = tokens.next_int(f"the size of club {c + 1}")
        if size < 0:
            raise InputFormatError(f"{source}: club {c + 1} has a negative size")
        capacity = tokens.next_int(f"the capacity of club {c + 1}")
        teams = tuple(tokens.next_int(f"a team of club {c + 1}") - 1 for _ in range(size))
        clubs.append(Club(teams, capacity))

    leagues = []
    for l in range(num_leagues):
        tokens.next_int(f"the number of league {l + 1}")      # only there for readability
        leagues.append(tuple(tokens.next_int(f"a team of league {l + 1}") - 1 for _ in range(league_size)))

    U = []
    for h in range(league_size):
        U.append(tuple(tokens.next_int(f"U[{h + 1}]") for _ in range(num_rounds)))
    tokens.finish()

    try:
        return Instance(league_size=league_size, leagues=leagues, clubs=clubs, U=U)
    except InputFormatError as e:
        raise InputFormatError(f"{source}: {e}") from e


def format_instance(instance):
    lines = ["\t".join(str(v) for v in (
        instance.num_teams, instance.num_leagues, instance.num_clubs, instance.league_size))]
    lines.append("")
    for club in instance.clubs:
        lines.append("\t".join(str(v) for v in [club.size, club.capacity] + [t + 1 for t in club.teams]))
    lines.append("")
    for l, league in enumerate(instance.leagues):
        lines.append("\t".join(str(v) for v in [l + 1] + [t + 1 for t in league]))
    lines.append("")
    for row in instance.U:
        lines.append("\t".join(str(v) for v in row))
    return "\n".join(lines) + "\n"


def read_instance(path):
    try:
        with open(path, "r") as f:
            text = f.read()
    except OSError as e:
        raise InputFormatError(f"Cannot read instance file {path}: {e}") from e
    instance = parse_instance(text, source=path)
    logger.debug(f"Read {path}: {instance.num_teams} teams, {instance.num_clubs} clubs")
    return instance


def write_instance(instance, path):
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w") as f:
        f.write(format_instance(instance))
    logger.info(f"Instance written to {path}")


def format_solution(solution):
    """Plain text report: violations, running time, z matrix and x matrix"""
    lines = [
        f"The total number of violations according to the allocation below is equal to: {solution.objective}",
        "",
        f"The total running time is: {solution.running_time * 1000:.0f} milliseconds.",
        "",
        "The amount of violations per club in each round is: (clubs in rows, rounds in columns)",
    ]
    for row in solution.z:
        lines.append("\t".join(str(v) for v in row))
    lines.append("")
    lines.append("The allocation of teams to HAPs is as follows: (teams in rows, HAPs in columns)")
    for row in solution.x:
        lines.append("\t".join(str(v) for v in row))
    return "\n".join(lines) + "\n"


def write_solution(solution, path):
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w") as f:
        f.write(format_solution(solution))
    logger.info(f"Solution written to {path}")


def solution_to_result(solution):
    """Entry of the json summary for a successful solve"""
    return {
        "time": round(solution.running_time),
        "optimal": solution.optimal,
        "obj": int(round(solution.objective)),
        "sol": [h + 1 for h in solution.assignment()],
    }


def failed_result(running_time):
    return {
        "time": round(running_time),
        "optimal": False,
        "obj": None,
        "sol": [],
    }


def save_solution_to_json(name, results, output_dir=RESULTS_DIR, silent=False):
    """
    Save solver results to a json file, keeping the results already stored there.

    Args:
        name: instance name, the file is <output_dir>/<name>.json
        results: dictionary solver name -> result entry
        output_dir: the directory to save the json file
        silent: if True, don't log the save message at info level
    """
    os.makedirs(output_dir, exist_ok=True)
    filename = os.path.join(output_dir, f"{name}.json")

    # Load the existing results if the file exists
    existing_results = {}
    if os.path.exists(filename):
        try:
            with open(filename, "r") as f:
                existing_results = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Ignoring unreadable results file {filename}: {e}")
            existing_results = {}

    existing_results.update(results)

    with open(filename, "w") as f:
        json.dump(existing_results, f, indent=2)

    if silent:
        logger.debug(f"Results saved to {filename}")
    else:
        logger.info(f"Results saved to {filename}")
    return filename
