"""
MILP for the Multi-League Sports Scheduling problem (Davari et al. 2020).

Variables:
    x[t][h] binary, team t plays HAP slot h of its league
    z[c][r] integer >= 0, home games club c hosts above its capacity in round r

Objective: minimize the total number of violations sum(z[c][r]).

Constraints:
    C1 every HAP slot of a league goes to exactly one of its teams
    C2 every team gets exactly one HAP slot
    C3 z[c][r] >= (home games of club c in round r) - capacity[c]
"""
import logging
import time

from ..errors import SolverError
from ..instance import Solution
from ..optimizer import VarType
from ..solvers import optimizer_factory as default_factory

logger = logging.getLogger(__name__)


def x_name(t, h):
    return f"x_{t}_{h}"


def z_name(c, r):
    return f"z_{c}_{r}"


class ModelBuilder:
    """
    Builds the MLSP model on an optimizer session and turns the answer into a Solution.

    Args:
        instance: Instance to solve
        optimizer_factory: callable returning a fresh Optimizer session
    """

    def __init__(self, instance, optimizer_factory=None):
        self.instance = instance
        self.optimizer_factory = optimizer_factory or default_factory()

    def stats(self):
        inst = self.instance
        return {
            "x": inst.num_teams * inst.league_size,
            "z": inst.num_clubs * inst.num_rounds,
            "C1": inst.num_leagues * inst.league_size,
            "C2": inst.num_teams,
            "C3": inst.num_clubs * inst.num_rounds,
        }

    def build(self, optimizer):
        inst = self.instance

        for t in inst.teams:
            for h in inst.haps:
                optimizer.add_variable(x_name(t, h), VarType.BINARY)
        # lower bound 0 is the non-negativity constraint on z
        for c in range(inst.num_clubs):
            for r in inst.rounds:
                optimizer.add_variable(z_name(c, r), VarType.INTEGER, low=0)

        optimizer.minimize({z_name(c, r): 1 for c in range(inst.num_clubs) for r in inst.rounds})

        #C1: in a league only one team can take a certain HAP
        for l, league in enumerate(inst.leagues):
            for h in inst.haps:
                optimizer.add_constraint(
                    {x_name(t, h): 1 for t in league}, "==", 1, name=f"C1_{l}_{h}")

        #C2: each team takes exactly one HAP
        for t in inst.teams:
            optimizer.add_constraint(
                {x_name(t, h): 1 for h in inst.haps}, "==", 1, name=f"C2_{t}")

        #C3: z[c][r] - sum(U[h][r] x[t][h]) >= -capacity, decision variables on the lhs
        for c, club in enumerate(inst.clubs):
            for r in inst.rounds:
                coefficients = {z_name(c, r): 1}
                for t in club.teams:
                    for h in inst.haps:
                        if inst.U[h][r]:
                            coefficients[x_name(t, h)] = -inst.U[h][r]
                optimizer.add_constraint(coefficients, ">=", -club.capacity, name=f"C3_{c}_{r}")

    def solve(self, time_limit=None, cancel_token=None):
        """
        Build the model on a new optimizer session, solve it once and read the solution back.

        Args:
            time_limit: seconds, None to run to completion
            cancel_token: optional CancellationToken

        Returns:
            Solution

        Raises:
            SolverError: infeasible, unbounded, failed, cancelled or stopped without a solution
        """
        with self.optimizer_factory() as optimizer:
            backend = optimizer.name
            self.build(optimizer)
            logger.debug(f"Model size: {self.stats()}")

            start = time.time()
            result = optimizer.solve(time_limit=time_limit, cancel_token=cancel_token)
            elapsed = time.time() - start
            logger.info(f"{backend}: {result.status.value} in {elapsed:.2f} seconds")

            if not result.status.has_solution:
                raise SolverError(result.status, result.message, backend=backend)
            return self._extract(result, elapsed, backend)

    def _extract(self, result, elapsed, backend):
        inst = self.instance
        values = result.values

        def read(name):
            val = values.get(name)
            if val is None:
                raise SolverError(result.status, f"no value for {name}", backend=backend)
            return val

        x = tuple(
            tuple(1 if read(x_name(t, h)) > 0.5 else 0 for h in inst.haps)
            for t in inst.teams
        )
        z = tuple(
            tuple(int(round(read(z_name(c, r)))) for r in inst.rounds)
            for c in range(inst.num_clubs)
        )
        self._check_assignment(x, result.status, backend)

        objective = result.objective
        if objective is None:
            objective = sum(sum(row) for row in z)
        return Solution(
            x=x, z=z, objective=objective, running_time=elapsed,
            status=result.status, backend=backend,
        )

    def _check_assignment(self, x, status, backend):
        inst = self.instance
        for t in inst.teams:
            if sum(x[t]) != 1:
                raise SolverError(status, f"team {t + 1} has {sum(x[t])} HAPs", backend=backend)
        for l, league in enumerate(inst.leagues):
            used = sorted(x[t].index(1) for t in league)
            if used != list(inst.haps):
                raise SolverError(status, f"league {l + 1} does not use every HAP once", backend=backend)


def solve_instance(instance, solver_choice="PULP_CBC_CMD", time_limit=None, cancel_token=None):
    """Solve an instance with the named backend"""
    builder = ModelBuilder(instance, default_factory(solver_choice))
    return builder.solve(time_limit=time_limit, cancel_token=cancel_token)
