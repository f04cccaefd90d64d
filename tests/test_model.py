import dataclasses

import pytest

from helpers import brute_force_optimum, generate_valid, violations
from mlsp.errors import SolverError
from mlsp.instance import Club, Instance
from mlsp.MILP.mlsp_model import ModelBuilder, solve_instance, x_name, z_name
from mlsp.optimizer import CancellationToken, Optimizer, SolveResult, SolveStatus, VarType

BACKENDS = ["PULP_CBC_CMD", "Z3"]


class RecordingOptimizer(Optimizer):
    """Keeps the model and answers with a fixed SolveResult"""
    name = "recording"

    def __init__(self, result=None, error=None):
        super().__init__()
        self.bounds = {}
        self.objective = None
        self.constraints = []
        self.result = result
        self.error = error
        self.closed = False

    def _add_variable(self, name, var_type, low, up):
        self.bounds[name] = (low, up)

    def _minimize(self, coefficients):
        self.objective = dict(coefficients)

    def _add_constraint(self, coefficients, sense, rhs, name):
        self.constraints.append((name, dict(coefficients), sense, rhs))

    def solve(self, time_limit=None, cancel_token=None):
        if self.error is not None:
            raise self.error
        return self.result

    def close(self):
        self.closed = True


def check_solution(instance, solution):
    # every league uses each HAP exactly once
    for league in instance.leagues:
        assert sorted(solution.hap_of(t) for t in league) == list(instance.haps)
    for t in instance.teams:
        assert sum(solution.x[t]) == 1
    # z is exactly the excess of home games over capacity
    hap_of = solution.assignment()
    for c, club in enumerate(instance.clubs):
        for r in instance.rounds:
            games = instance.home_games(c, r, hap_of)
            assert solution.z[c][r] == max(0, games - club.capacity)
    assert solution.objective == pytest.approx(solution.total_violations)
    assert solution.total_violations == violations(instance, hap_of)


@pytest.mark.parametrize("solver_choice", BACKENDS)
def test_scenario_matches_brute_force(scenario, solver_choice):
    solution = solve_instance(scenario, solver_choice)
    assert solution.optimal
    check_solution(scenario, solution)
    assert solution.objective == pytest.approx(brute_force_optimum(scenario))
    # HAP 0 and HAP 3 never play at home together, so they can share a club
    assert solution.objective == pytest.approx(0)


@pytest.mark.parametrize("solver_choice", BACKENDS)
def test_zero_capacity_counts_every_home_game(scenario, solver_choice):
    closed = Instance(
        league_size=4,
        leagues=scenario.leagues,
        clubs=[Club(club.teams, 0) for club in scenario.clubs],
        U=scenario.U,
    )
    solution = solve_instance(closed, solver_choice)
    check_solution(closed, solution)
    # two home games in each of the six rounds
    assert solution.objective == pytest.approx(12)


@pytest.mark.parametrize("seed", [1, 20, 300])
@pytest.mark.parametrize("solver_choice", BACKENDS)
def test_generated_instances_are_solved_to_optimality(seed, solver_choice):
    instance = generate_valid(4, 2, 5, seed)
    solution = solve_instance(instance, solver_choice)
    assert solution.optimal
    check_solution(instance, solution)
    assert solution.objective == pytest.approx(brute_force_optimum(instance))


@pytest.mark.parametrize("params", [(6, 3, 7), (8, 2, 9)])
def test_larger_generated_instances_are_feasible(params):
    instance = generate_valid(*params, seed=5)
    solution = solve_instance(instance, "PULP_CBC_CMD")
    check_solution(instance, solution)
    assert solution.backend == "PULP_CBC_CMD"
    assert solution.running_time >= 0


def test_build_creates_the_formulation(scenario):
    optimizer = RecordingOptimizer()
    builder = ModelBuilder(scenario, lambda: optimizer)
    builder.build(optimizer)

    stats = builder.stats()
    assert stats == {"x": 16, "z": 12, "C1": 4, "C2": 4, "C3": 12}
    assert optimizer.var_types[x_name(0, 0)] == VarType.BINARY
    assert optimizer.var_types[z_name(1, 5)] == VarType.INTEGER
    assert optimizer.bounds[z_name(1, 5)] == (0, None)
    assert optimizer.objective == {z_name(c, r): 1 for c in range(2) for r in range(6)}

    by_name = {name: (coefs, sense, rhs) for name, coefs, sense, rhs in optimizer.constraints}
    assert len(by_name) == stats["C1"] + stats["C2"] + stats["C3"]
    assert by_name["C1_0_2"] == ({x_name(t, 2): 1 for t in range(4)}, "==", 1)
    assert by_name["C2_3"] == ({x_name(3, h): 1 for h in range(4)}, "==", 1)
    # round 0: HAPs 0 and 1 are at home
    assert by_name["C3_0_0"] == (
        {z_name(0, 0): 1, x_name(0, 0): -1, x_name(0, 1): -1, x_name(1, 0): -1, x_name(1, 1): -1},
        ">=", -1)


@pytest.mark.parametrize("status", [
    SolveStatus.INFEASIBLE, SolveStatus.UNBOUNDED, SolveStatus.ERROR,
    SolveStatus.TIME_LIMIT, SolveStatus.CANCELLED,
])
def test_failed_solves_raise_and_release_the_session(scenario, status):
    optimizer = RecordingOptimizer(result=SolveResult(status, message="nope"))
    with pytest.raises(SolverError) as info:
        ModelBuilder(scenario, lambda: optimizer).solve()
    assert info.value.status == status
    assert info.value.backend == "recording"
    assert optimizer.closed


def test_session_is_released_when_the_solver_crashes(scenario):
    optimizer = RecordingOptimizer(error=RuntimeError("native crash"))
    with pytest.raises(RuntimeError):
        ModelBuilder(scenario, lambda: optimizer).solve()
    assert optimizer.closed


def test_inconsistent_assignment_is_rejected(scenario):
    # every team on HAP 0 breaks C1
    values = {x_name(t, h): float(h == 0) for t in range(4) for h in range(4)}
    values.update({z_name(c, r): 0.0 for c in range(2) for r in range(6)})
    optimizer = RecordingOptimizer(result=SolveResult(SolveStatus.OPTIMAL, 0.0, values))
    with pytest.raises(SolverError, match="does not use every HAP"):
        ModelBuilder(scenario, lambda: optimizer).solve()
    assert optimizer.closed


def test_missing_values_are_rejected(scenario):
    optimizer = RecordingOptimizer(result=SolveResult(SolveStatus.OPTIMAL, 0.0, {}))
    with pytest.raises(SolverError, match="no value"):
        ModelBuilder(scenario, lambda: optimizer).solve()


@pytest.mark.parametrize("solver_choice", BACKENDS)
def test_cancelled_token_stops_the_solve(scenario, solver_choice):
    token = CancellationToken()
    token.cancel()
    with pytest.raises(SolverError) as info:
        solve_instance(scenario, solver_choice, cancel_token=token)
    assert info.value.status == SolveStatus.CANCELLED


def test_every_solve_returns_a_new_frozen_solution(scenario):
    builder = ModelBuilder(scenario)
    first = builder.solve(time_limit=60)
    second = builder.solve(time_limit=60)
    assert first is not second
    assert first.objective == second.objective
    with pytest.raises(dataclasses.FrozenInstanceError):
        first.objective = 5
