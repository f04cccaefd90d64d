"""
Multi-League Sports Scheduling Problem: random instance generation and a MILP
that assigns home-away patterns to teams while respecting club capacities.
"""
from .errors import (
    GenerationConstraintError,
    InputFormatError,
    MLSPError,
    SolverError,
    UnsupportedLeagueSizeError,
)
from .generator import generate
from .hap_table import HAPTable
from .instance import Club, Instance, Solution, capacity_bounds
from .instance_io import read_instance, write_instance, write_solution
from .MILP.mlsp_model import ModelBuilder, solve_instance
from .optimizer import CancellationToken, Optimizer, SolveResult, SolveStatus, VarType

__version__ = "0.1.0"
