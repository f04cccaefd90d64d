import random

import pytest

from mlsp.hap_table import HAPTable
from mlsp.instance import Club, Instance


@pytest.fixture
def hap_table():
    return HAPTable()


@pytest.fixture
def rng():
    return random.Random(2024)


@pytest.fixture
def scenario(hap_table):
    """One league of four teams spread over two clubs of two, capacity 1"""
    return Instance(
        league_size=4,
        leagues=[(0, 1, 2, 3)],
        clubs=[Club((0, 1), 1), Club((2, 3), 1)],
        U=hap_table.lookup(4),
    )
