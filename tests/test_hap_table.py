import pytest

from mlsp.config import SUPPORTED_LEAGUE_SIZES
from mlsp.errors import InputFormatError, UnsupportedLeagueSizeError
from mlsp.hap_table import HAPTable, hapset_filename, parse_hapset


@pytest.mark.parametrize("league_size", SUPPORTED_LEAGUE_SIZES)
def test_shipped_hapsets_are_complementary(hap_table, league_size):
    U = hap_table.lookup(league_size)
    num_rounds = 2 * (league_size - 1)
    assert len(U) == league_size
    assert all(len(row) == num_rounds for row in U)
    assert len(set(U)) == league_size
    for r in range(num_rounds):
        assert sum(U[h][r] for h in range(league_size)) == league_size // 2


def test_lookup_is_cached(hap_table):
    assert hap_table.lookup(6) is hap_table.lookup(6)


def test_unsupported_size(hap_table):
    assert 18 not in hap_table
    with pytest.raises(UnsupportedLeagueSizeError):
        hap_table.lookup(18)


def test_missing_file(tmp_path):
    table = HAPTable(directory=str(tmp_path))
    with pytest.raises(InputFormatError):
        table.lookup(4)


def test_custom_directory(tmp_path):
    (tmp_path / hapset_filename(4)).write_text("H H A A H H\nH A H A H A\nA H A H A H\nA A H H A A\n")
    U = HAPTable(directory=str(tmp_path)).lookup(4)
    assert U[0] == (1, 1, 0, 0, 1, 1)
    assert U[3] == (0, 0, 1, 1, 0, 0)


@pytest.mark.parametrize("text", [
    "H A H A H A\nH A A A H H\nA H H H A A\n",             # a row short
    "H A H A H A\nH A A A H H\nA H H H A A\nA H A H A X\n",  # bad token
    "H A H A H A\nH A H A H A\nA H A H A H\nA H A H A H\n",  # duplicate rows
    "H H H A H A\nH A A A H H\nA H H H A A\nA H A H A H\n",  # three home games in round 2
])
def test_malformed_hapsets(text):
    with pytest.raises(InputFormatError):
        parse_hapset(text, 4)
