from __future__ import annotations

import pytest

from digitspin.pairs import BuildCancelled, PairPolicy, build_pair_table, pair_keys
from digitspin.phase import Spin
from digitspin.validation import ValidationError
from tests.helpers import rect_solid


def _solids():
    return [rect_solid(10.0, 20.0, name="0"), None, rect_solid(12.0, 20.0, name="2")]


def test_pair_keys_per_policy():
    assert pair_keys([2, 0, 5], PairPolicy.ALL_PAIRS) == [
        (0, 0), (0, 2), (0, 5), (2, 0), (2, 2), (2, 5), (5, 0), (5, 2), (5, 5),
    ]
    assert pair_keys([2, 0, 5], PairPolicy.CYCLIC) == [(0, 2), (2, 5), (5, 0)]


def test_all_pairs_table_skips_missing_solids_without_reindexing():
    table = build_pair_table(_solids(), PairPolicy.ALL_PAIRS)
    assert set(table) == {(0, 0), (0, 2), (2, 0), (2, 2)}
    assert table.indices == (0, 2)
    assert table.rows == (0, 2)
    assert table.partners(2) == [0, 2]
    assert table.next_index(0) == 2
    assert table.next_index(2) == 0
    assert table.source(2).name == "2"


def test_cyclic_table_pairs_each_index_with_the_next():
    table = build_pair_table(_solids(), PairPolicy.CYCLIC)
    assert sorted(table) == [(0, 2), (2, 0)]
    assert table.policy is PairPolicy.CYCLIC


def test_cells_are_watertight_intersections():
    table = build_pair_table(_solids(), PairPolicy.ALL_PAIRS, spin=Spin.COUNTERCLOCKWISE)
    # 10 x 20 x 10 box against the 12 x 20 x 12 box turned a quarter: 10 x 20 x 10 survives.
    cell = table[(0, 2)]
    assert cell.is_watertight
    assert cell.volume == pytest.approx(10.0 * 20.0 * 10.0, rel=1e-5)
    assert cell.name == "0&2"


def test_progress_hook_reports_every_cell():
    calls = []
    build_pair_table(_solids(), progress=lambda done, total: calls.append((done, total)))
    assert calls == [(1, 4), (2, 4), (3, 4), (4, 4)]


def test_cancel_hook_stops_the_build():
    checks = []

    def should_cancel() -> bool:
        checks.append(True)
        return len(checks) > 1

    with pytest.raises(BuildCancelled):
        build_pair_table(_solids(), should_cancel=should_cancel)


def test_threaded_build_matches_serial():
    serial = build_pair_table(_solids())
    threaded = build_pair_table(_solids(), workers=2)
    assert list(serial) == list(threaded)
    for key in serial:
        assert threaded[key].volume == pytest.approx(serial[key].volume)


def test_stats_rows_line_up_with_cells():
    table = build_pair_table(_solids(), PairPolicy.CYCLIC)
    rows = table.stats()
    assert [(row.row, row.col) for row in rows] == [(0, 2), (2, 0)]
    assert rows[0].base_faces == table.source(0).n_faces
    assert rows[0].partner_faces == table.source(2).n_faces
    assert rows[0].result_faces == table[(0, 2)].n_faces


def test_no_valid_solids():
    with pytest.raises(ValidationError):
        build_pair_table([None, None])


@pytest.mark.parametrize(
    ("name", "policy"),
    [("all", PairPolicy.ALL_PAIRS), ("All_Pairs", PairPolicy.ALL_PAIRS), ("adjacent", PairPolicy.CYCLIC)],
)
def test_policy_aliases(name, policy):
    assert PairPolicy.from_name(name) is policy


def test_unknown_policy():
    with pytest.raises(ValueError):
        PairPolicy.from_name("diagonal")
