from __future__ import annotations

from digitspin.modeling import extrude
from digitspin.outline import Outline
from digitspin.pairs import PairPolicy, PairTable, pair_keys
from digitspin.solid import Solid


def rect_outline(width: float, height: float, name: str | None = None) -> Outline:
    return Outline.from_points([(0.0, 0.0), (width, 0.0), (width, height), (0.0, height)], name=name)


def rect_solid(width: float, height: float, name: str | None = None) -> Solid:
    return extrude(rect_outline(width, height, name=name), center_origin=True)


def stub_table(count: int, policy: PairPolicy = PairPolicy.ALL_PAIRS) -> PairTable:
    """Pair table whose cells are the unintersected base solids; enough to drive the switcher."""

    sources = {index: rect_solid(10.0 + index, 20.0, name=str(index)) for index in range(count)}
    cells = {key: sources[key[0]] for key in pair_keys(list(sources), policy)}
    return PairTable(cells, policy=policy, indices=list(sources), sources=sources)
