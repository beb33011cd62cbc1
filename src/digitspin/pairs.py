from __future__ import annotations

import enum
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterator, Mapping, Sequence

from digitspin.modeling.csg import BooleanBackend, BooleanOp, evaluate
from digitspin.phase import Spin
from digitspin.solid import Solid
from digitspin.validation import ValidationError

PairKey = tuple[int, int]
ProgressHook = Callable[[int, int], None]
CancelHook = Callable[[], bool]


class BuildCancelled(RuntimeError):
    """Raised when a pair-table build is cancelled through its hook."""


class PairPolicy(enum.Enum):
    ALL_PAIRS = "all-pairs"
    CYCLIC = "cyclic"

    @classmethod
    def from_name(cls, name: str) -> "PairPolicy":
        key = name.strip().lower().replace("_", "-").replace(" ", "-")
        aliases = {
            "all": cls.ALL_PAIRS,
            "all-pairs": cls.ALL_PAIRS,
            "allpairs": cls.ALL_PAIRS,
            "cross": cls.ALL_PAIRS,
            "cyclic": cls.CYCLIC,
            "cyclic-adjacent": cls.CYCLIC,
            "adjacent": cls.CYCLIC,
        }
        if key not in aliases:
            raise ValueError(f"Unknown pair policy '{name}'.")
        return aliases[key]


@dataclass(frozen=True)
class PairStats:
    row: int
    col: int
    base_faces: int
    partner_faces: int
    result_faces: int


class PairTable(Mapping[PairKey, Solid]):
    """Read-only ``(row, col) -> Solid`` table keyed by original outline indices."""

    def __init__(
        self,
        cells: Mapping[PairKey, Solid],
        policy: PairPolicy,
        indices: Sequence[int],
        sources: Mapping[int, Solid] | None = None,
    ) -> None:
        self._cells = dict(cells)
        self.policy = policy
        self.indices: tuple[int, ...] = tuple(sorted(indices))
        self._sources = dict(sources or {})

    def __getitem__(self, key: PairKey) -> Solid:
        return self._cells[key]

    def __iter__(self) -> Iterator[PairKey]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    @property
    def rows(self) -> tuple[int, ...]:
        return tuple(sorted({row for row, _ in self._cells}))

    def partners(self, row: int) -> list[int]:
        return sorted(col for r, col in self._cells if r == row)

    def next_index(self, index: int) -> int:
        """Next valid outline index after ``index``, wrapping around."""

        for candidate in self.indices:
            if candidate > index:
                return candidate
        return self.indices[0]

    def source(self, index: int) -> Solid:
        return self._sources[index]

    def stats(self) -> list[PairStats]:
        rows: list[PairStats] = []
        for (row, col), solid in sorted(self._cells.items()):
            base = self._sources.get(row)
            partner = self._sources.get(col)
            rows.append(
                PairStats(
                    row=row,
                    col=col,
                    base_faces=base.n_faces if base is not None else 0,
                    partner_faces=partner.n_faces if partner is not None else 0,
                    result_faces=solid.n_faces,
                )
            )
        return rows


def rotate90(solid: Solid, spin: Spin = Spin.CLOCKWISE) -> Solid:
    """Quarter-turn a copy about the vertical axis and bake the rotation in."""

    return solid.rotated(spin.intersection_angle).frozen()


def pair_keys(indices: Sequence[int], policy: PairPolicy) -> list[PairKey]:
    ordered = sorted(indices)
    if policy is PairPolicy.ALL_PAIRS:
        return [(i, j) for i in ordered for j in ordered]
    return [(i, ordered[(pos + 1) % len(ordered)]) for pos, i in enumerate(ordered)]


def build_pair_table(
    solids: Sequence[Solid | None],
    policy: PairPolicy = PairPolicy.ALL_PAIRS,
    spin: Spin = Spin.CLOCKWISE,
    operator: BooleanOp = BooleanOp.INTERSECT,
    backend: BooleanBackend = "manifold",
    tolerance: float = 1e-6,
    workers: int = 1,
    progress: ProgressHook | None = None,
    should_cancel: CancelHook | None = None,
) -> PairTable:
    """Evaluate every (base, rotated partner) cell for the chosen policy.

    ``solids`` runs parallel to the outline list; ``None`` entries are
    skipped and the remaining solids keep their original indices.
    """

    valid = {index: solid for index, solid in enumerate(solids) if solid is not None}
    if not valid:
        raise ValidationError("No valid solids to build a pair table from.")

    rotated = {index: rotate90(solid, spin) for index, solid in valid.items()}
    keys = pair_keys(list(valid), policy)
    total = len(keys)

    def cell(key: PairKey) -> Solid:
        if should_cancel is not None and should_cancel():
            raise BuildCancelled(f"Pair table build cancelled before cell {key}.")
        row, col = key
        return evaluate(valid[row], rotated[col], operator, backend=backend, tolerance=tolerance)

    cells: dict[PairKey, Solid] = {}
    if workers <= 1:
        for done, key in enumerate(keys, start=1):
            cells[key] = cell(key)
            if progress is not None:
                progress(done, total)
    else:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="digitspin-pairs") as pool:
            futures = {key: pool.submit(cell, key) for key in keys}
            try:
                for done, key in enumerate(keys, start=1):
                    cells[key] = futures[key].result()
                    if progress is not None:
                        progress(done, total)
            except BaseException:
                for future in futures.values():
                    future.cancel()
                raise

    return PairTable(cells, policy=policy, indices=list(valid), sources=valid)


__all__ = [
    "BuildCancelled",
    "PairPolicy",
    "PairStats",
    "PairTable",
    "PairKey",
    "rotate90",
    "pair_keys",
    "build_pair_table",
]
