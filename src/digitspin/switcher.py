from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Callable

import numpy as np

from digitspin.modeling.transform import yaw_matrix
from digitspin.pairs import PairKey, PairTable
from digitspin.phase import Spin, forward_direction, has_crossed, quadrant_of
from digitspin.solid import Solid
from digitspin.validation import validate_start_pair, validate_step

AdvanceRule = Callable[[PairTable, int, int, random.Random], PairKey]


def sequential_advance(table: PairTable, rotate_from: int, rotate_to: int, rng: random.Random) -> PairKey:
    """The partner becomes the base; the next valid index becomes the partner."""

    new_from = rotate_to
    partners = table.partners(new_from)
    candidate = table.next_index(new_from)
    if candidate not in partners:
        candidate = partners[0]
    return new_from, candidate


def random_advance(table: PairTable, rotate_from: int, rotate_to: int, rng: random.Random) -> PairKey:
    """The partner becomes the base; the new partner is random but never the base itself."""

    new_from = rotate_to
    partners = table.partners(new_from)
    choices = [col for col in partners if col != new_from] or partners
    return new_from, rng.choice(choices)


ADVANCE_RULES: dict[str, AdvanceRule] = {
    "sequential": sequential_advance,
    "cyclic": sequential_advance,
    "random": random_advance,
}


def advance_rule(name: str) -> AdvanceRule:
    key = name.strip().lower()
    if key not in ADVANCE_RULES:
        raise ValueError(f"Unknown advance rule '{name}'. Choose one of: {', '.join(sorted(ADVANCE_RULES))}.")
    return ADVANCE_RULES[key]


@dataclass(frozen=True)
class SwapEvent:
    tick: int
    previous: PairKey
    current: PairKey
    quadrant: int


@dataclass(frozen=True, eq=False)
class DisplayFrame:
    pair: PairKey
    solid: Solid
    transform: np.ndarray


class DisplaySwitcher:
    """Advance the spin one tick at a time and swap solids every quarter turn.

    The displayed transform is rebuilt each tick from two integer counters:
    the outer spin ``ticks * step`` and the inner reset baseline
    ``swaps * spin.intersection_angle``. Their sum, ``accumulated_angle``,
    is the displayed solid's own yaw and falls back by a quarter turn on
    every swap, so the new solid continues exactly where the old one was.
    """

    def __init__(
        self,
        table: PairTable,
        spin: Spin = Spin.CLOCKWISE,
        step_deg: float = 0.5,
        rotate_from: int = 0,
        rotate_to: int = 1,
        advance: AdvanceRule = sequential_advance,
        rng: random.Random | None = None,
    ) -> None:
        validate_step(step_deg)
        validate_start_pair(table, rotate_from, rotate_to)
        self.table = table
        self.spin = spin
        self.step = math.radians(float(step_deg)) * spin.step_sign
        self.advance = advance
        self.rng = rng or random.Random()
        self.rotate_from = rotate_from
        self.rotate_to = rotate_to
        self.ticks = 0
        self.swaps = 0
        self.quadrant = self._current_quadrant()

    @property
    def pair(self) -> PairKey:
        return (self.rotate_from, self.rotate_to)

    @property
    def current_solid(self) -> Solid:
        return self.table[self.pair]

    @property
    def outer_angle(self) -> float:
        return self.ticks * self.step

    @property
    def baseline_angle(self) -> float:
        return self.swaps * self.spin.intersection_angle

    @property
    def accumulated_angle(self) -> float:
        return self.outer_angle + self.baseline_angle

    @property
    def display_transform(self) -> np.ndarray:
        return yaw_matrix(self.outer_angle) @ yaw_matrix(self.baseline_angle)

    def _current_quadrant(self) -> int:
        return quadrant_of(forward_direction(self.display_transform), self.spin)

    def tick(self) -> SwapEvent | None:
        self.ticks += 1
        quadrant = self._current_quadrant()
        if not has_crossed(quadrant, self.quadrant):
            return None

        previous = self.pair
        self.swaps += 1
        self.rotate_from, self.rotate_to = self.advance(self.table, self.rotate_from, self.rotate_to, self.rng)
        self.quadrant = self._current_quadrant()
        return SwapEvent(tick=self.ticks, previous=previous, current=self.pair, quadrant=quadrant)

    def run(self, ticks: int) -> list[SwapEvent]:
        events = []
        for _ in range(ticks):
            event = self.tick()
            if event is not None:
                events.append(event)
        return events

    def frame(self) -> DisplayFrame:
        return DisplayFrame(pair=self.pair, solid=self.current_solid, transform=self.display_transform)


__all__ = [
    "AdvanceRule",
    "ADVANCE_RULES",
    "advance_rule",
    "sequential_advance",
    "random_advance",
    "SwapEvent",
    "DisplayFrame",
    "DisplaySwitcher",
]
