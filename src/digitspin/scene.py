"""Wire outlines, extrusion, the pair table and the switcher together."""

from __future__ import annotations

import random
from typing import Sequence

from digitspin._config import SpinSettings
from digitspin.digits import digit_outlines
from digitspin.modeling.csg import BooleanBackend
from digitspin.modeling.extrude import HoleMode, extrude
from digitspin.outline import Outline
from digitspin.pairs import CancelHook, PairTable, ProgressHook, build_pair_table
from digitspin.solid import Solid
from digitspin.switcher import DisplaySwitcher, advance_rule
from digitspin.validation import validate_outline_count


def build_solids(
    outlines: Sequence[Outline],
    holes: HoleMode = "cap",
    backend: BooleanBackend = "manifold",
) -> list[Solid | None]:
    """Extrude every outline centred on its own origin; degenerate ones map to ``None``."""

    validate_outline_count(outlines)
    return [extrude(outline, center_origin=True, holes=holes, backend=backend) for outline in outlines]


def build_table(
    settings: SpinSettings,
    outlines: Sequence[Outline] | None = None,
    holes: HoleMode = "cap",
    backend: BooleanBackend = "manifold",
    workers: int = 1,
    progress: ProgressHook | None = None,
    should_cancel: CancelHook | None = None,
) -> PairTable:
    solids = build_solids(outlines if outlines is not None else digit_outlines(), holes=holes, backend=backend)
    return build_pair_table(
        solids,
        policy=settings.pair_policy,
        spin=settings.spin,
        backend=backend,
        workers=workers,
        progress=progress,
        should_cancel=should_cancel,
    )


def build_switcher(
    table: PairTable,
    settings: SpinSettings,
    rng: random.Random | None = None,
) -> DisplaySwitcher:
    return DisplaySwitcher(
        table,
        spin=settings.spin,
        step_deg=settings.step_deg,
        rotate_from=settings.rotate_from,
        rotate_to=settings.rotate_to,
        advance=advance_rule(settings.advance),
        rng=rng,
    )


__all__ = ["build_solids", "build_table", "build_switcher"]
