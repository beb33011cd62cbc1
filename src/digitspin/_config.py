from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Dict, TypeVar

from digitspin.pairs import PairPolicy
from digitspin.phase import Spin
from digitspin.switcher import ADVANCE_RULES

CONFIG_DIR = Path.home() / ".digitspin"
CONFIG_FILE = CONFIG_DIR / "digitspin.cfg"
DEFAULT_CONFIG = {
    "_comment": (
        "spin: clockwise|counterclockwise; step_deg: degrees per tick (0-90); "
        "pair_policy: all-pairs|cyclic; advance: sequential|random."
    ),
    "spin": "clockwise",
    "step_deg": 0.5,
    "pair_policy": "all-pairs",
    "advance": "sequential",
    "rotate_from": 0,
    "rotate_to": 1,
}

T = TypeVar("T")


@dataclass(frozen=True)
class SpinSettings:
    """Resolved animation settings from digitspin.cfg."""

    spin: Spin = Spin.CLOCKWISE
    step_deg: float = 0.5
    pair_policy: PairPolicy = PairPolicy.ALL_PAIRS
    advance: str = "sequential"
    rotate_from: int = 0
    rotate_to: int = 1

    def __post_init__(self) -> None:
        if not 0.0 < float(self.step_deg) < 90.0:
            raise ValueError(f"step_deg must be in (0, 90), got {self.step_deg}.")
        if self.advance not in ADVANCE_RULES:
            raise ValueError(f"Unknown advance rule '{self.advance}'.")

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["spin"] = self.spin.value
        data["pair_policy"] = self.pair_policy.value
        return data


def ensure_user_config(path: Path = CONFIG_FILE) -> None:
    """Ensure the config file exists with sane defaults."""

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        return

    if path.exists():
        return

    try:
        path.write_text(json.dumps(DEFAULT_CONFIG, indent=2) + "\n")
    except OSError:
        return


def _load_user_config(path: Path) -> Dict[str, Any]:
    ensure_user_config(path)
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError):
        return DEFAULT_CONFIG.copy()
    if not isinstance(data, dict):
        return DEFAULT_CONFIG.copy()
    return data


def _resolve(raw: Dict[str, Any], key: str, parse: Callable[[Any], T]) -> T:
    try:
        return parse(raw.get(key, DEFAULT_CONFIG[key]))
    except (TypeError, ValueError):
        return parse(DEFAULT_CONFIG[key])


def _parse_step(value: Any) -> float:
    step = float(value)
    if not 0.0 < step < 90.0:
        raise ValueError("step_deg out of range")
    return step


def _parse_choice(choices) -> Callable[[Any], str]:
    def parse(value: Any) -> str:
        key = str(value).strip().lower()
        if key not in choices:
            raise ValueError(f"unknown value {value!r}")
        return key

    return parse


def _parse_index(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("index must be an integer")
    index = int(value)
    if index < 0:
        raise ValueError("index must be non-negative")
    return index


def load_settings(path: Path | None = None) -> SpinSettings:
    """Return the configured settings, falling back to defaults per key."""

    raw = _load_user_config(path or CONFIG_FILE)
    return SpinSettings(
        spin=_resolve(raw, "spin", lambda v: Spin.from_name(str(v))),
        step_deg=_resolve(raw, "step_deg", _parse_step),
        pair_policy=_resolve(raw, "pair_policy", lambda v: PairPolicy.from_name(str(v))),
        advance=_resolve(raw, "advance", _parse_choice(ADVANCE_RULES)),
        rotate_from=_resolve(raw, "rotate_from", _parse_index),
        rotate_to=_resolve(raw, "rotate_to", _parse_index),
    )
