from __future__ import annotations

import json

import pytest

from digitspin._config import DEFAULT_CONFIG, SpinSettings, load_settings
from digitspin.pairs import PairPolicy
from digitspin.phase import Spin


def test_missing_config_is_created_with_defaults(isolated_config):
    settings = load_settings()
    assert isolated_config.exists()
    assert json.loads(isolated_config.read_text()) == DEFAULT_CONFIG
    assert settings == SpinSettings()


def test_values_are_normalised(tmp_path):
    path = tmp_path / "digitspin.cfg"
    path.write_text(
        json.dumps(
            {
                "spin": "CCW",
                "step_deg": "1.5",
                "pair_policy": "adjacent",
                "advance": "Random",
                "rotate_from": 3,
                "rotate_to": 4,
            }
        )
    )
    settings = load_settings(path)
    assert settings.spin is Spin.COUNTERCLOCKWISE
    assert settings.step_deg == 1.5
    assert settings.pair_policy is PairPolicy.CYCLIC
    assert settings.advance == "random"
    assert (settings.rotate_from, settings.rotate_to) == (3, 4)


def test_bad_values_fall_back_per_key(tmp_path):
    path = tmp_path / "digitspin.cfg"
    path.write_text(
        json.dumps(
            {"spin": "sideways", "step_deg": 120, "pair_policy": "cyclic", "rotate_from": -2, "rotate_to": True}
        )
    )
    settings = load_settings(path)
    assert settings.spin is Spin.CLOCKWISE
    assert settings.step_deg == 0.5
    assert settings.pair_policy is PairPolicy.CYCLIC
    assert (settings.rotate_from, settings.rotate_to) == (0, 1)


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
def test_unreadable_config_uses_defaults(tmp_path, content):
    path = tmp_path / "digitspin.cfg"
    path.write_text(content)
    assert load_settings(path) == SpinSettings()


def test_settings_reject_out_of_range_values():
    with pytest.raises(ValueError):
        SpinSettings(step_deg=90.0)
    with pytest.raises(ValueError):
        SpinSettings(advance="shuffle")


def test_to_dict_round_trips_through_the_loader(tmp_path):
    path = tmp_path / "digitspin.cfg"
    settings = SpinSettings(spin=Spin.COUNTERCLOCKWISE, step_deg=2.0, pair_policy=PairPolicy.CYCLIC)
    path.write_text(json.dumps(settings.to_dict()))
    assert load_settings(path) == settings
