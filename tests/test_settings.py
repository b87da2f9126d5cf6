"""Tests for fieldnav configuration and settings.

Covers default construction, serialisation round-trip, immutability,
validation, and the derived finder/grid helpers.
"""

from __future__ import annotations

import math
from dataclasses import fields as dc_fields

import pytest

from fieldnav.config.settings import Settings, get_default_settings
from fieldnav.errors import FieldnavError, NoFindersError
from fieldnav.models.search import FinderType, GridAlgorithm, Heuristic


class TestGetDefaultSettings:
    """Tests for the get_default_settings factory function."""

    def test_returns_settings_instance(self) -> None:
        """get_default_settings must return a Settings object."""
        assert isinstance(get_default_settings(), Settings)

    def test_no_field_size(self) -> None:
        """Field bounds come from the map, so settings carry none."""
        names = {f.name for f in dc_fields(Settings)}
        assert "field_width" not in names
        assert "field_height" not in names

    def test_robot_defaults(self) -> None:
        """The default robot footprint is 18 x 18."""
        s = get_default_settings()
        assert s.robot_width == 18.0
        assert s.robot_height == 18.0

    def test_resolution_default(self) -> None:
        """Default resolution is 2 cells per unit."""
        assert get_default_settings().resolution == 2

    def test_all_finders_enabled_by_default(self) -> None:
        """Every tier is on by default."""
        s = get_default_settings()
        assert s.use_lightning is True
        assert s.use_fast is True
        assert s.use_grid is True

    def test_grid_defaults(self) -> None:
        """A* with Manhattan, diagonals and corner protection by default."""
        s = get_default_settings()
        assert s.grid_algorithm == "a_star"
        assert s.heuristic == "manhattan"
        assert s.allow_diagonal is True
        assert s.dont_cross_corners is True
        assert s.orthogonal_cost == 1.0
        assert s.diagonal_cost == pytest.approx(math.sqrt(2.0))

    def test_path_samples_default(self) -> None:
        """Default path_samples is 50."""
        assert get_default_settings().path_samples == 50


class TestSettingsToDict:
    """Tests for Settings.to_dict serialisation."""

    def test_contains_all_fields(self) -> None:
        """The dict must have one key per Settings field."""
        d = get_default_settings().to_dict()
        assert set(d.keys()) == {f.name for f in dc_fields(Settings)}

    def test_values_match_attributes(self) -> None:
        """Dict values must equal the corresponding attributes."""
        s = get_default_settings()
        d = s.to_dict()
        assert d["resolution"] == s.resolution
        assert d["grid_algorithm"] == s.grid_algorithm
        assert d["use_grid"] == s.use_grid


class TestSettingsFromDict:
    """Tests for Settings.from_dict deserialisation."""

    def test_round_trip(self) -> None:
        """from_dict(to_dict()) produces an identical Settings."""
        original = Settings(resolution=4, grid_algorithm="theta_star")
        assert Settings.from_dict(original.to_dict()) == original

    def test_partial_dict_fills_defaults(self) -> None:
        """A dict with only some keys produces defaults for the rest."""
        s = Settings.from_dict({"resolution": 3})
        assert s.resolution == 3
        assert s.path_samples == 50  # default

    def test_field_size_keys_ignored(self) -> None:
        """Field size keys from older config files are discarded."""
        s = Settings.from_dict({"field_width": 10.0, "field_height": 10.0})
        assert s == Settings()

    def test_ignores_unknown_keys(self) -> None:
        """Unknown keys in the dict are silently discarded."""
        s = Settings.from_dict({"resolution": 5, "wheel_count": 4})
        assert s.resolution == 5
        assert not hasattr(s, "wheel_count")


class TestSettingsFrozen:
    """Tests for the immutability guarantee of Settings."""

    def test_cannot_set_attribute(self) -> None:
        """Assigning to any field must raise an error."""
        s = get_default_settings()
        with pytest.raises(AttributeError):
            s.resolution = 8  # type: ignore[misc]


class TestSettingsValidation:
    """Tests for __post_init__ validation."""

    @pytest.mark.parametrize(
        "name",
        ["resolution", "path_samples"],
    )
    def test_non_positive_values_rejected(self, name: str) -> None:
        """Resolution and samples must be positive."""
        with pytest.raises(ValueError, match=name):
            Settings(**{name: 0})

    @pytest.mark.parametrize("name", ["robot_width", "robot_height", "search_margin"])
    def test_negative_values_rejected(self, name: str) -> None:
        """Footprint and margin may be zero but not negative."""
        with pytest.raises(ValueError, match=name):
            Settings(**{name: -1.0})

    def test_zero_footprint_allowed(self) -> None:
        """A point robot is a valid configuration."""
        s = Settings(robot_width=0.0, robot_height=0.0)
        assert s.robot_half_diagonal == 0.0

    def test_non_positive_cost_rejected(self) -> None:
        """Grid move costs must be positive."""
        with pytest.raises(ValueError):
            Settings(diagonal_cost=0.0)

    def test_unknown_algorithm_rejected(self) -> None:
        """An algorithm with no implementation fails at construction."""
        with pytest.raises(ValueError):
            Settings(grid_algorithm="dijkstra_plus")

    def test_unknown_heuristic_rejected(self) -> None:
        """An unknown heuristic fails at construction."""
        with pytest.raises(ValueError):
            Settings(heuristic="telepathy")

    def test_all_finders_disabled_rejected(self) -> None:
        """Disabling every tier raises NoFindersError."""
        with pytest.raises(NoFindersError):
            Settings(use_lightning=False, use_fast=False, use_grid=False)

    def test_no_finders_error_is_value_error(self) -> None:
        """NoFindersError is both a FieldnavError and a ValueError."""
        with pytest.raises(ValueError):
            Settings(use_lightning=False, use_fast=False, use_grid=False)
        assert issubclass(NoFindersError, FieldnavError)

    @pytest.mark.parametrize(
        ("lightning", "fast", "grid"),
        [(True, False, False), (False, True, False), (False, False, True)],
    )
    def test_single_finder_is_enough(
        self, lightning: bool, fast: bool, grid: bool
    ) -> None:
        """Any one enabled tier is a valid configuration."""
        s = Settings(use_lightning=lightning, use_fast=fast, use_grid=grid)
        assert len(s.enabled_finders()) == 1


class TestSettingsDerived:
    """Tests for the derived helpers."""

    def test_robot_half_sizes(self) -> None:
        """Half sizes and half-diagonal follow from the footprint."""
        s = Settings(robot_width=6.0, robot_height=8.0)
        assert s.robot_half_width == 3.0
        assert s.robot_half_height == 4.0
        assert s.robot_half_diagonal == pytest.approx(5.0)

    def test_enabled_finders_order(self) -> None:
        """Tiers are listed cheapest first."""
        assert get_default_settings().enabled_finders() == [
            FinderType.LIGHTNING,
            FinderType.CORRIDOR,
            FinderType.GRID,
        ]

    def test_enabled_finders_skips_disabled(self) -> None:
        """Disabled tiers are left out without changing the order."""
        s = Settings(use_fast=False)
        assert s.enabled_finders() == [FinderType.LIGHTNING, FinderType.GRID]

    def test_algorithm(self) -> None:
        """algorithm() converts the configured name."""
        assert Settings(grid_algorithm="theta_star").algorithm() is GridAlgorithm.THETA_STAR

    def test_finder_options(self) -> None:
        """finder_options() bundles the grid movement rules."""
        s = Settings(heuristic="octile", allow_diagonal=False, orthogonal_cost=2.0)
        options = s.finder_options()
        assert options.heuristic is Heuristic.OCTILE
        assert options.allow_diagonal is False
        assert options.orthogonal_cost == 2.0
