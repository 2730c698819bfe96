"""Tests for analysis configuration."""

import pytest

from apidelta import AnalysisConfiguration


class TestAnalysisConfiguration:

    def test_defaults(self):
        config = AnalysisConfiguration()
        assert (config.low_threshold, config.medium_threshold,
                config.high_threshold, config.critical_threshold) == (1, 3, 10, 25)
        assert config.high_export_threshold == 2
        assert config.critical_export_threshold == 5
        assert config.elevate_isolated_entry_points is True
        assert config.max_depth is None

    def test_is_immutable(self):
        config = AnalysisConfiguration()
        with pytest.raises(AttributeError):
            config.low_threshold = 5

    @pytest.mark.parametrize("overrides", [
        {"low_threshold": 0},
        {"medium_threshold": 1},
        {"high_threshold": 30},
        {"high_export_threshold": 0},
        {"high_export_threshold": 5, "critical_export_threshold": 5},
        {"max_depth": 0},
    ])
    def test_invalid_values_raise(self, overrides):
        with pytest.raises(ValueError):
            AnalysisConfiguration(**overrides)

    def test_from_dict_ignores_unknown_keys(self):
        config = AnalysisConfiguration.from_dict({"max_depth": 3, "output_format": "json"})
        assert config.max_depth == 3
        assert config.low_threshold == 1
