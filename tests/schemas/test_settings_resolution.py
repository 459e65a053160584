"""Test resolve_settings() precedence and merging."""

import pytest
from pydantic import ValidationError

pytestmark = pytest.mark.unit

from maptheme.schemas import ResolverSettings, deep_merge, resolve_settings


class TestDeepMerge:

    def test_nested_merge(self):
        base = {"a": 1, "b": {"c": 2, "d": 3}}
        override = {"b": {"d": 4, "e": 5}, "f": 6}
        assert deep_merge(base, override) == {"a": 1, "b": {"c": 2, "d": 4, "e": 5}, "f": 6}

    def test_base_is_not_mutated(self):
        base = {"b": {"c": 2}}
        deep_merge(base, {"b": {"c": 3}})
        assert base == {"b": {"c": 2}}

    def test_later_overrides_win(self):
        assert deep_merge({"a": 1}, {"a": 2}, {"a": 3}) == {"a": 3}


class TestResolveSettings:

    def test_all_defaults(self):
        settings = resolve_settings()
        assert isinstance(settings, ResolverSettings)
        assert settings.selection.fill_defaults is True
        assert settings.no_data.color is None
        assert settings.no_data.label == "No data"
        assert settings.legend.ticks == 5
        assert settings.logging.level == "INFO"

    def test_user_dict_overrides_defaults(self):
        settings = resolve_settings({"no_data": {"color": "#cccccc"}})
        assert settings.no_data.color == "#cccccc"
        # Untouched sibling keeps its default
        assert settings.no_data.label == "No data"

    def test_overrides_beat_user_settings(self):
        settings = resolve_settings(
            {"logging": {"level": "WARNING"}},
            {"logging": {"level": "DEBUG"}},
        )
        assert settings.logging.level == "DEBUG"

    def test_none_overrides_are_skipped(self):
        settings = resolve_settings({"legend": {"ticks": 3}}, None)
        assert settings.legend.ticks == 3

    def test_settings_model_as_user_settings(self):
        user = ResolverSettings(legend={"ticks": 9})
        settings = resolve_settings(user, {"no_data": {"label": "n/a"}})
        assert settings.legend.ticks == 9
        assert settings.no_data.label == "n/a"

    def test_typo_is_an_error(self):
        with pytest.raises(ValidationError):
            resolve_settings({"no_dta": {"color": "#cccccc"}})

    def test_ticks_minimum(self):
        with pytest.raises(ValidationError):
            resolve_settings({"legend": {"ticks": 1}})

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            resolve_settings({"logging": {"level": "VERBOSE"}})
