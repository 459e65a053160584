"""Test condition matching and first-match-wins selection."""

from types import SimpleNamespace

import pytest

pytestmark = pytest.mark.unit

from maptheme.contracts import NoActiveCandidateError, SelectionError
from maptheme.engine import is_active, select_active


def candidate(name, conditions=None):
    return SimpleNamespace(name=name, conditions=conditions)


def reference_scan(candidates, selection):
    """Plain linear scan the selection must agree with."""
    matches = [c for c in candidates if is_active(c.conditions, selection)]
    return matches[0] if matches else None


class TestIsActive:

    def test_absent_conditions_always_hold(self):
        assert is_active(None, {})
        assert is_active({}, {"age": "children"})

    def test_selected_option_in_set(self):
        assert is_active({"age": ["children", "adults"]}, {"age": "adults"})

    def test_selected_option_not_in_set(self):
        assert not is_active({"age": ["children"]}, {"age": "adults"})

    def test_every_constrained_dimension_must_match(self):
        conditions = {"age": ["children"], "year": [2010]}
        assert is_active(conditions, {"age": "children", "year": 2010})
        assert not is_active(conditions, {"age": "children", "year": 2000})

    def test_unconstrained_dimensions_are_ignored(self):
        assert is_active({"age": ["children"]}, {"age": "children", "year": 1990})

    def test_missing_selection_never_matches(self):
        assert not is_active({"age": ["children"]}, {"year": 2010})

    def test_numeric_identity_is_typed(self):
        assert is_active({"year": [2010]}, {"year": 2010.0})
        assert not is_active({"year": [2010]}, {"year": "2010"})


class TestSelectActive:

    def test_catch_all_after_conditional(self):
        """A catch-all declared last is selected when nothing else matches."""
        candidates = [candidate("aggregate_only", {"mode": ["aggregate"]}), candidate("fallback")]
        assert select_active(candidates, {"mode": "geo"}).name == "fallback"

    def test_first_match_wins(self):
        candidates = [
            candidate("first", {"age": ["children", "adults"]}),
            candidate("second", {"age": ["children"]}),
        ]
        assert select_active(candidates, {"age": "children"}).name == "first"

    def test_catch_all_first_shadows_the_rest(self):
        candidates = [candidate("catch_all"), candidate("specific", {"age": ["children"]})]
        assert select_active(candidates, {"age": "children"}).name == "catch_all"

    def test_no_active_candidate(self):
        candidates = [candidate("only", {"age": ["children"]})]
        with pytest.raises(NoActiveCandidateError, match="schema"):
            select_active(candidates, {"age": "adults"}, kind="schema")

    def test_no_active_candidate_is_a_selection_error(self):
        with pytest.raises(SelectionError):
            select_active([], {})

    @pytest.mark.parametrize("selection", [
        {"age": "children", "year": 2000},
        {"age": "children", "year": 2010},
        {"age": "adults", "year": 2000},
        {"age": "adults", "year": 2010},
    ])
    def test_agrees_with_reference_scan_and_is_idempotent(self, selection):
        candidates = [
            candidate("a", {"age": ["adults"], "year": [2010]}),
            candidate("b", {"year": [2000]}),
            candidate("c", {"age": ["children"]}),
            candidate("d"),
        ]
        expected = reference_scan(candidates, selection)
        assert select_active(candidates, selection) is expected
        assert select_active(candidates, selection) is select_active(candidates, selection)
