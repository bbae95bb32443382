"""Unit tests for derived-value completion."""

import sys

import pytest

from implnavi.core.estimation import Pricing, complete_estimation, cp_from_items, round_half_up
from implnavi.core.validator import validate_estimation


def _result(overall=None, breakdown=None):
    return validate_estimation({"overall": overall or {}, "breakdown": breakdown or []})


class TestRoundHalfUp:

    @pytest.mark.parametrize("value,expected", [(0, 0), (0.49, 0), (0.5, 1), (2.5, 3), (10.000000000000002, 10)])
    def test_rounding(self, value, expected):
        assert round_half_up(value) == expected


class TestCompleteEstimation:
    """Tests for complete_estimation."""

    def test_hours_from_cp_total(self, pricing):
        completed = complete_estimation(_result({"cpTotal": 100}), pricing)
        assert completed.overall.hours == 10

    def test_costs_from_hours(self, pricing):
        completed = complete_estimation(_result({"hours": 10}), pricing)
        assert completed.overall.costJpyMin == 50000
        assert completed.overall.costJpyMax == 100000

    def test_cp_total_from_items(self, sample_result, pricing):
        completed = complete_estimation(validate_estimation(sample_result), pricing)
        assert completed.overall.cpTotal == 200
        assert completed.overall.hours == 20
        assert completed.overall.costJpyMin == 100000
        assert completed.overall.costJpyMax == 200000

    def test_cp_from_items_is_literal_sum(self):
        result = _result(breakdown=[
            {"category": "A", "items": [{"name": "a", "cp": 1.5}, {"name": "b"}]},
            {"category": "B", "items": []},
            {"category": "C", "items": [{"name": "c", "cp": 7}]},
        ])
        assert cp_from_items(result) == 8.5

    def test_cp_from_items_empty(self):
        assert cp_from_items(_result()) == 0

    def test_supplied_values_are_kept(self, pricing):
        overall = {"cpTotal": 300, "hours": 50, "costJpyMin": 1, "costJpyMax": 2}
        completed = complete_estimation(_result(overall, [{"category": "A", "items": [{"name": "a", "cp": 5}]}]), pricing)
        assert completed.overall.cpTotal == 300
        assert completed.overall.hours == 50
        assert completed.overall.costJpyMin == 1
        assert completed.overall.costJpyMax == 2

    def test_zero_is_treated_as_absent(self, pricing):
        result = _result({"cpTotal": 0}, [{"category": "A", "items": [{"name": "a", "cp": 30}]}])
        assert complete_estimation(result, pricing).overall.cpTotal == 30

    def test_everything_zero_without_items(self, pricing):
        overall = complete_estimation(_result(), pricing).overall
        assert (overall.cpTotal, overall.hours, overall.costJpyMin, overall.costJpyMax) == (0, 0, 0, 0)

    def test_idempotent(self, sample_result, pricing):
        once = complete_estimation(validate_estimation(sample_result), pricing)
        twice = complete_estimation(once, pricing)
        assert twice == once

    def test_input_not_mutated(self, sample_result, pricing):
        result = validate_estimation(sample_result)
        complete_estimation(result, pricing)
        assert result.overall.cpTotal == 0
        assert result.overall.hours == 0

    def test_other_fields_preserved(self, sample_result, pricing):
        result = validate_estimation(sample_result)
        completed = complete_estimation(result, pricing)
        assert completed.overall.stars == 3
        assert completed.overall.rationale == "中規模のWebアプリ"
        assert completed.breakdown == result.breakdown
        assert completed.steps == result.steps
        assert completed.learning == result.learning

    def test_custom_pricing(self):
        pricing = Pricing(hours_per_cp=0.25, rate_min=4000, rate_max=8000)
        completed = complete_estimation(_result({"cpTotal": 40}), pricing)
        assert completed.overall.hours == 10
        assert completed.overall.costJpyMin == 40000
        assert completed.overall.costJpyMax == 80000


class TestHugeValues:
    """Completion stays total for finite but enormous figures."""

    def test_round_half_up_saturates(self):
        assert round_half_up(float("inf")) == int(sys.float_info.max)
        assert round_half_up(float("nan")) == 0
        assert round_half_up(10 ** 400) == int(sys.float_info.max)

    def test_huge_item_cp_completes(self, pricing):
        result = _result(breakdown=[{"category": "A", "items": [{"name": "a", "cp": 1e306}]}])
        overall = complete_estimation(result, pricing).overall
        assert overall.cpTotal == 1e306
        assert overall.hours == round_half_up(1e306 * pricing.hours_per_cp)
        assert overall.costJpyMin == int(sys.float_info.max)
        assert overall.costJpyMax == int(sys.float_info.max)

    def test_huge_values_idempotent(self, pricing):
        result = _result({"cpTotal": 1.7e308})
        once = complete_estimation(result, pricing)
        assert complete_estimation(once, pricing) == once

    def test_item_sum_beyond_float_range_saturates(self, pricing):
        items = [{"name": "a", "cp": 1.7e308}, {"name": "b", "cp": 1.7e308}]
        result = _result(breakdown=[{"category": "A", "items": items}])
        assert cp_from_items(result) == sys.float_info.max
        assert complete_estimation(result, pricing).overall.cpTotal == sys.float_info.max
