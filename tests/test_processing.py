"""
Tests for row validation, industry classification and per-state aggregation.
"""
import math

import pytest

from bls_signals.models import CategoryTag, RawRow
from bls_signals.processing import STATE_FIPS_CODES
from bls_signals.processing.aggregate import YearAccumulator, aggregate_record
from bls_signals.processing.classify import classify_industry
from bls_signals.processing.validate import (
    parse_location_quotient,
    validate_state_record,
    validate_state_year_record,
)
from conftest import state_year


def row(area_fips="01000", industry_code="441", lq="1.2", year="2020"):
    return RawRow(area_fips=area_fips, industry_code=industry_code, year=year, lq_annual_avg_emplvl=lq)


class TestParseLocationQuotient:

    @pytest.mark.parametrize("value,expected", [
        ("1.25", 1.25),
        ("0", 0.0),
        ("-0.5", -0.5),
        (" 2 ", 2.0),
    ])
    def test_numeric(self, value, expected):
        assert parse_location_quotient(value) == expected

    @pytest.mark.parametrize("value", ["", "N/A", "abc", "nan", "inf", "-inf"])
    def test_unusable(self, value):
        assert parse_location_quotient(value) is None


class TestValidateStateRecord:
    """Tests for state-level row validation."""

    def test_valid_state_row(self):
        result = validate_state_record(row("06000", lq="0.87"))

        assert result.is_valid
        assert result.state_abbr == "CA"
        assert result.retail_lq == 0.87

    def test_county_row_rejected(self):
        assert not validate_state_record(row("06037")).is_valid

    def test_unknown_state_fips_rejected(self):
        # Puerto Rico and national totals are not in the state table
        assert not validate_state_record(row("72000")).is_valid
        assert not validate_state_record(row("US000")).is_valid

    @pytest.mark.parametrize("lq", ["0", "-1.5", "", "NaN", "n/a"])
    def test_non_positive_or_unparsable_lq_rejected(self, lq):
        assert not validate_state_record(row(lq=lq)).is_valid

    def test_invalid_result_has_no_state(self):
        result = validate_state_record(row("06037"))

        assert result.state_abbr is None
        assert result.retail_lq is None

    def test_state_table_covers_states_and_dc(self):
        assert len(STATE_FIPS_CODES) == 51
        assert STATE_FIPS_CODES["11000"] == "DC"
        assert all(code.endswith("000") for code in STATE_FIPS_CODES)


class TestValidateStateYearRecord:

    def test_record_with_codes_is_valid(self):
        assert validate_state_year_record(state_year("CA", 2020, brick={"441": 1.0}))

    def test_ecommerce_only_is_valid(self):
        assert validate_state_year_record(state_year("CA", 2020, ecommerce={"4541": 1.0}))

    def test_empty_maps_rejected(self):
        assert not validate_state_year_record(state_year("CA", 2020))

    def test_missing_state_rejected(self):
        assert not validate_state_year_record(state_year("", 2020, brick={"441": 1.0}))

    @pytest.mark.parametrize("year", [0, -2020])
    def test_non_positive_year_rejected(self, year):
        assert not validate_state_year_record(state_year("CA", year, brick={"441": 1.0}))


class TestClassifyIndustry:
    """Tests for NAICS prefix classification."""

    @pytest.mark.parametrize("code", ["441", "4411", "44111", "445", "452319", "453"])
    def test_brick_and_mortar(self, code):
        tag = classify_industry(code)
        assert tag.is_brick_and_mortar
        assert not tag.is_ecommerce

    @pytest.mark.parametrize("code", ["4541", "454110", "4921", "4922", "4931", "49311"])
    def test_ecommerce(self, code):
        tag = classify_industry(code)
        assert tag.is_ecommerce
        assert not tag.is_brick_and_mortar

    @pytest.mark.parametrize("code", ["10", "44-45", "454", "4542", "492", "722", ""])
    def test_neither(self, code):
        assert classify_industry(code) == CategoryTag(False, False)

    def test_deterministic(self):
        assert classify_industry("4411") == classify_industry("4411")


class TestAggregateRecord:
    """Tests for summing LQ into the year accumulator."""

    def test_sums_repeated_codes(self):
        acc = YearAccumulator()
        tag = CategoryTag(True, False)

        aggregate_record(acc, "AL", row(industry_code="441"), 1.0, tag)
        aggregate_record(acc, "AL", row(industry_code="441"), 0.5, tag)

        assert acc.states["AL"].brick_and_mortar_codes == {"441": 1.5}
        assert acc.states["AL"].ecommerce_codes == {}

    def test_both_flags_contribute_twice(self):
        acc = YearAccumulator()

        contributed = aggregate_record(acc, "AL", row(industry_code="999"), 2.0, CategoryTag(True, True))

        assert contributed == 2
        assert acc.states["AL"].brick_and_mortar_codes == {"999": 2.0}
        assert acc.states["AL"].ecommerce_codes == {"999": 2.0}

    def test_neither_flag_contributes_nothing(self):
        acc = YearAccumulator()

        contributed = aggregate_record(acc, "AL", row(industry_code="722"), 2.0, CategoryTag(False, False))

        assert contributed == 0
        assert len(acc) == 1
        assert acc.states["AL"].brick_and_mortar_codes == {}

    def test_materialize_sorted_by_state(self):
        acc = YearAccumulator()
        tag = CategoryTag(False, True)
        aggregate_record(acc, "WY", row(industry_code="4541"), 1.0, tag)
        aggregate_record(acc, "AK", row(industry_code="4541"), 3.0, tag)

        records = acc.materialize(2021, 1_700_000_000)

        assert [r.state for r in records] == ["AK", "WY"]
        assert all(r.year == 2021 for r in records)
        assert records[0].ecommerce_codes == {"4541": 3.0}

    def test_materialize_copies_maps(self):
        acc = YearAccumulator()
        aggregate_record(acc, "AL", row(), 1.0, CategoryTag(True, False))

        record = acc.materialize(2020, 0)[0]
        aggregate_record(acc, "AL", row(), 1.0, CategoryTag(True, False))

        assert record.brick_and_mortar_codes == {"441": 1.0}
        assert not math.isclose(acc.states["AL"].brick_and_mortar_codes["441"], 1.0)
