from datetime import date

import pytest

from academy_scheduler.core.enums import Category, ClassType
from academy_scheduler.series.model import SeriesDraft
from academy_scheduler.series.validator import validate_series, validate_series_update


def valid_input(**overrides):
    raw = {
        "title": "  Adult Boxing  ",
        "weekday": 2,
        "start_time": "10:00",
        "end_time": "11:00",
        "category": "adult",
        "class_type": "group",
        "instructor": "Rafael Costa",
        "capacity": 20,
        "active_from": "2024-01-01",
    }
    raw.update(overrides)
    return raw


def fields_of(result):
    return [e.field for e in result.errors]


def test_valid_series_is_normalized():
    result = validate_series(valid_input(capacity="15", weekday="3"))

    assert result.is_valid
    assert result.value == SeriesDraft(
        title="Adult Boxing",
        weekday=3,
        start_time="10:00",
        end_time="11:00",
        category=Category.ADULT,
        class_type=ClassType.GROUP,
        instructor="Rafael Costa",
        capacity=15,
        active_from=date(2024, 1, 1),
        active_until=None,
        active=True,
    )


def test_end_time_before_start_time_is_reported_on_end_time():
    result = validate_series(valid_input(start_time="10:00", end_time="09:00"))

    assert not result.is_valid
    assert fields_of(result) == ["end_time"]


def test_equal_times_are_rejected():
    result = validate_series(valid_input(start_time="10:00", end_time="10:00"))
    assert fields_of(result) == ["end_time"]


def test_active_until_before_active_from_is_reported_on_active_until():
    result = validate_series(valid_input(active_from="2024-02-01", active_until="2024-01-01"))

    assert fields_of(result) == ["active_until"]


def test_cross_field_time_check_waits_for_format_checks():
    result = validate_series(valid_input(start_time="10h", end_time="09:00"))

    assert fields_of(result) == ["start_time"]


def test_only_first_violation_per_field_and_in_validation_order():
    result = validate_series(
        valid_input(title="ab", weekday=7, capacity=0, category="senior", end_time="09:00", active_from="2024-13-01")
    )

    assert fields_of(result) == ["title", "weekday", "end_time", "capacity", "category", "active_from"]


def test_bounds():
    assert fields_of(validate_series(valid_input(title="x" * 81))) == ["title"]
    assert fields_of(validate_series(valid_input(instructor="Al"))) == ["instructor"]
    assert fields_of(validate_series(valid_input(instructor="y" * 61))) == ["instructor"]
    assert fields_of(validate_series(valid_input(weekday=-1))) == ["weekday"]
    assert fields_of(validate_series(valid_input(capacity=101))) == ["capacity"]
    assert fields_of(validate_series(valid_input(capacity=2.5))) == ["capacity"]
    assert fields_of(validate_series(valid_input(capacity=True))) == ["capacity"]
    assert validate_series(valid_input(weekday=0, capacity=100)).is_valid


@pytest.mark.parametrize("capacity", ["--5", "²", "1_0", "5.0", " ", "+-3"])
def test_malformed_integer_text_is_a_field_error(capacity):
    assert fields_of(validate_series(valid_input(capacity=capacity))) == ["capacity"]


def test_signed_integer_text_is_accepted():
    assert validate_series(valid_input(capacity=" +15 ")).value.capacity == 15
    assert fields_of(validate_series(valid_input(weekday="-1"))) == ["weekday"]


def test_time_with_trailing_newline_is_rejected():
    assert fields_of(validate_series(valid_input(start_time="10:00\n"))) == ["start_time"]


def test_timestamp_is_not_a_calendar_date():
    result = validate_series(valid_input(active_from="2024-01-01T03:00:00Z"))
    assert fields_of(result) == ["active_from"]


def test_missing_fields_are_all_reported():
    result = validate_series({})
    assert set(fields_of(result)) >= {"title", "instructor", "weekday", "start_time", "end_time", "capacity"}


def test_partial_update_validates_only_present_fields():
    result = validate_series_update({"capacity": 30})

    assert result.is_valid
    assert result.value == {"capacity": 30}


def test_partial_update_cross_checks_need_both_sides():
    assert validate_series_update({"end_time": "08:00"}).is_valid
    assert validate_series_update({"active_until": "2020-01-01"}).is_valid

    result = validate_series_update({"start_time": "10:00", "end_time": "08:00"})
    assert fields_of(result) == ["end_time"]

    result = validate_series_update({"active_from": "2024-02-01", "active_until": "2024-01-01"})
    assert fields_of(result) == ["active_until"]


def test_partial_update_applies_the_same_field_rules():
    result = validate_series_update({"category": "teens", "title": "  "})
    assert fields_of(result) == ["title", "category"]


def test_partial_update_can_clear_active_until():
    result = validate_series_update({"active_until": None})

    assert result.is_valid
    assert result.value == {"active_until": None}
