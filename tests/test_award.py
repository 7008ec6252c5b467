"""Tests for award interpretation."""

import calendar
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from hypothesis import given, strategies as st

from au_payroll.calculators.award import (
    STANDARD_AWARD_RULES,
    AwardInterpreter,
    calculate_gross_pay,
    component_hours,
    interpret,
)
from au_payroll.calculators.types import (
    AttendanceRecord,
    AwardRule,
    ComponentType,
    DayOfWeekEquals,
    HoursWorkedAbove,
    RuleKind,
)

from helpers import SATURDAY, SUNDAY, WEDNESDAY, make_record


class TestInterpretScenarios:
    """Worked examples on the standard award."""

    def test_eight_hour_weekday_is_all_ordinary(self):
        """Test 09:00-17:00 on a Wednesday yields one ordinary component."""
        components = interpret(make_record(WEDNESDAY, 9, 17), Decimal("30"))

        assert len(components) == 1
        ordinary = components[0]
        assert ordinary.code == "ORD"
        assert ordinary.component_type == ComponentType.ORDINARY
        assert ordinary.units == Decimal("8")
        assert ordinary.rate == Decimal("30")
        assert ordinary.amount == Decimal("240.00")

    def test_ten_hour_saturday_splits_and_loads(self):
        """Test 08:00-18:00 on a Saturday: loaded ordinary plus overtime."""
        components = interpret(make_record(SATURDAY, 8, 18), Decimal("30"))

        assert [c.code for c in components] == ["ORD", "OT"]
        ordinary, overtime = components

        assert ordinary.units == Decimal("8")
        assert ordinary.rate == Decimal("37.50")
        assert ordinary.amount == Decimal("300.00")

        assert overtime.component_type == ComponentType.OVERTIME
        assert overtime.units == Decimal("2")
        assert overtime.rate == Decimal("45")
        assert overtime.amount == Decimal("90.00")
        assert overtime.description == "Overtime (1.5x)"

        assert calculate_gross_pay(components) == Decimal("390.00")

    def test_sunday_ordinary_is_double_time(self):
        """Test Sunday loading doubles the ordinary rate."""
        components = interpret(make_record(SUNDAY, 9, 15), Decimal("30"))

        assert len(components) == 1
        assert components[0].rate == Decimal("60")
        assert components[0].amount == Decimal("360.00")


class TestInterpretEdgeCases:
    """Records that produce no components."""

    def test_missing_clock_out_yields_nothing(self):
        """Test a record without clock out is not interpreted."""
        assert interpret(make_record(WEDNESDAY, 9, None), Decimal("30")) == []

    def test_missing_clock_in_yields_nothing(self):
        """Test a record without clock in is not interpreted."""
        assert interpret(make_record(WEDNESDAY, None, 17), Decimal("30")) == []

    def test_clock_out_before_clock_in_yields_nothing(self):
        """Test negative spans count as zero hours."""
        assert interpret(make_record(WEDNESDAY, 17, 9), Decimal("30")) == []

    def test_partial_hours_are_truncated(self):
        """Test 7h59m counts as 7 whole hours."""
        record = make_record(WEDNESDAY, 9, 17)
        record = AttendanceRecord(
            record_id=record.record_id,
            employee_id=record.employee_id,
            work_date=record.work_date,
            clock_in=record.clock_in,
            clock_out=record.clock_out - timedelta(minutes=1),
        )

        components = interpret(record, Decimal("30"))

        assert components[0].units == Decimal("7")
        assert components[0].amount == Decimal("210.00")

    def test_under_one_hour_yields_nothing(self):
        """Test spans shorter than an hour emit no component."""
        record = make_record(WEDNESDAY, 9, 9)
        record = AttendanceRecord(
            record_id=record.record_id,
            employee_id=record.employee_id,
            work_date=record.work_date,
            clock_in=record.clock_in,
            clock_out=record.clock_in + timedelta(minutes=45),
        )

        assert interpret(record, Decimal("30")) == []

    def test_naive_and_aware_times_yield_nothing(self, caplog):
        """Test incomparable timestamps are skipped with a warning."""
        record = AttendanceRecord(
            record_id="att-mixed",
            employee_id="emp-1",
            work_date=WEDNESDAY,
            clock_in=datetime(2024, 7, 3, 9, 0),
            clock_out=make_record(WEDNESDAY, 9, 17).clock_out,
        )

        with caplog.at_level("WARNING"):
            assert interpret(record, Decimal("30")) == []

        assert "att-mixed" in caplog.text


class TestAwardRules:
    """Rule selection and multiplier policy."""

    def test_threshold_boundary_is_not_overtime(self):
        """Test exactly eight hours stays ordinary (strictly greater than)."""
        split = AwardInterpreter.split_hours(8, STANDARD_AWARD_RULES[0])

        assert split.ordinary == 8
        assert split.overtime == 0

    def test_no_overtime_rule_keeps_all_hours_ordinary(self):
        """Test rules without an hours rule never produce overtime."""
        rules = [r for r in STANDARD_AWARD_RULES if r.kind == RuleKind.PENALTY]

        components = interpret(make_record(WEDNESDAY, 6, 20), Decimal("30"), rules)

        assert len(components) == 1
        assert components[0].units == Decimal("14")

    def test_overtime_rule_without_multiplier_defaults_to_time_and_a_half(self):
        """Test a missing overtime multiplier falls back to 1.5."""
        rules = [
            AwardRule(
                rule_id="OT-X",
                name="Overtime > 7h",
                kind=RuleKind.OVERTIME,
                condition=HoursWorkedAbove(7),
            )
        ]

        components = interpret(make_record(WEDNESDAY, 8, 18), Decimal("20"), rules)

        overtime = components[1]
        assert overtime.units == Decimal("3")
        assert overtime.rate == Decimal("30")
        assert overtime.amount == Decimal("90.00")

    def test_penalties_take_maximum_not_product(self):
        """Test overlapping loadings use the highest, never a stacked rate."""
        rules = [
            AwardRule("PEN-A", "Loading A", RuleKind.PENALTY, DayOfWeekEquals(calendar.SATURDAY), Decimal("1.25")),
            AwardRule("PEN-B", "Loading B", RuleKind.PENALTY, HoursWorkedAbove(4), Decimal("1.5")),
        ]

        multiplier = AwardInterpreter.ordinary_multiplier(SATURDAY, 6, rules)

        assert multiplier == Decimal("1.5")

    def test_weekday_has_no_loading(self):
        """Test standard rules leave weekday ordinary hours at 1.0."""
        multiplier = AwardInterpreter.ordinary_multiplier(WEDNESDAY, 8, STANDARD_AWARD_RULES)

        assert multiplier == Decimal("1.0")

    def test_first_hours_overtime_rule_wins(self):
        """Test only the first hours-based overtime rule sets the threshold."""
        rules = [
            AwardRule("OT-10", "Overtime > 10h", RuleKind.OVERTIME, HoursWorkedAbove(10), Decimal("2.0")),
            AwardRule("OT-8", "Overtime > 8h", RuleKind.OVERTIME, HoursWorkedAbove(8), Decimal("1.5")),
        ]

        assert AwardInterpreter.find_overtime_rule(rules).rule_id == "OT-10"

    def test_per_call_rules_override_constructor_rules(self):
        """Test rules passed to interpret replace the instance rules."""
        interpreter = AwardInterpreter()

        components = interpreter.interpret(make_record(SATURDAY, 9, 17), Decimal("30"), rules=[])

        assert components[0].rate == Decimal("30")

    def test_interpret_many_keeps_record_order(self):
        """Test batch interpretation returns one result per record."""
        records = [
            make_record(WEDNESDAY, 9, 17, record_id="a"),
            make_record(WEDNESDAY, 9, None, record_id="b"),
            make_record(SATURDAY, 8, 18, record_id="c"),
        ]

        results = AwardInterpreter().interpret_many(records, Decimal("30"))

        assert [r.record_id for r in results] == ["a", "b", "c"]
        assert results[1].components == []
        assert results[2].gross == Decimal("390.00")

    def test_component_hours_split_by_type(self):
        """Test component units total separately for ordinary and overtime."""
        components = interpret(make_record(SATURDAY, 8, 18), Decimal("30"))

        assert component_hours(components) == (Decimal("8"), Decimal("2"))


class TestAttendanceRecordParsing:
    """Attendance records read from their JSON form."""

    def test_from_dict_reads_camel_case_fields(self):
        """Test ISO timestamps and metadata keys are parsed."""
        record = AttendanceRecord.from_dict(
            {
                "id": "att-9",
                "employeeId": "emp-9",
                "date": "2024-07-03",
                "clockIn": "2024-07-03T09:00:00Z",
                "clockOut": "2024-07-03T17:00:00Z",
                "breaks": [{"start": "2024-07-03T12:00:00Z", "end": "2024-07-03T12:30:00Z"}],
                "projectCode": "P-1",
            }
        )

        assert record.record_id == "att-9"
        assert record.work_date == date(2024, 7, 3)
        assert record.is_complete
        assert len(record.breaks) == 1
        assert record.metadata == {"projectCode": "P-1"}

    def test_breaks_are_not_deducted(self):
        """Test recorded breaks do not reduce hours worked."""
        record = AttendanceRecord.from_dict(
            {
                "id": "att-10",
                "employeeId": "emp-1",
                "date": "2024-07-03",
                "clockIn": "2024-07-03T09:00:00Z",
                "clockOut": "2024-07-03T17:00:00Z",
                "breaks": [{"start": "2024-07-03T12:00:00Z", "end": "2024-07-03T13:00:00Z"}],
            }
        )

        assert interpret(record, Decimal("30"))[0].units == Decimal("8")

    def test_missing_date_raises(self):
        """Test a record without a date is refused."""
        with pytest.raises(KeyError):
            AttendanceRecord.from_dict({"id": "att-11", "employeeId": "emp-1"})


class TestInterpretationProperties:
    """Invariants over arbitrary shifts."""

    @given(
        start=st.integers(min_value=0, max_value=23),
        length=st.integers(min_value=0, max_value=24),
        day_offset=st.integers(min_value=0, max_value=6),
    )
    def test_units_add_up_to_hours_worked(self, start, length, day_offset):
        """Test ordinary plus overtime units equal whole hours worked."""
        work_date = WEDNESDAY + timedelta(days=day_offset)
        record = make_record(work_date, start, start + length)

        components = interpret(record, Decimal("30"))
        ordinary, overtime = component_hours(components)

        assert ordinary + overtime == Decimal(length)
        assert ordinary <= 8
        assert all(c.units > 0 for c in components)

    @given(
        length=st.integers(min_value=1, max_value=16),
        rate=st.decimals(min_value=Decimal("0"), max_value=Decimal("500"), places=2),
        day_offset=st.integers(min_value=0, max_value=6),
    )
    def test_gross_is_sum_of_amounts(self, length, rate, day_offset):
        """Test gross equals the sum of component amounts."""
        record = make_record(WEDNESDAY + timedelta(days=day_offset), 6, 6 + length)

        components = interpret(record, rate)

        assert calculate_gross_pay(components) == sum(
            (c.amount for c in components), Decimal("0")
        )
        for component in components:
            assert component.amount == component.amount.quantize(Decimal("0.01"))

    @given(day_offset=st.integers(min_value=0, max_value=6), length=st.integers(1, 12))
    def test_ordinary_rate_never_exceeds_highest_loading(self, day_offset, length):
        """Test the ordinary rate is at most base times the largest loading."""
        record = make_record(WEDNESDAY + timedelta(days=day_offset), 8, 8 + length)

        ordinary = interpret(record, Decimal("30"))[0]

        assert Decimal("30") <= ordinary.rate <= Decimal("60")
