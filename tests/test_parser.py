"""Tests for parsing formula text into structured methods."""

import logging

import pytest

from zmanlang import (
    CustomBase,
    FixedOffset,
    FixedReference,
    OffsetDirection,
    Parsed,
    ProportionalHours,
    Reference,
    ShaosSystem,
    SolarAngle,
    SolarDirection,
    Unrepresentable,
    parse,
)


class TestGuidedForms:
    def test_solar(self):
        assert parse("solar(16.1, before_sunrise)") == Parsed(
            SolarAngle(degrees=16.1, direction=SolarDirection.BEFORE_SUNRISE)
        )

    @pytest.mark.parametrize("direction", ["before_sunrise", "after_sunset", "before_noon", "after_noon"])
    def test_solar_directions(self, direction):
        outcome = parse(f"solar(12, {direction})")
        assert outcome.ok
        assert outcome.method.direction.value == direction

    def test_shaos(self):
        assert parse("shaos(3, gra)") == Parsed(ProportionalHours(hours=3, base=ShaosSystem.GRA))

    def test_shaos_custom(self):
        outcome = parse("shaos(4, custom(@alos_hashachar, @tzeis_hakochavim))")
        assert outcome == Parsed(
            ProportionalHours(
                hours=4,
                base=CustomBase(
                    start=Reference(name="alos_hashachar", zman=True),
                    end=Reference(name="tzeis_hakochavim", zman=True),
                ),
            )
        )

    def test_offset_before(self):
        assert parse("sunrise - 72min") == Parsed(
            FixedOffset(minutes=72, direction=OffsetDirection.BEFORE, base=Reference(name="sunrise"))
        )

    def test_zero_offsets_are_distinct(self):
        after = parse("sunrise + 0min")
        before = parse("sunrise - 0min")
        assert after == Parsed(
            FixedOffset(minutes=0, direction=OffsetDirection.AFTER, base=Reference(name="sunrise"))
        )
        assert before.method.direction == OffsetDirection.BEFORE
        assert after != before

    def test_offset_from_zman_reference(self):
        outcome = parse("@alos_hashachar - 72min")
        assert outcome.method.base == Reference(name="alos_hashachar", zman=True)
        assert outcome.method.minutes == 72

    def test_bare_event(self):
        assert parse("sunset") == Parsed(FixedReference(name=Reference(name="sunset")))

    def test_bare_zman_reference(self):
        outcome = parse("@misheyakir")
        assert outcome.method == FixedReference(name=Reference(name="misheyakir", zman=True))


class TestSpelling:
    @pytest.mark.parametrize(
        "text",
        [
            "solar(16.1,before_sunrise)",
            "  solar( 16.1 , before_sunrise )  ",
            "solar(16.10, before_sunrise)",
            "solar(\n  16.1,\n  before_sunrise\n)",
        ],
    )
    def test_whitespace_and_trailing_zeroes(self, text):
        assert parse(text) == parse("solar(16.1, before_sunrise)")

    def test_integral_numbers_with_decimal_point(self):
        assert parse("shaos(3.0, gra)") == parse("shaos(3, gra)")
        assert parse("shaos(3.0, gra)").method.hours == 3.0

    @pytest.mark.parametrize("text", ["sunrise-72min", "sunrise - 72 min", "sunrise -72min", "sunrise - 72.0min"])
    def test_offset_spellings(self, text):
        assert parse(text) == parse("sunrise - 72min")


class TestMinutes:
    def test_large_count_is_exact(self):
        outcome = parse("sunrise - 9007199254740993min")
        assert outcome.method.minutes == 9007199254740993

    def test_whole_decimal_spelling(self):
        assert parse("sunrise - 9007199254740993.00min").method.minutes == 9007199254740993

    def test_leading_zeroes(self):
        assert parse("sunrise - 0072min") == parse("sunrise - 72min")

    def test_out_of_range(self):
        outcome = parse("sunrise - 9223372036854775808min")
        assert isinstance(outcome, Unrepresentable)
        assert outcome.complexity == "unknown_syntax"


class TestComments:
    def test_commented_formula_is_not_structured(self):
        outcome = parse("sunrise - 72min // alos per R. Moshe")
        assert isinstance(outcome, Unrepresentable)
        assert outcome.complexity == "unknown_syntax"

    def test_comment_on_own_line(self):
        assert isinstance(parse("// netz\nsunrise"), Unrepresentable)


class TestFallback:
    @pytest.mark.parametrize(
        "text",
        [
            "foo(1,2)",
            "solar(16.1",
            "shaos(abc, gra)",
            "solar(16.1, before_sunrise) extra",
            "solar(16.1, before_sunrise))",
            "solar(16.1, before_sunset)",
            "solar(0, before_sunrise)",
            "solar(-16.1, before_sunrise)",
            "SOLAR(16.1, before_sunrise)",
            "shaos(3, custom(alos_hashachar, @tzeis_hakochavim))",
            "shaos(3, custom)",
            "shaos(3, gra, mga)",
            "shaos(0, gra)",
            "sunrise - 72.5min",
            "sunrise - 72",
            "sunrise - 72minutes",
            "sunrise * 2",
            "sunrise ; drop",
            "sunrise - 10min + 5min",
            "solar",
            "gra",
            "min",
            "@",
            "@@alos",
            "_hidden",
            "1e5",
            "sunrise - " + "9" * 5000 + "min",
            "sunrise - 9223372036854775808min",
            "sunrise - 72min // alos per R. Moshe",
            "// sunrise",
            "solar(" + "9" * 400 + ", before_sunrise)",
            "\x00",
            "((((((((",
        ],
    )
    def test_never_raises(self, text):
        outcome = parse(text)
        assert isinstance(outcome, Unrepresentable)
        assert not outcome.ok
        assert outcome.reason

    @pytest.mark.parametrize(
        "text,complexity",
        [
            ("", "empty"),
            ("   ", "empty"),
            ("if (latitude > 60) { sunrise } else { sunset }", "conditional"),
            ("midpoint(sunrise, sunset)", "midpoint"),
            ("sunrise - 10min + 5min", "chained_operations"),
            ("custom_unsupported_fn(1,2,3)", "unknown_function"),
            ("proportional_hours(3, gra)", "unknown_function"),
            ("solar(16.1", "unknown_syntax"),
            ("sunrise ; drop", "unknown_syntax"),
            ("sunrise * 2", "unknown_syntax"),
            ("sunrise - 72min // alos", "unknown_syntax"),
        ],
    )
    def test_complexity(self, text, complexity):
        outcome = parse(text)
        assert isinstance(outcome, Unrepresentable)
        assert outcome.complexity == complexity
        assert outcome.details

    def test_unknown_function_named_in_reason(self):
        outcome = parse("proportional_hours(3, gra)")
        assert "proportional_hours" in outcome.reason

    def test_fallback_logged_at_debug(self, caplog):
        caplog.set_level(logging.DEBUG, logger="zmanlang.parser")
        parse("midpoint(sunrise, sunset)")
        assert "not representable" in caplog.text


class TestPriority:
    def test_solar_wins_over_reference(self):
        assert isinstance(parse("solar(16.1, after_sunset)").method, SolarAngle)

    def test_offset_wins_over_bare_reference(self):
        assert isinstance(parse("sunset + 18min").method, FixedOffset)
