"""Tests for canonical formula generation."""

import pytest

from zmanlang import build, generate


class TestGenerate:
    @pytest.mark.parametrize(
        "kind,fields,expected",
        [
            ("fixed_reference", {"name": "sunrise"}, "sunrise"),
            ("fixed_reference", {"name": "@alos_hashachar"}, "@alos_hashachar"),
            ("solar_angle", {"degrees": 16.1, "direction": "before_sunrise"}, "solar(16.1, before_sunrise)"),
            ("solar_angle", {"degrees": 8.5, "direction": "after_sunset"}, "solar(8.5, after_sunset)"),
            ("solar_angle", {"degrees": 18.0, "direction": "before_noon"}, "solar(18, before_noon)"),
            ("solar_angle", {"degrees": 3, "direction": "after_noon"}, "solar(3, after_noon)"),
            ("fixed_offset", {"minutes": 72, "direction": "before", "base": "sunrise"}, "sunrise - 72min"),
            ("fixed_offset", {"minutes": 18, "direction": "after", "base": "sunset"}, "sunset + 18min"),
            (
                "fixed_offset",
                {"minutes": 72, "direction": "before", "base": "@alos_hashachar"},
                "@alos_hashachar - 72min",
            ),
            ("proportional_hours", {"hours": 3, "base": "gra"}, "shaos(3, gra)"),
            ("proportional_hours", {"hours": 4.5, "base": "mga"}, "shaos(4.5, mga)"),
            (
                "proportional_hours",
                {"hours": 10.75, "base": {"start": "alos_hashachar", "end": "tzeis_hakochavim"}},
                "shaos(10.75, custom(@alos_hashachar, @tzeis_hakochavim))",
            ),
        ],
    )
    def test_canonical_text(self, kind, fields, expected):
        assert generate(build(kind, **fields)) == expected

    def test_zero_minutes_keep_their_sign(self):
        before = build("fixed_offset", minutes=0, direction="before", base="sunrise")
        after = build("fixed_offset", minutes=0, direction="after", base="sunrise")
        assert generate(before) == "sunrise - 0min"
        assert generate(after) == "sunrise + 0min"

    def test_no_trailing_zeroes(self):
        method = build("solar_angle", degrees=16.10, direction="before_sunrise")
        assert "16.10" not in generate(method)

    def test_deterministic(self):
        method = build("proportional_hours", hours=3, base="gra")
        assert generate(method) == generate(method)

    def test_rejects_non_method(self):
        with pytest.raises(TypeError):
            generate("sunrise")
