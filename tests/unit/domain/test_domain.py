"""Tests for domain models."""

import pytest

from src.domain.config import ConfigEntry, round_units_planned_key
from src.domain.round import Round, RoundStatus


def test_round_units_planned_key():
    assert round_units_planned_key("42") == "round_42_units_planned"


@pytest.mark.parametrize(
    ("value", "expected"),
    [("7", 7), (" 12 ", 12), ("0", None), ("-1", None), ("seven", None), ("", None)],
)
def test_as_positive_int(value, expected):
    assert ConfigEntry(key="k", value=value).as_positive_int() == expected


def test_round_is_finalized():
    assert Round(1, RoundStatus.FINALIZED.value).is_finalized()
    assert not Round(2, "created").is_finalized()
