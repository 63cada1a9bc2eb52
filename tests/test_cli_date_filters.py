"""Tests for CLI date filter helper."""

from datetime import date

import click
import pytest

from talikhata.cli.date_filters import resolve_cli_date_range
from talikhata.utils.date_parser import get_date_range, parse_date


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_resolve_cli_date_range_rejects_multiple_periods(capsys):
    period_flags = {"this-month": True, "last-month": True}

    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(),
            start_date=None,
            end_date=None,
            period_flags=period_flags,
        )

    assert excinfo.value.exit_code == 1
    err = capsys.readouterr().err
    assert "Only one period option" in err


def test_resolve_cli_date_range_rejects_period_with_start_end(capsys):
    period_flags = {"this-month": True}

    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(),
            start_date="2024-01-01",
            end_date=None,
            period_flags=period_flags,
        )

    assert excinfo.value.exit_code == 1
    err = capsys.readouterr().err
    assert "cannot be combined" in err


def test_resolve_cli_date_range_returns_period_range():
    period_flags = {"this-month": True, "today": False}

    expected_start, expected_end = get_date_range("this-month")
    start, end = resolve_cli_date_range(
        _ctx(),
        start_date=None,
        end_date=None,
        period_flags=period_flags,
    )

    assert start == expected_start
    assert end == expected_end


def test_resolve_cli_date_range_parses_explicit_dates():
    start, end = resolve_cli_date_range(
        _ctx(),
        start_date="2024-01-01",
        end_date="yesterday",
        period_flags={},
    )

    assert start == date(2024, 1, 1)
    assert end == parse_date("yesterday")


def test_resolve_cli_date_range_open_ended():
    start, end = resolve_cli_date_range(
        _ctx(), start_date=None, end_date=None, period_flags={"today": False}
    )

    assert start is None
    assert end is None


def test_resolve_cli_date_range_rejects_bad_date(capsys):
    with pytest.raises(click.exceptions.Exit):
        resolve_cli_date_range(
            _ctx(), start_date="not a date", end_date=None, period_flags={}
        )

    assert "Invalid start date" in capsys.readouterr().err
