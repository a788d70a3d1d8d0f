"""Tests for configuration helpers."""

import logging

import pytest

from macro_chef.config import Settings, parse_log_level


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, logging.INFO),
        ("debug", logging.DEBUG),
        (" WARNING ", logging.WARNING),
        ("chatty", logging.INFO),
    ],
)
def test_parse_log_level(raw: str | None, expected: int) -> None:
    assert parse_log_level(raw) == expected


def test_settings_defaults(settings: Settings) -> None:
    assert settings.state_table == "macro_chef_state"
    assert settings.api_token is None
    assert settings.log_level == "INFO"
