"""Tests for environment-driven settings."""

from __future__ import annotations

from repricer.settings import RepricingSettings


def test_defaults():
    settings = RepricingSettings()
    assert settings.standard_tax_rate == 21
    assert settings.reduced_tax_keywords == ("kniha", "knihy", "knížka", "knížky")
    assert settings.ladder_size == 19
    assert settings.default_listings_path == "heureka.xlsx"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("REPRICER_FLOOR_MARKUP", "2.5")
    monkeypatch.setenv("REPRICER_MAX_WORKERS", "4")

    settings = RepricingSettings()

    assert settings.floor_markup == 2.5
    assert settings.max_workers == 4


def test_explicit_overrides_win(monkeypatch):
    monkeypatch.setenv("REPRICER_STANDARD_TAX_RATE", "15")
    assert RepricingSettings(standard_tax_rate=10).standard_tax_rate == 10
