"""Unit tests for User Directory configuration and models."""

from __future__ import annotations

import pytest

from stockwatch.alerts import (
    AlertDirectoryConfig,
    AlertDirectoryConfigError,
    AlertQuery,
    DirectoryProtocolError,
    DirectoryUnavailable,
)
from stockwatch.intake.events import ProductAvailableEvent
from tests.helpers.fakes import AVAILABLE_ON, PROCESSING_DATE

_TEMPLATE = "http://users/alerts/{productId}?date={availableOnDate}"


class TestAlertDirectoryConfig:
    """Tests for ``AlertDirectoryConfig``."""

    def test_render_url_substitutes_placeholders(self) -> None:
        """Both placeholders are replaced."""
        config = AlertDirectoryConfig(endpoint_template=_TEMPLATE)
        assert config.render_url(42, "2024-05-01") == (
            "http://users/alerts/42?date=2024-05-01"
        )

    @pytest.mark.parametrize(
        "template",
        [
            "http://users/alerts?date={availableOnDate}",
            "http://users/alerts/{productId}",
        ],
    )
    def test_template_requires_both_placeholders(self, template: str) -> None:
        """A template missing a placeholder is rejected."""
        with pytest.raises(AlertDirectoryConfigError, match="placeholder"):
            AlertDirectoryConfig(endpoint_template=template)

    def test_from_env_reads_template_and_timeout(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Environment variables populate the configuration."""
        monkeypatch.setenv("STOCKWATCH_ALERT_QUERY_URL", _TEMPLATE)
        monkeypatch.setenv("STOCKWATCH_ALERT_QUERY_TIMEOUT_S", "2.5")

        config = AlertDirectoryConfig.from_env()

        assert config.endpoint_template == _TEMPLATE
        assert config.timeout_s == 2.5

    def test_from_env_defaults_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The timeout falls back to ten seconds."""
        monkeypatch.setenv("STOCKWATCH_ALERT_QUERY_URL", _TEMPLATE)
        monkeypatch.delenv("STOCKWATCH_ALERT_QUERY_TIMEOUT_S", raising=False)

        assert AlertDirectoryConfig.from_env().timeout_s == 10.0

    def test_from_env_requires_template(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A missing template names the environment variable."""
        monkeypatch.delenv("STOCKWATCH_ALERT_QUERY_URL", raising=False)

        with pytest.raises(AlertDirectoryConfigError, match="STOCKWATCH_ALERT_QUERY_URL"):
            AlertDirectoryConfig.from_env()

    @pytest.mark.parametrize("raw_timeout", ["soon", "0", "-1"])
    def test_from_env_rejects_bad_timeout(
        self, monkeypatch: pytest.MonkeyPatch, raw_timeout: str
    ) -> None:
        """Timeouts must be positive numbers."""
        monkeypatch.setenv("STOCKWATCH_ALERT_QUERY_URL", _TEMPLATE)
        monkeypatch.setenv("STOCKWATCH_ALERT_QUERY_TIMEOUT_S", raw_timeout)

        with pytest.raises(AlertDirectoryConfigError, match="timeout"):
            AlertDirectoryConfig.from_env()


class TestAlertQuery:
    """Tests for ``AlertQuery`` construction."""

    @pytest.mark.parametrize("product_id", [0, -3])
    def test_rejects_non_positive_product_id(self, product_id: int) -> None:
        """Product ids must be positive."""
        with pytest.raises(ValueError, match="positive"):
            AlertQuery(product_id=product_id, available_on=AVAILABLE_ON)

    def test_from_event_keeps_event_date(self) -> None:
        """An event date wins over the default date."""
        event = ProductAvailableEvent(product_id=42, available_on=AVAILABLE_ON)
        query = AlertQuery.from_event(event, PROCESSING_DATE)
        assert query == AlertQuery(product_id=42, available_on=AVAILABLE_ON)

    def test_from_event_fills_missing_date(self) -> None:
        """A missing event date falls back to the default date."""
        query = AlertQuery.from_event(ProductAvailableEvent(product_id=42), PROCESSING_DATE)
        assert query.available_on == PROCESSING_DATE


class TestDirectoryErrors:
    """Tests for directory error factory methods."""

    def test_http_error_carries_status(self) -> None:
        """http_error keeps the status code."""
        error = DirectoryUnavailable.http_error(502)
        assert error.status_code == 502
        assert "502" in str(error)

    def test_timeout_has_no_status(self) -> None:
        """Timeouts have no HTTP status."""
        assert DirectoryUnavailable.timeout().status_code is None

    def test_invalid_json_truncates_long_bodies(self) -> None:
        """Long bodies are cut to a short preview."""
        error = DirectoryProtocolError.invalid_json("x" * 500)
        assert len(str(error)) < 200
        assert str(error).endswith("...")
