"""Configuration for the User Directory alert query client."""

from __future__ import annotations

import dataclasses
import os

from stockwatch.alerts.errors import AlertDirectoryConfigError

PRODUCT_ID_PLACEHOLDER = "{productId}"
AVAILABLE_ON_PLACEHOLDER = "{availableOnDate}"

_DEFAULT_TIMEOUT_S = 10.0


@dataclasses.dataclass(frozen=True, slots=True)
class AlertDirectoryConfig:
    """Configuration for querying the User Directory.

    Attributes
    ----------
    endpoint_template
        URL of the alerted-users lookup with ``{productId}`` and
        ``{availableOnDate}`` placeholders, for example
        ``http://users/alerts?productId={productId}&date={availableOnDate}``.
    timeout_s
        Request timeout in seconds; a timeout counts as the directory being
        unavailable.

    """

    endpoint_template: str
    timeout_s: float = _DEFAULT_TIMEOUT_S

    def __post_init__(self) -> None:
        """Validate the template and timeout."""
        for placeholder in (PRODUCT_ID_PLACEHOLDER, AVAILABLE_ON_PLACEHOLDER):
            if placeholder not in self.endpoint_template:
                raise AlertDirectoryConfigError.missing_placeholder(
                    self.endpoint_template, placeholder
                )
        if self.timeout_s <= 0:
            raise AlertDirectoryConfigError.invalid_timeout(str(self.timeout_s))

    def render_url(self, product_id: int, available_on: str) -> str:
        """Substitute the query values into the endpoint template."""
        return self.endpoint_template.replace(
            PRODUCT_ID_PLACEHOLDER, str(product_id)
        ).replace(AVAILABLE_ON_PLACEHOLDER, available_on)

    @staticmethod
    def _parse_timeout_from_env() -> float:
        raw_timeout = os.environ.get("STOCKWATCH_ALERT_QUERY_TIMEOUT_S", "")
        if not raw_timeout.strip():
            return _DEFAULT_TIMEOUT_S
        try:
            timeout_s = float(raw_timeout)
        except ValueError as exc:
            raise AlertDirectoryConfigError.invalid_timeout(raw_timeout) from exc
        if timeout_s <= 0:
            raise AlertDirectoryConfigError.invalid_timeout(raw_timeout)
        return timeout_s

    @classmethod
    def from_env(cls) -> AlertDirectoryConfig:
        """Build configuration from environment variables.

        Reads the following environment variables:

        - ``STOCKWATCH_ALERT_QUERY_URL``: Required endpoint template.
        - ``STOCKWATCH_ALERT_QUERY_TIMEOUT_S``: Optional timeout in seconds.

        Raises
        ------
        AlertDirectoryConfigError
            If the template is missing or lacks a placeholder, or the timeout
            is not a positive number.

        """
        template = os.environ.get("STOCKWATCH_ALERT_QUERY_URL", "").strip()
        if not template:
            raise AlertDirectoryConfigError.missing_endpoint()
        return cls(endpoint_template=template, timeout_s=cls._parse_timeout_from_env())
