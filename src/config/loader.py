"""
Config loader: YAML file -> frozen dataclass tree.

The session credential is resolved from environment variables
(ORDERDESK_TOKEN, ORDERDESK_ACCOUNT_ID). Config file holds only non-secret values.
"""

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from venue.session import Session

DEFAULT_SYMBOLS = ("BTC-USD", "ETH-USD", "SOL-USD")


@dataclass(frozen=True)
class VenueConfig:
    base_url: str = "http://localhost:8082/api"
    timeout_s: float = 10.0
    token: str = ""
    account_id: str = ""

    def session(self) -> Session | None:
        """Session from the environment, or None when not logged in."""
        if not self.token:
            return None
        return Session(token=self.token, account_id=self.account_id or None)


@dataclass(frozen=True)
class PollingConfig:
    orderbook_interval_s: float = 60.0
    dashboard_interval_s: float = 30.0


@dataclass(frozen=True)
class AnalyticsConfig:
    trend_window: int = 20


@dataclass(frozen=True)
class AlertingConfig:
    structured_logs: bool = True
    webhook_url: str = ""


@dataclass(frozen=True)
class AppConfig:
    venue: VenueConfig = VenueConfig()
    polling: PollingConfig = PollingConfig()
    analytics: AnalyticsConfig = AnalyticsConfig()
    alerting: AlertingConfig = AlertingConfig()
    symbols: tuple[str, ...] = DEFAULT_SYMBOLS


def _positive(value: float | int | str, name: str) -> float:
    number = float(value)
    if number <= 0:
        raise ValueError(f"{name} must be positive, got {number}")
    return number


def load_config(path: str | Path = "config.yaml") -> AppConfig:
    """
    Load configuration from a YAML file.

    Session credentials are resolved from environment variables:
      - ORDERDESK_TOKEN
      - ORDERDESK_ACCOUNT_ID
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    v_raw = raw.get("venue") or {}
    venue_cfg = VenueConfig(
        base_url=str(v_raw.get("base_url", VenueConfig.base_url)),
        timeout_s=_positive(v_raw.get("timeout_s", 10.0), "venue.timeout_s"),
        token=os.environ.get("ORDERDESK_TOKEN", ""),
        account_id=os.environ.get("ORDERDESK_ACCOUNT_ID", ""),
    )

    p_raw = raw.get("polling") or {}
    polling_cfg = PollingConfig(
        orderbook_interval_s=_positive(
            p_raw.get("orderbook_interval_s", 60.0), "polling.orderbook_interval_s"
        ),
        dashboard_interval_s=_positive(
            p_raw.get("dashboard_interval_s", 30.0), "polling.dashboard_interval_s"
        ),
    )

    a_raw = raw.get("analytics") or {}
    trend_window = int(a_raw.get("trend_window", 20))
    if trend_window < 1:
        raise ValueError(f"analytics.trend_window must be >= 1, got {trend_window}")

    al_raw = raw.get("alerting") or {}
    alerting_cfg = AlertingConfig(
        structured_logs=bool(al_raw.get("structured_logs", True)),
        webhook_url=str(al_raw.get("webhook_url", "")),
    )

    symbols = raw.get("symbols") or list(DEFAULT_SYMBOLS)
    if not isinstance(symbols, list) or not all(isinstance(s, str) and s for s in symbols):
        raise ValueError("symbols must be a list of non-empty strings")

    return AppConfig(
        venue=venue_cfg,
        polling=polling_cfg,
        analytics=AnalyticsConfig(trend_window=trend_window),
        alerting=alerting_cfg,
        symbols=tuple(symbols),
    )
