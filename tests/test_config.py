"""Tests for config loader: YAML parsing, env var resolution, error cases."""

import os
import tempfile
from pathlib import Path

import pytest

from config import load_config
from venue.session import Session


def _write_yaml(path: Path, content: str) -> None:
    path.write_text(content)


def test_load_config_basic() -> None:
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        f.write(
            """
venue:
  base_url: "https://venue.example.com/api"
  timeout_s: 5
polling:
  orderbook_interval_s: 90
  dashboard_interval_s: 15
analytics:
  trend_window: 10
symbols:
  - BTC-USD
  - DOGE-USD
alerting:
  structured_logs: false
  webhook_url: "https://hooks.example.com/x"
"""
        )
        path = f.name
    try:
        cfg = load_config(path)
        assert cfg.venue.base_url == "https://venue.example.com/api"
        assert cfg.venue.timeout_s == 5.0
        assert cfg.polling.orderbook_interval_s == 90.0
        assert cfg.polling.dashboard_interval_s == 15.0
        assert cfg.analytics.trend_window == 10
        assert cfg.symbols == ("BTC-USD", "DOGE-USD")
        assert cfg.alerting.structured_logs is False
        assert cfg.alerting.webhook_url == "https://hooks.example.com/x"
    finally:
        os.unlink(path)


def test_load_config_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    _write_yaml(path, "")
    cfg = load_config(path)
    assert cfg.venue.base_url == "http://localhost:8082/api"
    assert cfg.venue.timeout_s == 10.0
    assert cfg.polling.orderbook_interval_s == 60.0
    assert cfg.polling.dashboard_interval_s == 30.0
    assert cfg.analytics.trend_window == 20
    assert cfg.symbols == ("BTC-USD", "ETH-USD", "SOL-USD")
    assert cfg.alerting.structured_logs is True


def test_load_config_env_vars(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "config.yaml"
    _write_yaml(path, "venue:\n  timeout_s: 3\n")
    monkeypatch.setenv("ORDERDESK_TOKEN", "secret-token")
    monkeypatch.setenv("ORDERDESK_ACCOUNT_ID", "acct-9")
    cfg = load_config(path)
    assert cfg.venue.token == "secret-token"
    assert cfg.venue.session() == Session(token="secret-token", account_id="acct-9")


def test_no_token_means_no_session(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "config.yaml"
    _write_yaml(path, "symbols: [BTC-USD]\n")
    monkeypatch.delenv("ORDERDESK_TOKEN", raising=False)
    assert load_config(path).venue.session() is None


def test_load_config_missing_file() -> None:
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        load_config("/nonexistent/config.yaml")


def test_load_config_not_a_mapping(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    _write_yaml(path, "- just\n- a list\n")
    with pytest.raises(ValueError, match="YAML mapping"):
        load_config(path)


@pytest.mark.parametrize(
    "content, message",
    [
        ("polling:\n  orderbook_interval_s: 0\n", "polling.orderbook_interval_s"),
        ("polling:\n  dashboard_interval_s: -5\n", "polling.dashboard_interval_s"),
        ("venue:\n  timeout_s: 0\n", "venue.timeout_s"),
        ("analytics:\n  trend_window: 0\n", "trend_window"),
        ("symbols: BTC-USD\n", "symbols"),
        ("symbols: ['BTC-USD', '']\n", "symbols"),
    ],
)
def test_load_config_invalid_values(tmp_path: Path, content: str, message: str) -> None:
    path = tmp_path / "config.yaml"
    _write_yaml(path, content)
    with pytest.raises(ValueError, match=message):
        load_config(path)
