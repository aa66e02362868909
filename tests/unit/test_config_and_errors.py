# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging
import re
import socket
import ssl

import httpx
import pytest

from readyprobe import config
from readyprobe.config import DEFAULT_USER_AGENT, ProbeConfig
from readyprobe.errors import (
    ConfigurationError,
    ErrorCategory,
    ProbeTimeoutError,
    categorize_exception,
    error_category_to_reason,
)
from readyprobe.log import setup_logging

URL = "http://127.0.0.1:3000/"


def test_http_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("READYPROBE_HTTP_TIMEOUT", "5.5")
    monkeypatch.setenv("READYPROBE_USER_AGENT", "CustomAgent/1.0")
    monkeypatch.setenv("READYPROBE_HTTP_REDIRECTS", "false")
    monkeypatch.setenv("READYPROBE_HTTP_VERIFY_SSL", "0")
    monkeypatch.setenv("READYPROBE_HTTP_MAX_BODY_BYTES", "4096")

    settings = config.load_http_settings()

    assert settings.timeout == 5.5
    assert settings.user_agent == "CustomAgent/1.0"
    assert settings.allow_redirects is False
    assert settings.verify_ssl is False
    assert settings.max_body_bytes == 4096


def test_http_settings_invalid_env_fall_back(monkeypatch):
    monkeypatch.setenv("READYPROBE_HTTP_TIMEOUT", "not-a-number")
    monkeypatch.setenv("READYPROBE_HTTP_MAX_BODY_BYTES", "-1")
    monkeypatch.delenv("READYPROBE_USER_AGENT", raising=False)

    settings = config.load_http_settings()

    assert settings.timeout == config.HttpSettings.timeout
    assert settings.max_body_bytes == config.HttpSettings.max_body_bytes
    assert settings.user_agent == DEFAULT_USER_AGENT


def test_non_finite_env_durations_fall_back(monkeypatch):
    monkeypatch.setenv("READYPROBE_HTTP_TIMEOUT", "nan")
    monkeypatch.setenv("READYPROBE_TIMEOUT", "inf")
    monkeypatch.setenv("READYPROBE_PROBE_TIMEOUT", "NaN")

    assert config.load_http_settings().timeout == config.HttpSettings.timeout
    probe_config = ProbeConfig.from_env([URL])
    assert probe_config.total_timeout == ProbeConfig.total_timeout
    assert probe_config.probe_timeout is None


def test_load_http_settings_reads_env_at_call_time(monkeypatch):
    monkeypatch.setenv("READYPROBE_HTTP_TIMEOUT", "7.7")
    assert config.load_http_settings().timeout == 7.7
    monkeypatch.setenv("READYPROBE_HTTP_TIMEOUT", "8.8")
    assert config.load_http_settings().timeout == 8.8


def test_probe_config_from_env(monkeypatch):
    monkeypatch.setenv("READYPROBE_TIMEOUT", "120")
    monkeypatch.setenv("READYPROBE_POLL_INTERVAL", "2")
    monkeypatch.setenv("READYPROBE_PROBE_TIMEOUT", "1.5")
    monkeypatch.setenv("READYPROBE_EXPECT", "Open WebUI")

    cfg = ProbeConfig.from_env([URL])

    assert cfg.candidates == [URL]
    assert cfg.total_timeout == 120
    assert cfg.poll_interval == 2
    assert cfg.probe_timeout == 1.5
    assert cfg.expected_signature == "Open WebUI"


def test_probe_config_from_env_defaults(monkeypatch):
    for name in ("READYPROBE_TIMEOUT", "READYPROBE_POLL_INTERVAL", "READYPROBE_PROBE_TIMEOUT", "READYPROBE_EXPECT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("READYPROBE_POLL_INTERVAL", "soon")

    cfg = ProbeConfig.from_env([URL])

    assert cfg.total_timeout == ProbeConfig.total_timeout
    assert cfg.poll_interval == config.DEFAULT_POLL_INTERVAL
    assert cfg.probe_timeout is None
    assert cfg.expected_signature is None


def test_validate_defaults_probe_timeout_below_interval():
    cfg = ProbeConfig(candidates=[URL], total_timeout=10, poll_interval=1).validate()
    assert cfg.probe_timeout == pytest.approx(0.8)

    cfg = ProbeConfig(candidates=[URL], total_timeout=60, poll_interval=10).validate()
    assert cfg.probe_timeout == config.DEFAULT_PROBE_TIMEOUT


def test_validate_clamps_soft_problems(caplog):
    with caplog.at_level(logging.WARNING, logger="readyprobe.config"):
        cfg = ProbeConfig(candidates=[URL], total_timeout=2, poll_interval=5, probe_timeout=9).validate()
    assert cfg.poll_interval == 2
    assert cfg.probe_timeout == pytest.approx(1.6)
    assert "clamping" in caplog.text


def test_validate_strips_candidates_and_blank_signature():
    cfg = ProbeConfig(candidates=[f"  {URL} "], total_timeout=5, expected_signature="   ").validate()
    assert cfg.candidates == [URL]
    assert cfg.expected_signature is None

    pattern = re.compile("webui", re.IGNORECASE)
    assert ProbeConfig(candidates=[URL], total_timeout=5, expected_signature=pattern).validate().expected_signature is pattern


@pytest.mark.parametrize(
    "kwargs",
    [
        {"candidates": []},
        {"candidates": ["ftp://127.0.0.1/"]},
        {"candidates": ["http://127.0.0.1:99999/"]},
        {"candidates": [URL], "total_timeout": 0},
        {"candidates": [URL], "poll_interval": -1},
        {"candidates": [URL], "probe_timeout": 0},
        {"candidates": [URL], "total_timeout": float("nan")},
        {"candidates": [URL], "total_timeout": float("inf")},
        {"candidates": [URL], "poll_interval": float("nan")},
        {"candidates": [URL], "probe_timeout": float("nan")},
        {"candidates": [URL], "total_timeout": None},
    ],
)
def test_validate_rejects_invalid_config(kwargs):
    with pytest.raises(ConfigurationError):
        ProbeConfig(**kwargs).validate()


def test_configuration_error_is_a_value_error():
    assert issubclass(ConfigurationError, ValueError)
    assert issubclass(ProbeTimeoutError, TimeoutError)


def test_probe_timeout_error_render_and_dict():
    err = ProbeTimeoutError(
        candidates=[URL, "http://127.0.0.1:8080/"],
        elapsed=5.02,
        rounds=5,
        last_errors={URL: "Connection refused"},
    )
    text = err.render()
    assert "5.0s" in text
    assert "5 rounds" in text
    assert f"{URL}: Connection refused" in text
    assert "http://127.0.0.1:8080/: not probed" in text
    data = err.to_dict()
    assert data["ready"] is False
    assert data["rounds"] == 5
    assert data["candidates"][1] == "http://127.0.0.1:8080/"


def test_categorize_exception():
    assert categorize_exception(httpx.ReadTimeout("slow")) is ErrorCategory.TIMEOUT
    assert categorize_exception(httpx.ConnectError("[Errno 111] Connection refused")) is ErrorCategory.CONNECTION_ERROR
    assert categorize_exception(httpx.ConnectError("[Errno -2] Name or service not known")) is ErrorCategory.DNS_ERROR
    assert categorize_exception(httpx.ConnectError("certificate verify failed")) is ErrorCategory.SSL_ERROR
    assert categorize_exception(socket.gaierror("lookup")) is ErrorCategory.DNS_ERROR
    assert categorize_exception(ssl.SSLError("bad")) is ErrorCategory.SSL_ERROR
    assert categorize_exception(ConnectionResetError()) is ErrorCategory.CONNECTION_ERROR
    assert categorize_exception(ValueError("x")) is ErrorCategory.UNKNOWN_ERROR


def test_error_category_to_reason():
    assert error_category_to_reason(ErrorCategory.TIMEOUT) == "request timed out"
    assert error_category_to_reason("DNS_ERROR") == "DNS resolution failure"
    assert error_category_to_reason("bogus") == "network error"
    assert error_category_to_reason(None) == ""


@pytest.fixture
def restore_log_levels():
    names = ("readyprobe", "httpx", "httpcore")
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_setup_logging_keeps_transport_loggers_quiet(monkeypatch, restore_log_levels):
    monkeypatch.delenv("READYPROBE_LOG_LEVEL", raising=False)

    assert setup_logging("info") == logging.INFO
    assert logging.getLogger("readyprobe").level == logging.INFO
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING

    assert setup_logging("debug") == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.DEBUG


def test_setup_logging_level_sources(monkeypatch, restore_log_levels):
    monkeypatch.setenv("READYPROBE_LOG_LEVEL", "error")
    assert setup_logging() == logging.ERROR
    assert setup_logging("info") == logging.INFO
    assert setup_logging("chatty") == logging.WARNING
