from __future__ import annotations

import json
import logging
import sys

from app.core.logging import _ContainerFormatter, _JsonFormatter, setup_logging


def _record(level: int = logging.INFO, msg: str = "hello", **kwargs) -> logging.LogRecord:
    return logging.LogRecord(
        name=kwargs.pop("name", "app.services.issuance_service"),
        level=level,
        pathname=kwargs.pop("pathname", "issuance_service.py"),
        lineno=kwargs.pop("lineno", 1),
        msg=msg,
        args=kwargs.pop("args", ()),
        exc_info=kwargs.pop("exc_info", None),
    )


# ---- setup_logging ----


def test_setup_logging_sets_root_level() -> None:
    setup_logging("debug")
    assert logging.getLogger().level == logging.DEBUG

    setup_logging("warning")
    assert logging.getLogger().level == logging.WARNING


def test_setup_logging_defaults_to_info_for_unknown_level() -> None:
    setup_logging("nonexistent")
    assert logging.getLogger().level == logging.INFO


def test_setup_logging_quiets_http_clients_at_debug() -> None:
    setup_logging("debug")
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("uvicorn").level == logging.WARNING


def test_setup_logging_json_switches_formatter() -> None:
    setup_logging("info", json_format=True)
    [handler] = logging.getLogger().handlers
    assert isinstance(handler.formatter, _JsonFormatter)
    setup_logging("info")


# ---- _ContainerFormatter ----


def test_container_formatter_excludes_location_for_info() -> None:
    output = _ContainerFormatter().format(_record())
    assert "hello" in output
    assert "[issuance_service.py:" not in output


def test_container_formatter_includes_location_for_warning() -> None:
    output = _ContainerFormatter().format(
        _record(logging.WARNING, "Issuance rejected", lineno=42)
    )
    assert "[issuance_service.py:42]" in output


# ---- _JsonFormatter ----


def test_json_formatter_produces_valid_json() -> None:
    parsed = json.loads(
        _JsonFormatter().format(_record(msg="Minted %s", args=("abc",)))
    )
    assert parsed["level"] == "INFO"
    assert parsed["logger"] == "app.services.issuance_service"
    assert parsed["message"] == "Minted abc"
    assert "timestamp" in parsed


def test_json_formatter_lifts_issuance_context() -> None:
    record = _record()
    record.request_id = "req-1"  # type: ignore[attr-defined]
    record.mint = "7xKXmint"  # type: ignore[attr-defined]
    record.wallet = "Student111"  # type: ignore[attr-defined]
    record.stage = "authorizing"  # type: ignore[attr-defined]

    parsed = json.loads(_JsonFormatter().format(record))
    assert parsed["request_id"] == "req-1"
    assert parsed["mint"] == "7xKXmint"
    assert parsed["wallet"] == "Student111"
    assert parsed["stage"] == "authorizing"


def test_json_formatter_omits_absent_context() -> None:
    parsed = json.loads(_JsonFormatter().format(_record()))
    assert "mint" not in parsed
    assert "stage" not in parsed


def test_json_formatter_includes_exception_info() -> None:
    try:
        raise RuntimeError("rpc timeout")
    except RuntimeError:
        record = _record(logging.ERROR, "Ledger step failed", exc_info=sys.exc_info())

    parsed = json.loads(_JsonFormatter().format(record))
    assert "RuntimeError: rpc timeout" in parsed["exception"]
