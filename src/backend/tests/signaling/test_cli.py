# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT
from unittest.mock import MagicMock

import pytest

from common.config import config
from signaling import cli


def test_parse_arguments_defaults_come_from_config() -> None:
    args = cli.parse_arguments([])

    assert args.host == config.SIGNALING_HOST
    assert args.port == config.SIGNALING_PORT
    assert args.path == config.SIGNALING_PATH


def test_parse_arguments_rejects_relative_path() -> None:
    with pytest.raises(SystemExit):
        cli.parse_arguments(["--path", "ws"])


def test_main_runs_uvicorn_on_free_port(monkeypatch: pytest.MonkeyPatch) -> None:
    import uvicorn

    run = MagicMock()
    monkeypatch.setattr(uvicorn, "run", run)
    monkeypatch.setattr("common.port_utils.find_free_port", lambda **_: 5123)
    monkeypatch.setattr(config, "SIGNALING_PATH", config.SIGNALING_PATH)
    monkeypatch.setenv("SIGNALING_PATH", "/ws")

    cli.main(["--host", "127.0.0.1", "--port", "5000", "--path", "/signal"])

    run.assert_called_once_with(
        "signaling.main:app", host="127.0.0.1", port=5123, reload=False
    )
    assert config.SIGNALING_PATH == "/signal"


def test_main_exits_when_no_port_is_free(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("common.port_utils.find_free_port", lambda **_: None)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--port", "5000"])

    assert excinfo.value.code == 1
