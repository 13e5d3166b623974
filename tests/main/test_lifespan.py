from __future__ import annotations

import logging
from unittest.mock import AsyncMock, Mock

from fastapi import FastAPI
import pytest

from src.main import lifespan as lifespan_module
from src.main.config import config
from src.main.lifespan import lifespan


@pytest.mark.asyncio
async def test_lifespan_initializes_and_shutdowns(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    init_sentry = Mock()
    engine = Mock()
    engine.dispose = AsyncMock()

    monkeypatch.setattr(lifespan_module, "init_sentry", init_sentry)
    monkeypatch.setattr(lifespan_module, "engine", engine)

    app = FastAPI()
    async with lifespan(app):
        init_sentry.assert_called_once()
        engine.dispose.assert_not_awaited()

    engine.dispose.assert_awaited_once()


@pytest.mark.asyncio
async def test_lifespan_warns_when_mail_unconfigured(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    engine = Mock()
    engine.dispose = AsyncMock()
    warnings: list[str] = []

    monkeypatch.setattr(lifespan_module, "init_sentry", Mock())
    monkeypatch.setattr(lifespan_module, "engine", engine)
    monkeypatch.setattr(config.app, "TESTING", False)
    monkeypatch.setattr(config.broadcasting, "EMAIL_SERVER", "")
    monkeypatch.setattr(
        lifespan_module.logger,
        "warning",
        lambda message, *args, **kwargs: warnings.append(message),
    )

    async with lifespan(FastAPI()):
        pass

    assert any("EMAIL_" in message for message in warnings)


@pytest.mark.asyncio
async def test_lifespan_logs_signing_algorithm(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    engine = Mock()
    engine.dispose = AsyncMock()
    monkeypatch.setattr(lifespan_module, "init_sentry", Mock())
    monkeypatch.setattr(lifespan_module, "engine", engine)
    monkeypatch.setattr(lifespan_module.logger, "propagate", True)
    caplog.set_level(logging.INFO, logger=lifespan_module.logger.name)

    async with lifespan(FastAPI()):
        pass

    assert any("HS512" in record.getMessage() for record in caplog.records)
