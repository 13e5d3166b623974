from __future__ import annotations

import base64
from uuid import uuid4

from fastapi import FastAPI
import httpx
import pytest

from src.core.email_service.recording_mailer import RecordingMailer
from src.core.proxy_headers import TrustedProxyHeadersMiddleware
from src.user.auth.schemas import TokenPairModel
from tests.fakes.store import InMemoryDatabase
from tests.helpers.requests import ClientFactory
from tests.helpers.tokens import refresh_of

FORBIDDEN = {"error": "Forbidden", "message": "Invalid token"}


@pytest.mark.asyncio
async def test_get_token_returns_pair_bound_to_peer(
    client_from: ClientFactory, memory_db: InMemoryDatabase
) -> None:
    user = memory_db.add_user()

    async with client_from("192.0.2.10") as client:
        response = await client.post("/v1/auth/get-token", json={"guid": str(user.id)})

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"access", "refresh"}
    assert refresh_of(TokenPairModel(**body)).origin == "192.0.2.10"


@pytest.mark.asyncio
async def test_get_token_for_unknown_user_is_404(client_from: ClientFactory) -> None:
    async with client_from("192.0.2.10") as client:
        response = await client.post("/v1/auth/get-token", json={"guid": str(uuid4())})

    assert response.status_code == 404
    assert response.json()["message"] == "User does not exist"


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"guid": "not-a-uuid"}, {"guid": 1, "x": 2}])
async def test_get_token_validates_body(
    client_from: ClientFactory, body: dict[str, object]
) -> None:
    async with client_from("192.0.2.10") as client:
        response = await client.post("/v1/auth/get-token", json=body)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_scenario_same_origin_refresh(
    client_from: ClientFactory,
    memory_db: InMemoryDatabase,
    recording_mailer: RecordingMailer,
) -> None:
    user = memory_db.add_user()

    async with client_from("192.0.2.10") as client:
        issued = await client.post("/v1/auth/get-token", json={"guid": str(user.id)})
        refreshed = await client.post("/v1/auth/refresh-token", json=issued.json())

    assert refreshed.status_code == 200
    assert refreshed.json() != issued.json()
    assert recording_mailer.check_message() is None


@pytest.mark.asyncio
async def test_scenario_new_origin_refresh_sends_alert(
    client_from: ClientFactory,
    memory_db: InMemoryDatabase,
    recording_mailer: RecordingMailer,
) -> None:
    user = memory_db.add_user(username="Maria", email="maria@example.com")

    async with client_from("192.0.2.10") as client:
        issued = await client.post("/v1/auth/get-token", json={"guid": str(user.id)})
    async with client_from("198.51.100.20") as client:
        refreshed = await client.post("/v1/auth/refresh-token", json=issued.json())

    assert refreshed.status_code == 200
    message = recording_mailer.check_message()
    assert message is not None
    assert message.recipients == ["maria@example.com"]
    assert "198.51.100.20" in message.body
    assert recording_mailer.sent_count == 1


@pytest.mark.asyncio
async def test_scenario_reused_pair_is_forbidden(
    client_from: ClientFactory, memory_db: InMemoryDatabase
) -> None:
    user = memory_db.add_user()

    async with client_from("192.0.2.10") as client:
        issued = await client.post("/v1/auth/get-token", json={"guid": str(user.id)})
        first = await client.post("/v1/auth/refresh-token", json=issued.json())
        second = await client.post("/v1/auth/refresh-token", json=issued.json())

    assert first.status_code == 200
    assert second.status_code == 403
    assert second.json() == FORBIDDEN


@pytest.mark.asyncio
async def test_mixed_pairs_are_forbidden(
    client_from: ClientFactory, memory_db: InMemoryDatabase
) -> None:
    user = memory_db.add_user()

    async with client_from("192.0.2.10") as client:
        one = (await client.post("/v1/auth/get-token", json={"guid": str(user.id)})).json()
        two = (await client.post("/v1/auth/get-token", json={"guid": str(user.id)})).json()
        response = await client.post(
            "/v1/auth/refresh-token",
            json={"access": one["access"], "refresh": two["refresh"]},
        )

    assert response.status_code == 403
    assert response.json() == FORBIDDEN


@pytest.mark.asyncio
async def test_garbage_tokens_are_forbidden(client_from: ClientFactory) -> None:
    async with client_from("192.0.2.10") as client:
        response = await client.post(
            "/v1/auth/refresh-token", json={"access": "abc", "refresh": "def"}
        )

    assert response.status_code == 403
    assert response.json() == FORBIDDEN


@pytest.mark.asyncio
async def test_storage_failure_is_500(
    client_from: ClientFactory, memory_db: InMemoryDatabase
) -> None:
    user = memory_db.add_user()
    memory_db.fail_on_add = True

    async with client_from("192.0.2.10") as client:
        response = await client.post("/v1/auth/get-token", json={"guid": str(user.id)})

    assert response.status_code == 500
    assert response.json()["error"] == "Infrastructure error"


def _flip_signature_byte(token: str) -> str:
    header, payload, signature = token.split(".")
    raw = bytearray(base64.urlsafe_b64decode(signature + "=" * (-len(signature) % 4)))
    raw[0] ^= 0x01
    tampered = base64.urlsafe_b64encode(bytes(raw)).rstrip(b"=").decode("ascii")
    return f"{header}.{payload}.{tampered}"


@pytest.mark.asyncio
async def test_scenario_tampered_signature_is_forbidden(
    client_from: ClientFactory, memory_db: InMemoryDatabase
) -> None:
    user = memory_db.add_user()

    async with client_from("192.0.2.10") as client:
        issued = (
            await client.post("/v1/auth/get-token", json={"guid": str(user.id)})
        ).json()
        tampered = await client.post(
            "/v1/auth/refresh-token",
            json={**issued, "access": _flip_signature_byte(issued["access"])},
        )
        untouched = await client.post("/v1/auth/refresh-token", json=issued)

    assert tampered.status_code == 403
    assert tampered.json() == FORBIDDEN
    assert untouched.status_code == 200


@pytest.mark.asyncio
async def test_forged_forwarded_for_does_not_break_issue(
    app_with_fakes: FastAPI, memory_db: InMemoryDatabase
) -> None:
    user = memory_db.add_user()
    proxied = TrustedProxyHeadersMiddleware(app_with_fakes, trusted_hosts=["10.0.0.0/8"])
    transport = httpx.ASGITransport(app=proxied, client=("10.0.0.5", 5555))

    async with httpx.AsyncClient(
        transport=transport, base_url="http://testserver"
    ) as client:
        response = await client.post(
            "/v1/auth/get-token",
            json={"guid": str(user.id)},
            headers={"X-Forwarded-For": "evil|203.0.113.5"},
        )

    assert response.status_code == 200
    assert refresh_of(TokenPairModel(**response.json())).origin == "10.0.0.5"
