import os

os.environ.setdefault("TESTING", "true")

from collections.abc import AsyncGenerator, Generator  # noqa: E402
from contextlib import AbstractAsyncContextManager  # noqa: E402

from fastapi import FastAPI  # noqa: E402
import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from src.core.database.session import get_unit_of_work_factory  # noqa: E402
from src.core.email_service.dependencies import get_email_service  # noqa: E402
from src.core.email_service.recording_mailer import RecordingMailer  # noqa: E402
from src.core.email_service.service import EmailService  # noqa: E402
from src.main.config import Config, get_settings  # noqa: E402
from src.main.web import get_application  # noqa: E402
from src.user.auth.access_token import (  # noqa: E402
    AccessTokenSigner,
    get_access_token_signer,
)
from tests.fakes.store import InMemoryDatabase, InMemoryUnitOfWork  # noqa: E402
from tests.helpers.overrides import DependencyOverrides  # noqa: E402
from tests.helpers.providers import ProvideValue  # noqa: E402
from tests.helpers.requests import ClientFactory  # noqa: E402


@pytest.fixture(scope="session")
def settings() -> Config:
    return get_settings()


@pytest.fixture
def signer(settings: Config) -> AccessTokenSigner:
    return AccessTokenSigner(
        signing_key=settings.jwt.signing_key,
        algorithm=settings.jwt.ALGORITHM,
        expire_minutes=settings.jwt.ACCESS_TOKEN_EXPIRE_MINUTES,
    )


@pytest.fixture
def app() -> FastAPI:
    return get_application()


@pytest.fixture
def dependency_overrides(app: FastAPI) -> Generator[DependencyOverrides]:
    overrides = DependencyOverrides(app)
    yield overrides
    overrides.reset()


@pytest.fixture
def recording_mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def email_service(recording_mailer: RecordingMailer) -> EmailService:
    return EmailService(recording_mailer)


@pytest.fixture
def memory_db() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def uow(memory_db: InMemoryDatabase) -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork(memory_db)


@pytest.fixture
def app_with_fakes(
    app: FastAPI,
    dependency_overrides: DependencyOverrides,
    memory_db: InMemoryDatabase,
    email_service: EmailService,
    signer: AccessTokenSigner,
) -> FastAPI:
    dependency_overrides.set(
        get_unit_of_work_factory, ProvideValue(lambda: InMemoryUnitOfWork(memory_db))
    )
    dependency_overrides.set(get_email_service, ProvideValue(email_service))
    dependency_overrides.set(get_access_token_signer, ProvideValue(signer))
    return app


@pytest_asyncio.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://testserver"
    ) as client:
        yield client


@pytest.fixture
def client_from(app_with_fakes: FastAPI) -> ClientFactory:
    """
    Clients whose requests arrive from a chosen peer address:
    ``async with client_from("10.0.0.1") as client: ...``
    """

    def factory(host: str) -> AbstractAsyncContextManager[httpx.AsyncClient]:
        transport = httpx.ASGITransport(app=app_with_fakes, client=(host, 5555))
        return httpx.AsyncClient(transport=transport, base_url="http://testserver")

    return factory
