import os
import tempfile

# Settings are read at import time, so the environment has to be in place first
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="knowledge-hub-uploads-")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from knowledge_hub.core.database import Base, get_db, enable_sqlite_pragmas
from knowledge_hub.main import app
from knowledge_hub.api.dependencies import get_llm_service
from knowledge_hub.clients import LLMProvider, ProviderCompletion, ProviderHTTPError
from knowledge_hub.services import LLMService

# Workaround for Starlette 0.50.0 + httpx compatibility issue
# Starlette's TestClient tries to pass 'app' to httpx.Client which doesn't accept it
# We'll use httpx directly with ASGITransport as a fallback
import httpx
from httpx import ASGITransport
import asyncio


class CompatibleTestClient:
    """Compatible test client that works around httpx/Starlette version issues"""
    def __init__(self, app):
        self.app = app
        self.transport = ASGITransport(app=app)
        self.base_url = "http://testserver"

    def _run_async(self, coro):
        """Run async coroutine in event loop"""
        try:
            loop = asyncio.get_event_loop()
            if loop.is_closed():
                loop = asyncio.new_event_loop()
                asyncio.set_event_loop(loop)
        except RuntimeError:
            loop = asyncio.new_event_loop()
            asyncio.set_event_loop(loop)
        return loop.run_until_complete(coro)

    def request(self, method, url, **kwargs):
        async def _request():
            async with httpx.AsyncClient(transport=self.transport, base_url=self.base_url) as client:
                return await client.request(method, url, **kwargs)
        return self._run_async(_request())

    def post(self, url, **kwargs):
        return self.request("POST", url, **kwargs)

    def get(self, url, **kwargs):
        return self.request("GET", url, **kwargs)

    def put(self, url, **kwargs):
        return self.request("PUT", url, **kwargs)

    def delete(self, url, **kwargs):
        return self.request("DELETE", url, **kwargs)


# Use CompatibleTestClient instead of FastAPI's TestClient to avoid version conflicts
TestClient = CompatibleTestClient

# Create test database
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
event.listen(engine, "connect", enable_sqlite_pragmas)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeProvider(LLMProvider):
    """
    Scripted provider

    Each call pops the next outcome: a ProviderCompletion is returned, a
    ProviderHTTPError is raised. The last outcome repeats once the script runs out.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes) or [completion("Hello from the model")]
        self.calls = []

    async def chat_completion(self, messages, model=None, temperature=0.7, max_tokens=None):
        self.calls.append({
            "messages": messages,
            "model": model,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def get_default_model(self) -> str:
        return "test-model"


class RecordingSleep:
    """Stands in for asyncio.sleep and remembers every requested delay"""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)

    @property
    def delays_ms(self):
        return [round(seconds * 1000) for seconds in self.delays]


def completion(content="Hello from the model", usage=None, model="test-model"):
    return ProviderCompletion(
        content=content,
        usage=usage if usage is not None else {"prompt_tokens": 12, "completion_tokens": 5, "total_tokens": 17},
        model=model
    )


def rate_limited(retry_after=None):
    return ProviderHTTPError(429, '{"error": "rate limited"}', retry_after=retry_after)


@pytest.fixture
def db():
    """Create a test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def fake_sleep():
    return RecordingSleep()


@pytest.fixture
def llm_service(fake_provider, fake_sleep):
    return LLMService(
        fake_provider,
        max_concurrent_requests=2,
        max_attempts=3,
        backoff_base_ms=1000,
        default_retry_after_ms=3000,
        sleep=fake_sleep
    )


@pytest.fixture
def client(db, llm_service):
    """Create a test client"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_llm_service] = lambda: llm_service
    # Use CompatibleTestClient to avoid Starlette/httpx version conflicts
    yield TestClient(app)
    app.dependency_overrides.clear()


def register_user(client, email="test@example.com", password="testpassword123", name="Test User"):
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password}
    )
    assert response.status_code == 201, response.text
    return response.json()["access_token"]


@pytest.fixture
def auth_headers(client):
    """Authorization header for a freshly registered user"""
    return {"Authorization": f"Bearer {register_user(client)}"}


@pytest.fixture
def other_auth_headers(client):
    """Authorization header for a second, unrelated user"""
    token = register_user(client, email="other@example.com", name="Other User")
    return {"Authorization": f"Bearer {token}"}


def upload(client, headers, filename="notes.txt", data=b"Quarterly revenue grew by 12%.",
           media_type="text/plain", title=None):
    form = {"title": title} if title is not None else None
    return client.post(
        "/api/documents/upload",
        files={"file": (filename, data, media_type)},
        data=form,
        headers=headers
    )
