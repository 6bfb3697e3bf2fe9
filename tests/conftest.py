"""Shared pytest fixtures for remodel API tests."""

import base64
from io import BytesIO
from typing import Generator, List, Optional

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from app.config import Settings
from app.dependencies import get_credits_ledger, get_image_generator, get_settings
from app.main import app
from app.models.parts import ComposedRequest, GenerationResult, ResultImagePart, ResultTextPart
from app.utils.errors import InsufficientCredits


GENERATED_IMAGE_BYTES = b"\x89PNG\r\n\x1a\ngenerated-room"


def make_image_base64(image_format: str = "PNG", color: str = "white") -> str:
    """Encode a tiny in-memory image as raw base64 (no data-URL header)."""
    buffer = BytesIO()
    Image.new("RGB", (4, 4), color).save(buffer, format=image_format)
    return base64.b64encode(buffer.getvalue()).decode("ascii")


class FakeImageGenerator:
    """In-memory stand-in for GeminiImageGenerator.

    Records every ComposedRequest it receives and returns a canned result,
    or raises the configured error.
    """

    def __init__(self, result: Optional[GenerationResult] = None, error: Optional[Exception] = None):
        self.result = result or GenerationResult(parts=[
            ResultTextPart(text="Here is the redesigned room."),
            ResultImagePart(data=GENERATED_IMAGE_BYTES, mime_type="image/png"),
        ])
        self.error = error
        self.calls: List[ComposedRequest] = []

    async def generate(self, composed: ComposedRequest) -> GenerationResult:
        self.calls.append(composed)
        if self.error is not None:
            raise self.error
        return self.result


class FakeCreditsLedger:
    """In-memory credits ledger keyed by user id."""

    def __init__(self, balances: Optional[dict] = None):
        self.balances = dict(balances or {})
        self.debits: List[tuple] = []

    async def get_balance(self, user_id: str) -> int:
        return self.balances.get(user_id, 0)

    async def debit(self, user_id: str, amount: int) -> int:
        balance = await self.get_balance(user_id)
        if balance < amount:
            raise InsufficientCredits("Insufficient credits.")
        self.balances[user_id] = balance - amount
        self.debits.append((user_id, amount))
        return self.balances[user_id]


@pytest.fixture
def png_base64() -> str:
    """Raw base64 of a valid PNG."""
    return make_image_base64("PNG")


@pytest.fixture
def jpeg_base64() -> str:
    """Raw base64 of a valid JPEG."""
    return make_image_base64("JPEG", color="gray")


@pytest.fixture
def mask_data_url() -> str:
    """A black/white mask encoded as a PNG data URL."""
    return "data:image/png;base64," + make_image_base64("PNG", color="black")


@pytest.fixture
def fake_generator() -> FakeImageGenerator:
    return FakeImageGenerator()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with credits disabled and a small request limit."""
    return Settings(
        gemini_api_key="test-key",
        supabase_url=None,
        supabase_key=None,
        max_request_size_mb=1,
        credit_cost_per_remodel=1,
    )


@pytest.fixture
def make_client(fake_generator, test_settings):
    """Factory building a TestClient with overridden dependencies.

    Startup hooks are not run, so no real Gemini or Supabase client is built.
    """

    def _make(generator=None, ledger=None, settings: Optional[Settings] = None) -> TestClient:
        app.dependency_overrides[get_image_generator] = lambda: generator or fake_generator
        app.dependency_overrides[get_credits_ledger] = lambda: ledger
        app.dependency_overrides[get_settings] = lambda: settings or test_settings
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def test_client(make_client) -> Generator[TestClient, None, None]:
    """TestClient with the fake generator and no credits ledger."""
    yield make_client()
