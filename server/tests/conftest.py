# ─────────────────────────────────────────────────────────────────────────────
# Test Fixtures — shared across all tests
# ─────────────────────────────────────────────────────────────────────────────
# Providers are replaced by the call-counting fakes in fakes.py, so tests can
# assert "imagery fetched once" without any network.
# ─────────────────────────────────────────────────────────────────────────────

import os
from collections.abc import Iterator

import pytest
from fakes import FakeImagery, FakeSynthesis, FakeVision
from fastapi.testclient import TestClient
from pydantic import SecretStr

from diorama.cache.resource_cache import PipelineCaches
from diorama.config import Settings
from diorama.main import create_app
from diorama.pipeline.fallback_catalog import FallbackCatalog
from diorama.pipeline.styles import StyleRegistry
from diorama.rate_limit import limiter
from diorama.services.generation_log import GenerationLogger
from diorama.services.generation_queue import GenerationQueue
from diorama.services.leads import LeadStore
from diorama.services.metrics import PipelineMetrics
from diorama.services.pipeline import PipelineOrchestrator

# ─── Core fixtures ───────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def reset_rate_limits() -> Iterator[None]:
    """slowapi storage is process-global; every test starts with full budgets."""
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings with fake keys and log files under tmp_path."""
    return Settings(
        google_maps_api_key=SecretStr("test-maps-key"),
        google_ai_api_key=SecretStr("test-ai-key"),
        generation_log_path=str(tmp_path / "generation_log.jsonl"),
        leads_path=str(tmp_path / "leads.jsonl"),
        log_json=False,
        log_level="DEBUG",
    )


@pytest.fixture
def fake_imagery() -> FakeImagery:
    return FakeImagery()


@pytest.fixture
def fake_vision() -> FakeVision:
    return FakeVision()


@pytest.fixture
def fake_synthesis() -> FakeSynthesis:
    return FakeSynthesis()


@pytest.fixture
def caches() -> PipelineCaches:
    return PipelineCaches.create()


@pytest.fixture
def generation_log(test_settings: Settings) -> GenerationLogger:
    return GenerationLogger(test_settings.generation_log_path)


@pytest.fixture
def metrics() -> PipelineMetrics:
    return PipelineMetrics()


@pytest.fixture
def queue(test_settings: Settings) -> GenerationQueue:
    return GenerationQueue(test_settings.max_concurrent_generations)


@pytest.fixture
def orchestrator(
    test_settings: Settings,
    fake_imagery: FakeImagery,
    fake_vision: FakeVision,
    fake_synthesis: FakeSynthesis,
    caches: PipelineCaches,
    queue: GenerationQueue,
    generation_log: GenerationLogger,
    metrics: PipelineMetrics,
) -> PipelineOrchestrator:
    return PipelineOrchestrator(
        test_settings,
        imagery=fake_imagery,
        vision=fake_vision,
        synthesis=fake_synthesis,
        caches=caches,
        styles=StyleRegistry(),
        queue=queue,
        generation_log=generation_log,
        fallback_catalog=FallbackCatalog.default(test_settings.gallery_base_url),
        metrics=metrics,
    )


@pytest.fixture
def client(
    test_settings: Settings,
    orchestrator: PipelineOrchestrator,
    caches: PipelineCaches,
    queue: GenerationQueue,
    generation_log: GenerationLogger,
    metrics: PipelineMetrics,
) -> TestClient:
    """FastAPI TestClient wired to the fake providers.

    The lifespan is not entered (no `with TestClient(...)`), so no real
    provider clients are built; app.state is populated here instead.
    """
    from diorama.config import get_settings

    get_settings.cache_clear()

    env_overrides = {
        "LOG_JSON": "false",
        "LOG_LEVEL": "DEBUG",
        "ALLOWED_ORIGINS": "*",  # Tests need permissive CORS (prod defaults to deny-all)
    }
    for k, v in env_overrides.items():
        os.environ[k] = v

    try:
        app = create_app()
        client = TestClient(app)

        app.state.settings = test_settings
        app.state.caches = caches
        app.state.style_registry = StyleRegistry()
        app.state.generation_queue = queue
        app.state.generation_log = generation_log
        app.state.fallback_catalog = FallbackCatalog.default(test_settings.gallery_base_url)
        app.state.lead_store = LeadStore(test_settings.leads_path)
        app.state.metrics = metrics
        app.state.pipeline_orchestrator = orchestrator

        return client
    finally:
        for k in env_overrides:
            os.environ.pop(k, None)
        get_settings.cache_clear()
