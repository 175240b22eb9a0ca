import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

from journal_graph.llm_clients import create_openai_client

BASE_DIR = Path(__file__).resolve().parent
LOG_DIR = BASE_DIR / "live_test_logs"
LIVE_MODEL = os.getenv("JOURNAL_LIVE_MODEL", "gpt-4o-mini")

load_dotenv(Path.cwd() / ".env")


def _live_ready() -> bool:
    return os.getenv("RUN_LIVE_TESTS") == "1" and bool(os.getenv("OPENAI_API_KEY"))


def pytest_configure(config):
    config.addinivalue_line("markers", "live: live OpenAI integration tests")


@pytest.fixture(autouse=True)
def _live_guard():
    if not _live_ready():
        pytest.skip("Live tests require RUN_LIVE_TESTS=1 and OPENAI_API_KEY")


@pytest.fixture
def live_log_dir(request):
    from uuid import uuid4

    LOG_DIR.mkdir(parents=True, exist_ok=True)
    name = request.node.name.replace("/", "_")
    path = LOG_DIR / f"{name}_{uuid4().hex[:8]}"
    path.mkdir(parents=True, exist_ok=True)
    return path


@pytest.fixture
def openai_llm():
    pytest.importorskip("openai")
    return create_openai_client(LIVE_MODEL)
