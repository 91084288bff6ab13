"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import json
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import get_settings  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (in-process API)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Drop cached settings so environment changes in a test take effect."""
    monkeypatch.delenv("KEEP_ANSWERS_SECRET", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def answers_secret(monkeypatch):
    """Configure an admin secret that authorizes keepAnswers."""
    monkeypatch.setenv("KEEP_ANSWERS_SECRET", "s3cret")
    get_settings.cache_clear()
    return "s3cret"


@pytest.fixture
def quiz_items():
    """Well-formed quiz questions as a model would emit them."""
    return [
        {"question": "What does HTML stand for?",
         "options": ["HyperText Markup Language", "High Tech Modern Language", "Home Tool Markup", "None"],
         "answer": "HyperText Markup Language"},
        {"question": "Which hook manages state in React?",
         "options": ["useState", "useFetch", "useStore", "useData"],
         "answer": "useState"},
    ]


@pytest.fixture
def exam_items():
    """Exam questions using the stored field names (questionText / correctAnswer)."""
    return [
        {"questionText": "Which layer does TCP belong to?",
         "options": ["Transport", "Network", "Session", "Physical"],
         "correctAnswer": "Transport",
         "explanation": "TCP is a transport-layer protocol.",
         "difficulty": "easy"},
        {"questionText": "What is the default port for HTTPS?",
         "options": ["80", "443", "8080", "21"],
         "correctAnswer": "443",
         "explanation": "HTTPS listens on 443 by default.",
         "difficulty": "medium"},
        {"questionText": "Which protocol resolves IP addresses to MAC addresses?",
         "options": ["ARP", "DNS", "DHCP", "ICMP"],
         "correctAnswer": "ARP",
         "explanation": "ARP maps IPv4 addresses to link-layer addresses.",
         "difficulty": "hard"},
    ]


@pytest.fixture
def chat_completion(exam_items):
    """OpenAI-style chat completion payload wrapping exam JSON in a fence."""
    content = "Here are your questions:\n```json\n" + json.dumps(exam_items) + "\n```"
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def sdk_response(quiz_items):
    """SDK-style response object exposing a text() accessor."""
    text = json.dumps(quiz_items)
    return SimpleNamespace(text=lambda: text)
