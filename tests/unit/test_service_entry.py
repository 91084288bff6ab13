"""
Unit tests for the uvicorn runner.

Run: pytest tests/unit/test_service_entry.py -v
"""
import uvicorn

import main


def test_serve_uses_settings(monkeypatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setenv("API_PORT", "9001")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    main.serve()

    app, kwargs = calls[0]
    assert app == "src.api.main:app"
    assert kwargs["port"] == 9001
    assert kwargs["log_level"] == "warning"
