from __future__ import annotations

from pathlib import Path

import pytest

CLEAN_HTML = '<div class="card"><p class="text">Hi</p></div>'
CLEAN_CSS = ".card { display: flex; padding: 10px; } .text { font-family: Inter; }"


@pytest.fixture(autouse=True)
def no_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the repair model out of CLI runs."""
    monkeypatch.delenv("FLOWBRIDGE_API_KEY", raising=False)
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)


@pytest.fixture
def write_files(tmp_path: Path):
    """Write an HTML and a CSS file and return their paths as strings."""

    def _write(html: str = CLEAN_HTML, css: str = CLEAN_CSS) -> tuple[str, str]:
        html_path = tmp_path / "page.html"
        css_path = tmp_path / "page.css"
        html_path.write_text(html, encoding="utf-8")
        css_path.write_text(css, encoding="utf-8")
        return str(html_path), str(css_path)

    return _write
