"""Shared test fixtures."""

from pathlib import Path

import pytest

from salespage.models import ExtractionResult

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def sales_page_html():
    """Load the sales page HTML fixture."""
    return (FIXTURES_DIR / "sales_page.html").read_text(encoding="utf-8")


@pytest.fixture
def settings():
    """Runtime settings that never touch the environment."""
    return {
        "cache_ttl_minutes": 30,
        "fetch_timeout_seconds": 5,
        "render_js": False,
        "cache_failures": False,
    }


@pytest.fixture
def product_result():
    """A successful extraction result."""
    return ExtractionResult(
        title="Curso Fotografia Pro",
        price="R$ 297,00",
        description="Aprenda a fotografar como um profissional.",
        benefits=("Mais de 120 aulas em vídeo", "Certificado de conclusão"),
        testimonials=("Melhor investimento que fiz na minha carreira.",),
        call_to_action="Quero me inscrever agora",
        source_url="https://example.com/curso",
    )


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
