# tests/conftest.py
import os, sys
import asyncio

import pytest

# put the project root (the directory containing "cutquote") first on sys.path
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from cutquote.server.settings.config import Settings
from cutquote.services.render_engine import RenderEngineProvider, RenderEnginePool, RenderSession

FAKE_PDF = b"%PDF-1.4\n% fake quote\n%%EOF\n"

TEMPLATE = (
    "<html><body>"
    "<img src=\"{{logoBase64}}\">"
    "<p>No: {{quoteNumber}}</p>"
    "<p>Date: {{date}} Due: {{dueDate}}</p>"
    "<p>Customer: {{customerName}}</p>"
    "<table><tbody>{{items}}</tbody></table>"
    "<p>Total: {{finalTotal}}</p>"
    "</body></html>"
)


class FakeSession(RenderSession):
    def __init__(self, provider):
        self.provider = provider

    async def print_pdf(self, html, options):
        self.provider.rendered.append((html, options))
        if self.provider.delay:
            await asyncio.sleep(self.provider.delay)
        if self.provider.fail_render:
            raise RuntimeError("page crashed")
        return FAKE_PDF

    async def close(self):
        self.provider.closed += 1
        if self.provider.fail_close:
            raise RuntimeError("close failed")


class FakeProvider(RenderEngineProvider):
    """Stands in for Chromium. Counts launches and closes."""

    name = "fake"

    def __init__(self, *, fail_launch=False, fail_render=False, fail_close=False, delay=0.0):
        self.fail_launch = fail_launch
        self.fail_render = fail_render
        self.fail_close = fail_close
        self.delay = delay
        self.launched = 0
        self.closed = 0
        self.rendered = []

    async def launch(self):
        if self.fail_launch:
            raise FileNotFoundError("chromium: executable doesn't exist")
        self.launched += 1
        return FakeSession(self)


@pytest.fixture
def template_file(tmp_path):
    p = tmp_path / "quote_template.html"
    p.write_text(TEMPLATE, encoding="utf-8")
    return p


@pytest.fixture
def logo_file(tmp_path):
    p = tmp_path / "logo.png"
    p.write_bytes(b"\x89PNG\r\n\x1a\nfake")
    return p


@pytest.fixture
def settings(tmp_path, template_file, logo_file):
    return Settings(
        template_path=template_file,
        logo_path=logo_file,
        logo_fallback_url="https://example.invalid/placeholder.png",
        currency_symbol="₹",
        due_days=30,
        date_format="%d/%m/%Y",
        render_timeout_s=5,
        max_concurrent_renders=2,
        render_engine="local",
        chromium_args=[],
    )


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def pool(provider):
    return RenderEnginePool(provider, max_concurrency=2)


@pytest.fixture
def sample_request():
    return {
        "customerName": "Acme Cutting",
        "description": "Laser cut MS plate",
        "rate": 10,
        "items": [{"pathLengthArea": 5, "thickness": "1", "passes": 2, "quantity": 3}],
    }
