"""
Render engine: HTML -> paginated PDF via headless Chromium (Playwright).

The rest of the code only sees RenderEngineProvider / RenderSession.
Which Chromium is launched is decided once, in provider_from_settings().

Every launched browser is a separate OS process, so sessions are handed out
through RenderEnginePool, which caps how many run at the same time and
always closes what it launched.
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, List, Optional

from cutquote.core.errors import RenderEngineUnavailable

log = logging.getLogger(__name__)

DEFAULT_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


@dataclass(frozen=True)
class PdfOptions:
    page_format: str = "A4"
    print_background: bool = True
    margin: Dict[str, str] = field(
        default_factory=lambda: {
            "top": "20px",
            "right": "40px",
            "bottom": "40px",
            "left": "40px",
        }
    )
    # Wait until the page has no network activity (logo URL, fonts)
    wait_until: str = "networkidle"
    timeout_s: float = 30.0


class RenderSession(ABC):
    """One running engine instance."""

    @abstractmethod
    async def print_pdf(self, html: str, options: PdfOptions) -> bytes:
        ...

    @abstractmethod
    async def close(self) -> None:
        ...


class RenderEngineProvider(ABC):
    """Starts engine instances."""

    name = "abstract"

    @abstractmethod
    async def launch(self) -> RenderSession:
        ...


# ==============================
# PLAYWRIGHT
# ==============================

class PlaywrightSession(RenderSession):
    def __init__(self, playwright, browser):
        self._playwright = playwright
        self._browser = browser

    async def print_pdf(self, html: str, options: PdfOptions) -> bytes:
        page = await self._browser.new_page()
        await page.set_content(
            html,
            wait_until=options.wait_until,
            timeout=options.timeout_s * 1000,
        )
        return await page.pdf(
            format=options.page_format,
            print_background=options.print_background,
            margin=options.margin,
        )

    async def close(self) -> None:
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()


class _PlaywrightProvider(RenderEngineProvider):
    @abstractmethod
    def _launch_kwargs(self) -> dict:
        """Keyword arguments for chromium.launch()."""

    async def launch(self) -> RenderSession:
        from playwright.async_api import async_playwright

        pw = await async_playwright().start()
        try:
            browser = await pw.chromium.launch(**self._launch_kwargs())
        except BaseException:
            await pw.stop()
            raise
        return PlaywrightSession(pw, browser)


class LocalChromiumProvider(_PlaywrightProvider):
    """The Chromium build installed by `playwright install chromium`."""

    name = "local"

    def __init__(self, extra_args: Optional[List[str]] = None):
        self.args = DEFAULT_ARGS + list(extra_args or [])

    def _launch_kwargs(self) -> dict:
        return {"headless": True, "args": self.args}


class ServerlessChromiumProvider(_PlaywrightProvider):
    """
    A Chromium binary shipped with the deployment image (slim containers,
    serverless functions). Needs an explicit executable path.
    """

    name = "serverless"

    def __init__(self, executable_path: str, extra_args: Optional[List[str]] = None):
        if not executable_path:
            raise ValueError("serverless render engine needs CHROMIUM_EXECUTABLE_PATH")
        self.executable_path = executable_path
        self.args = DEFAULT_ARGS + ["--single-process", "--no-zygote"] + list(extra_args or [])

    def _launch_kwargs(self) -> dict:
        return {
            "headless": True,
            "executable_path": self.executable_path,
            "args": self.args,
            "ignore_default_args": ["--disable-extensions"],
        }


def provider_from_settings(settings) -> RenderEngineProvider:
    engine = (settings.render_engine or "local").strip().lower()
    if engine == "serverless":
        return ServerlessChromiumProvider(
            settings.chromium_executable_path or "",
            extra_args=settings.chromium_args,
        )
    if engine == "local":
        return LocalChromiumProvider(extra_args=settings.chromium_args)
    raise ValueError(f"Unknown RENDER_ENGINE: {settings.render_engine!r}")


# ==============================
# POOL
# ==============================

class RenderEnginePool:
    """
    Bounds concurrent engine instances and pairs every launch with one close.

        async with pool.session() as session:
            pdf = await session.print_pdf(html, options)
    """

    def __init__(self, provider: RenderEngineProvider, max_concurrency: int = 2):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self.provider = provider
        self.max_concurrency = max_concurrency
        self._semaphore = asyncio.Semaphore(max_concurrency)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[RenderSession]:
        async with self._semaphore:
            try:
                sess = await self.provider.launch()
            except Exception as e:
                raise RenderEngineUnavailable(
                    f"Could not start render engine '{self.provider.name}': {e!r}. "
                    "Check that Chromium is installed (playwright install chromium) "
                    "or that CHROMIUM_EXECUTABLE_PATH points to a working binary."
                ) from e

            log.debug("Render engine '%s' started", self.provider.name)
            try:
                yield sess
            finally:
                try:
                    await sess.close()
                except Exception:
                    log.exception("Closing render engine '%s' failed", self.provider.name)
                else:
                    log.debug("Render engine '%s' closed", self.provider.name)
