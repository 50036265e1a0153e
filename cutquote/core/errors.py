"""Quote pipeline exceptions.

Every failure of the document pipeline is a subclass of QuoteError so the
HTTP route and the CLI can catch them in one place. ``detail`` is meant for
the server log only; callers get a fixed message.
"""


class QuoteError(Exception):
    """Base class for all quote pipeline errors."""

    def __init__(self, detail: str = ""):
        super().__init__(detail)
        self.detail = detail


class AssetUnavailable(QuoteError):
    """A static asset could not be read."""


class TemplateUnavailable(AssetUnavailable):
    """The HTML template is missing or unreadable. Nothing can be rendered."""


class RenderEngineUnavailable(QuoteError):
    """The headless browser could not be started."""


class RenderFailed(QuoteError):
    """The browser started but failed or timed out while printing."""
