"""cutquote - per-unit cutting service quotes rendered to PDF."""

__version__ = "0.1.0"
