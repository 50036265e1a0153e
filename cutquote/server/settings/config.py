from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel
from dotenv import load_dotenv
import os

load_dotenv()

# Project root (the directory that contains templates/ and static/)
ROOT = Path(__file__).resolve().parents[3]


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [part.strip() for part in raw.split(",") if part.strip()]


class Settings(BaseModel):
    app_name: str = os.getenv("APP_NAME", "Cutquote - quote generator")
    environment: str = os.getenv("ENVIRONMENT", "dev")

    # Document
    currency_symbol: str = os.getenv("CURRENCY_SYMBOL", "₹")
    template_path: Path = Path(os.getenv("QUOTE_TEMPLATE_PATH", str(ROOT / "templates" / "quote_template.html")))
    logo_path: Path = Path(os.getenv("QUOTE_LOGO_PATH", str(ROOT / "static" / "logo-placeholder.png")))
    logo_fallback_url: str = os.getenv(
        "LOGO_FALLBACK_URL",
        "https://placehold.co/150x50/cccccc/333333?text=Logo+Missing",
    )
    due_days: int = int(os.getenv("QUOTE_DUE_DAYS", "30"))
    date_format: str = os.getenv("QUOTE_DATE_FORMAT", "%d/%m/%Y")
    estimate_factor: float = float(os.getenv("ESTIMATE_FACTOR", "1"))

    # Render engine ("local" = Playwright's bundled Chromium,
    # "serverless" = a Chromium binary shipped with the deployment image)
    render_engine: str = os.getenv("RENDER_ENGINE", "local")
    chromium_executable_path: Optional[str] = os.getenv("CHROMIUM_EXECUTABLE_PATH") or None
    chromium_args: List[str] = _env_list("CHROMIUM_ARGS", "")
    render_timeout_s: float = float(os.getenv("RENDER_TIMEOUT_S", "30"))
    max_concurrent_renders: int = int(os.getenv("MAX_CONCURRENT_RENDERS", "2"))

    # HTTP
    cors_origins: List[str] = _env_list("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    json_logs: bool = _env_bool("JSON_LOGS", "0")


settings = Settings()


def get_settings() -> Settings:
    return settings
