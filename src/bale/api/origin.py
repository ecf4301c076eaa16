"""Public origin used when building links for emails and redirects."""

from starlette.requests import Request

from src.bale.core.config import get_settings


def request_origin(request: Request) -> str:
    """The caller's Origin when it is an allowed CORS origin, else the site URL."""
    settings = get_settings()
    origin = (request.headers.get("origin") or "").rstrip("/")
    if origin and origin in settings.cors_origins:
        return origin
    return settings.site_url


def safe_next_path(next_path: str | None, default: str = "/dashboard") -> str:
    """Only same-site absolute paths are followed after sign-in."""
    if not next_path or not next_path.startswith("/") or next_path.startswith("//"):
        return default
    if "\\" in next_path or "://" in next_path:
        return default
    return next_path
