"""IP bazlı rate limiting (SlowAPI); proxy (X-Forwarded-For) destekli."""
from fastapi import Request

from slowapi import Limiter

from app.core.config import settings


def _get_client_ip(request: Request) -> str:
    """Proxy arkasında gerçek istemci IP."""
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "127.0.0.1"


limiter = Limiter(key_func=_get_client_ip)

DEFAULT_LIMIT = f"{settings.rate_limit_per_minute}/minute"
VALIDATE_LIMIT = f"{settings.rate_limit_validate_per_minute}/minute"
