# hvacquote/core/rate_limit.py
from typing import Callable, Optional

from slowapi import Limiter
from slowapi.util import get_remote_address

from hvacquote.core.settings import Settings, get_settings

# One shared Limiter for the whole app
limiter = Limiter(key_func=get_remote_address)

# Settings of the most recently created app; limits are read per request
_active_settings: Optional[Settings] = None


def bind_settings(settings: Settings) -> None:
    global _active_settings
    _active_settings = settings


def limit_from(name: str) -> Callable[[], str]:
    """Rate limit string looked up by settings field name when a request comes in."""

    def _limit() -> str:
        return getattr(_active_settings or get_settings(), name)

    return _limit
