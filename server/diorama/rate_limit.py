# ─────────────────────────────────────────────────────────────────────────────
# Rate Limiter — shared slowapi instance
# ─────────────────────────────────────────────────────────────────────────────
# Extracted to its own module to avoid circular imports between main.py
# (which imports route modules) and route modules (which need the limiter).
#
# Two tiers, both keyed by client IP:
#   general    → application_limits, one budget across every route,
#                checked by the enforce_general_limit app dependency
#   generation → /generate and /generate-v2 share one stricter budget
#
# SlowAPIMiddleware is not used: it locates the endpoint through
# route.endpoint, which routes mounted by include_router do not expose, and
# it exempts whatever it cannot locate. App dependencies run before the
# endpoint (and its generation decorator), so the general tier is checked
# first and a RateLimitExceeded reaches the app's async 429 handler.
# ─────────────────────────────────────────────────────────────────────────────


from collections.abc import Callable
from typing import Any, TypeVar

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from diorama.config import get_settings

GENERAL_LIMIT_MESSAGE = "Too many requests, please try again later"
GENERATION_LIMIT_MESSAGE = "Generation limit reached. Please wait a minute before trying again."

GENERATION_SCOPE = "generation"

F = TypeVar("F", bound=Callable[..., Any])


def general_rate_limit() -> str:
    """Resolved per request so settings overrides (tests, .env) apply."""
    return get_settings().general_rate_limit


def generation_rate_limit() -> str:
    return get_settings().generation_rate_limit


limiter = Limiter(key_func=get_remote_address, application_limits=[general_rate_limit])

_generation_tier = limiter.shared_limit(
    generation_rate_limit,
    scope=GENERATION_SCOPE,
    error_message=GENERATION_LIMIT_MESSAGE,
)


async def enforce_general_limit(request: Request) -> None:
    """App-wide dependency: spend one unit of the client's general budget.

    Runs slowapi's application-limit check (the one its middleware would
    run) without an endpoint, so only application_limits apply.
    Raises RateLimitExceeded when the budget is spent.
    """
    limiter._check_request_limit(request, None, in_middleware=True)


def generation_limited(func: F) -> F:
    """Generation tier on one endpoint.

    The endpoint must accept a `request: Request` parameter.
    """
    return _generation_tier(func)  # type: ignore[no-any-return]
