import logging
import secrets
from typing import Awaitable, Callable, Optional

from fastapi import Header, HTTPException, status

from schedule_engine.core.config import get_settings

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-Internal-Api-Key"


def _key_matches(provided: Optional[str], expected: str) -> bool:
    if not provided:
        return False
    # Constant-time comparison; bytes so non-ASCII header values cannot raise.
    return secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def require_internal_api_key(operation: str) -> Callable[..., Awaitable[None]]:
    """
    Build the dependency guarding one /internal operation ("reload", "sync").

    Rules
    -----
    - INTERNAL_API_KEY configured:
        - header must match, otherwise 401 (in every environment).
    - INTERNAL_API_KEY not configured:
        - local/test (Settings.is_local_env) -> open, convenient for local dev.
        - anywhere else                      -> 500, the deployment is misconfigured.

    Rejections are logged with the operation name so a failing cron job
    (sync) can be told apart from a manual reload.
    """

    async def verify_internal_api_key(
        internal_api_key: Optional[str] = Header(
            default=None,
            alias=API_KEY_HEADER,
            description=f"Internal API key required to {operation} the schedule outside local/test.",
        ),
    ) -> None:
        settings = get_settings()
        expected = settings.INTERNAL_API_KEY

        if not expected:
            if settings.is_local_env:
                return
            logger.error("Refusing internal %s: INTERNAL_API_KEY is not configured", operation)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="INTERNAL_API_KEY not configured for this environment.",
            )

        if not _key_matches(internal_api_key, expected):
            logger.warning(
                "Rejected internal %s request (%s header %s)",
                operation,
                API_KEY_HEADER,
                "missing" if not internal_api_key else "invalid",
            )
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid or missing internal API key for {operation}.",
            )

    return verify_internal_api_key
