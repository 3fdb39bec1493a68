"""
AdvisorDesk — Request Authentication

Placeholder bearer-token check. Requests without a ``Bearer`` Authorization
header are logged and let through; nothing is rejected.
"""

import logging

from fastapi import Request

logger = logging.getLogger(__name__)


def has_bearer_token(header: str) -> bool:
    return bool(header) and header.startswith("Bearer ")


async def require_auth(request: Request) -> None:
    if not has_bearer_token(request.headers.get("authorization", "")):
        logger.warning(
            "[AUTH] Missing or invalid Authorization header on %s %s",
            request.method, request.url.path,
        )
