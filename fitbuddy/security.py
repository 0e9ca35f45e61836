"""Shared-key guard for the companion ``/v1`` routes.

The dashboard and the device pushing live-run samples both send the key in
``x-api-key``.
"""

from __future__ import annotations

import logging
import secrets

from fastapi import Depends, HTTPException, Request, Security
from fastapi.security import APIKeyHeader

from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

api_key_header: APIKeyHeader = APIKeyHeader(
    name="x-api-key", scheme_name="ApiKeyAuth", auto_error=False
)


def verify_api_key(
    request: Request,
    x_api_key: str | None = Security(api_key_header),
    settings: Settings = Depends(get_settings),
) -> None:
    if x_api_key and secrets.compare_digest(x_api_key.encode(), settings.api_key.encode()):
        return
    logger.warning(
        "Rejected %s %s: %s API key",
        request.method,
        request.url.path,
        "invalid" if x_api_key else "missing",
    )
    raise HTTPException(status_code=401, detail={"error": "Unauthorized"})


__all__ = ["api_key_header", "verify_api_key"]
