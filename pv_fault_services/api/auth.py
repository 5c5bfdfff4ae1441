"""Autenticación por API Key para los endpoints /api.

La emisión de credenciales es externa; aquí solo se compara el header.
"""

from __future__ import annotations

import logging

from fastapi import Header, HTTPException

from ..common.config import get_settings


def require_api_key(
    x_api_key: str | None = Header(default=None, alias="X-API-Key")
) -> None:
    """Valida API key.

    En producción PV_API_KEY debe estar configurado.
    En modo desarrollo, permite acceso sin autenticación con warning.
    """
    logger = logging.getLogger(__name__)
    settings = get_settings()
    expected = settings.api_key

    if not expected:
        if settings.is_production:
            logger.error("CRITICAL: PV_API_KEY not configured in production!")
            raise HTTPException(
                status_code=500,
                detail="Server misconfiguration: API key not set"
            )
        logger.debug("[SECURITY] PV_API_KEY not set - allowing unauthenticated access (DEV ONLY)")
        return

    if not x_api_key:
        raise HTTPException(status_code=401, detail="API key required")

    if x_api_key != expected:
        logger.warning("Invalid API key attempt from request")
        raise HTTPException(status_code=401, detail="Invalid API key")
