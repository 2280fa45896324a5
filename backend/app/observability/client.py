"""Opik client bootstrap; tracing stays local when Opik is disabled."""
from __future__ import annotations

import logging
from typing import Optional

import opik

from app.core.config import settings

logger = logging.getLogger(__name__)

_client: Optional[opik.Opik] = None


def init_opik() -> Optional[opik.Opik]:
    """Create the shared Opik client when OPIK_ENABLED is set."""
    global _client
    if not settings.opik_enabled:
        logger.info("Opik tracing disabled (OPIK_ENABLED=false)")
        _client = None
        return None
    if _client is not None:
        return _client

    try:
        _client = opik.Opik(project_name=settings.opik_project, api_key=settings.opik_api_key)
    except Exception:
        logger.exception("Failed to initialise Opik; spans will only be logged")
        _client = None
        return None
    logger.info("Opik tracing enabled (project=%s)", settings.opik_project)
    return _client


def get_opik_client() -> Optional[opik.Opik]:
    return _client
