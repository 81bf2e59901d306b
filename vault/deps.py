from __future__ import annotations

import logging
from typing import Iterator

import requests
from fastapi import Depends, HTTPException

from .config import Settings, get_settings
from .services.pinata_service import ConfigurationError, PinataClient

logger = logging.getLogger(__name__)

CONFIG_ERROR = "Server configuration error"


def get_http_session() -> Iterator[requests.Session]:
    session = requests.Session()
    try:
        yield session
    finally:
        session.close()


def get_pinata_client(
    settings: Settings = Depends(get_settings),
    session: requests.Session = Depends(get_http_session),
) -> PinataClient:
    try:
        return PinataClient.from_settings(settings, session)
    except ConfigurationError as exc:
        logger.error("Pinata client unavailable: %s", exc)
        raise HTTPException(status_code=500, detail=CONFIG_ERROR) from exc
