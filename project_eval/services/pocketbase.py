"""
PocketBase Client Factory - Project Evaluation Platform
project_eval/services/pocketbase.py

HTTP client factory for the PocketBase document store.
Used by repositories via dependency injection.
"""

from typing import Dict, Optional

import httpx

from project_eval.config import Settings, settings as default_settings


def build_headers(app_settings: Optional[Settings] = None) -> Dict[str, str]:
    cfg = app_settings or default_settings
    headers = {"Accept": "application/json"}
    if cfg.POCKETBASE_TOKEN is not None:
        headers["Authorization"] = cfg.POCKETBASE_TOKEN.get_secret_value()
    return headers


def get_pocketbase_client(app_settings: Optional[Settings] = None) -> httpx.Client:
    """Create a new client bound to POCKETBASE_URL. Caller closes it."""
    cfg = app_settings or default_settings
    return httpx.Client(
        base_url=cfg.POCKETBASE_URL,
        headers=build_headers(cfg),
        timeout=cfg.POCKETBASE_TIMEOUT_SECONDS,
    )
