"""
Base Repository - Project Evaluation Platform
project_eval/repositories/base.py

Base repository class with PocketBase client management and common utilities.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Generator, Optional

import httpx

from project_eval.core.exceptions import (
    DatabaseConnectionException,
    EntityNotFoundException,
    PersistenceFailureException,
    RepositoryException,
)
from project_eval.services.pocketbase import get_pocketbase_client

logger = logging.getLogger(__name__)


class BaseRepository:
    """Base repository for a PocketBase records collection."""

    COLLECTION: str = ""
    ENTITY_TYPE: str = "Record"

    def __init__(self, client: Optional[httpx.Client] = None, collection: Optional[str] = None):
        # An injected client is shared and never closed here
        self._client = client
        if collection:
            self.COLLECTION = collection

    @contextmanager
    def get_client(self) -> Generator[httpx.Client, None, None]:
        """Context manager for PocketBase HTTP clients."""
        if self._client is not None:
            yield self._client
            return

        client = get_pocketbase_client()
        try:
            yield client
        finally:
            client.close()

    @property
    def records_path(self) -> str:
        return f"/api/collections/{self.COLLECTION}/records"

    def record_path(self, record_id: str) -> str:
        return f"{self.records_path}/{record_id}"

    def execute_request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        record_id: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Execute a PocketBase API request with error handling.

        Args:
            method: HTTP method
            path: API path relative to the base URL
            json: Request body
            params: Query parameters
            record_id: Record addressed by the request, for not-found errors

        Returns:
            Decoded JSON body, or None for empty responses (204)
        """
        with self.get_client() as client:
            try:
                response = client.request(method, path, json=json, params=params)
            except (httpx.ConnectError, httpx.TimeoutException) as e:
                logger.error(f"PocketBase unreachable on {method} {path}: {e}")
                raise DatabaseConnectionException(f"Failed to reach document store: {e}")
            except httpx.HTTPError as e:
                raise RepositoryException(f"Request error: {e}")

        if response.status_code == 404:
            raise EntityNotFoundException(self.ENTITY_TYPE, record_id or path)

        if response.status_code >= 400:
            raise self.build_failure(response)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def build_failure(self, response: httpx.Response) -> PersistenceFailureException:
        """Translate a PocketBase error body into a PersistenceFailureException."""
        try:
            body = response.json()
        except ValueError:
            body = {}

        message = body.get("message") or f"Document store returned HTTP {response.status_code}"
        field_errors = {
            field: (detail.get("message") if isinstance(detail, dict) else str(detail))
            for field, detail in (body.get("data") or {}).items()
        }
        logger.warning(
            f"PocketBase rejected request ({response.status_code}): {message}",
            extra={"field_errors": field_errors},
        )
        return PersistenceFailureException(
            message, field_errors=field_errors, status_code=response.status_code
        )

    def parse_timestamp(self, value: Optional[str]) -> Optional[datetime]:
        """Parse PocketBase timestamps ('2024-05-01 10:00:00.123Z') as UTC."""
        if not value:
            return None
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        return self.normalize_timestamp(dt)

    def normalize_timestamp(self, dt: Optional[datetime]) -> Optional[datetime]:
        """Ensure timestamp is UTC-aware."""
        if dt is None:
            return None
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)

    @staticmethod
    def quote_filter_value(value: str) -> str:
        """Quote a string literal for a PocketBase filter expression."""
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
