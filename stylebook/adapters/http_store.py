"""
HTTP client for the hosted document store.
"""

import asyncio
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from ..domain.exceptions import DocumentNotFoundError, DocumentStoreError

logger = logging.getLogger(__name__)


class HttpDocumentStore:
    """
    Client for a REST document store.

    Endpoints:
        GET   {base_url}/{collection}/{id}  -> document JSON (404 if absent)
        PATCH {base_url}/{collection}/{id}  -> merge top-level fields
        POST  {base_url}/{collection}       -> {"id": "<new id>"}

    requests is blocking, so each call runs in a worker thread.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: int = 30,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the document store client.

        Args:
            base_url: Root URL of the document API
            api_key: Optional bearer token sent with every request
            timeout: Request timeout in seconds
            session: Optional requests session (shared connection pool)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {"Content-Type": "application/json"}
        if api_key:
            self.headers["Authorization"] = f"Bearer {api_key}"
        self._session = session or requests.Session()

    async def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        return await asyncio.to_thread(self._get_document, collection, doc_id)

    async def update_document(self, collection: str, doc_id: str, patch: Dict[str, Any]) -> None:
        await asyncio.to_thread(self._update_document, collection, doc_id, patch)

    async def add_document(self, collection: str, data: Dict[str, Any]) -> str:
        return await asyncio.to_thread(self._add_document, collection, data)

    def _get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        url = self._document_url(collection, doc_id)

        try:
            response = self._session.get(url, headers=self.headers, timeout=self.timeout)
            if response.status_code == 404:
                logger.debug("Document %s/%s not found", collection, doc_id)
                return None
            response.raise_for_status()
            data = response.json()

        except requests.exceptions.RequestException as e:
            raise DocumentStoreError(f"Failed to fetch {collection}/{doc_id}: {e}") from e
        except ValueError as e:
            raise DocumentStoreError(f"Invalid JSON for {collection}/{doc_id}: {e}") from e

        if not isinstance(data, dict):
            raise DocumentStoreError(f"Document {collection}/{doc_id} is not a JSON object")

        return data

    def _update_document(self, collection: str, doc_id: str, patch: Dict[str, Any]) -> None:
        url = self._document_url(collection, doc_id)

        try:
            response = self._session.patch(url, headers=self.headers, json=patch, timeout=self.timeout)
            if response.status_code == 404:
                raise DocumentNotFoundError(f"Document {collection}/{doc_id} does not exist")
            response.raise_for_status()

        except requests.exceptions.RequestException as e:
            raise DocumentStoreError(f"Failed to update {collection}/{doc_id}: {e}") from e

    def _add_document(self, collection: str, data: Dict[str, Any]) -> str:
        url = f"{self.base_url}/{quote(collection, safe='')}"

        try:
            response = self._session.post(url, headers=self.headers, json=data, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()

        except requests.exceptions.RequestException as e:
            raise DocumentStoreError(f"Failed to add document to {collection}: {e}") from e
        except ValueError as e:
            raise DocumentStoreError(f"Invalid JSON response from {collection}: {e}") from e

        doc_id = body.get("id") if isinstance(body, dict) else None
        if not doc_id:
            raise DocumentStoreError(f"Document store did not return an id for {collection}")

        return str(doc_id)

    def _document_url(self, collection: str, doc_id: str) -> str:
        return f"{self.base_url}/{quote(collection, safe='')}/{quote(doc_id, safe='')}"
