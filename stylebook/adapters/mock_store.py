"""
In-memory document store for testing without the hosted backend.
"""

import copy
import json
import uuid
from pathlib import Path
from typing import Any, Dict, Optional

from ..domain.exceptions import DocumentNotFoundError

DEFAULT_DATA_FILE = Path(__file__).parent / "mock_store_data.json"


class MockDocumentStore:
    """
    Mock store that keeps collections in memory.

    Collections are seeded either from a dict or from a JSON file shaped as
    ``{"<collection>": {"<doc id>": {...}}}``. Nothing is written back to
    disk.
    """

    def __init__(
        self,
        data: Optional[Dict[str, Dict[str, Dict[str, Any]]]] = None,
        data_file: Optional[Path] = None
    ):
        """
        Initialize the mock store.

        Args:
            data: Initial collections. Takes precedence over data_file.
            data_file: JSON file to seed from. Defaults to the bundled
                mock_store_data.json.
        """
        if data is not None:
            self.collections = copy.deepcopy(data)
        else:
            self.collections = self._load_data(Path(data_file) if data_file else DEFAULT_DATA_FILE)

    @staticmethod
    def _load_data(data_file: Path) -> Dict[str, Dict[str, Dict[str, Any]]]:
        """Load seed data from JSON file."""
        if not data_file.exists():
            # Fallback to empty if file doesn't exist
            return {}

        with open(data_file, "r", encoding="utf-8") as f:
            return json.load(f)

    async def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        document = self.collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(document) if document is not None else None

    async def update_document(self, collection: str, doc_id: str, patch: Dict[str, Any]) -> None:
        document = self.collections.get(collection, {}).get(doc_id)
        if document is None:
            raise DocumentNotFoundError(f"Document {collection}/{doc_id} does not exist")
        document.update(copy.deepcopy(patch))

    async def add_document(self, collection: str, data: Dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex[:20]
        self.collections.setdefault(collection, {})[doc_id] = copy.deepcopy(data)
        return doc_id
