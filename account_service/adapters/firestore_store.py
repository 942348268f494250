"""
Firestore Document Store
DocumentStore over Google Cloud Firestore collections
"""

from typing import Any, Dict, List

from google.cloud.firestore import AsyncClient
from google.cloud.firestore_v1.base_query import FieldFilter

from account_service.adapters.base import Document
from account_service.utils.logger import get_logger

logger = get_logger(__name__)


class FirestoreDocumentStore:
    """DocumentStore using the Firestore async client"""

    def __init__(self, client: AsyncClient):
        self._client = client

    async def query_by_field(self, collection: str, field: str, value: Any) -> List[Document]:
        query = self._client.collection(collection).where(filter=FieldFilter(field, "==", value))
        snapshots = await query.get()
        return [Document(id=snapshot.id, data=snapshot.to_dict() or {}) for snapshot in snapshots]

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        _, doc_ref = await self._client.collection(collection).add(data)
        logger.debug("Document added", collection=collection, key=doc_ref.id)
        return doc_ref.id

    async def delete_by_key(self, collection: str, key: str) -> None:
        await self._client.collection(collection).document(key).delete()
