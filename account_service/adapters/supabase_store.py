"""
Supabase Document Store
DocumentStore over Supabase tables (PostgREST), one table per collection
"""

from typing import Any, Dict, List

from supabase import AsyncClient

from account_service.adapters.base import Document
from account_service.exceptions import AccountServiceError
from account_service.utils.logger import get_logger

logger = get_logger(__name__)


class SupabaseDocumentStore:
    """DocumentStore using Supabase tables; ``key_column`` is the generated primary key"""

    def __init__(self, client: AsyncClient, key_column: str = "id"):
        self._client = client
        self.key_column = key_column

    def _to_document(self, row: Dict[str, Any]) -> Document:
        data = {k: v for k, v in row.items() if k != self.key_column}
        return Document(id=str(row[self.key_column]), data=data)

    async def query_by_field(self, collection: str, field: str, value: Any) -> List[Document]:
        response = await self._client.table(collection).select("*").eq(field, value).execute()
        return [self._to_document(row) for row in response.data or []]

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        response = await self._client.table(collection).insert(data).execute()
        if not response.data:
            raise AccountServiceError(f"Insert into '{collection}' returned no rows")
        key = str(response.data[0][self.key_column])
        logger.debug("Row inserted", collection=collection, key=key)
        return key

    async def delete_by_key(self, collection: str, key: str) -> None:
        await self._client.table(collection).delete().eq(self.key_column, key).execute()
