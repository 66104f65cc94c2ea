from typing import Any, Dict, List, Optional
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions
import structlog

from app.core.config import Settings
from app.db.store import (
    ENRICHED_SELECT,
    TRANSACTIONS_TABLE,
    StorageError,
    TransactionStore,
    full_replacement,
)


class SupabaseTransactionStore(TransactionStore):
    """TransactionStore backed by the Supabase (PostgREST) async client.
    
    The client is created on first use so that a missing URL or key fails the
    request that needs storage rather than application startup.
    """
    
    def __init__(self, settings: Settings, authorization: Optional[str] = None):
        self.settings = settings
        self.authorization = authorization
        self.logger = structlog.get_logger("SupabaseTransactionStore")
        self._client: Optional[AsyncClient] = None
    
    async def _get_client(self) -> AsyncClient:
        if self._client is None:
            options = None
            if self.authorization:
                # Row-level security then applies to the calling user
                options = AsyncClientOptions(headers={"Authorization": self.authorization})
            
            self._client = await acreate_client(
                self.settings.URL,
                self.settings.ANON_KEY,
                options=options,
            )
        return self._client
    
    async def aclose(self) -> None:
        """Close the PostgREST HTTP session of the client, if one was created"""
        if self._client is not None:
            await self._client.postgrest.aclose()
            self._client = None
    
    async def _execute(self, operation: str, query) -> List[Dict[str, Any]]:
        try:
            response = await query.execute()
        except APIError as e:
            self.logger.warning(
                "Storage call rejected",
                operation=operation,
                code=e.code,
                error=e.message,
            )
            raise StorageError(e.message or str(e), code=e.code, details=e.details) from e
        return response.data
    
    async def _table(self):
        client = await self._get_client()
        return client.table(TRANSACTIONS_TABLE)
    
    async def fetch_one(self, transaction_id: str) -> List[Dict[str, Any]]:
        table = await self._table()
        return await self._execute(
            "fetch_one", table.select("*").eq("id", transaction_id)
        )
    
    async def fetch_all_enriched(self) -> List[Dict[str, Any]]:
        table = await self._table()
        return await self._execute("fetch_all_enriched", table.select(ENRICHED_SELECT))
    
    async def insert(self, transaction: Dict[str, Any]) -> None:
        table = await self._table()
        await self._execute("insert", table.insert(transaction))
    
    async def replace(self, transaction_id: str, transaction: Dict[str, Any]) -> None:
        table = await self._table()
        await self._execute(
            "replace",
            table.update(full_replacement(transaction)).eq("id", transaction_id),
        )
    
    async def delete(self, transaction_id: str) -> None:
        table = await self._table()
        await self._execute("delete", table.delete().eq("id", transaction_id))
