"""Reservation store backed by a hosted Supabase (PostgREST) table"""

from typing import Any, Dict, List, Optional

import httpx
import structlog

from tablebook.errors import BackendOperationError, BackendUnavailableError, NotFoundError
from tablebook.mapping import from_storage, to_storage
from tablebook.schemas.reservation import Reservation, ReservationCreate, ReservationStatus
from tablebook.storage.base import ReservationBackend
from tablebook.storage.memory import utcnow

logger = structlog.get_logger()

# Postgres "invalid text representation", e.g. a malformed uuid in id=eq.<id>
INVALID_TEXT_REPRESENTATION = "22P02"


class SupabaseBackend(ReservationBackend):
    """
    Reservations stored in Supabase, spoken to over its REST interface.
    
    Every request carries the service role key both as `apikey` and as a
    bearer token, and asks PostgREST to return the affected rows so that
    mutations can report the stored record (and notice a missing id).
    """
    
    name = "supabase"
    
    def __init__(
        self,
        url: str,
        key: str,
        table: str = "reservations",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.table = table
        self.client = httpx.AsyncClient(
            base_url=f"{url.rstrip('/')}/rest/v1",
            headers={
                "apikey": key,
                "Authorization": f"Bearer {key}",
                "Content-Type": "application/json",
                "Prefer": "return=representation",
            },
            timeout=timeout,
            transport=transport,
        )
    
    @property
    def path(self) -> str:
        return f"/{self.table}"
    
    async def close(self) -> None:
        await self.client.aclose()
    
    async def probe(self) -> None:
        try:
            response = await self.client.get(self.path, params={"select": "id", "limit": "1"})
        except httpx.HTTPError as e:
            raise BackendUnavailableError(f"Supabase unreachable: {e}")
        
        if response.is_error:
            error = self._error(response)
            raise BackendUnavailableError(f"Supabase probe failed: {error.detail} ({error.code})")
    
    def _error(self, response: httpx.Response) -> BackendOperationError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        
        code = body.get("code") or str(response.status_code)
        message = body.get("message") or response.reason_phrase or "Request failed"
        return BackendOperationError(message, code=code)
    
    async def _request(self, method: str, params: Dict[str, str], json: Any = None) -> List[Dict[str, Any]]:
        try:
            response = await self.client.request(method, self.path, params=params, json=json)
        except httpx.HTTPError as e:
            logger.error("Supabase request failed", method=method, error=str(e))
            raise BackendOperationError(str(e), code=e.__class__.__name__) from e
        
        if response.is_error:
            error = self._error(response)
            if error.code == INVALID_TEXT_REPRESENTATION:
                raise NotFoundError()
            logger.error(
                "Supabase error",
                method=method,
                status_code=response.status_code,
                code=error.code,
                message=error.detail,
            )
            raise error
        
        if not response.content:
            return []
        return response.json()
    
    async def _single(self, method: str, reservation_id: str, json: Any = None) -> Dict[str, Any]:
        rows = await self._request(method, {"id": f"eq.{reservation_id}", "select": "*"}, json=json)
        if not rows:
            raise NotFoundError()
        return rows[0]
    
    async def list_reservations(self) -> List[Reservation]:
        rows = await self._request("GET", {"select": "*", "order": "date.asc,time.asc"})
        return [from_storage(row) for row in rows]
    
    async def get_reservation(self, reservation_id: str) -> Reservation:
        return from_storage(await self._single("GET", reservation_id))
    
    async def create_reservation(self, data: ReservationCreate) -> Reservation:
        now = utcnow().isoformat()
        row = {**to_storage(data), "created_at": now, "updated_at": now}
        
        rows = await self._request("POST", {"select": "*"}, json=row)
        if not rows:
            raise BackendOperationError("Database returned no data after insertion")
        return from_storage(rows[0])
    
    async def update_reservation(self, reservation_id: str, data: ReservationCreate) -> Reservation:
        row = {**to_storage(data), "updated_at": utcnow().isoformat()}
        return from_storage(await self._single("PATCH", reservation_id, json=row))
    
    async def update_status(self, reservation_id: str, status: ReservationStatus) -> Reservation:
        row = {"status": status.value, "updated_at": utcnow().isoformat()}
        return from_storage(await self._single("PATCH", reservation_id, json=row))
    
    async def delete_reservation(self, reservation_id: str) -> None:
        await self._single("DELETE", reservation_id)
