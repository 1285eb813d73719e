"""Choose the storage backend once, at startup"""

from typing import List

import structlog

from tablebook.config import Settings
from tablebook.errors import BackendUnavailableError
from tablebook.storage.base import ReservationBackend
from tablebook.storage.file import JsonFileBackend
from tablebook.storage.memory import InMemoryBackend, sample_reservations
from tablebook.storage.sql import SqlBackend
from tablebook.storage.supabase import SupabaseBackend

logger = structlog.get_logger()

BACKEND_NAMES = ("auto", "supabase", "sql", "file", "memory")


def configured_backends(settings: Settings) -> List[ReservationBackend]:
    """
    Backends to try, in preference order.
    
    `auto` considers every tier that has configuration: hosted Supabase, then
    a SQL database, then a local JSON file. Naming a single backend restricts
    the list to it. The in-memory store is never in this list; it is the
    fallback.
    """
    choice = settings.storage_backend.lower()
    if choice not in BACKEND_NAMES:
        raise ValueError(f"Unknown storage backend {settings.storage_backend!r}")
    
    candidates: List[ReservationBackend] = []
    
    if choice in ("auto", "supabase") and settings.supabase_configured:
        candidates.append(
            SupabaseBackend(
                settings.supabase_url,
                settings.supabase_service_role_key,
                table=settings.supabase_table,
                timeout=settings.backend_timeout_seconds,
            )
        )
    
    if choice in ("auto", "sql") and settings.database_url:
        candidates.append(SqlBackend(settings.database_url, echo=settings.database_echo))
    
    if choice in ("auto", "file") and settings.data_file:
        candidates.append(JsonFileBackend(settings.data_file))
    
    if choice not in ("auto", "memory") and not candidates:
        logger.warning("Storage backend requested but not configured", backend=choice)
    
    return candidates


async def select_backend(settings: Settings) -> ReservationBackend:
    """Return the first configured backend whose probe succeeds, else an in-memory store"""
    for backend in configured_backends(settings):
        try:
            await backend.probe()
        except BackendUnavailableError as e:
            logger.warning("Storage backend unavailable", backend=backend.name, error=e.message)
            await backend.close()
            continue
        
        logger.info("Storage backend selected", backend=backend.name)
        return backend
    
    seed = sample_reservations() if settings.seed_sample_data else None
    logger.info(
        "Using in-memory storage",
        backend=InMemoryBackend.name,
        sample_data=settings.seed_sample_data,
    )
    return InMemoryBackend(seed=seed)
