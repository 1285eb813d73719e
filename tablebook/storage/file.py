"""Reservation store persisted to a local JSON file"""

import json
import os
from pathlib import Path
from typing import Dict, Union

import structlog

from tablebook.errors import BackendOperationError, BackendUnavailableError
from tablebook.mapping import from_storage, to_row
from tablebook.schemas.reservation import Reservation
from tablebook.storage.memory import InMemoryBackend

logger = structlog.get_logger()


class JsonFileBackend(InMemoryBackend):
    """
    In-memory store loaded from, and rewritten to, a JSON file.
    
    The file holds a list of rows in the same snake_case shape as the
    database table. Every mutation rewrites the whole file through a
    temporary file and an atomic rename. A failed write leaves both the
    file and the in-memory state as they were.
    
    File access is blocking and runs on the event loop. This tier is meant
    for local development and single-process deployments.
    """
    
    name = "file"
    
    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path)
    
    async def probe(self) -> None:
        if not self.path.exists():
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._write(self._reservations)
            except OSError as e:
                raise BackendUnavailableError(f"Cannot create {self.path}: {e}")
            logger.info("Created reservations file", path=str(self.path))
            return
        
        try:
            rows = json.loads(self.path.read_text(encoding="utf-8"))
            reservations = [from_storage(row) for row in rows]
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise BackendUnavailableError(f"Cannot read {self.path}: {e}")
        
        self._reservations = {reservation.id: reservation for reservation in reservations}
        logger.info("Loaded reservations file", path=str(self.path), count=len(reservations))
    
    def _write(self, reservations: Dict[str, Reservation]) -> None:
        rows = [to_row(reservation) for reservation in reservations.values()]
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(json.dumps(rows, indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)
    
    async def _commit(self, reservations: Dict[str, Reservation]) -> None:
        try:
            self._write(reservations)
        except OSError as e:
            logger.error("Reservations file write failed", path=str(self.path), error=str(e))
            raise BackendOperationError(str(e), code=e.__class__.__name__)
        await super()._commit(reservations)
