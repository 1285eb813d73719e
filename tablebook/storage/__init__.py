"""Reservation storage backends"""

from tablebook.storage.base import ReservationBackend
from tablebook.storage.file import JsonFileBackend
from tablebook.storage.memory import InMemoryBackend, sample_reservations
from tablebook.storage.selector import select_backend
from tablebook.storage.sql import SqlBackend
from tablebook.storage.supabase import SupabaseBackend

__all__ = [
    "ReservationBackend",
    "InMemoryBackend",
    "JsonFileBackend",
    "SqlBackend",
    "SupabaseBackend",
    "sample_reservations",
    "select_backend",
]
