"""Configuration and connectivity diagnostics"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from tablebook.api.deps import get_backend, get_notifier
from tablebook.config import Settings, get_settings
from tablebook.errors import BackendUnavailableError
from tablebook.integrations.callfluent import CallFluentClient
from tablebook.schemas.common import ApiResponse
from tablebook.storage.base import ReservationBackend

router = APIRouter()


@router.get("", response_model=ApiResponse[Dict[str, Any]], response_model_exclude_none=True)
async def diagnostics(
    backend: ReservationBackend = Depends(get_backend),
    notifier: Optional[CallFluentClient] = Depends(get_notifier),
    settings: Settings = Depends(get_settings),
):
    """Report which integrations are configured (never their values) and probe storage"""
    try:
        await backend.probe()
        connection_test = "Successful"
    except BackendUnavailableError as e:
        connection_test = f"Failed: {e.message}"
    
    data = {
        "storage": {
            "backend": backend.name,
            "requested": settings.storage_backend,
            "connection_test": connection_test,
            "supabase_url_available": bool(settings.supabase_url),
            "supabase_key_available": bool(settings.supabase_service_role_key),
            "database_url_available": bool(settings.database_url),
            "data_file_available": bool(settings.data_file),
        },
        "callfluent": {
            "configured": notifier is not None,
            "auto_call_enabled": bool(notifier and notifier.auto_call_enabled),
            "callback_number_available": bool(settings.callfluent_callback_number),
        },
        "sms": {
            "configured": settings.sms_configured,
        },
    }
    
    return ApiResponse(success=connection_test == "Successful", data=data)
