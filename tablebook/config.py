"""
Application configuration using Pydantic Settings
"""

from typing import List
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    
    app_name: str = "Tablebook"
    
    # Storage: auto, supabase, sql, file, memory
    storage_backend: str = "auto"
    seed_sample_data: bool = True
    backend_timeout_seconds: float = 10.0
    
    # Hosted database (Supabase / PostgREST)
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_table: str = "reservations"
    
    # SQL database
    database_url: str = ""
    database_echo: bool = False
    
    # Local JSON file
    data_file: str = ""
    
    # CallFluent AI
    callfluent_api_endpoint: str = ""
    callfluent_api_key: str = ""
    callfluent_callback_number: str = ""
    callfluent_auto_call_enabled: bool = True
    callfluent_timeout_seconds: float = 10.0
    
    # Twilio (declared for SMS, not used by the API yet)
    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_phone_number: str = ""
    
    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    cors_origins: str = "http://localhost:3000"
    
    # Logging
    log_level: str = "INFO"
    log_format: str = "json"
    
    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.cors_origins.split(",")]
    
    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_role_key)
    
    @property
    def callfluent_configured(self) -> bool:
        return bool(self.callfluent_api_endpoint and self.callfluent_api_key)
    
    @property
    def sms_configured(self) -> bool:
        return bool(self.twilio_account_sid and self.twilio_auth_token and self.twilio_phone_number)
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
