"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum

from pydantic import BaseModel, Field


class LogLevel(StrEnum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class CacheBackendKind(StrEnum):
    MEMORY = "memory"
    SQLITE = "sqlite"


class UpstreamConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "http://dataservice.accuweather.com"
    api_key: str = ""
    timeout_seconds: float = Field(default=10.0, gt=0.0, le=60.0)
    metric: bool = False
    max_retries: int = Field(default=0, ge=0, le=5)
    retry_base_delay: float = Field(default=1.0, ge=0.0)
    user_agent: str = "weatherlookup/0.1.0"


class CacheConfig(BaseModel):
    model_config = {"extra": "forbid"}

    backend: CacheBackendKind = CacheBackendKind.MEMORY
    ttl_minutes: int = Field(default=30, ge=1)


class StoreConfig(BaseModel):
    model_config = {"extra": "forbid"}

    db_path: str = "data/weatherlookup.db"
    record_ttl_minutes: int = Field(default=30, ge=1)
    coordinate_tolerance: float = Field(default=0.01, ge=0.0, le=1.0)
    require_coordinates: bool = False


class ServiceConfig(BaseModel):
    model_config = {"extra": "forbid"}

    single_flight: bool = True


class LoggingConfig(BaseModel):
    model_config = {"extra": "forbid"}

    level: LogLevel = LogLevel.INFO
    file: str = ""


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    upstream: UpstreamConfig = UpstreamConfig()
    cache: CacheConfig = CacheConfig()
    store: StoreConfig = StoreConfig()
    service: ServiceConfig = ServiceConfig()
    logging: LoggingConfig = LoggingConfig()
