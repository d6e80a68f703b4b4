from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import SettingsConfigDict, BaseSettings


class SpaSettings(BaseSettings):
    spa_token: Optional[str] = Field(None, validation_alias="SPA_TOKEN")
    ws_base_url: str = Field("wss://accsmartlink.com", validation_alias="SPA_WS_BASE_URL")
    ws_origin: str = Field("https://accsmartlink.com", validation_alias="SPA_ORIGIN")
    ws_user_agent: str = Field(
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36",
        validation_alias="SPA_USER_AGENT",
    )
    ws_open_timeout: float = Field(10.0, validation_alias="SPA_OPEN_TIMEOUT")

    db_path: str = Field("spa-data.db", validation_alias="DB_PATH")

    server_ip: str = Field("0.0.0.0", validation_alias="SERVER_IP")
    server_port: int = Field(3000, validation_alias="PORT")

    poll_interval_seconds: float = Field(300.0, validation_alias="POLL_INTERVAL_SECONDS")
    session_timeout_seconds: float = Field(30.0, validation_alias="SESSION_TIMEOUT_SECONDS")
    target_samples: int = Field(3, validation_alias="TARGET_SAMPLES")

    log_ring_size: int = Field(200, validation_alias="LOG_RING_SIZE")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")

    enable_collector_job: bool = Field(True, validation_alias="ENABLE_COLLECTOR_JOB")
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", populate_by_name=True, extra="ignore")


@lru_cache
def get_settings() -> SpaSettings:
    return SpaSettings()
