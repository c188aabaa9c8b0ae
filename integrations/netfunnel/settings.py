from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from configs.constants import (
    RETRY_INTERVAL,
    REQUEST_TIMEOUT,
    DEFAULT_SERVICE_ID,
    DEFAULT_ACTION_ID,
    DEFAULT_LOG_TIMEZONE
)


class NetFunnelClientBaseConfiguration(BaseSettings):
    """
    NetFunnel client configuration, read from `NETFUNNEL_*` variables or `.env`.
    """
    API_ENDPOINT: str = Field(default="", description="NetFunnel gate endpoint. Differs per protected API server.")
    RETRY_INTERVAL: float = Field(default=RETRY_INTERVAL, ge=0, description="Seconds between status checks while queued.")
    REQUEST_TIMEOUT: float = Field(default=REQUEST_TIMEOUT, gt=0, description="Transport timeout per request, in seconds.")
    MAX_WAIT: Optional[float] = Field(default=None, gt=0, description="Upper bound on the polling phase. None waits indefinitely.")

    SERVICE_ID: str = Field(default=DEFAULT_SERVICE_ID, description="`sid` sent with ticket requests.")
    ACTION_ID: str = Field(default=DEFAULT_ACTION_ID, description="`aid` sent with ticket requests.")

    LOG_LEVEL: str = Field(default="INFO", description="Log level of the client loggers.")
    LOG_TIMEZONE: str = Field(default=DEFAULT_LOG_TIMEZONE, description="Timezone of log timestamps.")

    model_config = SettingsConfigDict(
        env_prefix="NETFUNNEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


@lru_cache
def get_settings() -> NetFunnelClientBaseConfiguration:
    return NetFunnelClientBaseConfiguration()
