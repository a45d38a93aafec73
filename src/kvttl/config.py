"""Cache configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class CacheSettings(BaseSettings):
    model_config = {"env_prefix": "KVTTL_", "env_file": ".env", "env_file_encoding": "utf-8"}

    # 0 = entries never expire unless a TTL is passed to set()
    default_ttl_seconds: float = 0
    # 0 = no background sweep, expiration is lazy only
    cleanup_interval_seconds: float = Field(0, ge=0)
