from pydantic import ConfigDict
from pydantic_settings import BaseSettings
from typing import Optional


class DeliverySettings(BaseSettings):
    model_config = ConfigDict(env_file=".env", env_prefix="CONTENT_DELIVERY_")

    api_key: str = ""
    delivery_token: str = ""
    environment: Optional[str] = None
    branch: Optional[str] = None

    host: str = "cdn.contentstack.io"
    region: str = "us"
    scheme: str = "https://"
    version: str = "v3"
    timeout_seconds: int = 30

    debug: bool = False
    log_level: str = "INFO"


def get_settings() -> DeliverySettings:
    return DeliverySettings()
