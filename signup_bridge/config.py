from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Server
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    # Browserless
    browserless_url: str = "https://production-sfo.browserless.io/chrome/bql"
    browserless_token: str = Field(
        "",
        validation_alias=AliasChoices("SIGNUP_BRIDGE_BROWSERLESS_TOKEN", "BROWSERLESS_TOKEN"),
    )
    mock_token_sentinel: str = "test_token"  # treated the same as no token
    browserless_proxy: str = "residential"  # empty string disables the proxy
    browserless_proxy_country: str = "us"
    browserless_humanlike: bool = True
    browserless_block_consent_modals: bool = True
    request_timeout: float = 120.0  # seconds, transport level

    # Target form
    form_url: str = "https://signup-aus.keela.co/embed/GmjpBXbNAsdcsaRco"
    selector_timeout_ms: int = 30000
    navigation_timeout_ms: int = 15000

    model_config = {"env_prefix": "SIGNUP_BRIDGE_", "populate_by_name": True}


settings = Settings()
