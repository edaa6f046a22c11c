import logging

from functools import lru_cache
from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)


class Scheme(str, Enum):
    HTTPS = "https"
    HTTP = "http"


class Settings(BaseSettings):
    relying_party_host: str = Field(description="Relying party host, e.g. webauthn.example.com")
    relying_party_scheme: Scheme = Scheme.HTTPS

    # Ceremony behaviour
    use_resident_key: bool = Field(default=False, description="Sent as useResidentKey on registration")
    allow_password_credentials: bool = Field(default=True, description="Offer saved passwords during sign in")
    require_login_match: bool = Field(default=True, description="Fail registration if the server confirms another login")

    # Transport
    request_timeout: float | None = Field(default=30.0, gt=0, description="HTTP timeout in seconds")

    model_config = SettingsConfigDict(env_prefix='passkey_')

    @field_validator("relying_party_host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        host = v.strip().rstrip("/")
        if not host:
            raise ValueError("Relying party host must not be empty")
        if "://" in host or "/" in host:
            raise ValueError("Relying party host must not include a scheme or path")
        return host

    @property
    def relying_party_url(self) -> str:
        return f"{self.relying_party_scheme.value}://{self.relying_party_host}"


@lru_cache()
def get_settings():
    return Settings()
