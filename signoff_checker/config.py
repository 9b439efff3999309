from dataclasses import dataclass, field
from typing import Annotated

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


@dataclass(frozen=True)
class RegistrationConfig:
    organizations: list[str] = field(default_factory=list)
    webhook_url: str = ""
    webhook_secret: str = ""
    dry_run: bool = False


class Settings(BaseSettings):
    github_token: str = ""
    github_api_url: str = "https://api.github.com"
    shared_secret: str = ""
    organizations: Annotated[list[str], NoDecode] = []
    webhook_url: str | None = None
    dry_run: bool = False
    register_interval: float = 3600.0
    debug: bool = False
    sentry_dsn: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @field_validator("organizations", mode="before")
    @classmethod
    def split_organizations(cls, v):
        if isinstance(v, str):
            return [org.strip() for org in v.split(",") if org.strip()]
        return v

    @model_validator(mode="after")
    def webhook_url_must_be_https(self):
        if self.registration_enabled and not (
            self.webhook_url and self.webhook_url.startswith("https://")
        ):
            raise ValueError(
                "webhook_url must be an https:// URL when organizations are set"
            )
        return self

    @property
    def registration_enabled(self) -> bool:
        return bool(self.organizations)

    @property
    def secret(self) -> bytes:
        return self.shared_secret.encode()

    def registration(self) -> RegistrationConfig:
        return RegistrationConfig(
            organizations=list(self.organizations),
            webhook_url=self.webhook_url or "",
            webhook_secret=self.shared_secret,
            dry_run=self.dry_run,
        )


settings = Settings()
