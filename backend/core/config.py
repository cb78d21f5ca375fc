from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic.aliases import AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


BACKEND_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=BACKEND_DIR / ".env", env_file_encoding="utf-8", extra="ignore")

    database_url: str

    # Runtime
    environment: str = Field(default="development", validation_alias=AliasChoices("environment", "ENVIRONMENT"))
    frontend_origin: str = Field(
        default="http://localhost:3000",
        validation_alias=AliasChoices("frontend_origin", "FRONTEND_ORIGIN"),
    )
    api_prefix: str = Field(default="/api/v1", validation_alias=AliasChoices("api_prefix", "API_PREFIX"))

    # None: create missing tables everywhere except production.
    auto_create_schema: bool | None = Field(
        default=None,
        validation_alias=AliasChoices("auto_create_schema", "AUTO_CREATE_SCHEMA"),
    )

    # Multi-branch scoping
    # - default_branch_id: branch used when a request carries no X-Branch-Id header
    # - require_branch: reject scoped requests that resolve to no branch at all
    default_branch_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("default_branch_id", "DEFAULT_BRANCH_ID"),
    )
    require_branch: bool = Field(
        default=False,
        validation_alias=AliasChoices("require_branch", "REQUIRE_BRANCH"),
    )

    # Auth (optional): when a secret is configured bearer tokens are verified
    # and their branch claims are enforced against X-Branch-Id.
    jwt_secret_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("jwt_secret_key", "jwt_secret", "JWT_SECRET_KEY", "JWT_SECRET"),
    )
    jwt_algorithm: str = Field(default="HS256", validation_alias=AliasChoices("jwt_algorithm", "JWT_ALGORITHM"))

    # Pagination
    default_page_size: int = Field(
        default=25,
        ge=1,
        validation_alias=AliasChoices("default_page_size", "DEFAULT_PAGE_SIZE"),
    )
    max_page_size: int = Field(
        default=100,
        ge=1,
        validation_alias=AliasChoices("max_page_size", "MAX_PAGE_SIZE"),
    )

    @field_validator("frontend_origin")
    @classmethod
    def _normalize_frontend_origin(cls, v: str) -> str:
        # Starlette CORS expects the Origin to match exactly (no trailing slash).
        return v.strip().rstrip("/")

    @field_validator("api_prefix")
    @classmethod
    def _normalize_api_prefix(cls, v: str) -> str:
        v = (v or "").strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v

    @field_validator("default_branch_id", "jwt_secret_key")
    @classmethod
    def _blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def should_create_schema(self) -> bool:
        if self.auto_create_schema is None:
            return not self.is_production
        return bool(self.auto_create_schema)


settings = Settings()
