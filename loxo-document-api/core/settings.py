import json
import os
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type

from dotenv import dotenv_values
from pydantic import Field, model_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class RecipientStrategy(str, Enum):
    EMAIL = "email"
    PERSON_ID = "person_id"
    QUERY_PARAM = "query_param"


class CredentialStrategy(str, Enum):
    PER_SLUG = "per_slug"
    GLOBAL = "global"


class FilenamePolicy(str, Enum):
    TIMESTAMP = "timestamp"
    URL_PATH = "url_path"


class ErrorStatusPolicy(str, Enum):
    NORMALIZED = "normalized"
    VERBATIM = "verbatim"


DEFAULT_APPSETTINGS_PATH = "appsettings.json"

# Keys used by the "Loxo" section of appsettings.json
APPSETTINGS_ALIASES = {
    "ApiHost": "LOXO_API_HOST",
    "Tokens": "LOXO_TOKENS",
    "BearerToken": "LOXO_BEARER_TOKEN",
    "AgencySlug": "LOXO_AGENCY_SLUG",
}


class AppSettingsJsonSource(PydanticBaseSettingsSource):
    """
    Reads the "Loxo" section of an appsettings.json file.

    The file is optional. Keys may use either the appsettings names
    (BearerToken, AgencySlug, Tokens, ApiHost) or the environment variable names.
    """

    def __init__(self, settings_cls: Type[BaseSettings], path: Optional[str] = None):
        super().__init__(settings_cls)
        self.path = Path(path or self._configured_path())
        self._data = self._load()

    def _configured_path(self) -> str:
        """APPSETTINGS_PATH from the environment, then from the .env file"""
        path = os.environ.get("APPSETTINGS_PATH")
        if not path:
            env_file = self.settings_cls.model_config.get("env_file")
            if isinstance(env_file, (str, Path)) and Path(env_file).is_file():
                path = dotenv_values(env_file).get("APPSETTINGS_PATH")
        return path or DEFAULT_APPSETTINGS_PATH

    def _load(self) -> Dict[str, Any]:
        if not self.path.is_file():
            return {}

        raw = json.loads(self.path.read_text(encoding="utf-8"))
        section = raw.get("Loxo", raw) if isinstance(raw, dict) else {}
        if not isinstance(section, dict):
            return {}

        return {APPSETTINGS_ALIASES.get(key, key): value for key, value in section.items()}

    def get_field_value(self, field: FieldInfo, field_name: str) -> Tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, False

    def __call__(self) -> Dict[str, Any]:
        return {
            name: value
            for name, value in self._data.items()
            if name in self.settings_cls.model_fields
        }


class Settings(BaseSettings):

    # Project settings
    PROJECT_NAME: str = "Loxo Document Upload API"
    API_PREFIX: str = "/api"
    DEBUG: bool = False

    # Loxo
    LOXO_API_HOST: str = "app.loxo.co"
    LOXO_TOKENS: Dict[str, str] = Field(default_factory=dict, description="Bearer token per agency slug")
    LOXO_BEARER_TOKEN: Optional[str] = Field(default=None, description="Single token used by the global credential strategy")
    LOXO_AGENCY_SLUG: Optional[str] = Field(default=None, description="Agency slug used by the query_param recipient strategy")

    # Pipeline behaviour
    RECIPIENT_STRATEGY: RecipientStrategy = RecipientStrategy.EMAIL
    CREDENTIAL_STRATEGY: CredentialStrategy = CredentialStrategy.PER_SLUG
    FILENAME_POLICY: FilenamePolicy = FilenamePolicy.TIMESTAMP
    FILENAME_TIMESTAMP_FORMAT: str = "Form_%Y_%m_%d_%H_%M_%S.pdf"
    ERROR_STATUS_POLICY: ErrorStatusPolicy = ErrorStatusPolicy.NORMALIZED

    # Optional logging settings
    LOG_LEVEL: str = "INFO"

    # Read before the other sources; see AppSettingsJsonSource
    APPSETTINGS_PATH: str = DEFAULT_APPSETTINGS_PATH

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            AppSettingsJsonSource(settings_cls),
            file_secret_settings,
        )

    @model_validator(mode='after')
    def check_strategy_requirements(self) -> 'Settings':
        if self.CREDENTIAL_STRATEGY == CredentialStrategy.GLOBAL and not self.LOXO_BEARER_TOKEN:
            raise ValueError("LOXO_BEARER_TOKEN is required when CREDENTIAL_STRATEGY is 'global'")
        if self.RECIPIENT_STRATEGY == RecipientStrategy.QUERY_PARAM and not self.LOXO_AGENCY_SLUG:
            raise ValueError("LOXO_AGENCY_SLUG is required when RECIPIENT_STRATEGY is 'query_param'")
        return self

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
