from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Mapping

from core.exceptions import MissingCredentialsError
from core.settings import CredentialStrategy, Settings


class CredentialProvider(ABC):
    """Resolves the Loxo bearer token to use for an agency slug"""

    @abstractmethod
    def get_token(self, agency_slug: str) -> str:
        ...


class PerAgencyCredentials(CredentialProvider):
    def __init__(self, tokens: Mapping[str, str]):
        # Read-only view, shared by every invocation
        self._tokens = MappingProxyType(dict(tokens))

    def get_token(self, agency_slug: str) -> str:
        token = self._tokens.get(agency_slug)
        if not token:
            raise MissingCredentialsError(agency_slug)
        return token


class GlobalCredentials(CredentialProvider):
    def __init__(self, token: str):
        self._token = token

    def get_token(self, agency_slug: str) -> str:
        if not self._token:
            raise MissingCredentialsError(agency_slug)
        return self._token


def build_credential_provider(settings: Settings) -> CredentialProvider:
    if settings.CREDENTIAL_STRATEGY == CredentialStrategy.GLOBAL:
        return GlobalCredentials(settings.LOXO_BEARER_TOKEN or "")
    return PerAgencyCredentials(settings.LOXO_TOKENS)
