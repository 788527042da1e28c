"""
Authentication credentials consumed by tools

A credential produces a token and a header map; only OAuth2 credentials with a
refresh token and refresh function can refresh.
"""

from __future__ import annotations

import base64
import logging
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from .schemes import ApiKeyScheme, AuthConfig
from ...exceptions import CredentialRefreshError

logger = logging.getLogger(__name__)

# Tokens this close to expiry are treated as expired
EXPIRY_SKEW_SECONDS = 30

RefreshFunction = Callable[[str], Awaitable[Dict[str, Any]]]


class AuthCredentialType(str, Enum):
    API_KEY = "api_key"
    BASIC = "basic"
    BEARER = "bearer"
    OAUTH2 = "oauth2"
    CUSTOM = "custom"


class AuthCredential(ABC):
    """Base class for authentication credentials"""

    def __init__(self, credential_type: AuthCredentialType):
        self.type = credential_type

    @abstractmethod
    def get_token(self) -> Optional[str]:
        pass

    @abstractmethod
    def get_headers(self, config: Optional[AuthConfig] = None) -> Dict[str, str]:
        pass

    def can_refresh(self) -> bool:
        return False

    async def refresh(self) -> None:
        raise CredentialRefreshError(f"Token refresh not supported for credential type {self.type.value}")


class ApiKeyCredential(AuthCredential):
    def __init__(self, api_key: str):
        super().__init__(AuthCredentialType.API_KEY)
        self.api_key = api_key

    def get_token(self) -> str:
        return self.api_key

    def get_headers(self, config: Optional[AuthConfig] = None) -> Dict[str, str]:
        scheme = config.auth_scheme if config else None
        if isinstance(scheme, ApiKeyScheme) and scheme.location == "header":
            return {scheme.name: self.api_key}
        return {}


class BasicAuthCredential(AuthCredential):
    def __init__(self, username: str, password: str):
        super().__init__(AuthCredentialType.BASIC)
        self.username = username
        self.password = password

    def get_token(self) -> str:
        return base64.b64encode(f"{self.username}:{self.password}".encode("utf-8")).decode("ascii")

    def get_headers(self, config: Optional[AuthConfig] = None) -> Dict[str, str]:
        return {"Authorization": f"Basic {self.get_token()}"}


class BearerTokenCredential(AuthCredential):
    def __init__(self, token: str):
        super().__init__(AuthCredentialType.BEARER)
        self.token = token

    def get_token(self) -> str:
        return self.token

    def get_headers(self, config: Optional[AuthConfig] = None) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


class OAuth2Credential(AuthCredential):
    """OAuth2 access token with optional refresh capability.

    ``refresh_function`` receives the refresh token and returns a dict with
    ``access_token`` and optionally ``refresh_token`` and ``expires_in``.
    """

    def __init__(
        self,
        access_token: str,
        refresh_token: Optional[str] = None,
        expires_in: Optional[float] = None,
        refresh_function: Optional[RefreshFunction] = None,
    ):
        super().__init__(AuthCredentialType.OAUTH2)
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.expires_at: Optional[float] = time.time() + expires_in if expires_in else None
        self._refresh_function = refresh_function

    def get_token(self) -> str:
        return self.access_token

    def get_headers(self, config: Optional[AuthConfig] = None) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}

    def can_refresh(self) -> bool:
        return bool(self.refresh_token) and self._refresh_function is not None

    def is_expired(self) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at - EXPIRY_SKEW_SECONDS < time.time()

    async def refresh(self) -> None:
        if not self.can_refresh():
            raise CredentialRefreshError("Cannot refresh token: no refresh token or refresh function")

        result = await self._refresh_function(self.refresh_token)
        self.access_token = result["access_token"]
        if result.get("refresh_token"):
            self.refresh_token = result["refresh_token"]
        if result.get("expires_in"):
            self.expires_at = time.time() + result["expires_in"]
        logger.info("OAuth2 access token refreshed")
