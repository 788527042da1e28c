"""
Authentication schemes describing how a tool's backend expects credentials
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Literal, Optional


class AuthSchemeType(str, Enum):
    APIKEY = "apiKey"
    HTTP = "http"
    OAUTH2 = "oauth2"
    OPENID_CONNECT = "openIdConnect"


@dataclass
class AuthScheme:
    type: AuthSchemeType


@dataclass
class ApiKeyScheme(AuthScheme):
    """API key sent in a header, query parameter or cookie"""
    location: Literal["query", "header", "cookie"] = "header"
    name: str = "X-API-Key"
    description: Optional[str] = None
    type: AuthSchemeType = AuthSchemeType.APIKEY


@dataclass
class HttpScheme(AuthScheme):
    scheme: Literal["basic", "bearer", "digest", "other"] = "bearer"
    bearer_format: Optional[str] = None
    description: Optional[str] = None
    type: AuthSchemeType = AuthSchemeType.HTTP


@dataclass
class OAuthFlow:
    authorization_url: Optional[str] = None
    token_url: Optional[str] = None
    refresh_url: Optional[str] = None
    scopes: Dict[str, str] = field(default_factory=dict)


@dataclass
class OAuthFlows:
    implicit: Optional[OAuthFlow] = None
    password: Optional[OAuthFlow] = None
    client_credentials: Optional[OAuthFlow] = None
    authorization_code: Optional[OAuthFlow] = None


@dataclass
class OAuth2Scheme(AuthScheme):
    flows: OAuthFlows = field(default_factory=OAuthFlows)
    description: Optional[str] = None
    type: AuthSchemeType = AuthSchemeType.OAUTH2


@dataclass
class OpenIdConnectScheme(AuthScheme):
    open_id_connect_url: str = ""
    description: Optional[str] = None
    type: AuthSchemeType = AuthSchemeType.OPENID_CONNECT


@dataclass
class AuthConfig:
    """Authentication configuration for tools"""
    auth_scheme: AuthScheme
    context: Dict[str, Any] = field(default_factory=dict)
