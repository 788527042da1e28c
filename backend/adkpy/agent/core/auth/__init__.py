"""Credential and scheme objects handed to tools."""

from .credentials import (
    ApiKeyCredential,
    AuthCredential,
    AuthCredentialType,
    BasicAuthCredential,
    BearerTokenCredential,
    OAuth2Credential,
)
from .handler import AuthHandler
from .schemes import (
    ApiKeyScheme,
    AuthConfig,
    AuthScheme,
    AuthSchemeType,
    HttpScheme,
    OAuth2Scheme,
    OAuthFlow,
    OAuthFlows,
    OpenIdConnectScheme,
)

__all__ = [
    "ApiKeyCredential",
    "AuthCredential",
    "AuthCredentialType",
    "BasicAuthCredential",
    "BearerTokenCredential",
    "OAuth2Credential",
    "AuthHandler",
    "ApiKeyScheme",
    "AuthConfig",
    "AuthScheme",
    "AuthSchemeType",
    "HttpScheme",
    "OAuth2Scheme",
    "OAuthFlow",
    "OAuthFlows",
    "OpenIdConnectScheme",
]
