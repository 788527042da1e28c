from __future__ import annotations

from typing import Dict, Optional

from .credentials import AuthCredential
from .schemes import AuthConfig
from ...exceptions import CredentialRefreshError


class AuthHandler:
    """Authentication handle passed to tools through the ToolContext."""

    def __init__(self, auth_config: AuthConfig, credential: Optional[AuthCredential] = None):
        self.auth_config = auth_config
        self.credential = credential

    def get_token(self) -> Optional[str]:
        return self.credential.get_token() if self.credential else None

    def get_headers(self) -> Dict[str, str]:
        if self.credential is None:
            return {}
        return self.credential.get_headers(self.auth_config)

    def can_refresh(self) -> bool:
        return self.credential is not None and self.credential.can_refresh()

    async def refresh_token(self) -> None:
        """Refresh the credential; fails explicitly when it cannot refresh."""
        if self.credential is None:
            raise CredentialRefreshError("No credential configured to refresh")
        await self.credential.refresh()
