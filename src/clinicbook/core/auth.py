"""
Staff credentials for the admin API.

Clinic staff authenticate with static API keys listed in ``API_KEYS`` as
``key:staff_name`` pairs. A bare key with no name is its own staff name.
Patients never authenticate.
"""

import hmac
import logging
import os
from typing import Dict, Optional

from fastapi import HTTPException

logger = logging.getLogger("clinicbook.auth")

BEARER_PREFIX = "Bearer "


def parse_api_keys(raw: str) -> Dict[str, str]:
    """Parse ``"key1:alice,key2:bob"`` into ``{key: staff_name}``."""
    keys: Dict[str, str] = {}
    for entry in (raw or "").split(","):
        entry = entry.strip()
        if not entry:
            continue
        key, _, name = entry.partition(":")
        key, name = key.strip(), name.strip()
        if key:
            keys[key] = name or key
    return keys


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


class AdminKeyring:
    """Resolves an admin request's credentials to a staff name."""

    def __init__(self, api_keys: Optional[Dict[str, str]] = None):
        if api_keys is None:
            api_keys = parse_api_keys(os.getenv("API_KEYS", ""))
        self._keys = api_keys
        if self._keys:
            logger.info("Loaded %d admin API key(s)", len(self._keys))
        else:
            logger.warning("API_KEYS is empty; every admin request will be rejected")

    def __len__(self) -> int:
        return len(self._keys)

    def staff_for_key(self, key: str) -> Optional[str]:
        # compare every key so timing does not reveal a prefix match
        found = None
        for known, staff in self._keys.items():
            if hmac.compare_digest(known.encode(), key.encode()):
                found = staff
        return found

    def authenticate(self, api_key: Optional[str] = None, authorization: Optional[str] = None) -> str:
        """Return the staff name for ``X-API-Key`` or ``Authorization: Bearer``.

        Raises:
            HTTPException: 401 when no credential is given or it is unknown.
        """
        key = (api_key or "").strip()
        if not key and authorization and authorization.startswith(BEARER_PREFIX):
            key = authorization[len(BEARER_PREFIX):].strip()
        if not key:
            raise _unauthorized("Missing X-API-Key header or Authorization Bearer token")

        staff = self.staff_for_key(key)
        if staff is None:
            logger.warning("Rejected admin key %s...", key[:4])
            raise _unauthorized("Invalid API key")
        return staff


_keyring: Optional[AdminKeyring] = None


def get_admin_keyring() -> AdminKeyring:
    global _keyring
    if _keyring is None:
        _keyring = AdminKeyring()
    return _keyring


def reset_admin_keyring() -> None:
    """Forget the cached keyring so the next request re-reads ``API_KEYS``."""
    global _keyring
    _keyring = None
