"""Admin password checks — class-based provider.

Two entry points share the configured ``ADMIN_PASSWORD``:

1. ``verify_password`` backs ``POST /api/admin/verify``, which the admin UI
   calls before unlocking its controls.
2. ``require_admin`` is a FastAPI dependency guarding admin-only endpoints.
   It expects ``Authorization: Bearer <ADMIN_PASSWORD>``.
"""

import logging
import secrets
from typing import Annotated

from fastapi import Depends, HTTPException, Request

from coplaylist.settings import AppSettings, get_settings

logger = logging.getLogger(__name__)


class AdminAuthProvider:
    """Provides admin authentication as a FastAPI dependency.

    When ``ADMIN_PASSWORD`` is empty the dependency lets every request
    through (dev mode), while ``verify_password`` refuses to answer.
    """

    async def require_admin(
        self,
        request: Request,
        settings: Annotated[AppSettings, Depends(get_settings)],
    ) -> None:
        """Raises HTTPException(401) unless the request carries the admin password."""
        if not settings.ADMIN_PASSWORD:
            return

        scheme, _, credentials = request.headers.get("Authorization", "").partition(" ")
        if scheme.lower() != "bearer" or not credentials:
            raise self._unauthorized("Admin password required")
        if not secrets.compare_digest(credentials.strip().encode(), settings.ADMIN_PASSWORD.encode()):
            logger.warning("Rejected admin request to %s", request.url.path)
            raise self._unauthorized("Invalid admin password")

    @staticmethod
    def _unauthorized(detail: str) -> HTTPException:
        return HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})

    @staticmethod
    def verify_password(password: str, settings: AppSettings) -> bool:
        """Constant-time comparison against the configured admin password.

        Raises HTTPException(500) when no password is configured.
        """
        if not settings.ADMIN_PASSWORD:
            raise HTTPException(status_code=500, detail="ADMIN_PASSWORD not configured")
        valid = secrets.compare_digest(password.encode(), settings.ADMIN_PASSWORD.encode())
        if not valid:
            logger.warning("Rejected admin password attempt")
        return valid


_provider = AdminAuthProvider()
require_admin = _provider.require_admin
verify_password = _provider.verify_password
