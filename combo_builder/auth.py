"""
Authentication for Staff (POS) Endpoints
========================================

The point-of-sale combo wizard lives under /pos/* and is meant for cashiers
only. It is protected with HTTP Basic authentication; the storefront wizard
under /combos and /combo-sessions is public.

Configuration:
--------------
Environment variables (see config.py):
- STAFF_USERNAME: Username for POS access (default: "staff")
- STAFF_PASSWORD: Password for POS access (required, no default)

Behaviour:
----------
- 503 if STAFF_PASSWORD is not configured (fail closed)
- 401 with WWW-Authenticate header if credentials are invalid
- The username string if authentication succeeds

Usage:
------
    from combo_builder.auth import verify_staff_credentials

    @router.get("/pos/something")
    def something(staff: str = Depends(verify_staff_credentials)):
        ...
"""

import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from . import config


# =============================================================================
# HTTP Basic Auth Setup
# =============================================================================
# One realm for every POS route so browsers reuse the cached credentials.

security = HTTPBasic(realm="Combo Builder POS")


# =============================================================================
# Staff Authentication Dependency
# =============================================================================

def verify_staff_credentials(
    credentials: HTTPBasicCredentials = Depends(security),
) -> str:
    """
    Verify HTTP Basic Auth credentials for POS endpoints.

    Args:
        credentials: HTTP Basic Auth credentials extracted from the request.

    Returns:
        str: The authenticated username.

    Raises:
        HTTPException (503): If STAFF_PASSWORD is not set.
        HTTPException (401): If credentials are invalid.
    """
    if not config.STAFF_PASSWORD:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Staff authentication not configured. Set STAFF_PASSWORD environment variable.",
        )

    # Constant-time comparison
    username_correct = secrets.compare_digest(
        credentials.username.encode("utf-8"),
        config.STAFF_USERNAME.encode("utf-8"),
    )
    password_correct = secrets.compare_digest(
        credentials.password.encode("utf-8"),
        config.STAFF_PASSWORD.encode("utf-8"),
    )

    if not (username_correct and password_correct):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid staff credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username
