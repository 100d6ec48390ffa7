import logging
import secrets

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from fooddelivery import settings

log = logging.getLogger(__name__)

# auto_error=False so a missing header is a 401 "Missing token", not FastAPI's 403
bearer = HTTPBearer(auto_error=False)


def require_token(credentials: HTTPAuthorizationCredentials | None = Depends(bearer)) -> str:
    """Reject the request unless it carries `Authorization: Bearer <API_TOKEN>`."""
    if credentials is None or not credentials.credentials:
        log.info("auth failed: missing token")
        raise HTTPException(401, "Missing token")
    if not secrets.compare_digest(credentials.credentials, settings.API_TOKEN):
        log.info("auth failed: invalid token")
        raise HTTPException(401, "Invalid token")
    return credentials.credentials
