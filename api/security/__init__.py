import secrets

from fastapi import Header, HTTPException, status

from config import ENV


async def require_admin_service(x_api_key: str | None = Header(None)) -> bool:
    """Every business route is admin-only; the back office authenticates with one service key."""
    expected = ENV().ADMIN_API_TOKEN
    if not expected:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Admin API token is not configured")
    if not x_api_key or not secrets.compare_digest(x_api_key, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid admin API key")
    return True
