from fastapi import Depends, HTTPException, Request, status

from . import config


async def require_admin(request: Request) -> None:
    """
    Guard for endpoints that change the ledger.  Listings, reports and
    downloads do not depend on it and stay readable without a token.

    - If LEDGERBOOK_API_TOKEN is set, require `Authorization: Bearer <token>`.
    - If no token is set, allow writes only from loopback addresses.
    """
    client_host = request.client.host if request.client else ""

    if config.API_TOKEN:
        auth_header = request.headers.get("Authorization", "")
        prefix = "Bearer "
        if not auth_header.startswith(prefix) or auth_header[len(prefix):].strip() != config.API_TOKEN:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or missing admin token.",
            )
        return

    if client_host not in ("127.0.0.1", "::1", "localhost"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Remote changes require LEDGERBOOK_API_TOKEN.",
        )


RequireAdmin = Depends(require_admin)
