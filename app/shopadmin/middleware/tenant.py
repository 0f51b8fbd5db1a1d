from jose import JWTError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from app.shopadmin.core.security import decode_token


class TenantContextMiddleware(BaseHTTPMiddleware):
    """Best-effort log context from the bearer token.

    Nothing here authorizes a request; the route dependencies re-resolve the
    admin from the database and overwrite these values.
    """

    async def dispatch(self, request: Request, call_next):
        request.state.admin_id = None
        request.state.store_id = None
        request.state.role = None

        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.lower().startswith("bearer "):
            token = auth_header.split(" ", 1)[1]
            try:
                payload = decode_token(token, request.app.state.settings)
            except JWTError:
                payload = {}
            request.state.admin_id = payload.get("sub")
            request.state.store_id = payload.get("store_id")
            request.state.role = payload.get("role")

        return await call_next(request)
