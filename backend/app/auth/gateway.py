"""
Authentication gateway middleware.

Every request under the protected namespace must carry
``Authorization: Bearer <token>``. The token is verified before any route
code runs. On success the verified identity is stored once on
``request.state.identity``; downstream handlers read it from there only and
never from headers or the body.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.auth.tokens import TokenCodec
from app.errors import InvalidToken, Unauthorized
from app.utils.logging import log_auth_rejected
from app.utils.metrics import auth_rejections_total

logger = logging.getLogger(__name__)

PUBLIC_PATHS = frozenset({
    "/",
    "/metrics",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/api/health",
    "/api/auth/login",
    "/api/auth/signup",
})

PROTECTED_PREFIX = "/api"


@dataclass(frozen=True)
class Identity:
    """Identity proven by a verified session token."""
    user_id: str
    email: str


class AuthGatewayMiddleware(BaseHTTPMiddleware):
    """Rejects unauthenticated requests and attaches verified identity."""

    def __init__(
        self,
        app,
        token_codec: TokenCodec,
        public_paths: Optional[Iterable[str]] = None,
        protected_prefix: str = PROTECTED_PREFIX,
    ):
        super().__init__(app)
        self.token_codec = token_codec
        self.public_paths = frozenset(public_paths) if public_paths is not None else PUBLIC_PATHS
        self.protected_prefix = protected_prefix

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path

        if request.method == "OPTIONS" or not self._is_protected(path):
            return await call_next(request)

        authorization = request.headers.get("Authorization")
        if not authorization:
            return self._reject(path, "missing_header", "Missing authorization header")

        token = self._extract_bearer(authorization)
        if token is None:
            return self._reject(path, "malformed_header", "Invalid authorization header format")

        try:
            claims = self.token_codec.verify(token)
        except InvalidToken as e:
            return self._reject(path, "invalid_token", e.message)

        request.state.identity = Identity(user_id=claims.user_id, email=claims.email)
        return await call_next(request)

    def _is_protected(self, path: str) -> bool:
        if path in self.public_paths or path.rstrip("/") in self.public_paths:
            return False
        return path == self.protected_prefix or path.startswith(self.protected_prefix + "/")

    @staticmethod
    def _extract_bearer(authorization: str) -> Optional[str]:
        parts = authorization.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            return None
        return parts[1]

    @staticmethod
    def _reject(path: str, reason: str, message: str) -> JSONResponse:
        auth_rejections_total.labels(reason=reason).inc()
        log_auth_rejected(logger, path=path, reason=reason)
        error = Unauthorized(message)
        return JSONResponse(
            status_code=error.status_code,
            content=error.to_response(),
            headers={"WWW-Authenticate": "Bearer"},
        )
