"""Shared API helpers: response envelope, cookies, auth guards, service wiring."""

from __future__ import annotations

import functools
import os
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any, TypeVar
from uuid import uuid4

from flask import Response, current_app, g, jsonify, request
from sqlalchemy.orm import Session
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from videohub.core.extensions import db, get_redis
from videohub.infra.jwt import JWTTokenProvider
from videohub.infra.media import LocalMediaResolver
from videohub.infra.redis import RedisRefreshTokenStore
from videohub.infra.sql import SqlRefreshTokenStore
from videohub.services._shared.errors import AuthError
from videohub.services._shared.ports import MediaResolver, RefreshTokenStore
from videohub.services.auth.dto import AuthTokenConfig
from videohub.services.auth.service import SessionService
from videohub.services.auth.tokens import TokenIssuer
from videohub.services.identity.service import IdentityService
from videohub.services.views.service import ViewService

F = TypeVar("F", bound=Callable[..., Any])


# ------------------------------ Responses ------------------------------------


def envelope(data: Any, message: str = "Success", *, status: int = 200) -> dict[str, Any]:
    """Build the success envelope shared by every endpoint."""

    return {"statusCode": status, "data": data, "message": message, "success": status < 400}


def json_response(data: Any, message: str = "Success", *, status: int = 200) -> Response:
    """Return an enveloped JSON response with the given status."""

    response = jsonify(envelope(data, message, status=status))
    response.status_code = status
    return response


# ------------------------------- Cookies -------------------------------------


def _cookie_options() -> dict[str, Any]:
    hardened = bool(current_app.config.get("COOKIE_HARDENED", False))
    return {
        "httponly": True,
        "secure": hardened,
        "samesite": "Strict" if hardened else "Lax",
        "path": "/",
    }


def set_auth_cookies(response: Response, *, access_token: str, refresh_token: str) -> Response:
    """Attach both credential cookies with lifetimes matching the tokens."""

    cfg = current_app.config
    options = _cookie_options()
    response.set_cookie(
        cfg["ACCESS_COOKIE_NAME"],
        access_token,
        max_age=int(timedelta(minutes=cfg["ACCESS_TOKEN_EXPIRES_MINUTES"]).total_seconds()),
        **options,
    )
    response.set_cookie(
        cfg["REFRESH_COOKIE_NAME"],
        refresh_token,
        max_age=int(timedelta(days=cfg["REFRESH_TOKEN_EXPIRES_DAYS"]).total_seconds()),
        **options,
    )
    return response


def clear_auth_cookies(response: Response) -> Response:
    cfg = current_app.config
    options = _cookie_options()
    response.delete_cookie(cfg["ACCESS_COOKIE_NAME"], **options)
    response.delete_cookie(cfg["REFRESH_COOKIE_NAME"], **options)
    return response


# ------------------------------ Composition ----------------------------------


def get_session() -> Session:
    """Return the SQLAlchemy session bound to the current application."""

    return db.session


def get_refresh_store(session: Session | None = None) -> RefreshTokenStore:
    """Redis when ``REDIS_URL`` is configured, the users table otherwise."""

    client = get_redis(current_app)
    if client is not None:
        ttl = int(timedelta(days=current_app.config["REFRESH_TOKEN_EXPIRES_DAYS"]).total_seconds())
        return RedisRefreshTokenStore(r=client, ttl_seconds=ttl)
    return SqlRefreshTokenStore(session=session or get_session())


def build_token_issuer() -> TokenIssuer:
    cfg = current_app.config
    provider = JWTTokenProvider(
        access_secret=cfg["ACCESS_TOKEN_SECRET"],
        refresh_secret=cfg["REFRESH_TOKEN_SECRET"],
        algorithm=cfg.get("JWT_ALGORITHM", "HS256"),
    )
    return TokenIssuer(
        provider,
        AuthTokenConfig(
            access_expires=timedelta(minutes=cfg["ACCESS_TOKEN_EXPIRES_MINUTES"]),
            refresh_expires=timedelta(days=cfg["REFRESH_TOKEN_EXPIRES_DAYS"]),
        ),
    )


def build_session_service() -> SessionService:
    session = get_session()
    return SessionService(
        session=session,
        issuer=build_token_issuer(),
        refresh_store=get_refresh_store(session),
        expose_details=bool(current_app.config.get("EXPOSE_ERROR_DETAILS", False)),
    )


def build_identity_service() -> IdentityService:
    session = get_session()
    return IdentityService(
        session=session,
        refresh_store=get_refresh_store(session),
        default_avatar_url=current_app.config["DEFAULT_AVATAR_URL"],
    )


def build_view_service() -> ViewService:
    return ViewService(
        session=get_session(),
        history_dedup=bool(current_app.config.get("WATCH_HISTORY_DEDUP", False)),
        history_max=int(current_app.config.get("WATCH_HISTORY_MAX", 0)),
    )


def build_media_resolver() -> MediaResolver:
    cfg = current_app.config
    return LocalMediaResolver(media_root=cfg["MEDIA_ROOT"], base_url=cfg["MEDIA_BASE_URL"])


# ------------------------------- Uploads -------------------------------------


def save_upload(field: str) -> str | None:
    """Write the uploaded file in ``field`` to the temp dir and return its path."""

    storage: FileStorage | None = request.files.get(field)
    if storage is None or not storage.filename:
        return None
    temp_dir = current_app.config["UPLOAD_TEMP_DIR"]
    os.makedirs(temp_dir, exist_ok=True)
    name = secure_filename(storage.filename) or "upload"
    path = os.path.join(temp_dir, f"{uuid4().hex}-{name}")
    storage.save(path)
    return path


def resolve_upload(field: str) -> str | None:
    """Save and hand the upload in ``field`` to the media resolver."""

    path = save_upload(field)
    if path is None:
        return None
    return build_media_resolver().resolve(path)


def discard_media(*refs: str | None) -> None:
    """Remove media stored by :func:`resolve_upload` for a request that failed."""

    resolver = build_media_resolver()
    for ref in refs:
        if ref:
            resolver.discard(ref)


# ------------------------------ Auth guards ----------------------------------


def _presented_access_token() -> str | None:
    token = request.cookies.get(current_app.config["ACCESS_COOKIE_NAME"])
    if token:
        return token
    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def current_user_id() -> int:
    """Return the user id set by :func:`require_auth`."""

    user_id = getattr(g, "current_user_id", None)
    if user_id is None:
        raise AuthError("Unauthorized request")
    return int(user_id)


def require_auth(func: F) -> F:
    """Ensure the request carries a valid access token (cookie or bearer)."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.current_user_id = build_session_service().authorize(_presented_access_token())
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def optional_auth(func: F) -> F:
    """Authenticate when a token is presented; anonymous otherwise.

    A presented but invalid token is still rejected.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = _presented_access_token()
        g.current_user_id = build_session_service().authorize(token) if token else None
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
