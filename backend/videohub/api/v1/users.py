"""User, session and channel endpoints."""

from __future__ import annotations

from dataclasses import replace

from flask import Blueprint, current_app, g, request

from videohub.api.deps import (
    build_identity_service,
    build_session_service,
    build_view_service,
    clear_auth_cookies,
    current_user_id,
    discard_media,
    json_response,
    optional_auth,
    require_auth,
    resolve_upload,
    set_auth_cookies,
    timing,
)
from videohub.schemas import (
    ChangePasswordSchema,
    ChannelViewSchema,
    EnrichedVideoSchema,
    LoginResponseSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
    UpdateAccountSchema,
    UserSchema,
)
from videohub.services._shared.errors import AuthError
from videohub.services.auth.dto import LoginIn, RefreshIn
from videohub.services.identity.dto import (
    UserAccountUpdateIn,
    UserPasswordChangeIn,
    UserRegisterIn,
)

bp = Blueprint("users", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
change_password_schema = ChangePasswordSchema()
update_account_schema = UpdateAccountSchema()
user_schema = UserSchema()
token_schema = TokenPairSchema()
login_response_schema = LoginResponseSchema()
channel_schema = ChannelViewSchema()
history_schema = EnrichedVideoSchema(many=True)


def _payload() -> dict:
    """Read JSON bodies and form fields alike."""

    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


# ------------------------------ Credentials ----------------------------------


@bp.post("/register")
@timing
def register():
    """Create an account; avatar and cover may arrive as uploaded files.

    Uploads are stored only once the account is known to be registrable.
    """

    data = register_schema.load(_payload())
    dto = UserRegisterIn(
        username=data["username"],
        email=data["email"],
        full_name=data["full_name"],
        password=data["password"],
        avatar_ref=data.get("avatar"),
        cover_image_ref=data.get("cover_image"),
    )
    service = build_identity_service()
    service.ensure_registrable(dto)

    avatar_ref = resolve_upload("avatar")
    cover_ref = resolve_upload("coverImage")
    try:
        user = service.register(
            replace(
                dto,
                avatar_ref=avatar_ref or dto.avatar_ref,
                cover_image_ref=cover_ref or dto.cover_image_ref,
            )
        )
    except Exception:
        discard_media(avatar_ref, cover_ref)
        raise
    return json_response(user_schema.dump(user), "User registered successfully", status=201)


@bp.post("/login")
@timing
def login():
    """Verify credentials, set both credential cookies, return the pair."""

    data = login_schema.load(_payload())
    result = build_session_service().login(
        LoginIn(password=data["password"], username=data["username"], email=data["email"])
    )
    body = login_response_schema.dump(
        {
            "user": result.user,
            "access_token": result.tokens.access_token,
            "refresh_token": result.tokens.refresh_token,
        }
    )
    response = json_response(body, "User logged in successfully")
    return set_auth_cookies(
        response,
        access_token=result.tokens.access_token,
        refresh_token=result.tokens.refresh_token,
    )


@bp.post("/logout")
@require_auth
@timing
def logout():
    build_session_service().logout(current_user_id())
    return clear_auth_cookies(json_response({}, "User logged out"))


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Rotate the refresh token taken from the cookie or the JSON body."""

    presented = request.cookies.get(current_app.config["REFRESH_COOKIE_NAME"])
    if not presented:
        presented = refresh_schema.load(_payload()).get("refresh_token")
    if not presented:
        raise AuthError("Unauthorized request")
    tokens = build_session_service().refresh(RefreshIn(refresh_token=presented))
    response = json_response(token_schema.dump(tokens), "Access token refreshed")
    return set_auth_cookies(
        response, access_token=tokens.access_token, refresh_token=tokens.refresh_token
    )


@bp.post("/change-password")
@require_auth
@timing
def change_password():
    data = change_password_schema.load(_payload())
    build_identity_service().change_password(
        UserPasswordChangeIn(
            user_id=current_user_id(),
            old_password=data["old_password"],
            new_password=data["new_password"],
        )
    )
    return json_response({}, "Password changed successfully")


# -------------------------------- Profile ------------------------------------


@bp.get("/current-user")
@require_auth
@timing
def current_user():
    user = build_identity_service().get_user(current_user_id())
    return json_response(user_schema.dump(user), "Current user fetched successfully")


@bp.route("/update-account", methods=["PUT", "PATCH"])
@require_auth
@timing
def update_account():
    data = update_account_schema.load(_payload())
    user = build_identity_service().update_account(
        UserAccountUpdateIn(
            user_id=current_user_id(), full_name=data["full_name"], email=data["email"]
        )
    )
    return json_response(user_schema.dump(user), "Account details updated successfully")


@bp.route("/update-avatar", methods=["PUT", "PATCH"])
@bp.patch("/avatar")
@require_auth
@timing
def update_avatar():
    user = build_identity_service().update_avatar(current_user_id(), resolve_upload("avatar"))
    return json_response(user_schema.dump(user), "Avatar image updated successfully")


@bp.route("/update-cover-image", methods=["PUT", "PATCH"])
@bp.patch("/cover-image")
@require_auth
@timing
def update_cover_image():
    user = build_identity_service().update_cover_image(
        current_user_id(), resolve_upload("coverImage")
    )
    return json_response(user_schema.dump(user), "Cover image updated successfully")


# --------------------------------- Views -------------------------------------


@bp.get("/user-channel/<username>")
@bp.get("/c/<username>")
@optional_auth
@timing
def channel_profile(username: str):
    """Channel profile; ``isSubscribed`` reflects the caller when authenticated."""

    view = build_view_service().build_channel_view(username, requester_id=_optional_user_id())
    return json_response(channel_schema.dump(view), "User channel fetched successfully")


@bp.get("/watch-history")
@bp.get("/history")
@require_auth
@timing
def watch_history():
    items = build_view_service().build_watch_history(current_user_id())
    return json_response(history_schema.dump(items), "Watch history fetched successfully")


@bp.post("/history/<int:video_id>")
@require_auth
@timing
def record_view(video_id: int):
    build_view_service().record_view(current_user_id(), video_id)
    return json_response({}, "View recorded", status=201)


def _optional_user_id() -> int | None:
    user_id = getattr(g, "current_user_id", None)
    return None if user_id is None else int(user_id)
