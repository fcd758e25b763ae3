from .pyjwt_token_provider import ACCESS, REFRESH, JWTTokenProvider

__all__ = ["JWTTokenProvider", "ACCESS", "REFRESH"]
