from .sql_refresh_token_store import SqlRefreshTokenStore

__all__ = ["SqlRefreshTokenStore"]
