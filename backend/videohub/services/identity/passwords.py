"""Password hashing helpers.

Plain functions over strings so credential checks can be tested without a
database. Hashes come from :mod:`werkzeug.security` (salted, slow KDF).
"""

from __future__ import annotations

from functools import lru_cache

from werkzeug.security import check_password_hash, generate_password_hash


def hash_password(raw: str) -> str:
    """
    Derive a salted one-way hash.

    :param raw: Plain text password.
    :type raw: str
    :returns: Encoded hash including method and salt.
    :rtype: str
    :raises ValueError: When ``raw`` is empty.
    """
    if not isinstance(raw, str) or not raw:
        raise ValueError("Password must be a non-empty string.")
    return generate_password_hash(raw)


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return generate_password_hash("videohub-timing-equalizer")


def verify_password(password_hash: str | None, candidate: str) -> bool:
    """
    Check ``candidate`` against ``password_hash``.

    When ``password_hash`` is ``None`` (the user does not exist) a dummy hash
    is still verified, so "no such user" and "wrong password" take the same
    time. Both return ``False``.

    :param password_hash: Stored hash, or ``None`` when no user matched.
    :param candidate: Password supplied by the caller.
    :returns: ``True`` only when a real hash matches.
    :rtype: bool
    """
    if password_hash is None:
        check_password_hash(_dummy_hash(), candidate or "")
        return False
    return bool(check_password_hash(password_hash, candidate or ""))
