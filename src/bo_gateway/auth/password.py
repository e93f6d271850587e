"""bcrypt password hashing for staff accounts.

The ``bcrypt`` package is used directly; passlib is unmaintained and breaks
with bcrypt >= 4.
"""

import bcrypt

MIN_PASSWORD_LENGTH = 6


def hash_password(plain: str) -> str:
    """Return the bcrypt hash of `plain` as a utf-8 string."""
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str | None) -> bool:
    """Check `plain` against a stored hash. A missing hash never matches."""
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed hash in the row (e.g. imported account); treat as mismatch
        return False
