"""Password hashing (bcrypt)"""

import logging

import bcrypt

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of the secret
BCRYPT_MAX_BYTES = 72
BCRYPT_ROUNDS = 10


def _to_bcrypt_secret(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def looks_hashed(value: str) -> bool:
    """True when the stored value is a bcrypt digest rather than a legacy plain password"""
    return isinstance(value, str) and value.startswith(("$2a$", "$2b$", "$2y$")) and len(value) == 60


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash as a UTF-8 string"""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_to_bcrypt_secret(password), salt).decode("utf-8")


def verify_password(password: str, stored: str) -> bool:
    """Check a password against the stored digest.

    Records created before hashing was introduced hold the password itself;
    those still match on plain equality.
    """
    if not password or not stored:
        return False
    if looks_hashed(stored):
        try:
            return bcrypt.checkpw(_to_bcrypt_secret(password), stored.encode("utf-8"))
        except ValueError as e:
            logger.warning(f"Malformed password hash: {e}")
            return False
    return password == stored
