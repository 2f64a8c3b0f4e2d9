"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting and is resistant to rainbow table attacks.
The work factor (rounds=12) takes ~100ms per hash on modern hardware.
"""

import bcrypt

from inkwell.errors import HashingFailure

# bcrypt only looks at the first 72 bytes of the password.
BCRYPT_MAX_BYTES = 72


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password with bcrypt.

    Learn: bcrypt includes a random salt automatically and produces
    hashes starting with "$2b$". Passwords are truncated to 72 bytes
    (bcrypt's limit). Any failure of the primitive is reported as
    HashingFailure so the caller can return a 500 without leaking details.
    """
    try:
        pw_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        salt = bcrypt.gensalt(rounds=rounds)
        return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")
    except (ValueError, TypeError) as e:
        raise HashingFailure() from e


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its bcrypt hash.

    A corrupt or non-bcrypt hash verifies as False rather than raising.
    """
    try:
        pw_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError):
        return False
