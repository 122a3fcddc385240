# utils/hashing.py
import bcrypt

# bcrypt only looks at the first 72 bytes of a secret and recent releases
# refuse longer input instead of truncating silently
_MAX_SECRET_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_MAX_SECRET_BYTES]


# One-way salted hash of a plaintext password
def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt()).decode("utf-8")


# Never raises on mismatch or on a corrupted stored hash
def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except ValueError:
        return False
