from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerifyMismatchError

ph = PasswordHasher(time_cost=3, memory_cost=65536, parallelism=4)


def hash_admin_key(admin_key: str) -> str:
    return ph.hash(admin_key)


def verify_admin_key(stored_hash: str, admin_key: str) -> bool:
    if not stored_hash or not admin_key:
        return False
    try:
        return ph.verify(stored_hash, admin_key)
    except (VerifyMismatchError, InvalidHashError):
        return False
