import bcrypt

from coursehub.core.config import settings

# bcrypt ignores everything past 72 bytes
_BCRYPT_MAX_BYTES = 72


class PasswordHelper:
    @staticmethod
    def _encode(password: str) -> bytes:
        return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password using bcrypt with the configured cost."""
        salt = bcrypt.gensalt(rounds=settings.password_hash_rounds)
        return bcrypt.hashpw(PasswordHelper._encode(password), salt).decode("utf-8")

    @staticmethod
    def check_password(password: str, hashed_password: str) -> bool:
        if not hashed_password:
            return False
        return bcrypt.checkpw(
            PasswordHelper._encode(password), hashed_password.encode("utf-8")
        )
