import secrets
import string

from passlib.context import CryptContext

from .config import BCRYPT_ROUNDS

# URL-safe alphabet for ids and tokens
ID_ALPHABET = string.ascii_letters + string.digits + "_-"

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


# PUBLIC_INTERFACE
def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


# PUBLIC_INTERFACE
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Raises ValueError when the stored hash is malformed."""
    return pwd_context.verify(plain_password, hashed_password)


# PUBLIC_INTERFACE
def generate_id(size: int) -> str:
    """Random string of `size` characters from a cryptographically secure source."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(size))
