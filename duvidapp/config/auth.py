import bcrypt
from jose import JWTError, jwt
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from duvidapp.config.settings import settings

SECRET_KEY = settings.secret_key
ALGORITHM = settings.algorithm
ACCESS_TOKEN_EXPIRE_MINUTES = settings.access_token_expire_minutes

# Hash password
def hash_password(password: str) -> str:
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')

# Verify password
def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError:
        # Malformed stored hash
        return False

# Create JWT token
def create_access_token(data: dict, expires_delta: timedelta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt

# Decode and verify JWT token (backend side)
def verify_access_token(token: str) -> Union[dict, None]:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None

# Read claims without verifying the signature (client side, the key stays on the server)
def decode_claims(token: str) -> Union[dict, None]:
    try:
        return jwt.get_unverified_claims(token)
    except JWTError:
        return None

# A token without an `exp` claim never expires
def is_expired(claims: dict, now: Optional[datetime] = None) -> bool:
    exp = claims.get("exp")
    if exp is None:
        return False
    now = now or datetime.now(timezone.utc)
    try:
        return float(exp) <= now.timestamp()
    except (TypeError, ValueError):
        return True
