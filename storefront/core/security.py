from datetime import datetime, timedelta, timezone
from typing import Optional
from passlib.context import CryptContext
from jose import jwt, JWTError
from pydantic import BaseModel, ConfigDict, field_validator

from storefront.core.config import settings, Settings, MIN_JWT_SECRET_LENGTH

pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
    argon2__time_cost=settings.PASSWORD_HASH_ROUNDS,
)

USER_ID_CLAIM = "userId"


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if hashed_password is None:
        # Burn the same amount of time as a real check
        pwd_context.dummy_verify()
        return False
    return pwd_context.verify(plain_password, hashed_password)


class TokenError(Exception):
    """Raised when a token cannot be parsed or lacks an expected claim."""


class TokenConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    secret: str
    algorithm: str = "HS256"
    expiration: timedelta = timedelta(hours=24)

    @field_validator("secret")
    @classmethod
    def check_secret(cls, value: str) -> str:
        if not value or len(value) < MIN_JWT_SECRET_LENGTH:
            raise ValueError(f"JWT secret must be at least {MIN_JWT_SECRET_LENGTH} characters")
        return value

    @classmethod
    def from_settings(cls, source: Settings) -> "TokenConfig":
        return cls(
            secret=source.JWT_SECRET,
            algorithm=source.JWT_ALGORITHM,
            expiration=timedelta(milliseconds=source.JWT_EXPIRATION_MS),
        )


class TokenService:
    """
    Issues and checks signed identity tokens.

    Tokens carry the username as ``sub`` and the numeric user id as ``userId``.
    Nothing is stored server side: a token is valid while its signature
    matches and ``exp`` lies in the future.
    """

    def __init__(self, config: TokenConfig):
        self.config = config

    def issue(self, username: str, user_id: int) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": username,
            USER_ID_CLAIM: user_id,
            "iat": now,
            "exp": now + self.config.expiration,
        }
        return jwt.encode(claims, self.config.secret, algorithm=self.config.algorithm)

    def _decode(self, token: str) -> dict:
        if not token:
            raise TokenError("Token is empty")
        try:
            return jwt.decode(token, self.config.secret, algorithms=[self.config.algorithm])
        except JWTError as e:
            raise TokenError(f"Could not parse token: {e}") from e

    def extract_username(self, token: str) -> str:
        username = self._decode(token).get("sub")
        if not username:
            raise TokenError("Token has no subject")
        return username

    def extract_user_id(self, token: str) -> int:
        user_id = self._decode(token).get(USER_ID_CLAIM)
        if user_id is None:
            raise TokenError("Token has no user id")
        try:
            return int(user_id)
        except (TypeError, ValueError) as e:
            raise TokenError("Token user id is not an integer") from e

    def validate(self, token: str, expected_username: str) -> bool:
        try:
            claims = self._decode(token)
        except TokenError:
            return False
        exp = claims.get("exp")
        if exp is None or datetime.fromtimestamp(exp, timezone.utc) <= datetime.now(timezone.utc):
            return False
        return claims.get("sub") == expected_username
