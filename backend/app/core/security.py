from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JOSEError, JWTClaimsError
from passlib.context import CryptContext
from passlib.exc import PasswordValueError
from app.core.config import Settings
from app.core.errors import HashingError, TokenSigningError

# CryptContext handles password hashing using bcrypt
# bcrypt is slow by design to prevent brute-force attacks
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class PasswordHasher:
    """One-way salted hashing of plaintext passwords"""

    def __init__(self, context: CryptContext = pwd_context):
        self._context = context

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt"""
        # bcrypt generates a fresh salt per call and embeds it in the digest,
        # so the same password never produces the same hash twice
        try:
            return self._context.hash(password)
        except (ValueError, TypeError) as exc:
            # Never include the password itself in the error
            raise HashingError("Could not hash password") from exc

    def verify(self, password: str, hashed_password: str) -> bool:
        """Verify a password against a hash using constant-time comparison"""
        try:
            return self._context.verify(password, hashed_password)
        except PasswordValueError:
            # bcrypt refuses some inputs (e.g. NUL bytes); such a password
            # can never have been stored, so it simply does not match
            return False
        except (ValueError, TypeError) as exc:
            # Stored digest is not a recognised hash
            raise HashingError("Could not verify password") from exc


class InvalidTokenError(Exception):
    """Base class for every reason a token is rejected"""


class MalformedTokenError(InvalidTokenError):
    pass


class BadSignatureError(InvalidTokenError):
    pass


class ExpiredTokenError(InvalidTokenError):
    pass


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """
    Issues and verifies signed, time-limited identity tokens.

    Verification depends only on the token and the secret, so no session
    state is kept on the server.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60 * 24):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret_key=settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        )

    def issue(self, user_id: int, expires_delta: Optional[timedelta] = None) -> str:
        """Create a JWT for user_id with 'sub', 'iat' and 'exp' claims"""
        issued_at = datetime.now(timezone.utc)
        if expires_delta is None:
            expires_delta = timedelta(minutes=self.expire_minutes)

        to_encode = {
            # JWT 'sub' must be a string
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + expires_delta,
        }

        # Signing with the server secret; if SECRET_KEY leaks, tokens can be forged
        try:
            return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)
        except JOSEError as exc:
            # e.g. an unsupported ALGORITHM in settings
            raise TokenSigningError("Could not sign token") from exc

    def verify(self, token: str) -> TokenClaims:
        """Decode and verify a JWT, raising an InvalidTokenError subclass on failure"""
        # Parse without the key first so garbage is told apart from forgery
        try:
            jwt.get_unverified_claims(token)
        except JWTError as exc:
            raise MalformedTokenError("Token could not be decoded") from exc

        # decode checks the signature first, then 'exp'
        # Only the configured algorithm is accepted ('none' is never allowed)
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError as exc:
            raise ExpiredTokenError("Token has expired") from exc
        except JWTClaimsError as exc:
            raise MalformedTokenError("Token claims are invalid") from exc
        except JWTError as exc:
            raise BadSignatureError("Token signature is invalid") from exc

        try:
            user_id = int(payload["sub"])
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        except (KeyError, ValueError, TypeError) as exc:
            raise MalformedTokenError("Token is missing identity claims") from exc

        return TokenClaims(user_id=user_id, issued_at=issued_at, expires_at=expires_at)
