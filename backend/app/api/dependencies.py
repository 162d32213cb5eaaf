import logging
from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, Header
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.database import get_db
from app.core.errors import ForbiddenError, UnauthorizedError
from app.core.security import InvalidTokenError, PasswordHasher, TokenService
from app.services.auth_service import AuthService
from app.services.entry_service import EntryService
from app.services.profile_service import ProfileService
from app.storage.entry_store import EntryStore
from app.storage.user_store import UserStore

logger = logging.getLogger(__name__)

# Built once from settings; tests swap them through app.dependency_overrides
_token_service = TokenService.from_settings(settings)
_password_hasher = PasswordHasher()


@dataclass(frozen=True)
class CurrentUser:
    id: int


def get_token_service() -> TokenService:
    return _token_service


def get_password_hasher() -> PasswordHasher:
    return _password_hasher


# Services are built per request around that request's session
def get_auth_service(
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service)
) -> AuthService:
    return AuthService(UserStore(db), hasher, tokens)


def get_entry_service(db: Session = Depends(get_db)) -> EntryService:
    return EntryService(EntryStore(db))


def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    return ProfileService(UserStore(db), EntryStore(db))


async def get_current_user(
    authorization: Optional[str] = Header(default=None),
    tokens: TokenService = Depends(get_token_service)
) -> CurrentUser:
    """
    Authenticate the request from its bearer token.

    No header at all is 403; a header that is not a valid, unexpired
    bearer token is 401. The store is never consulted here.
    """
    # No credential at all is a different failure from a bad credential
    if not authorization:
        raise ForbiddenError("No token provided. Please sign in")

    # Reusable exception for invalid credentials
    credentials_exception = UnauthorizedError(
        "Invalid or expired token. Please sign in again",
        headers={"WWW-Authenticate": "Bearer"},
    )

    # Header format: "Bearer <token>"; any other scheme is a bad credential
    scheme, token = get_authorization_scheme_param(authorization)
    if scheme.lower() != "bearer" or not token:
        raise credentials_exception

    # Malformed, forged and expired tokens all collapse to the same 401
    # The reason is only logged, never sent to the client
    try:
        claims = tokens.verify(token)
    except InvalidTokenError as e:
        logger.debug(f"Rejected token: {str(e)}")
        raise credentials_exception

    # Identity comes from the token alone; handlers scope their queries by it
    return CurrentUser(id=claims.user_id)
