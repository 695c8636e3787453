"""
JWT authentication service.

Verifies bearer tokens issued by the identity provider, turns their claims
into a :class:`Principal` and exposes FastAPI dependencies for route-level
permission checks. The principal is passed explicitly into every service call.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.models.user import UserRole

logger = logging.getLogger(__name__)

# Security scheme for Bearer token authentication
security = HTTPBearer(auto_error=False)

ADMIN_PERMISSION = "read:users"


class AuthenticationError(Exception):
    """Exception raised when authentication fails."""
    pass


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, resolved to a local user row."""

    user_id: int
    subject: str
    username: str
    email: str
    role: UserRole = UserRole.USER
    permissions: FrozenSet[str] = field(default_factory=frozenset)

    def has_permission(self, permission: str) -> bool:
        return permission in self.permissions

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN or ADMIN_PERMISSION in self.permissions

    def can_act_for(self, user_id: int) -> bool:
        """Whether the caller may read or modify data owned by ``user_id``."""
        return self.user_id == user_id or self.is_admin


class JWKSClient:
    """
    Fetches and caches the identity provider's JSON Web Key Set.

    Keys are looked up by ``kid``; an unknown ``kid`` forces one refetch so
    that key rotation is picked up without waiting for the cache to expire.
    """

    def __init__(self, url: str, cache_seconds: int = 3600, timeout: float = 10.0):
        self.url = url
        self.cache_seconds = cache_seconds
        self.timeout = timeout
        self._keys: List[Dict[str, Any]] = []
        self._fetched_at = 0.0
        self._lock = threading.Lock()

    def _fetch(self) -> None:
        logger.info(f"Fetching JWKS from {self.url}")
        try:
            response = httpx.get(self.url, timeout=self.timeout)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"JWKS request failed: {str(e)}")
            raise AuthenticationError("Unable to fetch signing keys")
        self._keys = response.json().get("keys", [])
        self._fetched_at = time.monotonic()

    def get_signing_key(self, kid: Optional[str]) -> Dict[str, Any]:
        with self._lock:
            expired = time.monotonic() - self._fetched_at > self.cache_seconds
            if expired or not self._keys:
                self._fetch()
            key = self._find(kid)
            if key is None:
                self._fetch()
                key = self._find(kid)
        if key is None:
            raise AuthenticationError("Invalid token: unknown signing key")
        return key

    def _find(self, kid: Optional[str]) -> Optional[Dict[str, Any]]:
        for key in self._keys:
            if kid is None or key.get("kid") == kid:
                return key
        return None


jwks_client = JWKSClient(settings.jwks_url, cache_seconds=settings.AUTH_JWKS_CACHE_SECONDS)


def create_access_token(
    subject: str,
    permissions: Optional[Iterable[str]] = None,
    email: Optional[str] = None,
    role: Optional[str] = None,
    extra_claims: Optional[Dict[str, Any]] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create an HS256 access token shaped like the identity provider's tokens.

    Used for local development and tests; production tokens are issued by the
    identity provider and verified against its JWKS.

    Args:
        subject: Identity provider subject, e.g. ``auth0|123``
        permissions: Permission strings to embed
        email: Email claim used to provision the local user
        role: Optional role claim (USER, ADMIN, MODERATOR)
        extra_claims: Additional claims such as ``nickname``
        expires_delta: Optional custom expiration time. Defaults to settings value.

    Returns:
        str: Encoded JWT token string
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode: Dict[str, Any] = {
        "sub": subject,
        "exp": expire,
        "iat": now,
        "aud": settings.AUTH_AUDIENCE,
        "permissions": list(permissions or []),
    }
    if settings.AUTH_ISSUER:
        to_encode["iss"] = settings.AUTH_ISSUER
    if email:
        to_encode["email"] = email
    if role:
        to_encode[f"{settings.AUTH_AUDIENCE}/role"] = role
    if extra_claims:
        to_encode.update(extra_claims)

    encoded_jwt = jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm="HS256")
    logger.debug(f"Created access token for subject {subject}")
    return encoded_jwt


def verify_access_token(token: str) -> Dict[str, Any]:
    """
    Verify a bearer token and return its claims.

    Validates the signature, expiration, audience and (when configured) issuer.

    Raises:
        AuthenticationError: If the token is invalid, expired, or missing required claims
    """
    algorithm = settings.JWT_ALGORITHM
    try:
        if algorithm == "HS256":
            key: Any = settings.JWT_SECRET_KEY
        else:
            header = jwt.get_unverified_header(token)
            key = jwks_client.get_signing_key(header.get("kid"))

        claims = jwt.decode(
            token,
            key,
            algorithms=[algorithm],
            audience=settings.AUTH_AUDIENCE or None,
            issuer=settings.AUTH_ISSUER or None,
        )
    except JWTError as e:
        logger.warning(f"JWT verification failed: {str(e)}")
        raise AuthenticationError(f"Invalid token: {str(e)}")

    if not claims.get("sub"):
        logger.warning("Token missing 'sub' claim")
        raise AuthenticationError("Invalid token: missing subject")

    return claims


def extract_permissions(claims: Dict[str, Any]) -> FrozenSet[str]:
    """Collect permission strings from the standard and namespaced claims."""
    permissions = set()
    for claim in ("permissions", f"{settings.AUTH_AUDIENCE}/permissions"):
        value = claims.get(claim)
        if isinstance(value, (list, tuple)):
            permissions.update(p for p in value if isinstance(p, str))
    if not permissions:
        logger.debug(f"No permissions found in token for {claims.get('sub')}")
    return frozenset(permissions)


def extract_role(claims: Dict[str, Any]) -> UserRole:
    """Read the role claim, defaulting to USER when absent or unknown."""
    value = claims.get(f"{settings.AUTH_AUDIENCE}/role") or claims.get("role")
    if isinstance(value, str):
        try:
            return UserRole(value.upper())
        except ValueError:
            logger.debug(f"Unknown role claim '{value}', defaulting to USER")
    return UserRole.USER


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Principal:
    """
    FastAPI dependency to get the authenticated caller.

    Extracts the bearer token from the Authorization header, verifies it,
    and synchronises the matching local user. Declared as a plain function so
    FastAPI runs it in the threadpool: the JWKS fetch and the user sync block.

    Raises:
        HTTPException: 401 if not authenticated or token is invalid
        HTTPException: 403 if the local account has been deactivated
    """
    # Imported here to avoid a cycle: the sync service uses Principal.
    from app.services.user_sync_service import AccountDeactivatedError, user_sync_service

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        logger.debug("No credentials provided")
        raise credentials_exception

    try:
        claims = verify_access_token(credentials.credentials)
        user = user_sync_service.sync_user(db, claims)
    except AuthenticationError as e:
        logger.warning(f"Authentication failed: {str(e)}")
        raise credentials_exception
    except AccountDeactivatedError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is deactivated",
        )

    return Principal(
        user_id=user.id,
        subject=claims["sub"],
        username=user.username,
        email=user.email,
        role=user.role,
        permissions=extract_permissions(claims),
    )


def require_permissions(*permissions: str):
    """
    Build a dependency that requires every permission in ``permissions``.

    Example:
        >>> @router.get("/workouts/my")
        ... async def my_workouts(principal: Principal = Depends(require_permissions("read:workouts"))):
        ...     ...
    """

    async def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        missing = [p for p in permissions if not principal.has_permission(p)]
        if missing:
            logger.warning(
                f"SECURITY: user {principal.user_id} missing permissions {missing}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied. You don't have permission to access this resource.",
            )
        return principal

    return dependency
