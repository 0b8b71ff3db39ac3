# jobboard/middleware/auth_middleware.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Protocol

import jwt  # PyJWT
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from jobboard.config import JWT_SECRET, JWT_ALGO, JWT_EXPIRES_MIN, JWT_LEEWAY_SEC

# NOTE: auto_error=False so we can consistently return 401 on problems
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class ActingUser:
    id: str
    email: Optional[str] = None


class AuthProvider(Protocol):
    """What the job repository needs from the auth service."""

    async def get_user(self) -> Optional[ActingUser]: ...

    async def get_claims(self) -> Optional[Dict[str, Any]]: ...


# ---------- Token creation (dev tooling / tests; prod tokens come from the auth service) ----------
def _now_utc() -> datetime:
    return datetime.now(timezone.utc)

def create_access_token(sub: str, extra: Optional[Dict[str, Any]] = None, minutes: Optional[int] = None) -> str:
    """
    Create a short-lived ACCESS token.
    `sub` should be the user's stable id (string).
    """
    if not isinstance(sub, str) or not sub.strip():
        raise ValueError("sub must be a non-empty string")

    exp_min = minutes if minutes is not None else JWT_EXPIRES_MIN
    now = _now_utc()
    payload: Dict[str, Any] = {
        "sub": sub,
        "typ": "access",
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=exp_min)).timestamp()),
    }
    if extra:
        payload.update(extra)
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGO)

# ---------- Token decoding / validation ----------
def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode & validate token. Raises 401 on any auth failure.
    """
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGO], leeway=JWT_LEEWAY_SEC)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid token")


def _subject(claims: Optional[Dict[str, Any]]) -> Optional[str]:
    if not claims:
        return None
    sub = claims.get("sub")
    return str(sub) if isinstance(sub, (str, int)) and str(sub).strip() else None


class TokenAuth:
    """
    AuthProvider over a bearer token. A missing, expired or forged token
    means "no acting user", never an exception.
    """

    def __init__(self, token: Optional[str]):
        self._token = (token or "").strip() or None
        self._claims: Optional[Dict[str, Any]] = None
        self._decoded = False

    def _load(self) -> Optional[Dict[str, Any]]:
        if not self._decoded:
            self._decoded = True
            if self._token:
                try:
                    self._claims = decode_token(self._token)
                except HTTPException:
                    self._claims = None
        return self._claims

    async def get_claims(self) -> Optional[Dict[str, Any]]:
        return self._load()

    async def get_user(self) -> Optional[ActingUser]:
        claims = self._load()
        sub = _subject(claims)
        if not sub:
            return None
        return ActingUser(id=sub, email=claims.get("email"))


# ---------- FastAPI dependencies ----------
def _bearer(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials is None or not credentials.scheme or credentials.scheme.lower() != "bearer":
        return None
    return (credentials.credentials or "").strip() or None

def require_claims(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> Dict[str, Any]:
    """
    Strict auth dependency (admin surface). Returns the validated claims dict.
    Always raises 401 (not 403) if header is missing/invalid.
    """
    token = _bearer(credentials)
    if not token:
        raise HTTPException(status_code=401, detail="Missing or invalid Authorization header")

    claims = decode_token(token)
    if not _subject(claims):
        raise HTTPException(status_code=401, detail="Invalid token subject")
    return claims

def get_auth(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> TokenAuth:
    """Soft auth: always returns a provider; anonymous if no valid token."""
    return TokenAuth(_bearer(credentials))

__all__ = [
    "ActingUser", "AuthProvider", "TokenAuth",
    "create_access_token", "decode_token",
    "require_claims", "get_auth", "security",
]
