# dockslot/core/security.py
import hashlib
import secrets

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from dockslot.db.base import get_db
from dockslot.db.models.profile import Profile

bearer_scheme = HTTPBearer(auto_error=False)


def generate_api_token() -> str:
    return secrets.token_urlsafe(32)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def get_current_captain(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Profile:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Not authenticated")

    captain = db.query(Profile).filter(Profile.api_token_hash == hash_token(credentials.credentials)).first()
    if not captain:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return captain
