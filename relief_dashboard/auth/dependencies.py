from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from relief_dashboard import crud, models
from relief_dashboard.auth import utils_auth as auth_utils
from relief_dashboard.database import get_db


def get_current_user(authorization: Optional[str] = Header(None), db: Session = Depends(get_db)) -> models.User:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Invalid Authorization header format")
    payload = auth_utils.decode_token(token)
    if not payload or payload.get("type") != "user":
        raise HTTPException(status_code=401, detail="Invalid token")
    user = crud.get_user(db, payload.get("sub"))
    if not user:
        raise HTTPException(status_code=401, detail="Unknown user")
    return user
