from fastapi import Depends, Header
from sqlmodel import Session

from gully_backend.core.database import get_session
from gully_backend.core.errors import NotFound
from gully_backend.models import User


# === CALLER IDENTITY ===
# Authentication happens upstream (gateway / mobile session). By the time a
# request reaches this service the caller's user id is in X-User-Id.

def get_caller_id(
    x_user_id: int = Header(..., alias="X-User-Id"),
    session: Session = Depends(get_session),
) -> int:
    if not session.get(User, x_user_id):
        raise NotFound("User not found")
    return x_user_id
