# user_model.py
# Minimal user record: identity, profile photo and push token.

from typing import Optional
from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    An app user. Players, team owners, captains and match authorities all
    point at this table. Only the fields the stats engine reads are kept.
    """
    __tablename__ = "app_user"

    id: Optional[int] = Field(default=None, primary_key=True)
    full_name: str = ""
    phone_number: Optional[str] = Field(default=None, index=True)
    profile_photo: Optional[str] = None
    fcm_token: Optional[str] = None  # Device token for push notifications
