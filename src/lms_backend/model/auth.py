import uuid
from sqlalchemy import Column, DateTime, String, Uuid, func

from .base import Base


class Profile(Base):
    __tablename__ = 'profiles'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # principals live in the identity provider; no local users table
    user_id = Column(Uuid, nullable=False, unique=True)
    full_name = Column(String(255))
    avatar_url = Column(String(2048))
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(True), nullable=False, server_default=func.now(), onupdate=func.now())
