import enum
import uuid
from sqlalchemy import Column, Enum, UniqueConstraint, Uuid

from .base import Base


class AppRole(str, enum.Enum):
    admin = "admin"
    student = "student"


class UserRole(Base):
    __tablename__ = 'user_roles'
    __table_args__ = (
        UniqueConstraint('user_id', 'role', name='user_roles_user_id_role_key'),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    role = Column(
        Enum(AppRole, name='app_role', values_callable=lambda e: [m.value for m in e], create_constraint=True),
        nullable=False
    )
