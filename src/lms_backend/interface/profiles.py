from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.orm import Session
from lms_backend.interface.base import BaseEntityGet, BaseEntityList, EntityInterface, ListQuery
from lms_backend.model.auth import Profile

def _validate_avatar_url(v):
    if v:
        if not (v.startswith('http://') or v.startswith('https://')):
            raise ValueError('URL must start with http:// or https://')
        if v == 'http://' or v == 'https://':
            raise ValueError('URL must include a domain after the protocol')
    return v

class ProfileCreate(BaseModel):
    user_id: Optional[UUID] = Field(None, description="Owning principal, defaults to the caller")
    full_name: Optional[str] = Field(None, max_length=255, description="Display name")
    avatar_url: Optional[str] = Field(None, max_length=2048, description="Avatar image URL")

    @field_validator('avatar_url')
    @classmethod
    def validate_avatar_url(cls, v):
        return _validate_avatar_url(v)

class ProfileGet(BaseEntityGet):
    id: UUID = Field(description="Profile unique identifier")
    user_id: UUID = Field(description="Owning principal")
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class ProfileList(BaseEntityList):
    id: UUID
    user_id: UUID
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, max_length=255, description="Display name")
    avatar_url: Optional[str] = Field(None, max_length=2048, description="Avatar image URL")

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, v):
        if v is not None:
            v = v.strip()
            if len(v) == 0:
                return None
        return v

    @field_validator('avatar_url')
    @classmethod
    def validate_avatar_url(cls, v):
        return _validate_avatar_url(v)

class ProfileQuery(ListQuery):
    user_id: Optional[UUID] = Field(None, description="Filter by owning principal")
    full_name: Optional[str] = Field(None, description="Filter by display name")

def profile_search(db: Session, query, params: Optional[ProfileQuery]):
    if params.user_id is not None:
        query = query.filter(Profile.user_id == params.user_id)
    if params.full_name is not None:
        query = query.filter(Profile.full_name.ilike(f"%{params.full_name}%"))

    return query.order_by(Profile.created_at)

class ProfileInterface(EntityInterface):
    create = ProfileCreate
    get = ProfileGet
    list = ProfileList
    update = ProfileUpdate
    query = ProfileQuery
    search = profile_search
    endpoint = "profiles"
    model = Profile
    owner_column = "user_id"
