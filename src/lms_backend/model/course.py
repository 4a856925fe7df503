import uuid
from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Integer,
    Numeric, String, Text, Uuid, func, text
)
from sqlalchemy.orm import relationship

from .base import Base


class Course(Base):
    __tablename__ = 'courses'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    description = Column(Text)
    short_description = Column(String(1024))
    thumbnail_url = Column(String(2048))
    price = Column(Numeric(10, 2), nullable=False, default=0, server_default=text("0"))
    original_price = Column(Numeric(10, 2))
    is_published = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    created_by = Column(Uuid)
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    modules = relationship(
        "CourseModule", back_populates="course", order_by="CourseModule.sort_order",
        cascade="all, delete-orphan", passive_deletes=True
    )
    enrollments = relationship("Enrollment", back_populates="course", cascade="all, delete-orphan", passive_deletes=True)
    reviews = relationship("CourseReview", back_populates="course", cascade="all, delete-orphan", passive_deletes=True)


class CourseModule(Base):
    __tablename__ = 'course_modules'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    course_id = Column(ForeignKey('courses.id', ondelete='CASCADE'), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    sort_order = Column(Integer, nullable=False, default=0, server_default=text("0"))
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())

    # Relationships
    course = relationship("Course", back_populates="modules")
    lessons = relationship(
        "Lesson", back_populates="module", order_by="Lesson.sort_order",
        cascade="all, delete-orphan", passive_deletes=True
    )


class Lesson(Base):
    __tablename__ = 'lessons'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    module_id = Column(ForeignKey('course_modules.id', ondelete='CASCADE'), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    video_url = Column(String(2048))
    duration_minutes = Column(Integer)
    sort_order = Column(Integer, nullable=False, default=0, server_default=text("0"))
    is_preview = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())

    # Relationships
    module = relationship("CourseModule", back_populates="lessons")
