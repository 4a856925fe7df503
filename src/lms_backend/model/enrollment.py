import uuid
from sqlalchemy import (
    Boolean, CheckConstraint, Column, DateTime, ForeignKey,
    Integer, String, Text, UniqueConstraint, Uuid, func, text
)
from sqlalchemy.orm import relationship

from .base import Base

ENROLLMENT_STATUSES = ("active", "expired", "refunded")


class Enrollment(Base):
    __tablename__ = 'enrollments'
    __table_args__ = (
        CheckConstraint("status IN (%s)" % ", ".join(f"'{s}'" for s in ENROLLMENT_STATUSES), name='enrollments_status_check'),
        UniqueConstraint('user_id', 'course_id', name='enrollments_user_id_course_id_key'),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    course_id = Column(ForeignKey('courses.id', ondelete='CASCADE'), nullable=False)
    status = Column(String(32), nullable=False, default="active", server_default=text("'active'"))
    enrolled_at = Column(DateTime(True), nullable=False, server_default=func.now())

    course = relationship("Course", back_populates="enrollments")


class CourseReview(Base):
    __tablename__ = 'course_reviews'
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name='course_reviews_rating_check'),
        UniqueConstraint('user_id', 'course_id', name='course_reviews_user_id_course_id_key'),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False)
    course_id = Column(ForeignKey('courses.id', ondelete='CASCADE'), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    review_text = Column(Text)
    is_approved = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())

    course = relationship("Course", back_populates="reviews")
