from .base import Base, metadata
from .auth import Profile
from .role import AppRole, UserRole
from .course import Course, CourseModule, Lesson
from .enrollment import ENROLLMENT_STATUSES, Enrollment, CourseReview

# Import all models to ensure relationships are properly set up
from . import auth, role, course, enrollment

__all__ = [
    'Base',
    'metadata',
    # Auth models
    'Profile',
    # Role models
    'AppRole',
    'UserRole',
    # Course models
    'Course',
    'CourseModule',
    'Lesson',
    # Enrollment and review models
    'ENROLLMENT_STATUSES',
    'Enrollment',
    'CourseReview',
]
