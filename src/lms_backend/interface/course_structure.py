from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from lms_backend.interface.courses import CourseGet
from lms_backend.interface.course_modules import CourseModuleGet
from lms_backend.interface.lessons import LessonGet

class LessonDraft(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    video_url: Optional[str] = Field(None, max_length=2048)
    duration_minutes: Optional[int] = Field(None, ge=0)
    is_preview: bool = False

class ModuleDraft(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    lessons: List[LessonDraft] = Field(default_factory=list)

class CourseDraft(BaseModel):
    """
    A complete course as submitted by the authoring screen.

    Module and lesson order is the list order; no identifiers are carried
    because a save replaces the whole structure.
    """
    title: str = Field(min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255, description="Generated from the title when empty")
    description: Optional[str] = None
    short_description: Optional[str] = Field(None, max_length=1024)
    thumbnail_url: Optional[str] = Field(None, max_length=2048)
    price: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    original_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    is_published: bool = False
    modules: List[ModuleDraft] = Field(default_factory=list)

class ModuleStructureGet(CourseModuleGet):
    lessons: List[LessonGet] = Field(default_factory=list)

class CourseStructureGet(BaseModel):
    course: CourseGet
    modules: List[ModuleStructureGet] = Field(default_factory=list)

    @property
    def lesson_count(self) -> int:
        return sum(len(module.lessons) for module in self.modules)
