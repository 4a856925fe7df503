from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lms_backend.api.api_builder import CrudRouter
from lms_backend.api.courses import course_router
from lms_backend.api.course_reviews import course_review_router
from lms_backend.api.hooks import hooks_router
from lms_backend.api.user import user_router
from lms_backend.api.user_roles import user_roles_router
from lms_backend.errors import AuthorizationDenied, BootstrapFailure, ConstraintViolation, CourseSaveFailure
from lms_backend.interface.course_modules import CourseModuleInterface
from lms_backend.interface.enrollments import EnrollmentInterface
from lms_backend.interface.lessons import LessonInterface
from lms_backend.interface.profiles import ProfileInterface
from lms_backend.settings import settings

app = FastAPI(title="LMS backend")

def cors_options(origins: list[str]) -> dict:
    # credentials only for an explicit allow-list
    if not origins:
        return {"allow_origins": ["*"], "allow_credentials": False}
    return {"allow_origins": origins, "allow_credentials": True}

app.add_middleware(
    CORSMiddleware,
    **cors_options(settings.CORS_ORIGINS),
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count"],
)

@app.exception_handler(AuthorizationDenied)
async def authorization_denied_handler(request: Request, exc: AuthorizationDenied):
    # indistinguishable from a missing row
    return JSONResponse(status_code=404, content={"detail": str(exc)})

@app.exception_handler(ConstraintViolation)
async def constraint_violation_handler(request: Request, exc: ConstraintViolation):
    return JSONResponse(status_code=400, content={"detail": exc.detail})

@app.exception_handler(BootstrapFailure)
async def bootstrap_failure_handler(request: Request, exc: BootstrapFailure):
    return JSONResponse(status_code=500, content={"detail": "Account bootstrap failed"})

@app.exception_handler(CourseSaveFailure)
async def course_save_failure_handler(request: Request, exc: CourseSaveFailure):
    return JSONResponse(status_code=500, content={"detail": "Course could not be saved"})

CrudRouter(ProfileInterface).register_routes(app)
course_router.register_routes(app)
CrudRouter(CourseModuleInterface).register_routes(app)
CrudRouter(LessonInterface).register_routes(app)
CrudRouter(EnrollmentInterface).register_routes(app)
course_review_router.register_routes(app)

app.include_router(
    user_roles_router,
    prefix="/user-roles",
    tags=["user", "roles"]
)

app.include_router(
    user_router,
    prefix="/user",
    tags=["user", "me"]
)

app.include_router(
    hooks_router,
    prefix="/auth/hooks",
    tags=["authentication", "hooks"]
)

@app.head("/", status_code=204)
def get_status_head():
    return
