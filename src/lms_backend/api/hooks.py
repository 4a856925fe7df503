"""
Identity provider webhooks.

The provider calls these with a shared secret instead of a user token; the
handlers run with elevated rights.
"""

import hmac
import logging
from typing import Annotated, Optional
from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.orm import Session

from lms_backend.api.exceptions import UnauthorizedException
from lms_backend.database import get_db
from lms_backend.interface.profiles import ProfileGet
from lms_backend.services.bootstrap import PrincipalCreatedEvent, bootstrap_account
from lms_backend.settings import settings

logger = logging.getLogger(__name__)

hooks_router = APIRouter()

def verify_webhook_secret(x_webhook_secret: Annotated[Optional[str], Header()] = None):
    expected = settings.AUTH_WEBHOOK_SECRET

    if not expected or x_webhook_secret is None:
        logger.warning("Rejected webhook call without configured or supplied secret")
        raise UnauthorizedException("Invalid webhook secret")

    if not hmac.compare_digest(x_webhook_secret.encode(), expected.encode()):
        logger.warning("Rejected webhook call with wrong secret")
        raise UnauthorizedException("Invalid webhook secret")

@hooks_router.post("/user-created", response_model=ProfileGet, status_code=status.HTTP_201_CREATED,
                   dependencies=[Depends(verify_webhook_secret)])
def user_created(event: PrincipalCreatedEvent, db: Session = Depends(get_db)):
    """Provision profile and default role for a newly registered principal"""
    return bootstrap_account(db, event)
