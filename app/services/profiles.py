import logging

from sqlalchemy.exc import IntegrityError

from ..errors import DuplicateProfile, ProfileRequired
from ..extensions import db
from ..models import Profile
from . import store_operation

logger = logging.getLogger(__name__)

def get_profile(email):
    with store_operation("profile lookup"):
        return db.session.get(Profile, email)

def require_profile(email):
    profile = get_profile(email)
    if profile is None:
        raise ProfileRequired(email)
    return profile

def create_profile(email, course, study_year, name, phone):
    """One-shot onboarding. There is deliberately no update path."""
    profile = Profile(email=email, course=course, study_year=study_year,
                      name=name, phone=phone)
    with store_operation("profile create"):
        if db.session.get(Profile, email) is not None:
            raise DuplicateProfile(email)
        db.session.add(profile)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise DuplicateProfile(email)
    logger.info("profile recorded for %s", email)
    return profile
