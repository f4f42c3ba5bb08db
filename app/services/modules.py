import logging
from collections import namedtuple

from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import Enrollment
from . import store_operation
from .profiles import require_profile

logger = logging.getLogger(__name__)

DeclarationReport = namedtuple("DeclarationReport", "declared failed")

def declare_modules(email, term_year, study_year, semester, module_codes):
    """Insert and commit one enrollment per module code.

    Best effort: a failing code is logged and reported, the rest still go in.
    Raises ProfileRequired before touching the table if there is no profile.
    """
    course = require_profile(email).course
    declared, failed = [], []
    for raw in module_codes:
        code = (raw or "").strip()
        if not code:
            failed.append(raw)
            logger.warning("skipping blank module code for %s", email)
            continue
        db.session.add(Enrollment(email=email, course=course,
                                  current_year=term_year, study_year=study_year,
                                  study_semester=semester, module_code=code))
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.warning("could not declare module %s for %s", code, email, exc_info=True)
            failed.append(code)
            continue
        declared.append(code)
    return DeclarationReport(declared, failed)

def list_modules(email):
    with store_operation("module listing"):
        rows = (db.session.query(Enrollment.module_code)
                .filter(Enrollment.email == email).all())
    return {code for (code,) in rows}
