"""Study groups: open, join, roster and dashboard counts.

Opening a group and joining one are the same insert. A group exists as long
as at least one membership row carries its key.
"""
import logging
from collections import namedtuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from ..errors import MalformedJoinCode
from ..extensions import db
from ..models import SectionMembership
from . import store_operation
from .profiles import require_profile

logger = logging.getLogger(__name__)

JoinCode = namedtuple("JoinCode", "module section year semester")
SectionKey = namedtuple("SectionKey", "term_year semester module_code section_code")
SectionSummary = namedtuple("SectionSummary",
                            "term_year module_code semester section_code members")

MAX_SEMESTER = 999

def _is_number(token):
    return token.isascii() and token.isdigit()

def is_valid_semester(semester):
    return semester is not None and 1 <= semester <= MAX_SEMESTER

def parse_join_code(code):
    """Split ``"<module> <section> <year> <semester>"`` into a JoinCode."""
    tokens = (code or "").split()
    if len(tokens) != 4:
        raise MalformedJoinCode(code, f"expected 4 tokens, got {len(tokens)}")
    module, section, year, semester = tokens
    if len(year) != 4 or not _is_number(year):
        raise MalformedJoinCode(code, "year must be four digits")
    if not _is_number(semester) or not is_valid_semester(int(semester)):
        raise MalformedJoinCode(code, f"semester must be a number from 1 to {MAX_SEMESTER}")
    return JoinCode(module, section, year, semester)

def format_join_code(key):
    return f"{key.module_code} {key.section_code} {key.term_year} {key.semester}"

def open_or_join_section(email, term_year, semester, module_code, section_code):
    """Add ``email`` to the group. Returns False if it was already a member."""
    name = require_profile(email).name
    member = SectionMembership(email=email, current_year=int(term_year),
                               study_semester=int(semester), module_code=module_code,
                               section_code=section_code, name=name)
    with store_operation("section join"):
        db.session.add(member)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            logger.info("%s already in %s/%s %s-%s", email, module_code, section_code,
                        term_year, semester)
            return False
    logger.info("%s joined %s/%s %s-%s", email, module_code, section_code,
                term_year, semester)
    return True

def join_by_code(email, join_code):
    code = parse_join_code(join_code)
    return open_or_join_section(email, code.year, code.semester, code.module, code.section)

def list_own_sections(email):
    with store_operation("own sections"):
        rows = (db.session.query(SectionMembership.current_year,
                                 SectionMembership.study_semester,
                                 SectionMembership.module_code,
                                 SectionMembership.section_code)
                .filter(SectionMembership.email == email)
                .order_by(SectionMembership.current_year, SectionMembership.study_semester,
                          SectionMembership.module_code, SectionMembership.section_code)
                .all())
    return [SectionKey(*row) for row in rows]

def list_sections_for_modules(module_codes):
    """One summary per group in any of ``module_codes``, with member counts."""
    codes = sorted(set(module_codes))
    if not codes:
        return []
    group_key = (SectionMembership.current_year, SectionMembership.module_code,
                 SectionMembership.study_semester, SectionMembership.section_code)
    with store_operation("section summary"):
        rows = (db.session.query(*group_key, func.count(SectionMembership.id))
                .filter(SectionMembership.module_code.in_(codes))
                .group_by(*group_key)
                .order_by(*group_key)
                .all())
    return [SectionSummary(*row) for row in rows]
