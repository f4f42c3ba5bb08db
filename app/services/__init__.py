import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from ..errors import StoreUnavailable
from ..extensions import db

logger = logging.getLogger(__name__)

@contextmanager
def store_operation(description):
    """Turn driver/ORM failures into StoreUnavailable after rolling back the session."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("store failure during %s", description)
        raise StoreUnavailable(description) from exc
