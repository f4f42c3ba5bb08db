"""Local and Google sign-in, unified into a single email principal.

Sessions hold the principal verbatim. Nothing is re-read from the store on
later requests, so a session outlives changes to its account until
PERMANENT_SESSION_LIFETIME runs out.
"""
import enum
import logging

from flask import current_app
from flask_login import UserMixin
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from ..errors import DuplicateRegistration, InvalidCredentials, UserNotFound
from ..extensions import db
from ..models import EXTERNAL_CREDENTIAL, Account
from . import store_operation

logger = logging.getLogger(__name__)

# Dialects with a native INSERT ... ON CONFLICT DO NOTHING.
_UPSERT_INSERTS = {"postgresql": pg_insert, "sqlite": sqlite_insert}


class Principal(UserMixin):
    """The authenticated identity attached to a session."""

    def __init__(self, email):
        self.email = email

    def get_id(self):
        return self.email

    def __eq__(self, other):
        return isinstance(other, Principal) and other.email == self.email

    def __hash__(self):
        return hash(self.email)

    def __repr__(self):
        return f"<Principal {self.email}>"


class AuthMethod(enum.Enum):
    LOCAL = ("local", "authenticate_local")
    FEDERATED = ("federated", "authenticate_federated")

    def __init__(self, label, verifier):
        self.label = label
        self.verifier = verifier


class IdentityManager:
    def __init__(self, hash_method="pbkdf2:sha256:600000"):
        # Fixed for the life of the manager; existing hashes keep their own method.
        self.hash_method = hash_method

    def authenticate(self, method, *args):
        principal = getattr(self, method.verifier)(*args)
        logger.info("%s login succeeded for %s", method.label, principal.email)
        return principal

    def register(self, username, password):
        email = username.strip()
        with store_operation("register"):
            if db.session.get(Account, email) is not None:
                raise DuplicateRegistration(email)
            hashed = generate_password_hash(password, method=self.hash_method)
            db.session.add(Account(email=email, password=hashed))
            try:
                db.session.commit()
            except IntegrityError:
                db.session.rollback()
                raise DuplicateRegistration(email)
        logger.info("registered account %s", email)
        return Principal(email)

    def authenticate_local(self, username, password):
        email = username.strip()
        with store_operation("local login"):
            account = db.session.get(Account, email)
        if account is None:
            logger.info("login rejected: no account for %s", email)
            raise UserNotFound(email)
        if not check_password_hash(account.password, password):
            logger.info("login rejected: bad password for %s", email)
            raise InvalidCredentials(email)
        return Principal(account.email)

    def authenticate_federated(self, external_profile):
        email = ((external_profile or {}).get("email") or "").strip()
        if not email:
            raise InvalidCredentials("external profile carries no email")
        with store_operation("federated login"):
            self._insert_if_absent(email)
            account = db.session.get(Account, email)
        return Principal(account.email)

    def _insert_if_absent(self, email):
        dialect = db.session.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is not None:
            stmt = (insert(Account)
                    .values(email=email, password=EXTERNAL_CREDENTIAL)
                    .on_conflict_do_nothing(index_elements=["email"]))
            db.session.execute(stmt)
            db.session.commit()
            return
        if db.session.get(Account, email) is not None:
            return
        # A concurrent insert between the lookup and the commit trips the primary key.
        db.session.add(Account(email=email, password=EXTERNAL_CREDENTIAL))
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()

    @staticmethod
    def serialize(principal):
        return principal.email

    @staticmethod
    def deserialize(token):
        if not token:
            return None
        return Principal(token)


def get_identity_manager():
    return current_app.extensions["identity"]
