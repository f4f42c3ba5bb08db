from ..extensions import db
from .account import Account, EXTERNAL_CREDENTIAL
from .profile import Profile
from .enrollment import Enrollment
from .section import SectionMembership

__all__ = [
    "Account", "EXTERNAL_CREDENTIAL", "Profile", "Enrollment", "SectionMembership",
]
