from ..extensions import db

class SectionMembership(db.Model):
    """One member of a study group.

    A group has no row of its own: it is every membership sharing
    (current_year, study_semester, module_code, section_code).
    """
    __tablename__ = "sections"
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), db.ForeignKey("accounts.email"), nullable=False, index=True)
    current_year = db.Column(db.Integer, nullable=False)
    study_semester = db.Column(db.Integer, nullable=False)
    module_code = db.Column(db.String(32), nullable=False, index=True)
    section_code = db.Column(db.String(32), nullable=False)
    name = db.Column(db.String(128), nullable=False)  # as of joining, never re-synced
    __table_args__ = (
        db.UniqueConstraint("email", "current_year", "study_semester", "module_code",
                            "section_code", name="uq_member_section"),
    )
