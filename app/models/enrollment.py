from ..extensions import db

class Enrollment(db.Model):
    """A module declared by an account for one term. Duplicates are allowed."""
    __tablename__ = "modules"
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), db.ForeignKey("accounts.email"), nullable=False, index=True)
    course = db.Column(db.String(128), nullable=False)
    current_year = db.Column(db.Integer, nullable=False)
    study_year = db.Column(db.String(16), nullable=False)
    study_semester = db.Column(db.Integer, nullable=False)
    module_code = db.Column(db.String(32), nullable=False, index=True)
