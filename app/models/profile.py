from ..extensions import db

class Profile(db.Model):
    __tablename__ = "details"
    email = db.Column(db.String(255), db.ForeignKey("accounts.email"), primary_key=True)
    course = db.Column(db.String(128), nullable=False)
    study_year = db.Column(db.String(16), nullable=False)
    name = db.Column(db.String(128), nullable=False)
    phone = db.Column(db.String(32))
