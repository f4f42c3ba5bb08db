from ..extensions import db

# Stored in place of a password hash for accounts created through Google.
# check_password_hash() rejects it, so such accounts can never log in locally.
EXTERNAL_CREDENTIAL = "google"

class Account(db.Model):
    __tablename__ = "accounts"
    email = db.Column(db.String(255), primary_key=True)
    password = db.Column(db.String(256), nullable=False)

    def __repr__(self):
        return f"<Account {self.email}>"
