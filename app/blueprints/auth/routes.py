import logging

from authlib.integrations.base_client import OAuthError
from flask import current_app, render_template, request, redirect, session, url_for, flash
from flask_login import login_user, logout_user, login_required, current_user
from ...errors import AuthenticationFailed, DuplicateRegistration
from ...extensions import oauth
from ...services.identity import AuthMethod, get_identity_manager
from . import bp

logger = logging.getLogger(__name__)

def start_session(principal):
    session.permanent = True
    login_user(principal)

@bp.get("/")
def home():
    return render_template("home.html")

@bp.route("/login", methods=["GET", "POST"])
def login():
    if request.method == "POST":
        username = request.form.get("username", "").strip()
        password = request.form.get("password", "")
        try:
            principal = get_identity_manager().authenticate(AuthMethod.LOCAL, username, password)
        except AuthenticationFailed:
            flash("Incorrect username or password")
            return redirect(url_for("auth.login"))
        start_session(principal)
        return redirect(url_for("student.main"))
    if current_user.is_authenticated:
        return redirect(url_for("student.main"))
    return render_template("login.html")

@bp.route("/register", methods=["GET", "POST"])
def register():
    if request.method == "POST":
        username = request.form.get("username", "").strip()
        password = request.form.get("password", "")
        if not username or not password:
            flash("Email and password are required")
            return redirect(url_for("auth.register"))
        try:
            principal = get_identity_manager().register(username, password)
        except DuplicateRegistration:
            flash("That email is already registered, please log in")
            return redirect(url_for("auth.login"))
        start_session(principal)
        return redirect(url_for("student.main"))
    return render_template("register.html")

@bp.get("/auth/google")
def google_login():
    redirect_uri = (current_app.config.get("GOOGLE_CALLBACK_URL")
                    or url_for("auth.google_callback", _external=True))
    return oauth.google.authorize_redirect(redirect_uri)

@bp.get("/auth/google/secrets")
def google_callback():
    try:
        token = oauth.google.authorize_access_token()
        profile = token.get("userinfo") or oauth.google.userinfo(token=token)
        principal = get_identity_manager().authenticate(AuthMethod.FEDERATED, profile)
    except (OAuthError, AuthenticationFailed) as err:
        logger.info("google login failed: %s", err)
        flash("Google sign-in failed")
        return redirect(url_for("auth.login"))
    start_session(principal)
    return redirect(url_for("student.main"))

@bp.get("/logout")
@login_required
def logout():
    logout_user()
    session.clear()
    return redirect(url_for("auth.home"))
