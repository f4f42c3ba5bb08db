from datetime import date
from itertools import groupby

from flask import render_template, request, redirect, url_for, flash
from flask_login import login_required, current_user
from ...errors import DuplicateProfile, MalformedJoinCode
from ...services import modules as module_service
from ...services import profiles as profile_service
from ...services import sections as section_service
from . import bp

def current_term_year():
    return date.today().year

@bp.get("/main")
@login_required
def main():
    email = current_user.email
    profile = profile_service.get_profile(email)
    if profile is None:
        return render_template("info.html", user=email)
    return render_template("main.html", user=email, profile=profile)

@bp.post("/info")
@login_required
def info():
    email = current_user.email
    course     = (request.form.get("course") or "").strip()
    study_year = (request.form.get("studyYear") or "").strip()
    name       = (request.form.get("name") or "").strip()
    phone      = (request.form.get("phone") or "").strip()
    if not course or not study_year or not name:
        flash("Course, year of study and name are required")
        return redirect(url_for("student.main"))
    try:
        profile_service.create_profile(email, course, study_year, name, phone)
    except DuplicateProfile:
        flash("Your details are already recorded")
    return redirect(url_for("student.main"))

@bp.get("/indicate")
@login_required
def indicate():
    profile_service.require_profile(current_user.email)
    return render_template("indicate.html")

@bp.get("/initiate")
@login_required
def initiate():
    email = current_user.email
    profile_service.require_profile(email)
    modules = sorted(module_service.list_modules(email))
    return render_template("initiate.html", modules=modules)

@bp.post("/submit-modules")
@login_required
def submit_modules():
    study_year = (request.form.get("year") or "").strip()
    semester   = request.form.get("semester", type=int)
    codes      = [c for c in request.form.getlist("modules") if c.strip()]
    if not study_year or not section_service.is_valid_semester(semester) or not codes:
        flash("Year, a semester from 1 to 999 and at least one module are required")
        return redirect(url_for("student.indicate"))
    report = module_service.declare_modules(current_user.email, current_term_year(),
                                            study_year, semester, codes)
    if report.failed:
        flash(f"Saved {len(report.declared)} module(s), {len(report.failed)} could not be saved")
    else:
        flash(f"Saved {len(report.declared)} module(s)")
    return redirect(url_for("student.main"))

@bp.post("/start-group")
@login_required
def start_group():
    semester = request.form.get("semester", type=int)
    module   = (request.form.get("module") or "").strip()
    section  = (request.form.get("section") or "").strip()
    if not section_service.is_valid_semester(semester) or not module or not section:
        flash("A semester from 1 to 999, module and section are required")
        return redirect(url_for("student.initiate"))
    joined = section_service.open_or_join_section(current_user.email, current_term_year(),
                                                  semester, module, section)
    if not joined:
        flash("You are already in that section")
    return redirect(url_for("student.board"))

@bp.post("/join-group")
@login_required
def join_group():
    try:
        joined = section_service.join_by_code(current_user.email, request.form.get("join", ""))
    except MalformedJoinCode:
        flash("Join code must look like: MODULE SECTION YEAR SEMESTER")
        return redirect(url_for("student.initiate"))
    if not joined:
        flash("You are already in that section")
    return redirect(url_for("student.board"))

@bp.get("/board")
@login_required
def board():
    email = current_user.email
    profile_service.require_profile(email)
    modules = sorted(module_service.list_modules(email))
    summaries = section_service.list_sections_for_modules(modules)
    by_module = {m: list(rows) for m, rows in
                 groupby(sorted(summaries, key=lambda s: s.module_code),
                         key=lambda s: s.module_code)}
    return render_template("board.html", user=email, modules=modules, sections=by_module,
                           join_code=section_service.format_join_code)

@bp.get("/signed-up")
@login_required
def signed_up():
    email = current_user.email
    profile_service.require_profile(email)
    sections = section_service.list_own_sections(email)
    return render_template("signedup.html", user=email, sections=sections,
                           join_code=section_service.format_join_code)
