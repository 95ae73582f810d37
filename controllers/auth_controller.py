import logging

from flask import Blueprint, flash, redirect, render_template, request, session, url_for

from models.local_storage import LocalStorage
from models.odoo_session import OdooSession
from services.hr_service import HrService
from services.odoo_rpc import OdooError
from utils.auth import current_odoo_session, is_logged_in, login_required, login_user, logout_user
from utils.odoo import new_odoo_client, odoo_settings

_logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


# Startup router
@auth_bp.route("/")
def index():
    storage = LocalStorage()
    if not storage.has_odoo_config() or storage.is_first_login():
        return redirect(url_for("odoo_config.index"))
    if is_logged_in():
        return redirect(url_for("face_attendance.index"))
    return redirect(url_for("auth.login"))


# Login
@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    storage = LocalStorage()
    url, database = odoo_settings()

    if request.method == "POST":
        email = (request.form.get("email") or "").strip()
        password = request.form.get("password") or ""

        if not email or not password:
            flash("Please enter your email and password.", "danger")
            return redirect(url_for("auth.login"))

        if not url or not database:
            flash("Odoo server is not configured.", "warning")
            return redirect(url_for("odoo_config.index"))

        client = new_odoo_client(url, database)
        try:
            uid = client.authenticate(email, password)
        except OdooError as e:
            _logger.info("Login failed for %s: %s", email, e.message)
            flash(e.message or "Authentication failed", "danger")
            return redirect(url_for("auth.login"))

        employee = HrService(client).get_current_employee()

        odoo_session = OdooSession(
            base_url=url,
            database=database,
            uid=uid,
            login=email,
            password=password,
            employee_id=employee.id if employee else None,
            employee_name=employee.name if employee else None,
        ).save()
        login_user(odoo_session)
        storage.save_last_email(email)

        if employee is None:
            flash("No employee is linked to this user; attendance is unavailable.", "warning")

        flash(f"Welcome {session.get('user_name')}!", "success")
        return redirect(url_for("face_attendance.index"))

    return render_template(
        "auth-login.html",
        saved_email=storage.get_saved_email() or "",
        odoo_url=url,
        odoo_database=database,
    )


# Logout
@auth_bp.route("/logout")
def logout():
    return logout_user()


# View Profile
@auth_bp.route("/profile")
@login_required
def view_profile():
    odoo_session = current_odoo_session()
    employee = HrService(odoo_session.client()).get_current_employee()

    # Employee may have been linked to the user after login
    if employee and employee.id != odoo_session.employee_id:
        odoo_session.set_employee(employee.id, employee.name)
        session["user_name"] = employee.name

    return render_template(
        "auth-profile.html",
        odoo_session=odoo_session,
        employee=employee,
    )
