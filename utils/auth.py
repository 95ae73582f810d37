from functools import wraps

from flask import flash, g, redirect, session, url_for

from models.local_storage import LocalStorage
from models.odoo_session import OdooSession


def current_odoo_session():
    """OdooSession of this browser, loaded once per request."""
    if "odoo_session" not in g:
        g.odoo_session = OdooSession.find_by_token(session.get("odoo_token"))
    return g.odoo_session


# This decorator makes sure that only logged-in users can access protected pages
def login_required(view_function):
    @wraps(view_function)
    def decorated_function(*args, **kwargs):
        if current_odoo_session() is None:
            session.pop("odoo_token", None)
            flash("Please log in to access this page.", "warning")
            return redirect(url_for("auth.login"))
        return view_function(*args, **kwargs)
    return decorated_function


def is_logged_in():
    return current_odoo_session() is not None


def login_user(odoo_session):
    session["odoo_token"] = odoo_session.token
    session["user_name"] = odoo_session.employee_name or odoo_session.login
    g.odoo_session = odoo_session


def logout_user():
    token = session.get("odoo_token")
    if token:
        OdooSession.delete(token)
    LocalStorage().clear_saved_credentials()
    session.clear()
    g.pop("odoo_session", None)
    flash("You have been logged out successfully.", "success")
    return redirect(url_for("auth.login"))
