from flask import Blueprint, flash, redirect, render_template, request, url_for

from models.local_storage import LocalStorage
from utils.odoo import new_odoo_client, odoo_settings

odoo_config_bp = Blueprint("odoo_config", __name__, url_prefix="/config")


def _validate(url, database):
    if not url:
        return "Please enter the Odoo server URL."
    if not (url.startswith("http://") or url.startswith("https://")):
        return "URL must start with http:// or https://"
    if not database:
        return "Please enter the database name."
    return None


@odoo_config_bp.route("/", methods=["GET", "POST"])
def index():
    url, database = odoo_settings()

    if request.method == "POST":
        url = (request.form.get("url") or "").strip().rstrip("/")
        database = (request.form.get("database") or "").strip()
        action = request.form.get("action", "save")

        if action == "reset":
            storage = LocalStorage()
            storage.clear_all_data()
            flash("Server configuration cleared.", "info")
            return redirect(url_for("odoo_config.index"))

        error = _validate(url, database)
        if error:
            flash(error, "danger")
            return render_template("odoo-config.html", url=url, database=database)

        if action == "test":
            # Probe only; the saved configuration is left untouched
            result = new_odoo_client(url, database).test_connection()
            if result.get("success"):
                version = result.get("server_version")
                suffix = f" (Odoo {version})" if version else ""
                flash(f"Successfully reached Odoo server at {url}{suffix}.", "success")
            else:
                flash(result.get("error") or f"Server responded with status {result.get('statusCode')}", "danger")
            return render_template("odoo-config.html", url=url, database=database)

        storage = LocalStorage()
        storage.save_odoo_config(url, database)
        storage.set_first_login_completed()
        flash("Configuration saved successfully.", "success")
        return redirect(url_for("auth.login"))

    return render_template("odoo-config.html", url=url, database=database)
