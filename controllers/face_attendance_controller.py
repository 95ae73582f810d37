import logging

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from models.attendance import CHECK_IN, CHECK_OUT
from services.face_verification import submit_face_via_controller
from utils.auth import current_odoo_session, login_required
from utils.geocoding import UNKNOWN_LOCATION, reverse_geocode
from utils.odoo import current_hr_service, current_reconciler
from utils.photo import PhotoError, decode_data_url, photo_to_base64

_logger = logging.getLogger(__name__)

face_attendance_bp = Blueprint("face_attendance", __name__, url_prefix="/attendance/face")


def parse_coordinates(form):
    """(latitude, longitude) floats from a form; (None, None) if absent or invalid."""
    try:
        latitude = float(form.get("latitude", ""))
        longitude = float(form.get("longitude", ""))
    except (TypeError, ValueError):
        return None, None
    if not (-90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0):
        return None, None
    return latitude, longitude


ALREADY_CHECKED_IN = "You are already checked in."
NOT_CHECKED_IN = "You need to check in before checking out."


def intent_conflict(intent, status):
    """Message when the button pressed no longer matches the server state, else None."""
    if intent == CHECK_IN and status.is_checked_in:
        return ALREADY_CHECKED_IN
    if intent == CHECK_OUT and not status.is_checked_in:
        return NOT_CHECKED_IN
    return None


def run_attendance_action(reconciler, intent, photo, latitude, longitude):
    """
    Perform the action the server state calls for.
    Returns (result, conflict); a conflict means nothing was written.
    """
    if intent not in (CHECK_IN, CHECK_OUT) or not reconciler.is_authenticated:
        return reconciler.submit(photo, latitude, longitude), None

    status = reconciler.get_current_status()
    conflict = intent_conflict(intent, status)
    if conflict:
        _logger.info("Refused %s for employee %s: %s", intent, reconciler.employee_id, conflict)
        return None, conflict
    if status.is_checked_in:
        return reconciler.check_out(status.record_id, latitude, longitude), None
    return reconciler.check_in(photo, latitude, longitude), None


def _address_for(latitude, longitude):
    config = current_app.config
    if not config["GEOCODER_ENABLED"]:
        return UNKNOWN_LOCATION
    return reverse_geocode(
        latitude,
        longitude,
        user_agent=config["GEOCODER_USER_AGENT"],
        timeout=config["GEOCODER_TIMEOUT"],
    )


@face_attendance_bp.route("/")
@login_required
def index():
    reconciler = current_reconciler()
    status = reconciler.get_current_status()
    return render_template(
        "face-attendance.html",
        status=status.to_dict(),
        employee_name=current_odoo_session().employee_name,
    )


@face_attendance_bp.route("/submit", methods=["POST"])
@login_required
def submit():
    config = current_app.config
    odoo_session = current_odoo_session()

    # 1. Photo
    upload = request.files.get("photo")
    try:
        raw = upload.read() if upload else decode_data_url(request.form.get("image"))
        base64_image = photo_to_base64(
            raw,
            max_side=config["PHOTO_MAX_SIDE"],
            quality=config["PHOTO_QUALITY"],
        )
    except PhotoError as e:
        flash(str(e), "danger")
        return redirect(url_for("face_attendance.index"))

    # 2. Location
    latitude, longitude = parse_coordinates(request.form)
    if latitude is None:
        flash("Could not get current location", "danger")
        return redirect(url_for("face_attendance.index"))

    address = _address_for(latitude, longitude)
    _logger.info("Face attendance for %s at %s (%s, %s)", odoo_session.login, address, latitude, longitude)

    # 3. Submit
    intent = request.form.get("action")
    reconciler = current_reconciler()

    if config["FACE_VERIFY_VIA_CONTROLLER"]:
        conflict = intent_conflict(intent, reconciler.get_current_status())
        if conflict:
            flash(conflict, "warning")
            return redirect(url_for("face_attendance.index"))

        result = submit_face_via_controller(
            odoo_session.base_url,
            base64_image,
            latitude,
            longitude,
            timeout=config["ODOO_WRITE_TIMEOUT"],
        )
        if result["success"]:
            flash(result.get("message") or "Attendance recorded.", "success")
        else:
            flash(result.get("error") or "Attendance action failed.", "danger")
        return redirect(url_for("face_attendance.index"))

    result, conflict = run_attendance_action(reconciler, intent, base64_image, latitude, longitude)
    if conflict:
        flash(conflict, "warning")
    elif result.success:
        current_hr_service(reconciler).invalidate_history()
        flash(f"✅ {result.message} ({address})", "success")
    else:
        flash(f"❌ {result.error}", "danger")
    return redirect(url_for("face_attendance.index"))
