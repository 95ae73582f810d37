import csv
import io
import logging

from flask import Blueprint, flash, jsonify, redirect, render_template, request, send_file, url_for
from openpyxl import Workbook
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from controllers.face_attendance_controller import parse_coordinates, run_attendance_action
from services.odoo_rpc import OdooError
from utils.auth import current_odoo_session, login_required
from utils.odoo import current_hr_service, current_reconciler
from utils.odoo_datetime import format_duration, format_local_time

_logger = logging.getLogger(__name__)

attendance_bp = Blueprint("attendance", __name__, url_prefix="/attendance")

EXPORT_HEADER = ["Date", "Check In", "Check Out", "Duration"]


def _export_rows(records):
    rows = []
    for record in records:
        rows.append([
            record.check_in.astimezone().strftime("%Y-%m-%d") if record.check_in else "",
            format_local_time(record.check_in),
            format_local_time(record.check_out) if record.check_out else "",
            format_duration(record.duration()) if record.check_out else "In progress",
        ])
    return rows


def _load_history(refresh=False):
    """History records, or None after flashing why they could not be loaded."""
    try:
        return current_hr_service().get_history(refresh=refresh)
    except OdooError as e:
        flash(f"Could not load attendance history: {e.message}", "danger")
    except ValueError as e:
        _logger.error("Unreadable attendance history: %s", e)
        flash(f"Could not load attendance history: {e}", "danger")
    return None


# ==========================================================
# DASHBOARD (today summary + session timer)
# ==========================================================
@attendance_bp.route("/")
@login_required
def index():
    summary = current_hr_service().get_today_summary()
    return render_template(
        "attendance.html",
        summary=summary,
        check_in_time=format_local_time(summary["current_check_in"]),
        employee_name=current_odoo_session().employee_name,
    )


@attendance_bp.route("/status")
@login_required
def status():
    return jsonify(current_reconciler().get_current_status().to_dict())


# ==========================================================
# CHECK IN / OUT WITHOUT PHOTO
# ==========================================================
@attendance_bp.route("/toggle", methods=["POST"])
@login_required
def toggle():
    latitude, longitude = parse_coordinates(request.form)
    reconciler = current_reconciler()
    result, conflict = run_attendance_action(reconciler, request.form.get("action"), None, latitude, longitude)

    if conflict:
        flash(conflict, "warning")
    elif result.success:
        current_hr_service(reconciler).invalidate_history()
        flash(f"✅ {result.message}", "success")
    else:
        flash(f"❌ Failed to update attendance: {result.error}", "danger")
    return redirect(url_for("attendance.index"))


# ==========================================================
# HISTORY
# ==========================================================
@attendance_bp.route("/history")
@login_required
def history():
    refresh = request.args.get("refresh") in ("1", "true", "yes")
    records = _load_history(refresh=refresh)
    if records is None:
        records = []

    return render_template(
        "attendance-history.html",
        records=records,
        rows=_export_rows(records),
    )


# ---------------- Export CSV ----------------
@attendance_bp.route("/export/csv")
@login_required
def export_csv():
    records = _load_history()
    if records is None:
        return redirect(url_for("attendance.history"))

    si = io.StringIO()
    cw = csv.writer(si)
    cw.writerow(EXPORT_HEADER)
    cw.writerows(_export_rows(records))

    output = io.BytesIO()
    output.write(si.getvalue().encode("utf-8"))
    output.seek(0)
    return send_file(output, mimetype="text/csv", as_attachment=True, download_name="attendance.csv")


# ---------------- Export Excel ----------------
@attendance_bp.route("/export/excel")
@login_required
def export_excel():
    records = _load_history()
    if records is None:
        return redirect(url_for("attendance.history"))

    wb = Workbook()
    ws = wb.active
    ws.title = "Attendance"
    ws.append(EXPORT_HEADER)
    for row in _export_rows(records):
        ws.append(row)

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return send_file(
        output,
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        as_attachment=True,
        download_name="attendance.xlsx",
    )


# ---------------- Export PDF ----------------
@attendance_bp.route("/export/pdf")
@login_required
def export_pdf():
    records = _load_history()
    if records is None:
        return redirect(url_for("attendance.history"))

    output = io.BytesIO()
    p = canvas.Canvas(output, pagesize=A4)
    width, height = A4
    y = height - 50

    p.setFont("Helvetica-Bold", 14)
    p.drawString(50, y, f"Attendance History - {current_odoo_session().employee_name or ''}")
    y -= 30

    p.setFont("Helvetica-Bold", 10)
    for x, title in zip((50, 170, 290, 410), EXPORT_HEADER):
        p.drawString(x, y, title)
    y -= 20

    p.setFont("Helvetica", 10)
    for row in _export_rows(records):
        if y < 50:
            p.showPage()
            p.setFont("Helvetica", 10)
            y = height - 50
        for x, value in zip((50, 170, 290, 410), row):
            p.drawString(x, y, value)
        y -= 18

    p.save()
    output.seek(0)
    return send_file(output, mimetype="application/pdf", as_attachment=True, download_name="attendance.pdf")
