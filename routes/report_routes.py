import base64
import logging
from datetime import datetime, timezone
from io import BytesIO

from flask import Blueprint, request, jsonify, send_file
from flask_login import login_required

from services.report_data import ReportFilters, get_department_name
from services.report_kinds import ReportKind, DEPARTMENT_REPORT_KINDS
from services.report_registry import table_data, generate_report, generate_department_report
from services.signatures import resolve_hod
from utils.errors import AppError, NotFoundError, error_response
from utils.params import parse_department_id, parse_faculty_id, parse_year
from utils.serializers import json_value

logger = logging.getLogger(__name__)

reports_bp = Blueprint("reports", __name__, url_prefix="/reports")


def department_for(department_id):
    """Department name for a filter id (None for all departments); 404 if unknown."""
    if department_id is None:
        return None
    name = get_department_name(department_id)
    if name is None:
        raise NotFoundError("Department not found")
    return name


def pdf_response(report):
    return send_file(
        BytesIO(report.content),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=report.filename
    )


# =========================================================
# POST /reports
# =========================================================
@reports_bp.route("", methods=["POST"])
@login_required
def create_report():
    if not request.is_json:
        return error_response("Invalid content type. Expected JSON.", 400)

    if not request.get_data(as_text=True).strip():
        return error_response("Empty request body", 400)

    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return error_response("Invalid JSON in request body", 400)

    # 1. HOD lookup short-circuit
    if body.get("requestType") == "hod-lookup":
        faculty_id = parse_faculty_id(body.get("facultyId"))
        if not faculty_id:
            return error_response("Faculty ID is required for HOD lookup", 400)
        return jsonify({"success": True, "hodName": resolve_hod(faculty_id)})

    # 2. Filters
    kind = ReportKind.parse(body.get("reportType"), default=ReportKind.FULL)
    if kind is None:
        return error_response("Invalid report type", 400)

    department_id = parse_department_id(body.get("departmentId"))
    filters = ReportFilters(
        department_id=department_id,
        faculty_id=parse_faculty_id(body.get("facultyId")),
        year=parse_year(body.get("year"))
    )
    department_name = department_for(department_id)
    generated_at = datetime.now(timezone.utc).isoformat()
    department_label = body.get("departmentId") or "all"

    # 3. JSON table data
    if body.get("format") == "json":
        rows, columns, warnings = table_data(kind, filters)
        data = {
            "reportType": kind.value,
            "departmentId": department_label,
            "generatedAt": generated_at,
            "tableData": json_value(rows),
            "columns": columns,
        }
        if warnings:
            data["warnings"] = warnings
        return jsonify({"success": True, "data": data})

    # 4. PDF as base64
    try:
        report = generate_report(kind, filters, department_name)
    except AppError:
        raise
    except Exception:
        logger.exception("Error generating %s report", kind.value)
        return error_response("Failed to generate report", 500)

    return jsonify({
        "success": True,
        "data": {
            "reportType": kind.value,
            "departmentId": department_label,
            "generatedAt": generated_at,
            "filename": report.filename,
            "pdfBase64": base64.b64encode(report.content).decode("ascii"),
        }
    })


# =========================================================
# GET /reports?id=
# =========================================================
@reports_bp.route("", methods=["GET"])
@login_required
def download_report():
    if not request.args.get("id"):
        return error_response("Report ID is required", 400)

    # Reports are not stored; the id only selects this demo download
    try:
        report = generate_report(ReportKind.FACULTY, ReportFilters())
    except Exception:
        logger.exception("Error generating PDF")
        return error_response("Failed to generate PDF", 500)

    return pdf_response(report)


# =========================================================
# GET /reports/department
# =========================================================
@reports_bp.route("/department", methods=["GET"])
@login_required
def department_report():
    report_type = request.args.get("reportType")
    if not report_type or not request.args.get("departmentId"):
        return error_response("Report type and department ID are required", 400)

    department_id = parse_department_id(request.args.get("departmentId"), required=True)
    department_name = department_for(department_id)

    kind = ReportKind.parse(report_type)
    if kind not in DEPARTMENT_REPORT_KINDS:
        return error_response("Invalid report type", 400)

    filters = ReportFilters(
        department_id=department_id,
        faculty_id=parse_faculty_id(request.args.get("facultyId")),
        year=parse_year(request.args.get("year")),
        within_department=True
    )

    try:
        report = generate_department_report(kind, department_name, filters)
    except AppError:
        raise
    except Exception:
        logger.exception("Error generating department report")
        return error_response("Failed to generate report", 500)

    return pdf_response(report)
