from flask import Blueprint, jsonify
from flask_login import login_required

from services.department_service import get_department_faculty, get_department_stats
from services.report_data import get_department_name
from utils.errors import error_response
from utils.serializers import json_value

departments_bp = Blueprint("departments", __name__, url_prefix="/departments")


def _department_id(raw_id):
    try:
        return int(raw_id)
    except ValueError:
        return None


# =========================================================
# FACULTY OF A DEPARTMENT
# =========================================================
@departments_bp.route("/<raw_id>/faculty", methods=["GET"])
@login_required
def department_faculty(raw_id):
    department_id = _department_id(raw_id)
    if department_id is None:
        return error_response("Invalid department ID", 400)

    department_name = get_department_name(department_id)
    if department_name is None:
        return error_response("Department not found", 404)

    faculty = get_department_faculty(department_name)
    return jsonify({
        "success": True,
        "data": json_value(faculty),
        "departmentName": department_name
    })


# =========================================================
# DEPARTMENT STATISTICS
# =========================================================
@departments_bp.route("/<raw_id>/stats", methods=["GET"])
@login_required
def department_stats(raw_id):
    department_id = _department_id(raw_id)
    if department_id is None:
        return error_response("Invalid department ID", 400)

    department_name = get_department_name(department_id)
    if department_name is None:
        return error_response("Department not found", 404)

    return jsonify({"success": True, "data": get_department_stats(department_name)})
