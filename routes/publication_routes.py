import logging

from flask import Blueprint, request, jsonify
from flask_login import current_user, login_required

from extensions import db
from models import Faculty, Publication
from services.publication_service import (
    list_faculty_publications, publication_fields, build_authors,
    fan_out_publication, update_publication, delete_publication
)
from utils.decorators import role_required
from utils.errors import DataAccessError, NotFoundError, ValidationError, error_response
from utils.params import parse_faculty_id
from utils.serializers import json_value

logger = logging.getLogger(__name__)

publications_bp = Blueprint("publications", __name__, url_prefix="/faculty/publications")

WRITE_ROLES = ("faculty", "hod", "admin")


def own_faculty_id():
    """Faculty id of a logged-in faculty member, None for other roles."""
    if current_user.role != "faculty":
        return None
    faculty = db.session.get(Faculty, current_user.username)
    if faculty is None:
        raise NotFoundError("Faculty record not found")
    return faculty.faculty_id


def publication_id_from(value):
    if value in (None, ""):
        raise ValidationError("Publication ID is required")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid publication ID")


def json_body():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON in request body")
    return payload


# =========================================================
# LIST
# =========================================================
@publications_bp.route("", methods=["GET"])
@login_required
def list_publications():
    faculty_id = own_faculty_id()

    # HOD and admin may look at any faculty member
    query_faculty_id = faculty_id or parse_faculty_id(request.args.get("facultyId"))
    if not query_faculty_id:
        return error_response("Faculty ID is required", 400)

    try:
        publications = list_faculty_publications(query_faculty_id)
    except DataAccessError as exc:
        return jsonify({"success": True, "data": [], "error": exc.message})

    return jsonify({"success": True, "data": json_value(publications)})


# =========================================================
# ADD
# =========================================================
@publications_bp.route("", methods=["POST"])
@role_required(*WRITE_ROLES, message="Unauthorized to add publications")
def add_publication():
    faculty_id = own_faculty_id()
    payload = json_body()

    if current_user.role == "faculty":
        publication_faculty_id = faculty_id
    else:
        publication_faculty_id = parse_faculty_id(payload.get("faculty_id"))
    if not publication_faculty_id:
        return error_response("Faculty ID is required", 400)

    co_authors = payload.get("co_authors") or []
    if not isinstance(co_authors, list):
        return error_response("co_authors must be a list of faculty IDs", 400)
    co_authors = [str(co_author) for co_author in co_authors if co_author]

    fields = publication_fields(payload)
    fields["authors"] = build_authors(publication_faculty_id, co_authors, fields["authors"])

    publication = fan_out_publication(publication_faculty_id, fields, co_authors)
    return jsonify({
        "success": True,
        "message": "Publication added successfully",
        "data": json_value(publication.to_dict())
    })


# =========================================================
# UPDATE
# =========================================================
@publications_bp.route("", methods=["PUT"])
@role_required(*WRITE_ROLES, message="Unauthorized to update publications")
def edit_publication():
    payload = json_body()
    publication_id = publication_id_from(payload.get("id"))
    faculty_id = own_faculty_id()

    publication = db.session.get(Publication, publication_id)
    if publication is None:
        return error_response("Publication not found", 404)

    if current_user.role == "faculty" and publication.faculty_id != faculty_id:
        return error_response("Unauthorized to update this publication", 403)

    fields = publication_fields(payload, require_authors=True)

    if current_user.role == "faculty":
        owner_id = faculty_id
    else:
        owner_id = parse_faculty_id(payload.get("faculty_id")) or publication.faculty_id

    update_publication(publication, owner_id, fields)
    return jsonify({
        "success": True,
        "message": "Publication updated successfully",
        "data": json_value(publication.to_dict())
    })


# =========================================================
# DELETE
# =========================================================
@publications_bp.route("", methods=["DELETE"])
@role_required(*WRITE_ROLES, message="Unauthorized to delete publications")
def remove_publication():
    publication_id = publication_id_from(request.args.get("id"))
    faculty_id = own_faculty_id()

    publication = db.session.get(Publication, publication_id)
    if publication is None:
        return error_response("Publication not found", 404)

    if current_user.role == "faculty" and publication.faculty_id != faculty_id:
        return error_response("Unauthorized to delete this publication", 403)

    delete_publication(publication)
    logger.info("Publication %s deleted by %s", publication_id, current_user.username)
    return jsonify({"success": True, "message": "Publication deleted successfully"})
