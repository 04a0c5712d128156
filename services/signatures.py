import logging
from dataclasses import dataclass
from typing import Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import aliased

from extensions import db
from models import Faculty, FacultyDetails, Department, DepartmentDetails

logger = logging.getLogger(__name__)

PLACEHOLDER_FACULTY = "Prof. XXXX XXXX"
PLACEHOLDER_HOD = "Prof. YYY ZZZ"
UNKNOWN_HOD = "Prof. XXX XXX"
ALL_DEPARTMENTS = "All Departments"


@dataclass(frozen=True)
class Signatory:
    faculty_name: str
    signature_ref: Optional[str] = None


PLACEHOLDER_SIGNATORY = Signatory(PLACEHOLDER_FACULTY)


def _signatory_query():
    return (
        db.session.query(Faculty.name, FacultyDetails.signature_url)
        .outerjoin(FacultyDetails, FacultyDetails.faculty_id == Faculty.faculty_id)
    )


def resolve_signatory(faculty_id=None, department_name=None):
    """
    Name and signature reference for the faculty sign-off slot.

    Explicit faculty first, then the first faculty of the department
    (by faculty id), then the placeholder. Never raises.
    """
    if faculty_id:
        try:
            row = _signatory_query().filter(Faculty.faculty_id == faculty_id).first()
            if row:
                return Signatory(row.name, row.signature_url or None)
        except SQLAlchemyError:
            db.session.rollback()
            logger.warning("Signatory lookup failed for faculty %s", faculty_id, exc_info=True)

    if department_name and department_name != ALL_DEPARTMENTS:
        try:
            row = (
                _signatory_query()
                .filter(Faculty.department_name == department_name)
                .order_by(Faculty.faculty_id.asc())
                .first()
            )
            if row:
                return Signatory(row.name, row.signature_url or None)
        except SQLAlchemyError:
            db.session.rollback()
            logger.warning(
                "Signatory lookup failed for department %s", department_name, exc_info=True
            )

    return PLACEHOLDER_SIGNATORY


def hod_fallback(department_name):
    fallback = current_app.config.get("HOD_FALLBACK", {})
    return fallback.get(department_name, UNKNOWN_HOD)


def resolve_hod_by_department(department_name):
    if not department_name or department_name == ALL_DEPARTMENTS:
        return PLACEHOLDER_HOD

    hod = aliased(Faculty)
    try:
        department = (
            db.session.query(Department.department_id, DepartmentDetails.hod_id, hod.name)
            .outerjoin(
                DepartmentDetails,
                DepartmentDetails.department_id == Department.department_id
            )
            .outerjoin(hod, hod.faculty_id == DepartmentDetails.hod_id)
            .filter(Department.name == department_name)
            .first()
        )
    except SQLAlchemyError:
        db.session.rollback()
        logger.warning("HOD lookup failed for department %s", department_name, exc_info=True)
        return hod_fallback(department_name)

    if department is None:
        logger.info("Department %s not found, using HOD fallback table", department_name)
        return hod_fallback(department_name)

    # Department exists but has no HOD assigned
    return department.name or PLACEHOLDER_HOD


def resolve_hod(faculty_id=None):
    """HOD name for the department of ``faculty_id``. Never raises."""
    if not faculty_id:
        return PLACEHOLDER_HOD

    hod = aliased(Faculty)
    try:
        hod_name = (
            db.session.query(hod.name)
            .select_from(Faculty)
            .join(Department, Department.name == Faculty.department_name)
            .join(DepartmentDetails, DepartmentDetails.department_id == Department.department_id)
            .join(hod, hod.faculty_id == DepartmentDetails.hod_id)
            .filter(Faculty.faculty_id == faculty_id)
            .scalar()
        )
        if hod_name:
            return hod_name

        department_name = (
            db.session.query(Faculty.department_name)
            .filter(Faculty.faculty_id == faculty_id)
            .scalar()
        )
    except SQLAlchemyError:
        db.session.rollback()
        logger.warning("HOD lookup failed for faculty %s", faculty_id, exc_info=True)
        return PLACEHOLDER_HOD

    if not department_name:
        return PLACEHOLDER_HOD

    return resolve_hod_by_department(department_name)


def resolve_hod_for(faculty_id=None, department_name=None):
    if faculty_id:
        return resolve_hod(faculty_id)
    return resolve_hod_by_department(department_name)
