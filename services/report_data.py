"""
Report data aggregators.

Every aggregator takes a ``ReportFilters`` and returns ``(rows, columns)``:
``rows`` is a list of dicts keyed by column label and ``columns`` the ordered
keys shown in tables. A faculty filter always wins over a department filter.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy import case, extract, literal, or_, text
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import (
    Faculty, FacultyDetails, Department, DepartmentDetails,
    Publication, ResearchProject, Contribution, Workshop,
    Membership, Award
)
from utils.errors import DataAccessError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportFilters:
    department_id: Optional[int] = None
    faculty_id: Optional[str] = None
    year: Optional[int] = None
    # Keep the department condition alongside a faculty filter
    within_department: bool = False


FACULTY_COLUMNS = [
    "name", "designation", "dateOfJoining", "department", "highestDegree", "experience"
]
STUDENT_COLUMNS = ["id", "name", "department", "division", "email"]
RESEARCH_COLUMNS = [
    "faculty_name", "department", "title", "type", "year", "venue", "funding_amount", "source"
]
PUBLICATION_COLUMNS = [
    "faculty_name", "Title", "Journal_Name", "Publication_Type",
    "Publication_Date", "Impact_Factor", "DOI"
]
RESEARCH_PROJECT_COLUMNS = [
    "faculty_name", "Title", "Funding_Agency", "Amount", "Start_Date", "End_Date", "Status"
]
CONTRIBUTION_COLUMNS = [
    "faculty_name", "Contribution_Type", "Description", "Date",
    "Recognized_By", "Award_Received", "Remarks"
]
WORKSHOP_COLUMNS = [
    "faculty_name", "Workshop_Name", "Organization", "Start_Date", "End_Date", "Role"
]
MEMBERSHIP_COLUMNS = [
    "faculty_name", "Organization_Name", "Membership_Type", "Start_Date",
    "End_Date", "Position_Held", "Status"
]
AWARD_COLUMNS = [
    "faculty_name", "Award_Name", "Awarding_Organization", "Date_Received",
    "Category", "Description"
]

# Contribution types that count as research output
RESEARCH_CONTRIBUTION_KEYWORDS = ("journal", "conference", "publication", "research", "paper")


# =========================================================
# HELPERS
# =========================================================

def department_name_subquery(department_id):
    return (
        db.session.query(Department.name)
        .filter(Department.department_id == department_id)
        .scalar_subquery()
    )


def hod_id_subquery():
    """HOD_ID of the department named by the outer faculty row."""
    return (
        db.session.query(DepartmentDetails.hod_id)
        .join(Department, Department.department_id == DepartmentDetails.department_id)
        .filter(Department.name == Faculty.department_name)
        .correlate(Faculty)
        .scalar_subquery()
    )


def scope_query(query, filters, faculty_column, department_column, date_column=None):
    if filters.faculty_id:
        query = query.filter(faculty_column == filters.faculty_id)
    if filters.department_id is not None and (
        not filters.faculty_id or filters.within_department
    ):
        query = query.filter(
            department_column == department_name_subquery(filters.department_id)
        )

    if filters.year is not None and date_column is not None:
        query = query.filter(extract("year", date_column) == filters.year)

    return query


def fetch_rows(query, what):
    try:
        return [row._asdict() for row in query.all()]
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Error fetching %s data", what)
        raise DataAccessError(f"Failed to fetch {what} data") from exc


# =========================================================
# FACULTY / STUDENTS
# =========================================================

def get_faculty_report_data(filters=ReportFilters()):
    hod_rank = case((Faculty.faculty_id == hod_id_subquery(), 0), else_=1)
    designation_rank = case(
        (FacultyDetails.designation == "Professor", 1),
        (FacultyDetails.designation == "Associate Professor", 2),
        (FacultyDetails.designation == "Assistant Professor", 3),
        else_=4
    )

    query = (
        db.session.query(
            Faculty.faculty_id.label("F_id"),
            Faculty.name.label("name"),
            Faculty.department_name.label("department"),
            FacultyDetails.designation.label("designation"),
            FacultyDetails.highest_degree.label("highestDegree"),
            FacultyDetails.experience.label("experience"),
            FacultyDetails.date_of_joining.label("dateOfJoining"),
            FacultyDetails.email.label("email"),
            hod_rank.label("hod_rank")
        )
        .outerjoin(FacultyDetails, FacultyDetails.faculty_id == Faculty.faculty_id)
    )

    if filters.department_id is not None:
        query = query.filter(
            Faculty.department_name == department_name_subquery(filters.department_id)
        )

    query = query.order_by(
        hod_rank,
        designation_rank,
        FacultyDetails.date_of_joining.asc(),
        Faculty.name.asc()
    )

    rows = fetch_rows(query, "faculty")
    for row in rows:
        row["isHOD"] = row.pop("hod_rank") == 0
    return rows, list(FACULTY_COLUMNS)


STUDENT_SQL = """
    SELECT s.id, s.username AS name, s.branch AS department, s.division, s.email
    FROM student s
"""

# Older deployments keep name/department instead of username/branch
LEGACY_STUDENT_SQL = """
    SELECT s.id, s.name AS name, s.department AS department, s.division, s.email
    FROM student s
"""


def student_statement(base_sql, department_column, department_id):
    sql = base_sql
    params = {}
    if department_id is not None:
        sql += (
            f" WHERE {department_column} = "
            "(SELECT Department_Name FROM department WHERE Department_ID = :department_id)"
        )
        params["department_id"] = department_id
    sql += " ORDER BY name"
    return text(sql), params


def get_students_report_data(filters=ReportFilters()):
    statement, params = student_statement(STUDENT_SQL, "s.branch", filters.department_id)
    try:
        rows = db.session.execute(statement, params).mappings().all()
        return [dict(r) for r in rows], list(STUDENT_COLUMNS)
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.warning("Student table query failed, trying legacy layout: %s", exc)

    statement, params = student_statement(
        LEGACY_STUDENT_SQL, "s.department", filters.department_id
    )
    try:
        rows = db.session.execute(statement, params).mappings().all()
        return [dict(r) for r in rows], list(STUDENT_COLUMNS)
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Error fetching student data from legacy student table")
        raise DataAccessError("Failed to fetch student data") from exc


# =========================================================
# RESEARCH (three sources)
# =========================================================

def research_publications_query(filters):
    query = (
        db.session.query(
            Faculty.name.label("faculty_name"),
            Faculty.department_name.label("department"),
            Publication.title.label("title"),
            Publication.publication_type.label("type"),
            extract("year", Publication.publication_date).label("year"),
            Publication.publication_venue.label("venue"),
            literal("").label("funding_amount"),
            literal("faculty_publication").label("source")
        )
        .select_from(Publication)
        .join(Faculty, Publication.faculty_id == Faculty.faculty_id)
    )
    query = scope_query(
        query, filters, Faculty.faculty_id, Faculty.department_name,
        Publication.publication_date
    )
    return query.order_by(Publication.publication_date.desc(), Faculty.name.asc())


def research_projects_query(filters):
    query = db.session.query(
        ResearchProject.investigators.label("faculty_name"),
        ResearchProject.investigator_department.label("department"),
        ResearchProject.title.label("title"),
        literal("research project").label("type"),
        extract("year", ResearchProject.year_of_award).label("year"),
        ResearchProject.funding_agency.label("venue"),
        ResearchProject.amount_sanctioned.label("funding_amount"),
        literal("research_project").label("source")
    )
    query = scope_query(
        query, filters, ResearchProject.user_id,
        ResearchProject.investigator_department, ResearchProject.year_of_award
    )
    return query.order_by(
        ResearchProject.year_of_award.desc(), ResearchProject.investigators.asc()
    )


def research_contributions_query(filters):
    query = (
        db.session.query(
            Faculty.name.label("faculty_name"),
            Faculty.department_name.label("department"),
            Contribution.description.label("title"),
            Contribution.contribution_type.label("type"),
            extract("year", Contribution.contribution_date).label("year"),
            Contribution.recognized_by.label("venue"),
            literal("").label("funding_amount"),
            literal("contribution").label("source")
        )
        .select_from(Contribution)
        .join(Faculty, Contribution.faculty_id == Faculty.faculty_id)
        .filter(or_(*[
            Contribution.contribution_type.ilike(f"%{keyword}%")
            for keyword in RESEARCH_CONTRIBUTION_KEYWORDS
        ]))
    )
    query = scope_query(
        query, filters, Faculty.faculty_id, Faculty.department_name,
        Contribution.contribution_date
    )
    return query.order_by(Contribution.contribution_date.desc(), Faculty.name.asc())


RESEARCH_SOURCES = (
    ("research publications", research_publications_query),
    ("research projects", research_projects_query),
    ("research contributions", research_contributions_query),
)


def get_research_report_data(filters=ReportFilters()):
    results = []
    for what, build_query in RESEARCH_SOURCES:
        try:
            results.extend(fetch_rows(build_query(filters), what))
        except DataAccessError:
            # a failing source contributes no rows
            logger.warning("Skipping %s in research report", what)
    return results, list(RESEARCH_COLUMNS)


# =========================================================
# FACULTY ACTIVITIES
# =========================================================

def get_publications_report_data(filters=ReportFilters()):
    logger.debug("Publications report requested with %s", filters)
    query = (
        db.session.query(
            Faculty.name.label("faculty_name"),
            Faculty.department_name.label("department"),
            Publication.id.label("id"),
            Publication.title.label("Title"),
            Publication.publication_venue.label("Journal_Name"),
            Publication.publication_type.label("Publication_Type"),
            Publication.publication_date.label("Publication_Date"),
            literal("").label("Impact_Factor"),
            Publication.doi.label("DOI")
        )
        .select_from(Publication)
        .join(Faculty, Publication.faculty_id == Faculty.faculty_id)
    )
    query = scope_query(
        query, filters, Faculty.faculty_id, Faculty.department_name,
        Publication.publication_date
    )
    query = query.order_by(
        Publication.publication_date.desc(), Faculty.name.asc(), Publication.id.asc()
    )
    return fetch_rows(query, "publications"), list(PUBLICATION_COLUMNS)


def get_research_projects_report_data(filters=ReportFilters()):
    query = (
        db.session.query(
            Faculty.name.label("faculty_name"),
            Faculty.department_name.label("department"),
            ResearchProject.title.label("Title"),
            ResearchProject.funding_agency.label("Funding_Agency"),
            ResearchProject.amount_sanctioned.label("Amount"),
            ResearchProject.year_of_award.label("Start_Date"),
            literal("").label("End_Date"),
            ResearchProject.status.label("Status")
        )
        .select_from(ResearchProject)
        .join(Faculty, ResearchProject.user_id == Faculty.faculty_id)
    )
    query = scope_query(
        query, filters, Faculty.faculty_id, Faculty.department_name,
        ResearchProject.year_of_award
    )
    query = query.order_by(ResearchProject.year_of_award.desc(), Faculty.name.asc())
    return fetch_rows(query, "research projects"), list(RESEARCH_PROJECT_COLUMNS)


def get_contributions_report_data(filters=ReportFilters()):
    query = (
        db.session.query(
            Faculty.name.label("faculty_name"),
            Faculty.department_name.label("department"),
            Contribution.contribution_type.label("Contribution_Type"),
            Contribution.description.label("Description"),
            Contribution.contribution_date.label("Date"),
            Contribution.recognized_by.label("Recognized_By"),
            Contribution.award_received.label("Award_Received"),
            Contribution.remarks.label("Remarks")
        )
        .select_from(Contribution)
        .join(Faculty, Contribution.faculty_id == Faculty.faculty_id)
    )
    query = scope_query(
        query, filters, Faculty.faculty_id, Faculty.department_name,
        Contribution.contribution_date
    )
    query = query.order_by(Contribution.contribution_date.desc(), Faculty.name.asc())
    return fetch_rows(query, "contributions"), list(CONTRIBUTION_COLUMNS)


def workshop_duration_days(start_date, end_date):
    if start_date and end_date:
        return (end_date - start_date).days or 1
    return 1


def get_workshops_report_data(filters=ReportFilters()):
    query = (
        db.session.query(
            Faculty.name.label("faculty_name"),
            Faculty.department_name.label("department"),
            Workshop.title.label("Workshop_Name"),
            Workshop.type.label("Type"),
            Workshop.venue.label("Organization"),
            Workshop.start_date.label("Start_Date"),
            Workshop.end_date.label("End_Date"),
            Workshop.role.label("Role"),
            literal("").label("Certificate_URL")
        )
        .select_from(Workshop)
        .join(Faculty, Workshop.faculty_id == Faculty.faculty_id)
    )
    query = scope_query(
        query, filters, Faculty.faculty_id, Faculty.department_name, Workshop.start_date
    )
    query = query.order_by(Workshop.start_date.desc(), Faculty.name.asc())

    rows = fetch_rows(query, "workshops")
    for row in rows:
        row["Duration_Days"] = workshop_duration_days(row["Start_Date"], row["End_Date"])
    return rows, list(WORKSHOP_COLUMNS)


def membership_status(end_date, today=None):
    today = today or date.today()
    if end_date is None or end_date > today:
        return "Active"
    return "Expired"


def get_memberships_report_data(filters=ReportFilters()):
    query = (
        db.session.query(
            Faculty.name.label("faculty_name"),
            Faculty.department_name.label("department"),
            Membership.organization.label("Organization_Name"),
            Membership.membership_type.label("Membership_Type"),
            Membership.start_date.label("Start_Date"),
            Membership.end_date.label("End_Date"),
            literal("").label("Position_Held"),
            Membership.organization_category.label("Status")
        )
        .select_from(Membership)
        .join(Faculty, Membership.faculty_id == Faculty.faculty_id)
    )
    query = scope_query(
        query, filters, Faculty.faculty_id, Faculty.department_name, Membership.start_date
    )
    query = query.order_by(Membership.start_date.desc(), Faculty.name.asc())

    rows = fetch_rows(query, "memberships")
    for row in rows:
        row["Membership_Status"] = membership_status(row["End_Date"])
    return rows, list(MEMBERSHIP_COLUMNS)


def get_awards_report_data(filters=ReportFilters()):
    query = (
        db.session.query(
            Faculty.name.label("faculty_name"),
            Faculty.department_name.label("department"),
            Award.award_name.label("Award_Name"),
            Award.awarding_organization.label("Awarding_Organization"),
            Award.award_date.label("Date_Received"),
            Award.category.label("Category"),
            Award.award_description.label("Description")
        )
        .select_from(Award)
        .join(Faculty, Award.faculty_id == Faculty.faculty_id)
    )
    query = scope_query(
        query, filters, Faculty.faculty_id, Faculty.department_name, Award.award_date
    )
    query = query.order_by(Award.award_date.desc(), Faculty.name.asc())
    return fetch_rows(query, "awards"), list(AWARD_COLUMNS)


FULL_REPORT_SECTIONS = (
    ("faculty", get_faculty_report_data, FACULTY_COLUMNS),
    ("student", get_students_report_data, STUDENT_COLUMNS),
    ("research", get_research_report_data, RESEARCH_COLUMNS),
)


def collect_full_report_data(filters=ReportFilters()):
    """
    Faculty, student and research sections for the combined report.
    A failing section degrades to [] and adds a warning instead of failing.
    """
    data, columns, warnings = {}, {}, []
    for section, aggregator, default_columns in FULL_REPORT_SECTIONS:
        try:
            data[section], columns[section] = aggregator(filters)
        except DataAccessError:
            logger.warning("Full report: %s section unavailable", section)
            data[section], columns[section] = [], list(default_columns)
            warnings.append(f"Could not fetch {section} data")
    return data, columns, warnings


def get_full_report_data(filters=ReportFilters()):
    data, columns, _ = collect_full_report_data(filters)
    return data, columns


def get_department_name(department_id):
    """Department_Name for an id, or None. Raises DataAccessError on store failure."""
    try:
        department = db.session.get(Department, department_id)
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Error fetching department %s", department_id)
        raise DataAccessError("Failed to fetch department") from exc
    return department.name if department else None
