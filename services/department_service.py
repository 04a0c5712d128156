import logging
from datetime import date

from sqlalchemy import extract, func, select, text
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import (
    Faculty, FacultyDetails, Publication, ResearchProject, Award,
    Workshop, Membership, Contribution
)
from utils.errors import DataAccessError

logger = logging.getLogger(__name__)

STUDENTS_PER_FACULTY_ESTIMATE = 30
PUBLICATION_WINDOW_YEARS = 5


def _count_for_faculty(model, column):
    return (
        select(func.count())
        .select_from(model)
        .where(column == Faculty.faculty_id)
        .correlate(Faculty)
        .scalar_subquery()
    )


def research_project_count(faculty_name):
    """Projects whose investigator list mentions the faculty name; 0 on failure."""
    try:
        return (
            db.session.query(func.count(ResearchProject.id))
            .filter(ResearchProject.investigators.like(f"%{faculty_name}%"))
            .scalar()
        ) or 0
    except SQLAlchemyError:
        db.session.rollback()
        logger.warning("Error fetching research projects for %s", faculty_name, exc_info=True)
        return 0


def get_department_faculty(department_name):
    query = (
        db.session.query(
            Faculty.faculty_id.label("F_id"),
            Faculty.name.label("F_name"),
            Faculty.department_name.label("F_dept"),
            FacultyDetails.email.label("Email"),
            FacultyDetails.designation.label("Current_Designation"),
            FacultyDetails.experience.label("Experience"),
            FacultyDetails.highest_degree.label("Highest_Degree"),
            FacultyDetails.date_of_joining.label("Date_of_Joining"),
            _count_for_faculty(Publication, Publication.faculty_id).label("publicationCount"),
            _count_for_faculty(Award, Award.faculty_id).label("awardCount"),
            _count_for_faculty(Workshop, Workshop.faculty_id).label("workshopCount"),
            _count_for_faculty(Membership, Membership.faculty_id).label("membershipCount"),
            _count_for_faculty(Contribution, Contribution.faculty_id).label("contributionCount")
        )
        .outerjoin(FacultyDetails, FacultyDetails.faculty_id == Faculty.faculty_id)
        .filter(Faculty.department_name == department_name)
        .order_by(Faculty.name)
    )

    try:
        faculty = [row._asdict() for row in query.all()]
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Error fetching department faculty for %s", department_name)
        raise DataAccessError("Failed to fetch faculty data") from exc

    for member in faculty:
        member["researchProjectCount"] = research_project_count(member["F_name"])
    return faculty


def years_ago(today, years):
    try:
        return today.replace(year=today.year - years)
    except ValueError:
        # 29 February
        return today.replace(year=today.year - years, day=28)


def student_count(department_name, total_faculty):
    try:
        return db.session.execute(
            text("SELECT COUNT(*) FROM student WHERE branch = :branch"),
            {"branch": department_name}
        ).scalar() or 0
    except SQLAlchemyError:
        db.session.rollback()
        logger.warning("Student count unavailable for %s, using estimate", department_name)
        return total_faculty * STUDENTS_PER_FACULTY_ESTIMATE


def _department_count(model, faculty_column):
    return (
        db.session.query(func.count())
        .select_from(model)
        .join(Faculty, faculty_column == Faculty.faculty_id)
    )


def get_department_stats(department_name, today=None):
    today = today or date.today()
    cutoff = years_ago(today, PUBLICATION_WINDOW_YEARS)

    try:
        designation_count = func.count(Faculty.faculty_id)
        by_designation = (
            db.session.query(FacultyDetails.designation, designation_count)
            .select_from(Faculty)
            .join(FacultyDetails, FacultyDetails.faculty_id == Faculty.faculty_id)
            .filter(Faculty.department_name == department_name)
            .group_by(FacultyDetails.designation)
            .order_by(designation_count.desc())
            .all()
        )

        year = extract("year", Publication.publication_date)
        by_year = (
            db.session.query(year.label("year"), func.count(Publication.id))
            .select_from(Publication)
            .join(Faculty, Publication.faculty_id == Faculty.faculty_id)
            .filter(Faculty.department_name == department_name)
            .filter(Publication.publication_date >= cutoff)
            .group_by(year)
            .order_by(year.desc())
            .all()
        )

        total_research_projects = (
            db.session.query(func.count(ResearchProject.id))
            .filter(ResearchProject.branch == department_name)
            .scalar()
        ) or 0
        total_awards = (
            _department_count(Award, Award.faculty_id)
            .filter(Faculty.department_name == department_name)
            .scalar()
        ) or 0
        total_workshops = (
            _department_count(Workshop, Workshop.faculty_id)
            .filter(Faculty.department_name == department_name)
            .scalar()
        ) or 0
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Error fetching department statistics for %s", department_name)
        raise DataAccessError("Failed to fetch department statistics") from exc

    total_faculty = sum(count for _, count in by_designation)
    return {
        "departmentName": department_name,
        "totalFaculty": total_faculty,
        "totalStudents": student_count(department_name, total_faculty),
        "totalPublications": sum(count for _, count in by_year),
        "totalResearchProjects": total_research_projects,
        "totalAwards": total_awards,
        "totalWorkshops": total_workshops,
        "facultyByDesignation": [
            {"designation": designation or "Not Specified", "count": count}
            for designation, count in by_designation
        ],
        "publicationsByYear": [
            {"year": str(int(y)) if y is not None else "Unknown", "count": count}
            for y, count in by_year
        ],
    }
