import logging

import pandas as pd
from sqlalchemy import case, func

from extensions import db
from models import Faculty, FacultyDetails, ResearchProject
from services.report_data import department_name_subquery, fetch_rows

logger = logging.getLogger(__name__)

TOP_FUNDING_AGENCIES = 10


def _designation_count(title):
    return func.sum(case((FacultyDetails.designation == title, 1), else_=0))


def faculty_statistics(department_id=None):
    """Faculty totals per department, split by designation."""
    query = (
        db.session.query(
            Faculty.department_name.label("Department"),
            func.count(Faculty.faculty_id).label("TotalFaculty"),
            _designation_count("Professor").label("Professors"),
            _designation_count("Associate Professor").label("AssociateProfessors"),
            _designation_count("Assistant Professor").label("AssistantProfessors")
        )
        .outerjoin(FacultyDetails, FacultyDetails.faculty_id == Faculty.faculty_id)
    )
    if department_id is not None:
        query = query.filter(Faculty.department_name == department_name_subquery(department_id))

    query = query.group_by(Faculty.department_name).order_by(Faculty.department_name)
    return fetch_rows(query, "faculty statistics")


def designation_distribution():
    count = func.count(FacultyDetails.faculty_id)
    query = (
        db.session.query(
            FacultyDetails.designation.label("Designation"),
            count.label("Count")
        )
        .group_by(FacultyDetails.designation)
        .order_by(count.desc(), FacultyDetails.designation)
    )
    rows = fetch_rows(query, "designation distribution")
    for row in rows:
        row["Designation"] = row["Designation"] or "Not Specified"
    return rows


def count_by(rows, key, label, count_label):
    """Group already fetched rows by ``key``; None becomes "N/A"."""
    if not rows:
        return []
    df = pd.DataFrame(rows)
    df[key] = df[key].fillna("N/A")
    counts = df.groupby(key).size().reset_index(name=count_label).sort_values(key)
    return [
        {label: r[key], count_label: int(r[count_label])}
        for r in counts.to_dict("records")
    ]


def student_statistics(student_rows):
    return (
        count_by(student_rows, "department", "Branch", "Total Students"),
        count_by(student_rows, "division", "Division", "Number of Students"),
    )


def parse_amount(series):
    """Amounts stored as text such as "Rs. 1,50,000" -> float (NaN if unparseable)."""
    cleaned = (
        series.fillna("")
        .astype(str)
        .str.replace(r"(?i)rs\.?|,|\s", "", regex=True)
    )
    return pd.to_numeric(cleaned, errors="coerce")


def format_rupees(amount):
    if amount is None or pd.isna(amount):
        return "N/A"
    return f"Rs. {amount:,.2f}"


def research_project_frame(department_id=None):
    query = db.session.query(
        ResearchProject.branch.label("Department"),
        ResearchProject.project_type.label("Type"),
        ResearchProject.govt_type.label("Govt"),
        ResearchProject.funding_agency.label("Agency"),
        ResearchProject.amount_sanctioned.label("Amount")
    )
    if department_id is not None:
        query = query.filter(ResearchProject.branch == department_name_subquery(department_id))
    return pd.read_sql(query.statement, db.session.connection())


def research_statistics(department_id=None):
    """
    Per-branch project counts and the top funding agencies.

    Returns ``(summary_rows, agency_rows)``; both empty when there are no
    projects in scope.
    """
    df = research_project_frame(department_id)
    if df.empty:
        return [], []

    df["Department"] = df["Department"].fillna("N/A")
    df["Agency"] = df["Agency"].fillna("N/A")
    df["is_research"] = (df["Type"] == "Research Project").astype(int)
    df["is_consultancy"] = (df["Type"] == "Consultancy").astype(int)
    df["is_govt"] = (df["Govt"] == "Govt").astype(int)
    df["is_non_govt"] = (df["Govt"] == "NonGovt").astype(int)
    df["amount_value"] = parse_amount(df["Amount"])

    summary = (
        df.groupby("Department")
        .agg(
            TotalProjects=("Type", "size"),
            ResearchProjects=("is_research", "sum"),
            Consultancies=("is_consultancy", "sum"),
            GovernmentFunded=("is_govt", "sum"),
            NonGovernmentFunded=("is_non_govt", "sum")
        )
        .reset_index()
        .sort_values("Department")
    )

    agencies = (
        df.groupby("Agency")
        .agg(
            ProjectCount=("Agency", "size"),
            TotalAmount=("amount_value", lambda s: s.sum(min_count=1))
        )
        .reset_index()
        .sort_values(["ProjectCount", "Agency"], ascending=[False, True])
        .head(TOP_FUNDING_AGENCIES)
    )

    summary_rows = [
        {k: (v if k == "Department" else int(v)) for k, v in row.items()}
        for row in summary.to_dict("records")
    ]
    agency_rows = [
        {
            "Agency": row["Agency"],
            "ProjectCount": int(row["ProjectCount"]),
            "TotalAmount": format_rupees(row["TotalAmount"]),
        }
        for row in agencies.to_dict("records")
    ]
    logger.debug("Research statistics: %d branches, %d agencies", len(summary_rows), len(agency_rows))
    return summary_rows, agency_rows
