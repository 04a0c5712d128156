"""
Composition recipes, one per report kind, plus the department report layout.

A recipe takes a ``ReportContext`` (filters, resolved department and
signatories, aggregated rows) and returns a finished ``ReportDocument``.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from flask import current_app
from reportlab.lib.pagesizes import A4, landscape
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from services.report_data import ReportFilters
from services.report_kinds import ReportKind
from services.report_pdf import ReportDocument, INDIGO, GREY, ACTIVITY, DEPARTMENT
from services.report_stats import (
    faculty_statistics, designation_distribution, student_statistics, research_statistics
)
from services.signatures import Signatory
from utils.errors import DataAccessError
from utils.params import sanitize_filename_part

logger = logging.getLogger(__name__)


@dataclass
class ReportContext:
    kind: ReportKind
    filters: ReportFilters
    department_name: str
    signatory: Signatory
    hod_name: str
    rows: Any
    columns: Any

    @property
    def faculty_scoped(self):
        return bool(self.filters.faculty_id)


def report_filename(kind, filters, faculty_name=None, today=None):
    today = today or date.today()
    if filters.faculty_id:
        scope = sanitize_filename_part(faculty_name or filters.faculty_id)
    elif filters.department_id is not None:
        scope = str(filters.department_id)
    else:
        scope = "all"
    return f"{kind.value.replace('-', '_')}_report_{scope}_{today.isoformat()}.pdf"


# =========================================================
# SHARED PIECES
# =========================================================

def open_document(ctx, title, show_department=True, footer_note=None):
    doc = ReportDocument(title, footer_note=footer_note)
    section_page(doc, ctx, title, show_department)
    return doc


def section_page(doc, ctx, title, show_department=True):
    config = current_app.config
    doc.letterhead(config["INSTITUTION_HEADER"], config.get("REPORT_LOGO_PATH"))
    doc.heading(title, "Heading2")
    doc.generated_line(ctx.department_name if show_department else None)


def sign(doc, ctx):
    doc.signature_block(ctx.signatory, ctx.hod_name)


def numbered(rows):
    return [dict(row, sr_no=index) for index, row in enumerate(rows, start=1)]


# =========================================================
# FACULTY / STUDENT / RESEARCH
# =========================================================

FACULTY_TABLE = (
    ("name", "Name"),
    ("department", "Department"),
    ("designation", "Designation"),
    ("highestDegree", "Highest Degree"),
    ("experience", "Experience (Years)"),
    ("dateOfJoining", "Date of Joining"),
    ("email", "Email"),
)

FACULTY_STATS_TABLE = (
    ("Department", "Department"),
    ("TotalFaculty", "Total Faculty"),
    ("Professors", "Professors"),
    ("AssociateProfessors", "Associate Professors"),
    ("AssistantProfessors", "Assistant Professors"),
)


def add_keyed_table(doc, layout, rows, preset, **kwargs):
    return doc.add_table(
        [key for key, _ in layout], rows, preset=preset,
        titles=[title for _, title in layout], **kwargs
    )


def build_faculty_report(ctx):
    doc = open_document(
        ctx, "Faculty Report", footer_note=current_app.config["REPORT_FOOTER_NOTE"]
    )

    display_rows = [
        dict(row, name=f"{row['name']} (HOD)" if row.get("isHOD") else row["name"])
        for row in ctx.rows
    ]
    add_keyed_table(
        doc, FACULTY_TABLE, display_rows, INDIGO, empty_notice="No faculty data found"
    )

    if ctx.rows:
        doc.page_break()
        doc.heading("Faculty Statistics by Department", "Heading2")
        try:
            stats = faculty_statistics(ctx.filters.department_id)
        except DataAccessError:
            stats = []
        add_keyed_table(
            doc, FACULTY_STATS_TABLE, stats, INDIGO,
            empty_notice="Faculty statistics are not available"
        )

    sign(doc, ctx)
    return doc


STUDENT_TABLE = (
    ("sr_no", "Sr. No"),
    ("name", "Student Name"),
    ("email", "Email"),
    ("department", "Branch"),
    ("division", "Division"),
)


def build_student_report(ctx):
    doc = open_document(ctx, "Student Report")
    add_keyed_table(
        doc, STUDENT_TABLE, numbered(ctx.rows), GREY,
        empty_notice="No student data found"
    )

    if ctx.rows:
        by_branch, by_division = student_statistics(ctx.rows)
        doc.heading("Student Statistics by Branch", "Heading3")
        doc.add_table(["Branch", "Total Students"], by_branch, preset=GREY,
                      titles=["Branch", "Total Students"])
        doc.heading("Student Statistics by Division", "Heading3")
        doc.add_table(["Division", "Number of Students"], by_division, preset=GREY,
                      titles=["Division", "Number of Students"])

    sign(doc, ctx)
    return doc


RESEARCH_TABLE = (
    ("sr_no", "Sr. No"),
    ("title", "Title"),
    ("faculty_name", "Faculty / Investigators"),
    ("department", "Department"),
    ("type", "Type"),
    ("year", "Year"),
    ("venue", "Venue / Funding Agency"),
    ("funding_amount", "Amount"),
)

RESEARCH_STATS_TABLE = (
    ("Department", "Department"),
    ("TotalProjects", "Total Projects"),
    ("ResearchProjects", "Research Projects"),
    ("Consultancies", "Consultancies"),
    ("GovernmentFunded", "Govt Funded"),
    ("NonGovernmentFunded", "Non-Govt Funded"),
)

FUNDING_AGENCY_TABLE = (
    ("Agency", "Funding Agency"),
    ("ProjectCount", "Project Count"),
    ("TotalAmount", "Total Amount Sanctioned"),
)


def build_research_report(ctx):
    doc = open_document(ctx, "Research Report")
    add_keyed_table(
        doc, RESEARCH_TABLE, numbered(ctx.rows), GREY,
        empty_notice="No research data found"
    )

    doc.page_break()
    section_page(doc, ctx, "Research Statistics Summary")
    try:
        summary, agencies = research_statistics(ctx.filters.department_id)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Error computing research statistics")
        summary, agencies = [], []

    add_keyed_table(
        doc, RESEARCH_STATS_TABLE, summary, GREY,
        empty_notice="No research project statistics available"
    )
    if agencies:
        doc.heading("Top Funding Agencies", "Heading3")
        add_keyed_table(doc, FUNDING_AGENCY_TABLE, agencies, GREY)

    sign(doc, ctx)
    return doc


# =========================================================
# FULL REPORT
# =========================================================

NAAC_SAMPLE = (
    ("Criteria", "Score", "Max Score", "Percentage", "Year"),
    ("Faculty Qualifications", "85", "100", "85.0%", "2024"),
    ("Student Support and Progression", "78", "100", "78.0%", "2024"),
    ("Research, Innovation and Extension", "82", "100", "82.0%", "2024"),
    ("Infrastructure and Learning Resources", "90", "100", "90.0%", "2024"),
    ("Student Satisfaction Survey", "88", "100", "88.0%", "2024"),
    ("Teaching-Learning and Evaluation", "86", "100", "86.0%", "2024"),
    ("Governance, Leadership and Management", "84", "100", "84.0%", "2024"),
)

NBA_SAMPLE = (
    ("Program", "Status", "Validity", "Year"),
    ("Computer Science Engineering", "Accredited", "2023-2026", "2023"),
    ("Electronics Engineering", "Accredited", "2022-2025", "2022"),
    ("Mechanical Engineering", "Provisional", "2023-2024", "2023"),
    ("Civil Engineering", "Applied", "Pending", "2023"),
    ("Information Technology", "Accredited", "2024-2027", "2024"),
)


def add_fixed_table(doc, table):
    header, body = table[0], table[1:]
    keys = [f"c{i}" for i in range(len(header))]
    rows = [dict(zip(keys, values)) for values in body]
    doc.add_table(keys, rows, preset=GREY, titles=list(header))


def build_full_report(ctx):
    doc = open_document(ctx, "Comprehensive Academic Report")
    doc.spacer(24)
    doc.centered_line(f"Department: {ctx.department_name}", bold=True)
    doc.spacer(24)
    doc.centered_line("This comprehensive report contains detailed statistics about faculty,")
    doc.centered_line("students, research output, and academic accreditation metrics.")

    doc.page_break()
    section_page(doc, ctx, "NAAC Accreditation Statistics")
    add_fixed_table(doc, NAAC_SAMPLE)
    doc.paragraph("* NAAC metrics based on current institutional assessment", "Italic")

    doc.page_break()
    section_page(doc, ctx, "NBA Accreditation Statistics")
    add_fixed_table(doc, NBA_SAMPLE)
    doc.paragraph("* NBA accreditation status based on current program assessments", "Italic")

    doc.page_break()
    section_page(doc, ctx, "Faculty Distribution Statistics")
    try:
        distribution = designation_distribution()
    except DataAccessError:
        distribution = []
    doc.add_table(
        ["Designation", "Count"], distribution, preset=GREY,
        empty_notice="Faculty distribution is not available"
    )

    doc.page_break()
    section_page(doc, ctx, "Report Summary and References")
    doc.paragraph("This comprehensive report includes the following sections:")
    for line in (
        "NAAC Accreditation Statistics",
        "NBA Accreditation Status",
        "Faculty Distribution Statistics",
    ):
        doc.paragraph(f"• {line}")
    doc.spacer()

    rows = ctx.rows or {}
    doc.paragraph("For detailed information, please refer to individual reports:")
    doc.paragraph(
        f"• Faculty Report: Complete faculty details and activities "
        f"({len(rows.get('faculty', []))} faculty members)"
    )
    doc.paragraph(
        f"• Student Report: Student enrollment and distribution "
        f"({len(rows.get('student', []))} students)"
    )
    doc.paragraph(
        f"• Research Report: Research projects and consultancy details "
        f"({len(rows.get('research', []))} entries)"
    )

    sign(doc, ctx)
    return doc


# =========================================================
# FACULTY ACTIVITY REPORTS
# =========================================================

def activity_recipe(title, what):
    def build(ctx):
        if ctx.faculty_scoped:
            doc = open_document(
                ctx, f"Faculty {title} - {ctx.signatory.faculty_name}", show_department=False
            )
        else:
            doc = open_document(ctx, title)

        doc.add_table(
            ctx.columns, ctx.rows, preset=ACTIVITY,
            empty_notice=f"No {what} data found for the selected criteria."
        )
        sign(doc, ctx)
        return doc

    build.__name__ = f"build_{what.replace(' ', '_')}_report"
    return build


build_publications_report = activity_recipe("Publications Report", "publications")
build_research_projects_report = activity_recipe("Research Projects Report", "research projects")
build_contributions_report = activity_recipe("Contributions Report", "contributions")
build_workshops_report = activity_recipe("Workshops & Conferences Report", "workshops")
build_memberships_report = activity_recipe("Professional Memberships Report", "memberships")
build_awards_report = activity_recipe("Awards & Recognitions Report", "awards")


# =========================================================
# DEPARTMENT REPORT (landscape, GET /reports/department)
# =========================================================

def _year_of(key):
    def value(row):
        when = row.get(key)
        return when.year if isinstance(when, date) else when
    return value


def _field(key):
    return lambda row: row.get(key)


DEPARTMENT_LAYOUTS = {
    ReportKind.PUBLICATIONS: ("Publications Report", (
        ("Faculty Name", _field("faculty_name")),
        ("Title", _field("Title")),
        ("Journal/Conference", _field("Journal_Name")),
        ("Year", _year_of("Publication_Date")),
        ("Type", _field("Publication_Type")),
    )),
    ReportKind.RESEARCH_PROJECTS: ("Research Projects Report", (
        ("Faculty Name", _field("faculty_name")),
        ("Project Title", _field("Title")),
        ("Funding Agency", _field("Funding_Agency")),
        ("Year", _year_of("Start_Date")),
        ("Amount", _field("Amount")),
    )),
    ReportKind.AWARDS: ("Awards Report", (
        ("Faculty Name", _field("faculty_name")),
        ("Award Name", _field("Award_Name")),
        ("Organization", _field("Awarding_Organization")),
        ("Date", _field("Date_Received")),
        ("Category", _field("Category")),
    )),
    ReportKind.WORKSHOPS: ("Workshops Report", (
        ("Faculty Name", _field("faculty_name")),
        ("Workshop Title", _field("Workshop_Name")),
        ("Type", _field("Type")),
        ("Date", _field("Start_Date")),
        ("Duration", lambda row: f"{row.get('Duration_Days') or 1} days"),
    )),
    ReportKind.MEMBERSHIPS: ("Professional Memberships Report", (
        ("Faculty Name", _field("faculty_name")),
        ("Organization", _field("Organization_Name")),
        ("Type", _field("Membership_Type")),
        ("Start Date", _field("Start_Date")),
        ("Status", _field("Membership_Status")),
    )),
    ReportKind.CONTRIBUTIONS: ("Contributions Report", (
        ("Faculty Name", _field("faculty_name")),
        ("Type", _field("Contribution_Type")),
        ("Description", _field("Description")),
        ("Date", _field("Date")),
        ("Recognition", _field("Recognized_By")),
    )),
}


def department_filter_line(filters):
    parts = []
    if filters.faculty_id:
        parts.append(f"Faculty ID: {filters.faculty_id}")
    if filters.year is not None:
        parts.append(f"Academic Year: {filters.year}-{filters.year + 1}")
    return "  ".join(parts)


def build_department_report(kind, department_name, filters, rows):
    title, layout = DEPARTMENT_LAYOUTS[kind]
    titles = [column for column, _ in layout]
    display_rows = [
        {column: extract(row) for column, extract in layout} for row in rows
    ]

    doc = ReportDocument(
        title,
        pagesize=landscape(A4),
        footer_note=f"Generated on: {date.today().strftime('%d/%m/%Y')}",
        margin=28
    )
    doc.heading(current_app.config["DEPARTMENT_REPORT_INSTITUTION"], "Title")
    doc.centered_line(f"{department_name} Department", bold=True)
    doc.centered_line(title, bold=True)
    filter_line = department_filter_line(filters)
    if filter_line:
        doc.centered_line(filter_line)
    doc.spacer(16)

    doc.add_table(
        titles, display_rows, preset=DEPARTMENT, titles=titles,
        empty_notice="No records found for the selected filters."
    )
    return doc


def department_report_filename(kind, department_name, year: Optional[int]):
    return f"{kind.value}-report-{department_name}-{year if year is not None else 'all'}.pdf"
