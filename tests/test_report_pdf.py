from datetime import date
from decimal import Decimal

from reportlab.platypus import Image, Table

from services.report_builders import (
    ReportContext, build_department_report, build_faculty_report, build_publications_report,
    department_filter_line, report_filename
)
from services.report_data import ReportFilters
from services.report_kinds import ReportKind
from services.report_pdf import (
    GREY, ReportDocument, column_title, format_cell, load_signature_image
)
from services.signatures import Signatory

ONE_PIXEL_PNG = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


def context(kind, rows, columns=None, faculty_id=None, department_id=None):
    return ReportContext(
        kind=kind,
        filters=ReportFilters(department_id=department_id, faculty_id=faculty_id),
        department_name="Civil Engineering",
        signatory=Signatory("Prof. XXXX XXXX"),
        hod_name="Prof. YYY ZZZ",
        rows=rows,
        columns=columns or []
    )


def test_every_page_is_stamped_with_total():
    doc = ReportDocument("Long report")
    rows = [{"n": i, "text": f"row {i}"} for i in range(250)]
    doc.add_table(["n", "text"], rows, preset=GREY)

    content = doc.finalize()

    assert content.startswith(b"%PDF")
    total = doc.page_count
    assert total > 1
    assert doc.canvas.page_labels == [f"Page {i} of {total}" for i in range(1, total + 1)]


def test_empty_rows_render_notice_instead_of_table():
    doc = ReportDocument("Empty")
    table = doc.add_table(["a"], [], empty_notice="No faculty data found")

    assert table is None
    assert doc.notices == ["No faculty data found"]
    assert doc.tables == []
    assert doc.finalize().startswith(b"%PDF")


def test_missing_logo_draws_placeholder_box():
    doc = ReportDocument("Logo")
    assert isinstance(doc.logo_flowable("/nonexistent/logo.jpg"), Table)


def test_signature_image_sources():
    assert isinstance(load_signature_image(ONE_PIXEL_PNG), Image)
    assert load_signature_image(None) is None
    assert load_signature_image("/nonexistent/signature.png") is None
    assert load_signature_image("data:image/png;base64,AAAA") is None


def test_signature_block_with_and_without_image():
    doc = ReportDocument("Signatures")
    doc.signature_block(Signatory("Prof. Ravi Menon", ONE_PIXEL_PNG), "Dr. Anita Desai")
    assert doc.signature == {
        "faculty_name": "Prof. Ravi Menon",
        "hod_name": "Dr. Anita Desai",
        "has_image": True,
    }

    doc = ReportDocument("Signatures")
    doc.signature_block(Signatory("Prof. XXXX XXXX"), "Prof. YYY ZZZ")
    assert doc.signature["has_image"] is False
    assert doc.finalize().startswith(b"%PDF")


def test_cell_and_title_formatting():
    assert column_title("faculty_name") == "Faculty Name"
    assert column_title("Publication_Date") == "Publication Date"
    assert format_cell(date(2023, 5, 10)) == "10-05-2023"
    assert format_cell(None) == "-"
    assert format_cell(Decimal("1500")) == "1500.00"
    assert format_cell(True) == "Yes"


def test_report_filename_scopes():
    today = date(2024, 3, 1)

    assert report_filename(ReportKind.FACULTY, ReportFilters(), today=today) == \
        "faculty_report_all_2024-03-01.pdf"
    assert report_filename(
        ReportKind.RESEARCH_PROJECTS, ReportFilters(department_id=3), today=today
    ) == "research_projects_report_3_2024-03-01.pdf"
    assert report_filename(
        ReportKind.PUBLICATIONS, ReportFilters(department_id=3, faculty_id="F002"),
        faculty_name="Prof. Ravi Menon", today=today
    ) == "publications_report_Prof._Ravi_Menon_2024-03-01.pdf"


def test_empty_faculty_report_keeps_signature(app):
    doc = build_faculty_report(context(ReportKind.FACULTY, [], department_id=5))

    content = doc.finalize()

    assert content.startswith(b"%PDF")
    assert doc.notices == ["No faculty data found"]
    assert doc.signature["hod_name"] == "Prof. YYY ZZZ"


def test_faculty_scoped_activity_report_title(app):
    ctx = ReportContext(
        kind=ReportKind.PUBLICATIONS,
        filters=ReportFilters(faculty_id="F002"),
        department_name="All Departments",
        signatory=Signatory("Prof. Ravi Menon"),
        hod_name="Dr. Anita Desai",
        rows=[],
        columns=["faculty_name", "Title"]
    )
    doc = build_publications_report(ctx)

    assert doc.title == "Faculty Publications Report - Prof. Ravi Menon"
    assert doc.notices == ["No publications data found for the selected criteria."]


def test_department_report_layout(app):
    rows = [{
        "faculty_name": "Prof. Ravi Menon",
        "Workshop_Name": "FDP on Machine Learning",
        "Type": "FDP",
        "Start_Date": date(2023, 7, 1),
        "Duration_Days": 4,
    }]
    doc = build_department_report(
        ReportKind.WORKSHOPS, "Computer Engineering", ReportFilters(year=2023), rows
    )

    header, body = doc.tables[0][0], doc.tables[0][1]
    assert [cell.getPlainText() for cell in header] == [
        "Faculty Name", "Workshop Title", "Type", "Date", "Duration"
    ]
    assert [cell.getPlainText() for cell in body] == [
        "Prof. Ravi Menon", "FDP on Machine Learning", "FDP", "01-07-2023", "4 days"
    ]
    assert doc.finalize().startswith(b"%PDF")


def test_department_filter_line():
    assert department_filter_line(ReportFilters()) == ""
    assert department_filter_line(ReportFilters(faculty_id="F002", year=2023)) == \
        "Faculty ID: F002  Academic Year: 2023-2024"


def test_report_filename_strips_unsafe_characters():
    filename = report_filename(
        ReportKind.AWARDS, ReportFilters(faculty_id="F009"),
        faculty_name='Dr. A/B "Rao"', today=date(2024, 3, 1)
    )

    assert filename == "awards_report_Dr._A_B__Rao__2024-03-01.pdf"
