"""
Binds every ``ReportKind`` to its aggregator and composition recipe.

The table is checked at import time so a new kind cannot be added without
both halves.
"""
import logging
from dataclasses import dataclass
from typing import Callable

from services import report_builders as builders
from services import report_data as data
from services.report_kinds import ReportKind, DEPARTMENT_REPORT_KINDS
from services.report_pdf import GeneratedReport
from services.signatures import resolve_signatory, resolve_hod_for, ALL_DEPARTMENTS
from utils.params import parse_department_id, parse_faculty_id, parse_year

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportBinding:
    aggregator: Callable
    recipe: Callable


BINDINGS = {
    ReportKind.FACULTY: ReportBinding(data.get_faculty_report_data, builders.build_faculty_report),
    ReportKind.STUDENT: ReportBinding(data.get_students_report_data, builders.build_student_report),
    ReportKind.RESEARCH: ReportBinding(data.get_research_report_data, builders.build_research_report),
    ReportKind.PUBLICATIONS: ReportBinding(
        data.get_publications_report_data, builders.build_publications_report
    ),
    ReportKind.RESEARCH_PROJECTS: ReportBinding(
        data.get_research_projects_report_data, builders.build_research_projects_report
    ),
    ReportKind.CONTRIBUTIONS: ReportBinding(
        data.get_contributions_report_data, builders.build_contributions_report
    ),
    ReportKind.WORKSHOPS: ReportBinding(
        data.get_workshops_report_data, builders.build_workshops_report
    ),
    ReportKind.MEMBERSHIPS: ReportBinding(
        data.get_memberships_report_data, builders.build_memberships_report
    ),
    ReportKind.AWARDS: ReportBinding(data.get_awards_report_data, builders.build_awards_report),
    ReportKind.FULL: ReportBinding(data.get_full_report_data, builders.build_full_report),
}

_unbound = [kind.value for kind in ReportKind if kind not in BINDINGS]
if _unbound:
    raise RuntimeError(f"Report kinds without a binding: {', '.join(_unbound)}")

_no_layout = [k.value for k in DEPARTMENT_REPORT_KINDS if k not in builders.DEPARTMENT_LAYOUTS]
if _no_layout:
    raise RuntimeError(f"Department report kinds without a layout: {', '.join(_no_layout)}")


def aggregate(report_type, department_id=None, faculty_id=None, year=None):
    """``(rows, columns)`` for a report kind (enum member or its string value)."""
    kind = ReportKind(report_type)
    filters = data.ReportFilters(
        parse_department_id(department_id),
        parse_faculty_id(faculty_id),
        parse_year(year)
    )
    return BINDINGS[kind].aggregator(filters)


def table_data(kind, filters):
    """Rows, columns and warnings for the JSON report format."""
    if kind is ReportKind.FULL:
        return data.collect_full_report_data(filters)
    rows, columns = BINDINGS[kind].aggregator(filters)
    return rows, columns, []


def generate_report(kind, filters, department_name=None):
    binding = BINDINGS[kind]
    rows, columns = binding.aggregator(filters)

    scope_name = department_name or ALL_DEPARTMENTS
    signatory = resolve_signatory(filters.faculty_id, scope_name)
    hod_name = resolve_hod_for(filters.faculty_id, scope_name)

    context = builders.ReportContext(
        kind=kind,
        filters=filters,
        department_name=scope_name,
        signatory=signatory,
        hod_name=hod_name,
        rows=rows,
        columns=columns
    )
    document = binding.recipe(context)
    content = document.finalize()

    filename = builders.report_filename(kind, filters, signatory.faculty_name)
    logger.info("Generated %s report %s (%d pages)", kind.value, filename, document.page_count)
    return GeneratedReport(filename, content, document.page_count)


def generate_department_report(kind, department_name, filters):
    rows, _ = BINDINGS[kind].aggregator(filters)
    document = builders.build_department_report(kind, department_name, filters, rows)
    content = document.finalize()
    filename = builders.department_report_filename(kind, department_name, filters.year)
    return GeneratedReport(filename, content, document.page_count)
