from enum import Enum


class ReportKind(str, Enum):
    FACULTY = "faculty"
    STUDENT = "student"
    RESEARCH = "research"
    PUBLICATIONS = "publications"
    RESEARCH_PROJECTS = "research-projects"
    CONTRIBUTIONS = "contributions"
    WORKSHOPS = "workshops"
    MEMBERSHIPS = "memberships"
    AWARDS = "awards"
    FULL = "full"

    @classmethod
    def parse(cls, value, default=None):
        """Kind for a request value; ``default`` when blank, None when unknown."""
        if value is None or value == "":
            return default
        try:
            return cls(value)
        except ValueError:
            return None


# Kinds served by GET /reports/department
DEPARTMENT_REPORT_KINDS = (
    ReportKind.PUBLICATIONS,
    ReportKind.RESEARCH_PROJECTS,
    ReportKind.AWARDS,
    ReportKind.WORKSHOPS,
    ReportKind.MEMBERSHIPS,
    ReportKind.CONTRIBUTIONS,
)
