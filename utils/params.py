import re

from utils.errors import ValidationError

ALL = "all"


def _blank(value):
    return value is None or str(value).strip() == "" or str(value).strip().lower() == ALL


def parse_department_id(value, required=False):
    """Return the department id as int, or None for "all"/absent."""
    if _blank(value):
        if required:
            raise ValidationError("Department ID is required")
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError("Invalid department ID")


def parse_faculty_id(value):
    if _blank(value):
        return None
    return str(value).strip()


def parse_year(value):
    if _blank(value):
        return None
    value = str(value).strip()
    if not re.fullmatch(r"\d{4}", value):
        raise ValidationError("Year must be a four-digit year or 'all'")
    return int(value)


def sanitize_filename_part(value):
    """Whitespace runs and characters unsafe in a filename become underscores."""
    collapsed = re.sub(r"\s+", "_", str(value).strip())
    return re.sub(r"[^\w.-]", "_", collapsed)
