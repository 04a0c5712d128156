from .faculty import Faculty, FacultyDetails
from .department import Department, DepartmentDetails
from .publication import Publication, PublicationCoAuthor
from .research_project import ResearchProject
from .award import Award
from .workshop import Workshop
from .membership import Membership
from .contribution import Contribution
from .book_chapter import BookChapter
from .student import Student
__all__ = ["Faculty", "FacultyDetails", "Department", "DepartmentDetails", "Publication", "PublicationCoAuthor", "ResearchProject", "Award", "Workshop", "Membership", "Contribution", "BookChapter", "Student"]
