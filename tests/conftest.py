from datetime import date

import pytest
from sqlalchemy import text

from app import create_app
from config.config import Config
from extensions import db
from models import (
    Faculty, FacultyDetails, Department, DepartmentDetails, Publication,
    ResearchProject, Award, Workshop, Membership, Contribution, BookChapter, Student
)
from services import auth_service
from services.auth_service import SessionUser


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    REPORT_LOGO_PATH = "/nonexistent/report-logo.jpg"
    LOG_LEVEL = "WARNING"


SESSIONS = {
    "admin-token": ("admin1", "admin"),
    "hod-token": ("F001", "hod"),
    "faculty-token": ("F002", "faculty"),
    "ghost-token": ("F999", "faculty"),
    "student-token": ("S001", "student"),
}


def fake_fetch_session_user(cookie_header):
    if not cookie_header or "auth_token=" not in cookie_header:
        return None
    token = cookie_header.split("auth_token=", 1)[1].split(";", 1)[0]
    if token not in SESSIONS:
        return None
    username, role = SESSIONS[token]
    return SessionUser(username, role)


def login(client, token):
    """Attach a session cookie that the stubbed session service recognises."""
    client.set_cookie("auth_token", token)
    return client


def seed():
    departments = [
        Department(department_id=1, name="Computer Engineering"),
        Department(department_id=2, name="Mechanical Engineering"),
        Department(department_id=3, name="Information Technology"),
        Department(department_id=5, name="Civil Engineering"),
    ]
    faculty = [
        ("F001", "Dr. Anita Desai", "Computer Engineering", "Professor", date(2005, 6, 1)),
        ("F002", "Prof. Ravi Menon", "Computer Engineering", "Assistant Professor", date(2015, 7, 1)),
        ("F003", "Dr. Kavita Rao", "Computer Engineering", "Associate Professor", date(2010, 1, 15)),
        ("F004", "Prof. Sunil Joshi", "Computer Engineering", "Professor", date(2008, 8, 1)),
        ("F100", "Prof. Meera Iyer", "Mechanical Engineering", "Assistant Professor", date(2018, 6, 1)),
        ("F300", "Dr. Arjun Nair", "Electrical Engineering", "Professor", date(2001, 6, 1)),
        ("F400", "Prof. Leela Das", "Robotics", "Lecturer", date(2020, 6, 1)),
    ]
    db.session.add_all(departments)
    for faculty_id, name, dept, designation, joined in faculty:
        db.session.add(Faculty(faculty_id=faculty_id, name=name, department_name=dept))
        db.session.add(FacultyDetails(
            faculty_id=faculty_id,
            email=f"{faculty_id.lower()}@example.edu",
            designation=designation,
            highest_degree="Ph.D." if name.startswith("Dr.") else "M.E.",
            experience=2024 - joined.year,
            date_of_joining=joined,
            signature_url="/nonexistent/signatures/f002.png" if faculty_id == "F002" else None
        ))
    db.session.flush()

    db.session.add_all([
        DepartmentDetails(department_id=1, hod_id="F001"),
        DepartmentDetails(department_id=2, hod_id=None),
        DepartmentDetails(department_id=5, hod_id=None),
    ])

    db.session.add_all([
        Publication(id=1, faculty_id="F002", title="Deep Learning for Crop Yield",
                    authors="Prof. Ravi Menon", publication_date=date(2023, 5, 10),
                    publication_type="journal", publication_venue="IEEE Access",
                    doi="10.1109/ACCESS.2023.1"),
        Publication(id=2, faculty_id="F003", title="Edge Caching Strategies",
                    authors="Dr. Kavita Rao", publication_date=date(2022, 11, 1),
                    publication_type="conference", publication_venue="ICC 2022"),
        Publication(id=3, faculty_id="F100", title="Thermal Analysis of Fins",
                    authors="Prof. Meera Iyer", publication_date=date(2023, 2, 15),
                    publication_type="journal", publication_venue="Applied Thermal Engineering"),
        Publication(id=4, faculty_id="F001", title="Graph Neural Networks Survey",
                    authors="Dr. Anita Desai", publication_date=date(2021, 7, 20),
                    publication_type="journal", publication_venue="ACM Computing Surveys"),
        Publication(id=77, faculty_id="F003", title="Federated Learning at the Edge",
                    authors="Dr. Kavita Rao", publication_date=date(2023, 9, 1),
                    publication_type="journal", publication_venue="IEEE IoT Journal"),
    ])

    db.session.add_all([
        ResearchProject(user_id="F002", title="Smart Irrigation",
                        investigators="Prof. Ravi Menon, Dr. Kavita Rao",
                        investigator_department="Computer Engineering",
                        branch="Computer Engineering", project_type="Research Project",
                        year_of_award=date(2023, 4, 1), amount_sanctioned="Rs. 1,50,000",
                        funding_agency="AICTE", govt_type="Govt", status="Ongoing"),
        ResearchProject(user_id="F003", title="IoT Lab", investigators="Dr. Kavita Rao",
                        investigator_department="Computer Engineering",
                        branch="Computer Engineering", project_type="Research Project",
                        year_of_award=date(2023, 1, 1), amount_sanctioned="Rs. 50,000",
                        funding_agency="AICTE", govt_type="Govt", status="Completed"),
        ResearchProject(user_id="F100", title="Wind Turbine Blade Study",
                        investigators="Prof. Meera Iyer",
                        investigator_department="Mechanical Engineering",
                        branch="Mechanical Engineering", project_type="Consultancy",
                        year_of_award=date(2022, 8, 1), amount_sanctioned="2,00,000",
                        funding_agency="Tata Motors", govt_type="NonGovt", status="Completed"),
    ])

    db.session.add_all([
        Contribution(faculty_id="F002", contribution_type="Journal Reviewer",
                     description="Reviewed for IEEE Access", contribution_date=date(2023, 3, 1),
                     recognized_by="IEEE"),
        Contribution(faculty_id="F003", contribution_type="Conference Session Chair",
                     description="Chaired session on networks", contribution_date=date(2022, 12, 12),
                     recognized_by="ICC"),
        Contribution(faculty_id="F002", contribution_type="Sports Coordinator",
                     description="Annual sports meet", contribution_date=date(2023, 6, 1)),
    ])

    db.session.add_all([
        Workshop(faculty_id="F002", title="FDP on Machine Learning", type="FDP",
                 venue="IIT Bombay", start_date=date(2023, 7, 1), end_date=date(2023, 7, 5),
                 role="Participant"),
        Workshop(faculty_id="F003", title="Cloud Workshop", type="Workshop",
                 venue="AWS Academy", start_date=date(2022, 9, 10), end_date=date(2022, 9, 10),
                 role="Resource Person"),
    ])

    db.session.add_all([
        Membership(faculty_id="F002", organization="IEEE", membership_type="Member",
                   organization_category="Professional", start_date=date(2020, 1, 1)),
        Membership(faculty_id="F003", organization="ACM", membership_type="Member",
                   organization_category="Professional", start_date=date(2018, 1, 1),
                   end_date=date(2020, 12, 31)),
    ])

    db.session.add_all([
        Award(faculty_id="F001", award_name="Best Teacher", awarding_organization="University of Mumbai",
              award_date=date(2022, 9, 5), category="Teaching"),
        Award(faculty_id="F002", award_name="Young Researcher", awarding_organization="IEEE Bombay",
              award_date=date(2023, 10, 10), category="Research"),
    ])

    db.session.add_all([
        BookChapter(user_id="F002", teacher_name="Prof. Ravi Menon", book_title="Advances in AI",
                    year_of_publication=2021, national_or_international="International",
                    publisher="Springer", isbn_or_issn="978-3-030-00000-0", status="approved"),
        BookChapter(user_id="F002", teacher_name="Prof. Ravi Menon", book_title="Draft Chapter",
                    year_of_publication=2024, national_or_international="National",
                    publisher="Pearson", status="pending"),
    ])

    db.session.add_all([
        Student(id=1, username="Aarav Shah", email="aarav@example.edu",
                branch="Computer Engineering", division="A"),
        Student(id=2, username="Diya Patil", email="diya@example.edu",
                branch="Computer Engineering", division="A"),
        Student(id=3, username="Kabir Jain", email="kabir@example.edu",
                branch="Computer Engineering", division="B"),
        Student(id=4, username="Isha Kulkarni", email="isha@example.edu",
                branch="Mechanical Engineering", division="A"),
    ])

    db.session.commit()


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setattr(auth_service, "fetch_session_user", fake_fetch_session_user)
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        seed()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def drop_table():
    """Drop a table mid-test to simulate a missing source."""
    def drop(name):
        db.session.execute(text(f"DROP TABLE {name}"))
        db.session.commit()
    return drop
