from datetime import date

from services.department_service import get_department_stats, years_ago
from tests.conftest import login


def test_department_faculty_with_activity_counts(client):
    login(client, "hod-token")
    response = client.get("/departments/1/faculty")

    assert response.status_code == 200
    body = response.get_json()
    assert body["departmentName"] == "Computer Engineering"

    faculty = {member["F_id"]: member for member in body["data"]}
    assert [member["F_name"] for member in body["data"]] == [
        "Dr. Anita Desai", "Dr. Kavita Rao", "Prof. Ravi Menon", "Prof. Sunil Joshi"
    ]
    ravi = faculty["F002"]
    assert ravi["publicationCount"] == 1
    assert ravi["awardCount"] == 1
    assert ravi["workshopCount"] == 1
    assert ravi["membershipCount"] == 1
    assert ravi["contributionCount"] == 2
    assert ravi["researchProjectCount"] == 1
    assert ravi["Date_of_Joining"] == "2015-07-01"
    assert faculty["F003"]["researchProjectCount"] == 2
    assert faculty["F004"]["publicationCount"] == 0


def test_department_stats_route(client):
    login(client, "admin-token")
    response = client.get("/departments/1/stats")

    assert response.status_code == 200
    stats = response.get_json()["data"]
    assert stats["departmentName"] == "Computer Engineering"
    assert stats["totalFaculty"] == 4
    assert stats["totalStudents"] == 3


def test_department_routes_validate_id(client):
    login(client, "admin-token")
    response = client.get("/departments/abc/faculty")
    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid department ID"

    response = client.get("/departments/99/stats")
    assert response.status_code == 404
    assert response.get_json()["message"] == "Department not found"


def test_department_routes_require_session(client):
    assert client.get("/departments/1/faculty").status_code == 401


def test_department_stats(app):
    stats = get_department_stats("Computer Engineering", today=date(2027, 1, 1))

    assert stats["totalFaculty"] == 4
    assert stats["totalPublications"] == 3
    assert stats["publicationsByYear"] == [
        {"year": "2023", "count": 2},
        {"year": "2022", "count": 1},
    ]
    assert stats["totalResearchProjects"] == 2
    assert stats["totalAwards"] == 2
    assert stats["totalWorkshops"] == 2
    designations = {row["designation"]: row["count"] for row in stats["facultyByDesignation"]}
    assert designations == {
        "Professor": 2, "Associate Professor": 1, "Assistant Professor": 1
    }


def test_student_count_estimate_when_table_missing(app, drop_table):
    drop_table("student")

    stats = get_department_stats("Computer Engineering", today=date(2027, 1, 1))

    assert stats["totalStudents"] == 4 * 30


def test_years_ago_handles_leap_day():
    assert years_ago(date(2024, 2, 29), 5) == date(2019, 2, 28)
