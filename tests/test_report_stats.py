import pandas as pd

from services.report_stats import (
    designation_distribution, faculty_statistics, format_rupees, parse_amount,
    research_statistics, student_statistics
)


def test_faculty_statistics_for_department(app):
    assert faculty_statistics(1) == [{
        "Department": "Computer Engineering",
        "TotalFaculty": 4,
        "Professors": 2,
        "AssociateProfessors": 1,
        "AssistantProfessors": 1,
    }]


def test_designation_distribution(app):
    assert designation_distribution() == [
        {"Designation": "Professor", "Count": 3},
        {"Designation": "Assistant Professor", "Count": 2},
        {"Designation": "Associate Professor", "Count": 1},
        {"Designation": "Lecturer", "Count": 1},
    ]


def test_student_statistics():
    rows = [
        {"department": "Computer Engineering", "division": "A"},
        {"department": "Computer Engineering", "division": None},
        {"department": "Mechanical Engineering", "division": "A"},
    ]

    by_branch, by_division = student_statistics(rows)

    assert by_branch == [
        {"Branch": "Computer Engineering", "Total Students": 2},
        {"Branch": "Mechanical Engineering", "Total Students": 1},
    ]
    assert by_division == [
        {"Division": "A", "Number of Students": 2},
        {"Division": "N/A", "Number of Students": 1},
    ]
    assert student_statistics([]) == ([], [])


def test_research_statistics(app):
    summary, agencies = research_statistics()

    assert summary == [
        {"Department": "Computer Engineering", "TotalProjects": 2, "ResearchProjects": 2,
         "Consultancies": 0, "GovernmentFunded": 2, "NonGovernmentFunded": 0},
        {"Department": "Mechanical Engineering", "TotalProjects": 1, "ResearchProjects": 0,
         "Consultancies": 1, "GovernmentFunded": 0, "NonGovernmentFunded": 1},
    ]
    assert agencies == [
        {"Agency": "AICTE", "ProjectCount": 2, "TotalAmount": "Rs. 200,000.00"},
        {"Agency": "Tata Motors", "ProjectCount": 1, "TotalAmount": "Rs. 200,000.00"},
    ]


def test_research_statistics_for_empty_department(app):
    assert research_statistics(5) == ([], [])


def test_amount_parsing():
    amounts = parse_amount(pd.Series(["Rs. 1,50,000", "75000", "pending", None]))

    assert amounts.iloc[0] == 150000
    assert amounts.iloc[1] == 75000
    assert amounts.iloc[2:].isna().all()
    assert format_rupees(float("nan")) == "N/A"
