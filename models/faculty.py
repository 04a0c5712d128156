from extensions import db


class Faculty(db.Model):
    __tablename__ = "faculty"

    # F_id doubles as the login username of the faculty member
    faculty_id = db.Column("F_id", db.String(50), primary_key=True)
    name = db.Column("F_name", db.String(150), nullable=False)

    # Free text, matched against department.Department_Name
    department_name = db.Column("F_dept", db.String(150))

    details = db.relationship(
        "FacultyDetails",
        backref="faculty",
        uselist=False,
        lazy=True
    )

    def __repr__(self):
        return f"<Faculty {self.faculty_id}>"


class FacultyDetails(db.Model):
    __tablename__ = "faculty_details"

    faculty_id = db.Column(
        "F_ID",
        db.String(50),
        db.ForeignKey("faculty.F_id"),
        primary_key=True
    )
    email = db.Column("Email", db.String(150))
    designation = db.Column("Current_Designation", db.String(100))
    highest_degree = db.Column("Highest_Degree", db.String(100))
    experience = db.Column("Experience", db.Integer)
    date_of_joining = db.Column("Date_of_Joining", db.Date)
    signature_url = db.Column(db.String(1000))

    def __repr__(self):
        return f"<FacultyDetails {self.faculty_id}>"
