from extensions import db


class Department(db.Model):
    __tablename__ = "department"

    department_id = db.Column("Department_ID", db.Integer, primary_key=True)
    name = db.Column("Department_Name", db.String(150), unique=True, nullable=False)

    details = db.relationship(
        "DepartmentDetails",
        backref="department",
        uselist=False,
        lazy=True
    )

    def __repr__(self):
        return f"<Department {self.name}>"


class DepartmentDetails(db.Model):
    __tablename__ = "department_details"

    department_id = db.Column(
        "Department_ID",
        db.Integer,
        db.ForeignKey("department.Department_ID"),
        primary_key=True
    )
    hod_id = db.Column("HOD_ID", db.String(50), db.ForeignKey("faculty.F_id"), nullable=True)

    def __repr__(self):
        return f"<DepartmentDetails {self.department_id} hod={self.hod_id}>"
