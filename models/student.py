from extensions import db


class Student(db.Model):
    __tablename__ = "student"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(150), nullable=False)
    email = db.Column(db.String(150))

    # Department name, matched against department.Department_Name
    branch = db.Column(db.String(150))
    division = db.Column(db.String(20))

    def __repr__(self):
        return f"<Student {self.username}>"
