from extensions import db


class Workshop(db.Model):
    __tablename__ = "faculty_workshops"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    faculty_id = db.Column(db.String(50), db.ForeignKey("faculty.F_id"), nullable=False)
    title = db.Column(db.String(300), nullable=False)
    type = db.Column(db.String(100))
    venue = db.Column(db.String(300))
    start_date = db.Column(db.Date)
    end_date = db.Column(db.Date)
    role = db.Column(db.String(100))

    def __repr__(self):
        return f"<Workshop {self.id}>"
