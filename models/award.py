from extensions import db


class Award(db.Model):
    __tablename__ = "faculty_awards"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    faculty_id = db.Column(db.String(50), db.ForeignKey("faculty.F_id"), nullable=False)
    award_name = db.Column(db.String(300), nullable=False)
    awarding_organization = db.Column(db.String(300))
    award_date = db.Column(db.Date)
    category = db.Column(db.String(100))
    award_description = db.Column(db.Text)

    def __repr__(self):
        return f"<Award {self.id}>"
