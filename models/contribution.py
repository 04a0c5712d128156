from extensions import db


class Contribution(db.Model):
    __tablename__ = "faculty_contributions"

    contribution_id = db.Column("Contribution_ID", db.Integer, primary_key=True, autoincrement=True)
    faculty_id = db.Column("F_ID", db.String(50), db.ForeignKey("faculty.F_id"), nullable=False)
    contribution_type = db.Column("Contribution_Type", db.String(150))
    description = db.Column("Description", db.Text)
    contribution_date = db.Column("Contribution_Date", db.Date)
    recognized_by = db.Column("Recognized_By", db.String(300))
    award_received = db.Column("Award_Received", db.String(300))
    remarks = db.Column("Remarks", db.Text)

    def __repr__(self):
        return f"<Contribution {self.contribution_id}>"
