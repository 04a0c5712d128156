from extensions import db


class Membership(db.Model):
    __tablename__ = "faculty_memberships"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    faculty_id = db.Column(db.String(50), db.ForeignKey("faculty.F_id"), nullable=False)
    organization = db.Column(db.String(300), nullable=False)
    membership_type = db.Column(db.String(100))
    organization_category = db.Column(db.String(100))
    start_date = db.Column(db.Date)
    end_date = db.Column(db.Date)

    def __repr__(self):
        return f"<Membership {self.id}>"
