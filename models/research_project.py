from extensions import db


class ResearchProject(db.Model):
    __tablename__ = "research_project_consultancies"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column(db.String(50), db.ForeignKey("faculty.F_id"))
    academic_year = db.Column("Academic_year", db.String(20))
    project_type = db.Column("Type_Research_Project_Consultancy", db.String(100))
    branch = db.Column("Branch", db.String(150))
    title = db.Column("Name_Of_Project_Endownment", db.String(500))
    investigators = db.Column("Name_Of_Principal_Investigator_CoInvestigator", db.String(500))
    investigator_department = db.Column("Department_Of_Principal_Investigator", db.String(150))
    year_of_award = db.Column("Year_Of_Award", db.Date)
    # Free text, e.g. "Rs. 1,50,000"
    amount_sanctioned = db.Column("Amount_Sanctioned", db.String(100))
    duration = db.Column("Duration_Of_The_Project", db.String(100))
    funding_agency = db.Column("Name_Of_The_Funding_Agency", db.String(300))
    govt_type = db.Column("Type_Govt_NonGovt", db.String(20))
    status = db.Column("STATUS", db.String(50))

    def __repr__(self):
        return f"<ResearchProject {self.id}>"
