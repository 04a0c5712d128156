from extensions import db


class BookChapter(db.Model):
    __tablename__ = "bookschapter"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column(db.String(50), db.ForeignKey("faculty.F_id"), nullable=False)
    teacher_name = db.Column("Name_Of_The_Teacher", db.String(300))
    book_title = db.Column("Title_Of_The_Book_Published", db.String(500))
    year_of_publication = db.Column("Year_Of_Publication", db.Integer)
    national_or_international = db.Column("National_Or_International", db.String(50))
    publisher = db.Column("Name_Of_The_Publisher", db.String(300))
    isbn_or_issn = db.Column("ISBN_Or_ISSN_Number", db.String(100))
    paper_link = db.Column(db.String(1000))
    status = db.Column("STATUS", db.String(50))

    def __repr__(self):
        return f"<BookChapter {self.id}>"
