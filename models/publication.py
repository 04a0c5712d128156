from extensions import db


class Publication(db.Model):
    __tablename__ = "faculty_publications"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    faculty_id = db.Column(
        db.String(50),
        db.ForeignKey("faculty.F_id"),
        nullable=False,
        index=True
    )
    title = db.Column(db.String(500), nullable=False)
    abstract = db.Column(db.Text)
    authors = db.Column(db.String(500), nullable=False)
    publication_date = db.Column(db.Date, nullable=False)
    publication_type = db.Column(
        db.Enum("journal", "conference", "book", "book_chapter", "other",
                name="publication_type"),
        nullable=False
    )
    publication_venue = db.Column(db.String(500), nullable=False)
    doi = db.Column(db.String(100))
    url = db.Column(db.String(1000))
    citation_count = db.Column(db.Integer)

    citations_crossref = db.Column(db.Integer)
    citations_semantic_scholar = db.Column(db.Integer)
    citations_google_scholar = db.Column(db.Integer)
    citations_web_of_science = db.Column(db.Integer)
    citations_scopus = db.Column(db.Integer)
    citations_last_updated = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime,
        server_default=db.func.now(),
        onupdate=db.func.now()
    )

    def to_dict(self):
        return {
            "id": self.id,
            "faculty_id": self.faculty_id,
            "title": self.title,
            "abstract": self.abstract,
            "authors": self.authors,
            "publication_date": self.publication_date,
            "publication_type": self.publication_type,
            "publication_venue": self.publication_venue,
            "doi": self.doi,
            "url": self.url,
            "citation_count": self.citation_count,
            "citations_crossref": self.citations_crossref,
            "citations_semantic_scholar": self.citations_semantic_scholar,
            "citations_google_scholar": self.citations_google_scholar,
            "citations_web_of_science": self.citations_web_of_science,
            "citations_scopus": self.citations_scopus,
            "citations_last_updated": self.citations_last_updated,
        }

    def __repr__(self):
        return f"<Publication {self.id} faculty={self.faculty_id}>"


class PublicationCoAuthor(db.Model):
    __tablename__ = "publication_co_authors"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    publication_id = db.Column(
        db.Integer,
        db.ForeignKey("faculty_publications.id"),
        nullable=False
    )
    faculty_id = db.Column(db.String(50), db.ForeignKey("faculty.F_id"), nullable=False)
    # Primary author is 1, co-authors start at 2
    author_order = db.Column(db.Integer, nullable=False)

    def __repr__(self):
        return f"<PublicationCoAuthor pub={self.publication_id} faculty={self.faculty_id}>"
