import logging
from datetime import date, datetime

from sqlalchemy import case, literal, or_
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import Faculty, Publication, PublicationCoAuthor, BookChapter, Contribution
from utils.errors import DataAccessError, ValidationError

logger = logging.getLogger(__name__)

PUBLICATION_TYPES = ("journal", "conference", "book", "book_chapter", "other")

CITATION_FIELDS = (
    "citations_crossref",
    "citations_semantic_scholar",
    "citations_google_scholar",
    "citations_web_of_science",
    "citations_scopus",
)

PUBLICATION_CONTRIBUTION_KEYWORDS = ("journal", "conference", "publication", "book", "paper")


# =========================================================
# READ
# =========================================================

def _book_chapter_publications(faculty_id):
    rows = (
        BookChapter.query
        .filter(BookChapter.user_id == faculty_id, BookChapter.status == "approved")
        .order_by(BookChapter.year_of_publication.desc())
        .all()
    )
    return [
        {
            "id": row.id,
            "faculty_id": faculty_id,
            "title": row.book_title,
            "abstract": None,
            "authors": row.teacher_name,
            "publication_date": (
                date(row.year_of_publication, 1, 1) if row.year_of_publication else None
            ),
            "publication_type": (
                "book_chapter"
                if (row.national_or_international or "").lower() == "international"
                else "book"
            ),
            "publication_venue": row.publisher,
            "doi": row.isbn_or_issn,
            "url": row.paper_link,
            "citation_count": None,
        }
        for row in rows
    ]


def _contribution_publications(faculty_id):
    contribution_type = Contribution.contribution_type
    publication_type = case(
        (contribution_type.ilike("%journal%"), literal("journal")),
        (contribution_type.ilike("%conference%"), literal("conference")),
        (contribution_type.ilike("%book%"), literal("book")),
        else_=literal("other")
    )
    rows = (
        db.session.query(Contribution, publication_type.label("publication_type"))
        .filter(Contribution.faculty_id == faculty_id)
        .filter(or_(*[
            contribution_type.ilike(f"%{keyword}%")
            for keyword in PUBLICATION_CONTRIBUTION_KEYWORDS
        ]))
        .order_by(Contribution.contribution_date.desc())
        .all()
    )
    return [
        {
            "id": contribution.contribution_id,
            "faculty_id": faculty_id,
            "title": contribution.description,
            "abstract": None,
            "authors": f"Faculty ID: {contribution.faculty_id}",
            "publication_date": contribution.contribution_date,
            "publication_type": kind,
            "publication_venue": contribution.recognized_by,
            "doi": contribution.award_received,
            "url": None,
            "citation_count": None,
        }
        for contribution, kind in rows
    ]


OPTIONAL_PUBLICATION_SOURCES = (
    ("bookschapter", _book_chapter_publications),
    ("faculty_contributions", _contribution_publications),
)


def list_faculty_publications(faculty_id):
    """
    Publications of a faculty member: ``faculty_publications`` first, then
    approved book chapters and publication-like contributions. The optional
    sources are skipped when they fail.
    """
    try:
        publications = [
            p.to_dict()
            for p in Publication.query
            .filter_by(faculty_id=faculty_id)
            .order_by(Publication.publication_date.desc())
            .all()
        ]
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Error querying faculty_publications for %s", faculty_id)
        raise DataAccessError("Database error when fetching publications") from exc

    for table, fetch in OPTIONAL_PUBLICATION_SOURCES:
        try:
            publications.extend(fetch(faculty_id))
        except SQLAlchemyError:
            db.session.rollback()
            logger.warning("Error fetching from %s table", table, exc_info=True)

    logger.info("Found %d publications for faculty %s", len(publications), faculty_id)
    return publications


# =========================================================
# WRITE
# =========================================================

def parse_date(value, field="publication date"):
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise ValidationError(f"Invalid {field}")


def parse_timestamp(value):
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError("Invalid citations_last_updated timestamp")
    return parsed.replace(tzinfo=None, microsecond=0)


def optional_int(payload, field):
    value = payload.get(field)
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")


def publication_fields(payload, require_authors=False):
    """Validated column values from a request body."""
    required = [
        payload.get("title"),
        payload.get("publication_date"),
        payload.get("publication_type"),
        payload.get("publication_venue"),
    ]
    if require_authors:
        required.append(payload.get("authors"))
    if not all(required):
        if require_authors:
            raise ValidationError(
                "Title, authors, publication date, type, and venue are required"
            )
        raise ValidationError("Title, publication date, type, and venue are required")

    if payload["publication_type"] not in PUBLICATION_TYPES:
        raise ValidationError("Invalid publication type")

    fields = {
        "title": payload["title"],
        "abstract": payload.get("abstract") or None,
        "authors": payload.get("authors") or None,
        "publication_date": parse_date(payload["publication_date"]),
        "publication_type": payload["publication_type"],
        "publication_venue": payload["publication_venue"],
        "doi": payload.get("doi") or None,
        "url": payload.get("url") or None,
        "citation_count": optional_int(payload, "citation_count"),
        "citations_last_updated": parse_timestamp(payload.get("citations_last_updated")),
    }
    for field in CITATION_FIELDS:
        fields[field] = optional_int(payload, field)
    return fields


def faculty_name(faculty_id):
    faculty = db.session.get(Faculty, faculty_id)
    return faculty.name if faculty else None


def build_authors(faculty_id, co_author_ids, authors=None):
    """Primary author's name followed by the known co-authors' names."""
    if not co_author_ids:
        return authors or faculty_name(faculty_id) or "Unknown"

    names = [faculty_name(faculty_id) or "Unknown"]
    for co_author_id in co_author_ids:
        name = faculty_name(co_author_id)
        if name:
            names.append(name)
    return ", ".join(names)


def fan_out_publication(faculty_id, fields, co_author_ids=()):
    """
    Insert a publication, one ``publication_co_authors`` row per co-author and
    a duplicate publication row owned by each co-author, in one transaction.
    """
    try:
        publication = Publication(faculty_id=faculty_id, **fields)
        db.session.add(publication)
        db.session.flush()

        # Duplicates carry the bibliographic fields only, not citation metrics
        copied = {
            key: fields[key]
            for key in (
                "title", "abstract", "authors", "publication_date", "publication_type",
                "publication_venue", "doi", "url", "citation_count"
            )
        }
        for order, co_author_id in enumerate(co_author_ids, start=2):
            db.session.add(PublicationCoAuthor(
                publication_id=publication.id,
                faculty_id=co_author_id,
                author_order=order
            ))
            db.session.add(Publication(faculty_id=co_author_id, **copied))

        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Error adding publication for faculty %s", faculty_id)
        raise DataAccessError("Failed to add publication") from exc

    logger.info(
        "Publication %s added for %s with %d co-authors",
        publication.id, faculty_id, len(co_author_ids)
    )
    return publication


def update_publication(publication, faculty_id, fields):
    try:
        for key, value in fields.items():
            setattr(publication, key, value)
        publication.faculty_id = faculty_id
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Error updating publication %s", publication.id)
        raise DataAccessError("Failed to update publication") from exc
    return publication


def delete_publication(publication):
    try:
        PublicationCoAuthor.query.filter_by(publication_id=publication.id).delete()
        db.session.delete(publication)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Error deleting publication %s", publication.id)
        raise DataAccessError("Failed to delete publication") from exc
