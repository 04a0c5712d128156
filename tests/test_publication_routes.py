import pytest

from extensions import db
from models import Publication, PublicationCoAuthor
from services.publication_service import fan_out_publication, publication_fields
from services.report_registry import aggregate
from tests.conftest import login
from utils.errors import DataAccessError, ValidationError

NEW_PUBLICATION = {
    "title": "Transformers for Soil Analysis",
    "publication_date": "2024-01-15",
    "publication_type": "journal",
    "publication_venue": "Computers and Electronics in Agriculture",
    "doi": "10.1016/j.compag.2024.1",
}


def test_faculty_sees_own_publications_from_every_source(client):
    login(client, "faculty-token")
    response = client.get("/faculty/publications?facultyId=F003")

    assert response.status_code == 200
    publications = response.get_json()["data"]
    titles = [p["title"] for p in publications]
    assert titles[0] == "Deep Learning for Crop Yield"
    assert "Federated Learning at the Edge" not in titles

    chapter = next(p for p in publications if p["title"] == "Advances in AI")
    assert chapter["publication_type"] == "book_chapter"
    assert chapter["publication_date"] == "2021-01-01"
    assert "Draft Chapter" not in titles

    review = next(p for p in publications if p["title"] == "Reviewed for IEEE Access")
    assert review["publication_type"] == "journal"
    assert "Annual sports meet" not in titles


def test_admin_must_name_faculty(client):
    login(client, "admin-token")
    response = client.get("/faculty/publications")
    assert response.status_code == 400

    response = client.get("/faculty/publications?facultyId=F003")
    titles = {p["title"] for p in response.get_json()["data"]}
    assert titles == {
        "Edge Caching Strategies", "Federated Learning at the Edge",
        "Chaired session on networks",
    }


def test_listing_requires_session(client):
    response = client.get("/faculty/publications?facultyId=F002")
    assert response.status_code == 401


def test_students_cannot_add(client):
    login(client, "student-token")
    response = client.post(
        "/faculty/publications", json=NEW_PUBLICATION
    )

    assert response.status_code == 403
    assert response.get_json()["message"] == "Unauthorized to add publications"


def test_add_requires_session(client):
    response = client.post("/faculty/publications", json=NEW_PUBLICATION)
    assert response.status_code == 401


def test_add_fans_out_to_co_authors(client):
    body = dict(NEW_PUBLICATION, co_authors=["F003"])

    login(client, "faculty-token")
    response = client.post("/faculty/publications", json=body)

    assert response.status_code == 200
    created = response.get_json()["data"]
    assert created["faculty_id"] == "F002"
    assert created["authors"] == "Prof. Ravi Menon, Dr. Kavita Rao"
    assert created["publication_date"] == "2024-01-15"

    links = PublicationCoAuthor.query.filter_by(publication_id=created["id"]).all()
    assert [(link.faculty_id, link.author_order) for link in links] == [("F003", 2)]

    copies = Publication.query.filter_by(title=NEW_PUBLICATION["title"]).all()
    assert sorted(p.faculty_id for p in copies) == ["F002", "F003"]

    rows, _ = aggregate("publications", faculty_id="F003")
    assert NEW_PUBLICATION["title"] in {row["Title"] for row in rows}


def test_add_without_co_authors_uses_faculty_name(client):
    login(client, "faculty-token")
    response = client.post(
        "/faculty/publications", json=NEW_PUBLICATION
    )

    assert response.get_json()["data"]["authors"] == "Prof. Ravi Menon"
    assert PublicationCoAuthor.query.count() == 0


def test_add_validates_fields(client):
    body = dict(NEW_PUBLICATION)
    del body["publication_venue"]

    login(client, "faculty-token")
    response = client.post("/faculty/publications", json=body)
    assert response.status_code == 400
    assert response.get_json()["message"] == \
        "Title, publication date, type, and venue are required"

    body = dict(NEW_PUBLICATION, publication_type="poster")
    response = client.post("/faculty/publications", json=body)
    assert response.get_json()["message"] == "Invalid publication type"


def test_add_for_unknown_faculty_record(client):
    login(client, "ghost-token")
    response = client.post(
        "/faculty/publications", json=NEW_PUBLICATION
    )

    assert response.status_code == 404
    assert response.get_json()["message"] == "Faculty record not found"


def test_admin_add_needs_faculty_id(client):
    login(client, "admin-token")
    response = client.post(
        "/faculty/publications", json=NEW_PUBLICATION
    )
    assert response.status_code == 400

    body = dict(NEW_PUBLICATION, faculty_id="F004")
    response = client.post("/faculty/publications", json=body)
    assert response.get_json()["data"]["faculty_id"] == "F004"


def test_fan_out_is_all_or_nothing(app):
    fields = publication_fields(NEW_PUBLICATION)
    fields["authors"] = "Prof. Ravi Menon"

    with pytest.raises(DataAccessError):
        fan_out_publication("F002", fields, [None])

    assert Publication.query.filter_by(title=NEW_PUBLICATION["title"]).count() == 0
    assert PublicationCoAuthor.query.count() == 0


def test_publication_fields_parse_optional_numbers():
    fields = publication_fields(dict(
        NEW_PUBLICATION, citation_count="12", citations_last_updated="2024-02-01T10:00:00Z"
    ))

    assert fields["citation_count"] == 12
    assert fields["citations_scopus"] is None
    assert fields["citations_last_updated"].isoformat() == "2024-02-01T10:00:00"

    with pytest.raises(ValidationError):
        publication_fields(dict(NEW_PUBLICATION, citation_count="many"))


def test_update_own_publication(client):
    body = dict(NEW_PUBLICATION, id=1, authors="Prof. Ravi Menon", title="Crop Yield, Revised")

    login(client, "faculty-token")
    response = client.put("/faculty/publications", json=body)

    assert response.status_code == 200
    assert db.session.get(Publication, 1).title == "Crop Yield, Revised"


def test_update_requires_authors(client):
    body = dict(NEW_PUBLICATION, id=1)

    login(client, "faculty-token")
    response = client.put("/faculty/publications", json=body)

    assert response.status_code == 400
    assert response.get_json()["message"] == \
        "Title, authors, publication date, type, and venue are required"


def test_cannot_update_someone_elses_publication(client):
    body = dict(NEW_PUBLICATION, id=77, authors="Prof. Ravi Menon")

    login(client, "faculty-token")
    response = client.put("/faculty/publications", json=body)

    assert response.status_code == 403
    assert response.get_json()["message"] == "Unauthorized to update this publication"


def test_hod_update_keeps_owner(client):
    body = dict(NEW_PUBLICATION, id=77, authors="Dr. Kavita Rao")

    login(client, "hod-token")
    response = client.put("/faculty/publications", json=body)

    assert response.status_code == 200
    assert db.session.get(Publication, 77).faculty_id == "F003"


def test_cannot_delete_someone_elses_publication(client):
    login(client, "faculty-token")
    response = client.delete("/faculty/publications?id=77")

    assert response.status_code == 403
    assert response.get_json()["message"] == "Unauthorized to delete this publication"
    assert db.session.get(Publication, 77) is not None


def test_delete_own_publication(client):
    login(client, "faculty-token")
    response = client.delete("/faculty/publications?id=1")

    assert response.status_code == 200
    assert response.get_json()["message"] == "Publication deleted successfully"
    db.session.expire_all()
    assert db.session.get(Publication, 1) is None


def test_delete_unknown_or_missing_id(client):
    login(client, "admin-token")
    response = client.delete("/faculty/publications?id=4040")
    assert response.status_code == 404
    assert response.get_json()["message"] == "Publication not found"

    response = client.delete("/faculty/publications")
    assert response.status_code == 400
    assert response.get_json()["message"] == "Publication ID is required"
