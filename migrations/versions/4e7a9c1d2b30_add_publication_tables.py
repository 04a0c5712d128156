"""add faculty publications and co-author tables

Revision ID: 4e7a9c1d2b30
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "4e7a9c1d2b30"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "faculty_publications",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("faculty_id", sa.String(length=50), nullable=False, index=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("abstract", sa.Text(), nullable=True),
        sa.Column("authors", sa.String(length=500), nullable=False),
        sa.Column("publication_date", sa.Date(), nullable=False),
        sa.Column(
            "publication_type",
            sa.Enum("journal", "conference", "book", "book_chapter", "other", name="publication_type"),
            nullable=False
        ),
        sa.Column("publication_venue", sa.String(length=500), nullable=False),
        sa.Column("doi", sa.String(length=100), nullable=True),
        sa.Column("url", sa.String(length=1000), nullable=True),
        sa.Column("citation_count", sa.Integer(), nullable=True),
        sa.Column("citations_crossref", sa.Integer(), nullable=True),
        sa.Column("citations_semantic_scholar", sa.Integer(), nullable=True),
        sa.Column("citations_google_scholar", sa.Integer(), nullable=True),
        sa.Column("citations_web_of_science", sa.Integer(), nullable=True),
        sa.Column("citations_scopus", sa.Integer(), nullable=True),
        sa.Column("citations_last_updated", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.ForeignKeyConstraint(["faculty_id"], ["faculty.F_id"]),
    )

    op.create_table(
        "publication_co_authors",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("publication_id", sa.Integer(), nullable=False),
        sa.Column("faculty_id", sa.String(length=50), nullable=False),
        sa.Column("author_order", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["publication_id"], ["faculty_publications.id"]),
        sa.ForeignKeyConstraint(["faculty_id"], ["faculty.F_id"]),
    )


def downgrade():
    op.drop_table("publication_co_authors")
    op.drop_table("faculty_publications")
