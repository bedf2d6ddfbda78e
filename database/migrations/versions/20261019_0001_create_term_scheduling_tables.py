"""create term scheduling tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    section_modality = sa.Enum("in_person", "hybrid", "online", name="section_modality")
    meeting_block_type = sa.Enum("lecture", "lab", "other", name="meeting_block_type")

    op.create_table(
        "terms",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("starts_on", sa.Date(), nullable=True),
        sa.Column("ends_on", sa.Date(), nullable=True),
        sa.Column("weeks_in_term", sa.Integer(), nullable=False, server_default="15"),
        sa.Column("slot_minutes", sa.Integer(), nullable=False, server_default="15"),
        sa.Column("buffer_minutes", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("schedule_locked", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("schedule_locked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("schedule_locked_by", sa.String(length=100), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_terms_code", "terms", ["code"], unique=True)

    op.create_table(
        "catalog_courses",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("credits", sa.Float(), nullable=False, server_default="0"),
        sa.Column("lecture_hours_per_week", sa.Float(), nullable=True),
        sa.Column("lab_hours_per_week", sa.Float(), nullable=True),
        sa.Column("contact_hours_per_week", sa.Float(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_catalog_courses_code", "catalog_courses", ["code"], unique=True)

    op.create_table(
        "rooms",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("building", sa.String(length=200), nullable=True),
        sa.Column("room_number", sa.String(length=50), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_rooms_name", "rooms", ["name"], unique=True)

    op.create_table(
        "instructors",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("is_full_time", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_instructors_email", "instructors", ["email"], unique=True)

    op.create_table(
        "offerings",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("term_id", sa.String(length=36), sa.ForeignKey("terms.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "catalog_course_id",
            sa.String(length=36),
            sa.ForeignKey("catalog_courses.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("delivery_method", sa.String(length=50), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_offerings_term_id", "offerings", ["term_id"])
    op.create_index("ix_offerings_catalog_course_id", "offerings", ["catalog_course_id"])

    op.create_table(
        "sections",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column(
            "offering_id",
            sa.String(length=36),
            sa.ForeignKey("offerings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("section_code", sa.String(length=20), nullable=False),
        sa.Column(
            "instructor_id",
            sa.String(length=36),
            sa.ForeignKey("instructors.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("modality", section_modality, nullable=False, server_default="in_person"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_sections_offering_id", "sections", ["offering_id"])
    op.create_index("ix_sections_instructor_id", "sections", ["instructor_id"])

    op.create_table(
        "meeting_blocks",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column(
            "section_id",
            sa.String(length=36),
            sa.ForeignKey("sections.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("type", meeting_block_type, nullable=False, server_default="lecture"),
        sa.Column("days", sa.JSON(), nullable=False),
        sa.Column("starts_at", sa.String(length=5), nullable=False),
        sa.Column("ends_at", sa.String(length=5), nullable=False),
        sa.Column("room_id", sa.String(length=36), sa.ForeignKey("rooms.id", ondelete="SET NULL"), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_meeting_blocks_section_id", "meeting_blocks", ["section_id"])
    op.create_index("ix_meeting_blocks_room_id", "meeting_blocks", ["room_id"])

    op.create_table(
        "office_hour_blocks",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("term_id", sa.String(length=36), sa.ForeignKey("terms.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "instructor_id",
            sa.String(length=36),
            sa.ForeignKey("instructors.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("days", sa.JSON(), nullable=False),
        sa.Column("starts_at", sa.String(length=5), nullable=False),
        sa.Column("ends_at", sa.String(length=5), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_office_hour_blocks_term_id", "office_hour_blocks", ["term_id"])
    op.create_index("ix_office_hour_blocks_instructor_id", "office_hour_blocks", ["instructor_id"])

    op.create_table(
        "instructor_term_locks",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("term_id", sa.String(length=36), sa.ForeignKey("terms.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "instructor_id",
            sa.String(length=36),
            sa.ForeignKey("instructors.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("office_hours_locked", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("office_hours_locked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("office_hours_locked_by", sa.String(length=100), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("term_id", "instructor_id", name="uq_instructor_term_locks_term_instructor"),
    )
    op.create_index(
        "ix_instructor_term_locks_term_locked",
        "instructor_term_locks",
        ["term_id", "office_hours_locked"],
    )


def downgrade() -> None:
    op.drop_index("ix_instructor_term_locks_term_locked", table_name="instructor_term_locks")
    op.drop_table("instructor_term_locks")
    op.drop_index("ix_office_hour_blocks_instructor_id", table_name="office_hour_blocks")
    op.drop_index("ix_office_hour_blocks_term_id", table_name="office_hour_blocks")
    op.drop_table("office_hour_blocks")
    op.drop_index("ix_meeting_blocks_room_id", table_name="meeting_blocks")
    op.drop_index("ix_meeting_blocks_section_id", table_name="meeting_blocks")
    op.drop_table("meeting_blocks")
    op.drop_index("ix_sections_instructor_id", table_name="sections")
    op.drop_index("ix_sections_offering_id", table_name="sections")
    op.drop_table("sections")
    op.drop_index("ix_offerings_catalog_course_id", table_name="offerings")
    op.drop_index("ix_offerings_term_id", table_name="offerings")
    op.drop_table("offerings")
    op.drop_index("ix_instructors_email", table_name="instructors")
    op.drop_table("instructors")
    op.drop_index("ix_rooms_name", table_name="rooms")
    op.drop_table("rooms")
    op.drop_index("ix_catalog_courses_code", table_name="catalog_courses")
    op.drop_table("catalog_courses")
    op.drop_index("ix_terms_code", table_name="terms")
    op.drop_table("terms")

    sa.Enum(name="meeting_block_type").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="section_modality").drop(op.get_bind(), checkfirst=True)
