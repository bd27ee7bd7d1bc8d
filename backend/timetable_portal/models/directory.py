import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from timetable_portal.db.base import Base


class SchoolClass(Base):
    __tablename__ = "school_classes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    section: Mapped[str] = mapped_column(String(20), nullable=False, default="A")
    class_teacher_id: Mapped[str | None] = mapped_column(String(36), nullable=True)


class Teacher(Base):
    __tablename__ = "teachers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    contact_number: Mapped[str | None] = mapped_column(String(30), nullable=True)


class Subject(Base):
    __tablename__ = "subjects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    class_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
