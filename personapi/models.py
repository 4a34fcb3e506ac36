"""Database models for people records."""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base shared by all models."""


class Person(Base):
    """A person stored in the ``people`` table."""

    __tablename__ = "people"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    surname: Mapped[str] = mapped_column(String, nullable=False)
    patronymic: Mapped[Optional[str]] = mapped_column(String, default="")
    age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(String, default="")
    nationality: Mapped[Optional[str]] = mapped_column(String, default="")

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form; empty optional fields are left out."""
        data: dict[str, Any] = {
            "id": self.id if self.id is not None else 0,
            "name": self.name or "",
            "surname": self.surname or "",
        }
        if self.patronymic:
            data["patronymic"] = self.patronymic
        if self.age is not None:
            data["age"] = self.age
        if self.gender:
            data["gender"] = self.gender
        if self.nationality:
            data["nationality"] = self.nationality
        return data

    def __repr__(self) -> str:
        return f"Person(id={self.id!r}, name={self.name!r}, surname={self.surname!r})"