"""Course ORM — a course, optionally taught around one artist's repertoire.

Invariants:
    - title is at most 120 characters
    - level is one of CourseLevel values
    - deleting an artist nulls the reference (courses outlive artists)
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from harmonia.core.domain_types import CourseLevel
from harmonia.db.base import Base


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    level: Mapped[str] = mapped_column(
        String(20), nullable=False, default=CourseLevel.BEGINNER.value,
    )
    artist_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("artists.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    artist = relationship("Artist", back_populates="courses")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "level": self.level,
            "artistId": self.artist_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
