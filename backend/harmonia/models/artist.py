"""Artist ORM — a performer or composer that courses can reference.

Invariants:
    - name is at most 50 characters (matches the artist schemas)
    - genres is a non-empty JSON list of strings when set through the API
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from harmonia.db.base import Base


class Artist(Base):
    __tablename__ = "artists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    genres: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    origin_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    courses = relationship("Course", back_populates="artist", passive_deletes=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "genres": list(self.genres or []),
            "originYear": self.origin_year,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
