from datetime import datetime, date, UTC
from sqlalchemy import String, Integer, Date, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from frogtrack.db.base import Base


class Certification(Base):
    __tablename__ = "certifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    provider: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(Text, nullable=True)
    issue_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True, index=True)
    cert_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    cert_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )

    def as_row(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "provider": self.provider,
            "category": self.category,
            "issue_date": self.issue_date,
            "expiry_date": self.expiry_date,
            "cert_id": self.cert_id,
            "cert_url": self.cert_url,
            "notes": self.notes,
        }
