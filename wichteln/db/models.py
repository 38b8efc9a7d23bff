from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class Participant(Base):
    __tablename__ = "participants"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    # Case-folded name; uniqueness of participants is decided on this column.
    name_key = Column(String, nullable=False, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<Participant(id={self.id}, name={self.name})>"


class Pairing(Base):
    __tablename__ = "pairings"

    id = Column(Integer, primary_key=True)
    giver_name = Column(String, nullable=False)
    giver_key = Column(String, nullable=False, index=True)
    recipient_name = Column(String, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("giver_key", "position", name="uq_pairings_giver_position"),
    )

    def __repr__(self) -> str:
        return (
            "<Pairing(giver={0}, recipient={1}, position={2})>"
        ).format(self.giver_name, self.recipient_name, self.position)
