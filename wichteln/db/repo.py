from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy import func, select

from wichteln.db.models import Pairing, Participant


def normalize_name(name: str) -> str:
    return name.strip().casefold()


def get_participant_by_name(session, name: str) -> Optional[Participant]:
    return session.scalar(select(Participant).where(Participant.name_key == normalize_name(name)))


def add_participant(session, name: str) -> Participant:
    participant = Participant(name=name, name_key=normalize_name(name))
    session.add(participant)
    session.flush()
    return participant


def list_participant_names(session) -> List[str]:
    return list(session.scalars(select(Participant.name).order_by(Participant.id)).all())


def count_participants(session) -> int:
    return session.scalar(select(func.count()).select_from(Participant))


def has_pairings(session) -> bool:
    return session.scalar(select(func.count()).select_from(Pairing)) > 0


def create_pairings(session, pairings: Dict[str, List[str]]) -> None:
    rows = [
        Pairing(
            giver_name=giver,
            giver_key=normalize_name(giver),
            recipient_name=recipient,
            position=position,
        )
        for giver, recipients in pairings.items()
        for position, recipient in enumerate(recipients)
    ]
    session.add_all(rows)
    session.flush()


def load_pairings(session) -> Dict[str, List[str]]:
    pairings: Dict[str, List[str]] = {}
    rows = session.scalars(select(Pairing).order_by(Pairing.id, Pairing.position)).all()
    for row in rows:
        pairings.setdefault(row.giver_name, []).append(row.recipient_name)
    return pairings


def list_pairings_for_giver(session, name: str) -> List[Pairing]:
    return list(
        session.scalars(
            select(Pairing)
            .where(Pairing.giver_key == normalize_name(name))
            .order_by(Pairing.position)
        ).all()
    )
