from __future__ import annotations

import datetime
import html
from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError

from wichteln.db import Participant, repo
from wichteln.services.pairing import PairingSet, generate_pairings
from wichteln.services.schedule import Deadline, Phase, current_phase

MAX_NAME_LENGTH = 64


@dataclass(frozen=True)
class RegistrationResult:
    added: bool
    message: str
    participant: Optional[Participant] = None


@dataclass(frozen=True)
class RevealResult:
    found: bool
    message: str
    giver: Optional[str] = None
    recipients: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class StatusSnapshot:
    phase: Phase
    deadline: Deadline
    now: datetime.datetime
    participant_count: int
    pairings_ready: bool


def clean_name(name: Optional[str]) -> str:
    return (name or "").strip()


def register_participant(
    session,
    name: Optional[str],
    deadline: Deadline,
    now: Optional[datetime.datetime] = None,
) -> RegistrationResult:
    if current_phase(deadline, now) != Phase.REGISTER:
        if not deadline.is_configured:
            return RegistrationResult(False, "The registration deadline is not configured yet.")
        return RegistrationResult(False, "Registration is closed. The draw has started.")

    name = clean_name(name)
    if not name:
        return RegistrationResult(False, "Please enter a name.")
    if len(name) > MAX_NAME_LENGTH:
        return RegistrationResult(False, f"Names can be at most {MAX_NAME_LENGTH} characters long.")

    if repo.get_participant_by_name(session, name):
        return RegistrationResult(False, "This name is already taken.")

    try:
        participant = repo.add_participant(session, name)
    except IntegrityError:
        session.rollback()
        return RegistrationResult(False, "This name is already taken.")

    logger.bind(participant_id=participant.id).info("Participant registered")
    return RegistrationResult(True, "You're in! Your name has been saved.", participant)


def ensure_pairings(session, seed: Optional[int] = None) -> PairingSet:
    """Return the stored pairings, drawing them first if none exist yet.

    The draw happens at most once: as soon as any pairing row is stored the
    stored set is served as is, even if participants change afterwards.
    """
    if repo.has_pairings(session):
        return repo.load_pairings(session)

    names = repo.list_participant_names(session)
    if not names:
        return {}

    pairings = generate_pairings(names, seed=seed)
    try:
        repo.create_pairings(session, pairings)
    except IntegrityError:
        # Another session stored its draw first; serve that one.
        session.rollback()
        logger.bind(participants=len(names)).info("Pairings drawn concurrently, using stored set")
        return repo.load_pairings(session)

    doubles = sum(1 for recipients in pairings.values() if len(recipients) > 1)
    logger.bind(participants=len(names), double_assignments=doubles).info("Pairings generated")
    return pairings


def reveal_recipients(
    session,
    name: Optional[str],
    deadline: Deadline,
    now: Optional[datetime.datetime] = None,
) -> RevealResult:
    if current_phase(deadline, now) == Phase.REGISTER:
        return RevealResult(False, "The draw has not happened yet. Come back after the deadline.")

    name = clean_name(name)
    if not name:
        return RevealResult(False, "Please enter your name to see who you are gifting.")

    ensure_pairings(session)

    rows = repo.list_pairings_for_giver(session, name)
    if not rows:
        participant = repo.get_participant_by_name(session, name)
        if participant is None:
            return RevealResult(False, "Your name was not found.")
        return RevealResult(False, "Nobody has been assigned to you yet.", giver=participant.name)

    return RevealResult(
        True,
        "",
        giver=rows[0].giver_name,
        recipients=[row.recipient_name for row in rows],
    )


def get_status(
    session,
    deadline: Deadline,
    now: Optional[datetime.datetime] = None,
) -> StatusSnapshot:
    if now is None:
        now = datetime.datetime.now()
    return StatusSnapshot(
        phase=current_phase(deadline, now),
        deadline=deadline,
        now=now,
        participant_count=repo.count_participants(session),
        pairings_ready=repo.has_pairings(session),
    )


def format_reveal(result: RevealResult) -> str:
    if not result.found:
        return html.escape(result.message)
    heading = (
        "The people you are gifting:" if len(result.recipients) > 1 else "The person you are gifting:"
    )
    lines = [heading]
    lines.extend(f"• <b>{html.escape(recipient)}</b>" for recipient in result.recipients)
    return "\n".join(lines)


def format_status(snapshot: StatusSnapshot) -> str:
    if snapshot.deadline.is_configured:
        deadline_text = snapshot.deadline.value.strftime("%d.%m.%Y %H:%M")
    else:
        deadline_text = "not set"

    phase_text = "Registration open" if snapshot.phase == Phase.REGISTER else "Draw started"
    lines = [
        f"Today: {snapshot.now.strftime('%d.%m.%Y %H:%M')}",
        f"Deadline: {deadline_text}",
        f"Status: {phase_text}",
        f"Registered participants: {snapshot.participant_count}",
    ]
    if not snapshot.deadline.is_configured:
        lines.append("")
        lines.append("Set DEADLINE=YYYY-MM-DD HH:MM in the .env file to open registration.")
    return "\n".join(lines)
