import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from wichteln.db import repo
from wichteln.db.models import Base
from wichteln.services import exchange
from wichteln.services.pairing import PairingError
from wichteln.services.schedule import Phase, parse_deadline

DEADLINE = parse_deadline("2025-12-20 18:00")
BEFORE = datetime.datetime(2025, 12, 1, 12, 0)
AFTER = datetime.datetime(2025, 12, 21, 9, 0)


def create_session():
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)()


def register_all(session, names):
    for name in names:
        result = exchange.register_participant(session, name, DEADLINE, BEFORE)
        assert result.added, result.message
    session.commit()


def test_register_participant():
    session = create_session()
    result = exchange.register_participant(session, "  Anna ", DEADLINE, BEFORE)
    assert result.added
    assert result.participant.name == "Anna"
    assert repo.list_participant_names(session) == ["Anna"]


def test_register_rejects_case_insensitive_duplicate():
    session = create_session()
    register_all(session, ["Anna"])
    result = exchange.register_participant(session, "ANNA", DEADLINE, BEFORE)
    assert not result.added
    assert result.message == "This name is already taken."
    assert repo.count_participants(session) == 1


def test_register_rejects_blank_name():
    session = create_session()
    result = exchange.register_participant(session, "   ", DEADLINE, BEFORE)
    assert not result.added
    assert result.message == "Please enter a name."


def test_register_rejects_long_name():
    session = create_session()
    result = exchange.register_participant(session, "x" * 65, DEADLINE, BEFORE)
    assert not result.added


def test_register_closed_after_deadline():
    session = create_session()
    result = exchange.register_participant(session, "Anna", DEADLINE, AFTER)
    assert not result.added
    assert "closed" in result.message


def test_register_requires_configured_deadline():
    session = create_session()
    result = exchange.register_participant(session, "Anna", parse_deadline(None), BEFORE)
    assert not result.added
    assert "not configured" in result.message


def test_registration_order_is_kept():
    session = create_session()
    register_all(session, ["Dora", "Anna", "Chris"])
    assert repo.list_participant_names(session) == ["Dora", "Anna", "Chris"]


def test_reveal_before_deadline():
    session = create_session()
    register_all(session, ["Anna", "Bob"])
    result = exchange.reveal_recipients(session, "Anna", DEADLINE, BEFORE)
    assert not result.found
    assert not repo.has_pairings(session)


def test_reveal_generates_and_finds_recipient():
    session = create_session()
    register_all(session, ["Anna", "Bob"])
    result = exchange.reveal_recipients(session, "anna", DEADLINE, AFTER)
    assert result.found
    assert result.giver == "Anna"
    assert result.recipients == ["Bob"]
    assert repo.load_pairings(session) == {"Anna": ["Bob"], "Bob": ["Anna"]}


def test_concurrent_draw_serves_stored_pairings(tmp_path, monkeypatch):
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'wichteln.db'}", future=True)
    Base.metadata.create_all(engine)
    make_session = sessionmaker(bind=engine, expire_on_commit=False)

    first = make_session()
    register_all(first, ["Anna", "Bob", "Chris", "Dora"])
    stored = exchange.ensure_pairings(first, seed=1)
    first.commit()
    first.close()

    # The second session missed the first one's commit when it checked.
    monkeypatch.setattr(repo, "has_pairings", lambda session: False)
    second = make_session()
    result = exchange.reveal_recipients(second, "Anna", DEADLINE, AFTER)

    assert result.found
    assert result.recipients == stored["Anna"]
    assert repo.load_pairings(second) == stored
    second.close()


def test_register_race_reports_taken(monkeypatch):
    session = create_session()
    register_all(session, ["Anna"])

    # The lookup misses a row that another session just inserted.
    monkeypatch.setattr(repo, "get_participant_by_name", lambda session, name: None)
    result = exchange.register_participant(session, "anna", DEADLINE, BEFORE)

    assert not result.added
    assert result.message == "This name is already taken."
    assert repo.list_participant_names(session) == ["Anna"]


def test_reveal_unknown_name():
    session = create_session()
    register_all(session, ["Anna", "Bob"])
    result = exchange.reveal_recipients(session, "Zoe", DEADLINE, AFTER)
    assert not result.found
    assert result.message == "Your name was not found."


def test_reveal_blank_name_does_not_draw():
    session = create_session()
    register_all(session, ["Anna", "Bob"])
    result = exchange.reveal_recipients(session, "", DEADLINE, AFTER)
    assert not result.found
    assert not repo.has_pairings(session)


def test_pairings_are_generated_once():
    session = create_session()
    register_all(session, ["Anna", "Bob", "Chris", "Dora", "Emil"])
    first = exchange.ensure_pairings(session, seed=1)
    session.commit()
    second = exchange.ensure_pairings(session, seed=2)
    assert first == second
    assert repo.load_pairings(session) == first


def test_stored_pairings_keep_double_assignment():
    session = create_session()
    register_all(session, ["Anna", "Bob", "Chris"])
    pairings = exchange.ensure_pairings(session, seed=5)
    session.commit()

    stored = repo.load_pairings(session)
    assert stored == pairings
    assert sorted(len(recipients) for recipients in stored.values()) == [1, 1, 2]


def test_late_participant_has_no_recipient():
    session = create_session()
    register_all(session, ["Anna", "Bob"])
    exchange.ensure_pairings(session)
    repo.add_participant(session, "Chris")
    session.commit()

    result = exchange.reveal_recipients(session, "Chris", DEADLINE, AFTER)
    assert not result.found
    assert result.message == "Nobody has been assigned to you yet."
    assert "Chris" not in repo.load_pairings(session)


def test_single_participant_cannot_be_paired():
    session = create_session()
    register_all(session, ["Anna"])
    with pytest.raises(PairingError):
        exchange.reveal_recipients(session, "Anna", DEADLINE, AFTER)
    assert not repo.has_pairings(session)


def test_no_participants_gives_empty_pairings():
    session = create_session()
    assert exchange.ensure_pairings(session) == {}


def test_status_snapshot():
    session = create_session()
    register_all(session, ["Anna", "Bob"])
    snapshot = exchange.get_status(session, DEADLINE, BEFORE)
    assert snapshot.phase == Phase.REGISTER
    assert snapshot.participant_count == 2
    assert not snapshot.pairings_ready

    text = exchange.format_status(snapshot)
    assert "20.12.2025 18:00" in text
    assert "Registration open" in text


def test_status_without_deadline():
    session = create_session()
    snapshot = exchange.get_status(session, parse_deadline(""), AFTER)
    assert snapshot.phase == Phase.REVEAL
    assert "DEADLINE=" in exchange.format_status(snapshot)


def test_format_reveal_escapes_names():
    result = exchange.RevealResult(True, "", giver="Anna", recipients=["<Bob>", "Chris"])
    text = exchange.format_reveal(result)
    assert text.startswith("The people you are gifting:")
    assert "&lt;Bob&gt;" in text
    assert "<Bob>" not in text
