from wichteln.db.models import Base, Pairing, Participant
from wichteln.db.session import SessionLocal, ensure_data_directory, get_session, init_engine

__all__ = [
    "Base",
    "Pairing",
    "Participant",
    "SessionLocal",
    "ensure_data_directory",
    "get_session",
    "init_engine",
]
