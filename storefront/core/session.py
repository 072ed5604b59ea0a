"""Session management for checkout wizards"""

import uuid
from datetime import datetime, timezone
from typing import Optional
from dataclasses import dataclass

from ..services.checkout import CheckoutWorkflow


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CheckoutSession:
    """One checkout wizard in progress"""
    session_id: str
    created_at: datetime
    updated_at: datetime
    workflow: CheckoutWorkflow

    def touch(self) -> None:
        self.updated_at = _now()


class CheckoutSessionManager:
    """Manages checkout sessions"""

    def __init__(self):
        self.sessions: dict[str, CheckoutSession] = {}

    def create_session(self, workflow: CheckoutWorkflow) -> CheckoutSession:
        """Create a new session around a started workflow"""
        now = _now()
        session = CheckoutSession(
            session_id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            workflow=workflow,
        )
        self.sessions[session.session_id] = session
        return session

    def get_session(self, session_id: str) -> Optional[CheckoutSession]:
        """Get session by ID"""
        session = self.sessions.get(session_id)
        if session:
            session.touch()
        return session

    def delete_session(self, session_id: str) -> bool:
        """Delete a session"""
        if session_id in self.sessions:
            del self.sessions[session_id]
            return True
        return False

    def cleanup_old_sessions(self, max_age_hours: int = 24) -> int:
        """Remove sessions idle for longer than max_age_hours"""
        now = _now()
        old_sessions = [
            sid for sid, session in self.sessions.items()
            if (now - session.updated_at).total_seconds() > max_age_hours * 3600
        ]
        for sid in old_sessions:
            del self.sessions[sid]
        return len(old_sessions)


# Singleton instance
session_manager = CheckoutSessionManager()
