"""Chat users and the table that holds them."""

import threading
from dataclasses import dataclass


@dataclass
class User:
    """Content-side user, tied to a network session by ``session_id``."""

    session_id: int
    user_id: int = 0
    nick_name: str = ""
    win_count: int = 0
    lose_count: int = 0


class UserManager:
    """Holds up to ``max_sessions`` users keyed by user id."""

    def __init__(self, max_sessions):
        if max_sessions < 0:
            raise ValueError("max_sessions must not be negative")
        self.max_sessions = max_sessions
        self.users = {}
        self.user_to_session = {}
        self._lock = threading.Lock()