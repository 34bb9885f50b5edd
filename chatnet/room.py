"""Chat rooms holding a bounded list of users."""

import itertools
import threading

_number_lock = threading.Lock()
_numbers = itertools.count(1)


def _next_room_number():
    with _number_lock:
        return next(_numbers) % 0x10000


class Room:
    """A numbered chat room with a user limit.

    The first user to enter becomes the owner; when the owner leaves, the
    longest-staying remaining user takes over.
    """

    def __init__(self, owner, max_user_count):
        if max_user_count < 0:
            raise ValueError("max_user_count must not be negative")
        self.owner = owner
        self.max_user_count = max_user_count
        self.room_number = _next_room_number()
        self.owner_id = None
        self._users = []
        self._lock = threading.Lock()

    @property
    def cur_user_count(self):
        with self._lock:
            return len(self._users)

    @property
    def user_ids(self):
        with self._lock:
            return list(self._users)

    def enter_room(self, user_id):
        """Add ``user_id``; raise ValueError if it is present or the room is full."""
        with self._lock:
            if user_id in self._users:
                raise ValueError(f"user {user_id} is already in room {self.room_number}")
            if len(self._users) >= self.max_user_count:
                raise ValueError(f"room {self.room_number} is full")
            self._users.append(user_id)
            if self.owner_id is None:
                self.owner_id = user_id

    def leave_room(self, user_id):
        """Remove ``user_id``; raise ValueError if it is not in the room."""
        with self._lock:
            try:
                self._users.remove(user_id)
            except ValueError:
                raise ValueError(
                    f"user {user_id} is not in room {self.room_number}"
                ) from None
            if self.owner_id == user_id:
                self.owner_id = self._users[0] if self._users else None