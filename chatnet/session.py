"""Connected sessions and the fixed-size table that hands them out."""

import errno
import itertools
import threading
from collections import deque
from enum import Enum

from chatnet.errors import NetworkError, NetworkErrorCode
from chatnet.log import LogLevel, log
from chatnet.net_utils import NetAddress
from chatnet.ring_buffer import RingBuffer
from chatnet.serialization import SerializationBuffer

UNASSIGNED_ID = 2**64 - 1

_QUIET_ERRORS = {errno.ECONNABORTED, errno.ECONNRESET, 10053, 10054}

_id_lock = threading.Lock()
_ids = itertools.count(1)


def _next_id():
    with _id_lock:
        return next(_ids)


def _as_address(address):
    if address is None or isinstance(address, NetAddress):
        return address if address is not None else NetAddress()
    return NetAddress.from_sockaddr(address)


def _payload(buffer):
    if isinstance(buffer, SerializationBuffer):
        return buffer.data()
    return bytes(buffer)


def _is_quiet(exc):
    return exc.errno in _QUIET_ERRORS or getattr(exc, "winerror", None) in _QUIET_ERRORS


class EventType(Enum):
    ACCEPT = "accept"
    CONNECT = "connect"
    RECV = "recv"
    SEND = "send"
    DISCONNECT = "disconnect"


class Session:
    """One connection: a socket, a receive ring buffer and a send queue.

    ``post_send`` and ``post_recv`` perform one I/O operation each and count
    it as outstanding; the caller reports a finished send through
    ``process_send`` and ends every operation with ``release_io``.
    """

    def __init__(self, sock=None, address=None):
        self._send_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._send_queue = deque()
        self.pending_buffers = []
        self.pending_events = set()
        self.recv_buffer = RingBuffer()
        self._sending = False
        self._io_count = 0
        self._sock = sock
        self.address = _as_address(address)
        self.session_id = _next_id() if sock is not None else UNASSIGNED_ID

    @property
    def sock(self):
        return self._sock

    @property
    def io_count(self):
        with self._state_lock:
            return self._io_count

    @property
    def sending(self):
        with self._state_lock:
            return self._sending

    def _add_io(self, delta):
        with self._state_lock:
            self._io_count += delta
            return self._io_count

    def reset(self, sock, address):
        """Reuse this slot for a new connection with a fresh id."""
        self._sock = sock
        self.address = _as_address(address)
        self.recv_buffer.clear()
        with self._send_lock:
            self._send_queue.clear()
        self.pending_buffers.clear()
        self.pending_events.clear()
        with self._state_lock:
            self._sending = False
            self._io_count = 0
        self.session_id = _next_id()

    def send(self, buffer):
        """Queue ``buffer`` and try to send; return the bytes sent now."""
        with self._send_lock:
            self._send_queue.append(buffer)
        return self.post_send()

    def release_io(self):
        """Finish one outstanding operation; True when none remain."""
        return self._add_io(-1) == 0

    def process_send(self, transferred):
        """Complete a send; return the bytes of the follow-up send, if any."""
        self.pending_events.discard(EventType.SEND)
        self.pending_buffers.clear()
        with self._state_lock:
            self._sending = False
        if transferred == 0:
            raise NetworkError(NetworkErrorCode.SEND_LEN_ZERO, "0 byte send")
        return self.post_send()

    def process_connect(self):
        self.pending_events.discard(EventType.CONNECT)
        return self.post_recv()

    def process_accept(self):
        self.pending_events.discard(EventType.ACCEPT)
        return self.post_recv()

    def process_disconnect(self):
        self.pending_events.discard(EventType.DISCONNECT)
        return False

    def post_send(self):
        """Send everything queued unless a send is in flight; return bytes sent."""
        if self._sock is None:
            raise RuntimeError("session has no socket")
        with self._state_lock:
            if self._sending:
                return 0
            self._sending = True
        with self._send_lock:
            if not self._send_queue:
                with self._state_lock:
                    self._sending = False
                return 0
            self.pending_buffers.extend(self._send_queue)
            self._send_queue.clear()
        payload = b"".join(_payload(buffer) for buffer in self.pending_buffers)
        self.pending_events.add(EventType.SEND)
        self._add_io(1)
        try:
            self._sock.sendall(payload)
        except OSError as exc:
            self.pending_events.discard(EventType.SEND)
            self._add_io(-1)
            if not _is_quiet(exc):
                log(f"send error - [ errCode {exc.errno} ]", LogLevel.SYSTEM)
            return 0
        return len(payload)

    def post_recv(self):
        """Receive into the ring buffer's free space.

        Returns the byte count (0 at end of stream), which the caller commits
        with ``recv_buffer.move_rear_exact``; None if the receive failed.
        """
        if self._sock is None:
            raise RuntimeError("session has no socket")
        views = self.recv_buffer.free_views()
        if not views:
            raise NetworkError(NetworkErrorCode.RECV_BUF_OVERFLOW, "receive buffer full")
        self.pending_events.add(EventType.RECV)
        self._add_io(1)
        try:
            received = self._sock.recv_into(views[0])
        except OSError as exc:
            self._add_io(-1)
            if not _is_quiet(exc):
                log(f"recv error - [ errCode {exc.errno} ]", LogLevel.SYSTEM)
            return None
        finally:
            self.pending_events.discard(EventType.RECV)
        return received

    def close(self):
        if self._sock is not None:
            try:
                self._sock.close()
            finally:
                self._sock = None


class SessionManager:
    """A fixed table of reusable sessions looked up by id."""

    def __init__(self, max_sessions):
        if max_sessions < 0:
            raise ValueError("max_sessions must not be negative")
        self._max = max_sessions
        self._sessions = [Session() for _ in range(max_sessions)]
        self._available = list(range(max_sessions - 1, -1, -1))
        self._id_to_index = {}
        self._index_to_id = {}
        self._map_lock = threading.Lock()
        self._index_lock = threading.Lock()
        self._count_lock = threading.Lock()
        self._current = 0

    def add_session(self, sock, address):
        """Place a new connection in a free slot and return its session."""
        with self._index_lock:
            if not self._available:
                raise RuntimeError("no free session slot")
            index = self._available.pop()
        session = self._sessions[index]
        session.reset(sock, address)
        with self._map_lock:
            self._id_to_index[session.session_id] = index
            self._index_to_id[index] = session.session_id
        with self._count_lock:
            self._current += 1
        return session

    def delete_session(self, session):
        """Close ``session`` and free its slot."""
        with self._map_lock:
            try:
                index = self._id_to_index.pop(session.session_id)
            except KeyError:
                raise KeyError(f"unknown session id {session.session_id}") from None
            self._index_to_id.pop(index, None)
        self._sessions[index].close()
        with self._index_lock:
            self._available.append(index)
        with self._count_lock:
            self._current -= 1

    def get_session(self, session_id):
        with self._map_lock:
            index = self._id_to_index.get(session_id)
        return None if index is None else self._sessions[index]

    def current_count(self):
        with self._count_lock:
            return self._current

    def max_count(self):
        return self._max

    def is_full(self):
        with self._index_lock:
            return not self._available


class ServerSessionManager(SessionManager):
    """Sessions of accepted clients."""


class ClientSessionManager(SessionManager):
    """Sessions of outgoing connections."""

    def delete_all(self):
        with self._map_lock:
            active = [self._sessions[i] for i in self._id_to_index.values()]
        for session in active:
            self.delete_session(session)