"""Error codes shared by the networking layer."""

from enum import IntEnum


class NetworkErrorCode(IntEnum):
    """Result codes reported by servers, clients and sessions."""

    NONE = 0
    WSA_START_UP_ERROR = 1

    # server
    CREATE_COMPLETION_PORT_FAILED = 100
    CREATE_SOCKET_FAILED = 101
    LISTEN_FAILED = 102
    BIND_FAILED = 103

    # client
    CLIENT_CONNECT_FAILED = 104

    # common
    SET_SOCK_OPT_FAILED = 105

    RECV_BUF_OVERFLOW = 200
    RECV_BUF_DEQUE_FAILED = 201

    SEND_LEN_ZERO = 300
    MESSAGE_SEND_FAILED_MEMORY = 301

    CANNOT_FIND_PACKET_FUNC = 1000


class NetworkError(Exception):
    """Raised when a network operation fails; carries a NetworkErrorCode."""

    def __init__(self, code, message=""):
        self.code = NetworkErrorCode(code)
        self.message = message
        text = f"{self.code.name}: {message}" if message else self.code.name
        super().__init__(text)