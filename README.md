# chatnet

Building blocks for a packet-based chat server and its clients.

Every message on the wire is a small header, a 16-bit payload size followed
by a 16-bit packet type (both little-endian), and then the payload. chatnet
supplies the pieces that hold, frame and route those messages:

- `chatnet.ring_buffer.RingBuffer`: a fixed-capacity circular byte buffer
  for received data. One slot always stays free, so a buffer made with
  capacity `n` holds at most `n - 1` bytes. The default capacity is 10000.
- `chatnet.serialization.SerializationBuffer`: a linear buffer that writes
  and reads little-endian integers and floats (`write_uint16`,
  `read_int64`, `write_double` and the rest), plus raw bytes through
  `put_data` and `get_data`. `resize()` doubles the capacity, up to 1600
  bytes.
- `chatnet.packets`: `PacketType`, `PacketHeader` and `EchoPacket`, with
  `pack` and `unpack` for each.
- `chatnet.session`: `Session`, which sends and receives on a socket you
  give it, and the fixed-size session tables `ServerSessionManager` and
  `ClientSessionManager`.
- `chatnet.packet_handler`: `ClientPacketHandler` and
  `ServerPacketHandler`, dispatch tables that map a packet type to a
  function, and `make_packet`, which builds a send buffer.
- `chatnet.room.Room` and `chatnet.user`: chat rooms with a user limit, and
  the `User` record with its `UserManager` table.
- `chatnet.monitor.NetMonitor`: writes session, send and receive counts at
  a fixed interval on a background thread.
- `chatnet.memory_pool`: size-classed block pools whose blocks carry guard
  values that are checked on free.
- `chatnet.net_utils`: `NetAddress`, an IPv4 endpoint, and `RecvBuffer`, a
  linear receive buffer.
- `chatnet.log`: console logging filtered by level.

Errors are raised as exceptions. Network failures raise
`chatnet.errors.NetworkError`, whose `code` is a `NetworkErrorCode`.

The package needs Python 3.10 or later and has no dependencies outside the
standard library.

## Buffers

```python
from chatnet.ring_buffer import RingBuffer
from chatnet.serialization import SerializationBuffer

ring = RingBuffer(16)
ring.enqueue(b"hello")       # 5: how many bytes were stored
ring.peek(5)                 # b"hello", not consumed
ring.dequeue(5)              # b"hello", consumed
ring.is_empty()              # True

buf = SerializationBuffer(100)
buf.write_uint16(42).write_int64(-7)   # writes return the buffer
buf.read_uint16()            # 42
buf.read_int64()             # -7
```

`enqueue`, `dequeue` and `peek` move as much data as fits or is available.
The `*_exact` variants move all of the requested size or raise
`RingBufferError`. `SerializationBuffer` raises `SerializationError` when a
write does not fit, a read runs past the data, or a value is out of range
for its type.

## Packets

```python
from chatnet.packets import EchoPacket, PacketHeader, PacketType

header = PacketHeader(8, PacketType.ECHO_PACKET)
header.pack()                            # 4 bytes: size, then type

wire = EchoPacket(42).pack()             # header followed by a signed 64-bit value
EchoPacket.unpack(wire).data             # 42
PacketHeader.unpack(wire).type           # PacketType.ECHO_PACKET
```

## Dispatching packets

```python
from chatnet.packet_handler import ClientPacketHandler, make_packet
from chatnet.packets import PacketType

handler = ClientPacketHandler()
handler.register(
    PacketType.CHAT_TO_ROOM_REQUEST_PACKET,
    lambda session_id, buffer: buffer.data(),
)

send_buffer = make_packet(PacketType.CHAT_TO_ROOM_REQUEST_PACKET, b"hi")
```

`process_packet(session_id, packet_type, buffer)` calls the registered
function and returns its result. An unregistered type raises `NetworkError`
with `NetworkErrorCode.CANNOT_FIND_PACKET_FUNC`. `ServerPacketHandler` works
the same way, with handlers that take only the buffer.

`make_packet` accepts raw payload bytes, which get a header carrying their
length and the given type, or an object with a `pack()` method that returns
a whole packet.

## Sessions

A session manager hands out reusable `Session` slots, each with a fresh id:

```python
import socket

from chatnet.packet_handler import make_packet
from chatnet.packets import PacketType
from chatnet.session import ServerSessionManager

ours, theirs = socket.socketpair()
manager = ServerSessionManager(10)
session = manager.add_session(ours, ("127.0.0.1", 6000))

session.send(make_packet(PacketType.CHAT_NOTIFY_PACKET, b"hi"))
theirs.recv(64)

manager.get_session(session.session_id) is session   # True
manager.delete_session(session)                       # closes the socket
```

`send` queues a buffer and sends everything queued unless a send is already
in progress. `post_recv` reads into the ring buffer's free space and returns
the byte count, which you commit with `session.recv_buffer.move_rear_exact`.
Each send and receive counts as an outstanding operation; `process_send`
reports a finished send and `release_io` ends one operation, returning
`True` when none remain. `add_session` raises `RuntimeError` when every slot
is taken; `is_full()` tells you beforehand.

## Rooms and users

```python
from chatnet.room import Room

room = Room(owner=None, max_user_count=2)
room.enter_room(1)
room.enter_room(2)
room.owner_id            # 1: the first user in
room.leave_room(1)
room.owner_id            # 2: the longest-staying user takes over
```

Entering a full room, entering twice, or leaving a room you are not in
raises `ValueError`. `UserManager` is a plain table: its `users` and
`user_to_session` dictionaries are for you to fill.

## Monitoring

```python
from chatnet.monitor import NetMonitor

monitor = NetMonitor(manager, interval=1.0)
monitor.inc_recv_count()
print(monitor.report())   # counts, then the counters restart from zero
monitor.begin()           # writes a report every interval to stdout
monitor.end()
```

## Memory pool

```python
from chatnet.memory_pool import PoolManager

pools = PoolManager(managed_count=8)
block = pools.alloc(100)
block.data[:5] = b"hello"
pools.free(block)         # raises GuardError if a guard was overwritten
```

Each of the 48 size classes keeps `managed_count` blocks ready (4000 by
default), so pick a small number where memory matters. Requests larger than
4096 bytes, header and guards included, get a block of their own that is
not pooled.

## Logging

```python
from chatnet.log import LogLevel, log, set_log_level

set_log_level(LogLevel.DEBUG)
log("client connected", LogLevel.SYSTEM)   # True: written to stdout
```

The default threshold is `LogLevel.ERROR`.

## What chatnet does not do

chatnet has no server or client loop. Nothing in it binds, listens, accepts
or connects sockets, runs worker threads, or splits a stream of received
bytes into packets and calls a handler for each; you write that loop
around `Session`, `RingBuffer`, `PacketHeader` and the packet handlers.
There is no command to run, no chat server ready to start, no login or
storage of users, and no profiler.

## Tests

The tests use pytest, which is listed in the `test` extra:

```
pip install -e .[test]
pytest
```