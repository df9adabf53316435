# msgnet

The core of an event-driven networking layer. It identifies network
resources, frames byte streams into messages, polls sockets for readiness
and drives pluggable transport adapters that turn raw socket activity into
high-level network events. It has no dependencies outside the standard
library.

## Installation

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## What is inside

- `msgnet.encoding`: varint length-prefix framing. `encode_size(message)`
  returns the prefix to send before a message, `decode_size(data)` returns
  `(message_size, header_bytes)` or `None` when the header is incomplete,
  and `Decoder` rebuilds whole messages from partial chunks.
  `Decoder.decode(data)` returns the list of messages completed by `data`;
  `Decoder.stored_size()` tells how many bytes are held back.
- `msgnet.namespaced_thread`: `NamespacedThread(name, func)` runs `func` in a
  thread named `<parent thread name>/<name>`. `join()` returns what `func`
  returned (or raises what it raised), `try_join()` returns `None` if the
  thread was already joined, and leaving a `with` block joins it.
- `msgnet.resource_id`: `ResourceId` packs an adapter id (0 to 127), a
  `ResourceType` (`LOCAL` or `REMOTE`) and a base value into one integer.
  Build one with `ResourceId.create(...)` or from its raw value with
  `ResourceId(raw)`. `ResourceIdGenerator` hands out consecutive ids and is
  thread safe.
- `msgnet.remote_addr`: `RemoteAddr` holds either a socket address
  `(ip, port)` or a free-form string such as a WebSocket URL.
  `parse_socket_addr(text)` parses `'ip:port'` and `'[ipv6]:port'`.
  `to_remote_addr(value)` accepts strings (an `'ip:port'` string becomes a
  socket address, anything else stays a string), `(host, port)` tuples
  (host names are resolved) and existing `RemoteAddr` values.
- `msgnet.transport`: the `Transport` enum (`TCP`, `FRAMED_TCP`, `UDP`,
  `WS`) with `id()`, `from_id()`, `is_connection_oriented()` and
  `is_packet_based()`.
- `msgnet.endpoint`: `Endpoint`, a resource id paired with a peer address.
  `Endpoint.from_listener` only accepts local resources of transports that
  are not connection oriented and raises `ValueError` otherwise.
- `msgnet.poll`: `Poll`, `PollRegistry` and `PollWaker`, built on the
  standard `selectors` module. `Poll.process_event(timeout, callback)`
  reports `NetworkPollEvent` (a resource id with a `Readiness`) and
  `WakerPollEvent`. Write readiness is reported once per registration.
- `msgnet.adapter`: the base classes `Resource`, `Remote`, `Local` and
  `Adapter`, the values `AcceptedRemote` and `AcceptedData` passed to
  `Local.accept` callbacks, `ConnectionInfo`, `ListeningInfo`, and the
  `SendStatus`, `ReadStatus` and `PendingStatus` results. An `Adapter`
  subclass must set its `remote` and `local` class attributes to `Remote`
  and `Local` subclasses, or a `TypeError` is raised when it is defined.
- `msgnet.registry`: `ResourceRegistry`, a thread-safe map from resource ids
  to `Register` entries that keeps the poll registration in step.
- `msgnet.driver`: `Driver`, which runs one adapter: `connect`, `listen`,
  `send`, `remove` and `is_ready` act on its resources, and
  `process(resource_id, readiness, callback)` turns poll events into
  `Connected`, `Accepted`, `Message` and `Disconnected` events.
- `msgnet.loader`: `DriverLoader`, which mounts adapters by id on a shared
  `Poll`; `take()` returns the poll and the per-id drivers. Ids with no
  adapter mounted hold an `UnimplementedDriver`, whose every operation
  raises `RuntimeError`.

## Framing example

```python
from msgnet.encoding import Decoder, encode_size

payload = b"hello"
frame = encode_size(payload) + payload

decoder = Decoder()
messages = decoder.decode(frame[:3])   # incomplete: nothing yet
messages += decoder.decode(frame[3:])  # completes the message
assert messages == [b"hello"]
assert decoder.stored_size() == 0
```

## Resource ids

```python
from msgnet.resource_id import ResourceIdGenerator, ResourceType
from msgnet.transport import Transport
from msgnet.endpoint import Endpoint

generator = ResourceIdGenerator(Transport.UDP.id(), ResourceType.LOCAL)
listener_id = generator.generate()
endpoint = Endpoint.from_listener(listener_id, ("127.0.0.1", 3000))
print(endpoint)  # [2.L.0] 127.0.0.1:3000
```

## What this package does not do

- It ships no transport adapters. `Transport` names TCP, framed TCP, UDP and
  WebSocket, but no `Adapter` implementation for any of them is included;
  to move data you write your own `Remote`, `Local` and `Adapter`
  subclasses and mount them with `DriverLoader.mount`.
- It has no node or event loop that runs the poll and dispatches events for
  you, and no signals or timers. Your code calls `Poll.process_event` and
  passes each `NetworkPollEvent` to the matching driver's `process`.
- It has no command-line program.