import socket

import pytest

from msgnet.adapter import (
    AcceptedData,
    AcceptedRemote,
    Adapter,
    ConnectionInfo,
    ListeningInfo,
    Local,
    PendingStatus,
    ReadStatus,
    Remote,
    Resource,
    SendStatus,
)
from msgnet.poll import Readiness


class _Remote(Remote):
    def __init__(self, sock):
        self.sock = sock

    def source(self):
        return self.sock

    @classmethod
    def connect(cls, remote_addr):
        a, _ = socket.socketpair()
        return ConnectionInfo(cls(a), ("127.0.0.1", 1), remote_addr.socket_addr())

    def receive(self, process_data):
        process_data(b"data")
        return ReadStatus.WAIT_NEXT_EVENT

    def send(self, data):
        return SendStatus.SENT

    def pending(self, readiness):
        return PendingStatus.READY if readiness is Readiness.WRITE else PendingStatus.INCOMPLETE


class _Local(Local):
    def source(self):
        return None

    @classmethod
    def listen(cls, addr):
        return ListeningInfo(cls(), addr)

    def accept(self, accept_remote):
        accept_remote(AcceptedData(("127.0.0.1", 80), b"hi"))


def test_abstract_classes_cannot_be_instantiated():
    with pytest.raises(TypeError):
        Resource()
    with pytest.raises(TypeError):
        Remote()
    with pytest.raises(TypeError):
        Local()


def test_ready_to_write_defaults_true():
    a, b = socket.socketpair()
    try:
        assert Remote.ready_to_write(_Remote(a)) is True
    finally:
        a.close()
        b.close()


def test_send_to_default_raises():
    with pytest.raises(RuntimeError):
        Local.send_to(_Local(), ("127.0.0.1", 80), b"x")


def test_listen_returns_info():
    info = _Local.listen(("127.0.0.1", 80))
    assert info == ListeningInfo(info.local, ("127.0.0.1", 80))
    assert info.local_addr == ("127.0.0.1", 80)
    assert isinstance(info.local, _Local)


def test_accept_delivers_data():
    received = []
    _Local().accept(received.append)
    assert received == [AcceptedData(("127.0.0.1", 80), b"hi")]


def test_accepted_data_str():
    assert str(AcceptedData(("127.0.0.1", 80), b"")) == "AcceptedType::Data(127.0.0.1:80)"


def test_accepted_remote_str():
    text = str(AcceptedRemote(("::1", 80), None))
    assert text == "AcceptedType::Remote([::1]:80)"


def test_adapter_subclass_validation():
    class Good(Adapter):
        remote = _Remote
        local = _Local

    assert Good.remote is _Remote
    assert Good.local is _Local
    info = Good.local.listen(("127.0.0.1", 80))
    assert info == ListeningInfo(info.local, ("127.0.0.1", 80))

    with pytest.raises(TypeError):

        class NoLocal(Adapter):
            remote = _Remote

    with pytest.raises(TypeError):

        class Swapped(Adapter):
            remote = _Local
            local = _Remote


def test_status_enums_are_distinct():
    assert [SendStatus(s.value) for s in SendStatus] == list(SendStatus)
    assert len(set(SendStatus)) == 4
    assert ReadStatus(ReadStatus.DISCONNECTED.value) is ReadStatus.DISCONNECTED
    assert ReadStatus.DISCONNECTED is not ReadStatus.WAIT_NEXT_EVENT
    assert PendingStatus(PendingStatus.READY.value) is PendingStatus.READY
    assert PendingStatus.READY is not PendingStatus.DISCONNECTED