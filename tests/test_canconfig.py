import pytest

from wizweb.canconfig import (
    Baudrate,
    CanConfig,
    CanMessage,
    EthMode,
    RxRingBuffer,
    bitrate,
    describe_can_config,
)


def test_default_config():
    config = CanConfig.default()
    assert config.eth_mode == EthMode.TCP_SERVER
    assert config.baudrate == Baudrate.KBPS_125


@pytest.mark.parametrize(
    "selection, expected",
    [(Baudrate.KBPS_125, 125000), (Baudrate.KBPS_250, 250000), (Baudrate.KBPS_500, 500000)],
)
def test_bitrate(selection, expected):
    assert bitrate(selection) == expected


def test_bitrate_unknown():
    with pytest.raises(ValueError):
        bitrate(3)


def test_describe_default():
    text = describe_can_config(CanConfig.default())
    assert "\tmode : TCP Server\n" in text
    assert "\tbaudrate : 125kbps\n" in text
    assert text.startswith("\n------------ CAN config ------------\n")


def test_describe_client_500():
    text = describe_can_config(CanConfig(EthMode.TCP_CLIENT, Baudrate.KBPS_500))
    assert "\tmode : TCP Client\n" in text
    assert "\tbaudrate : 500kbps\n" in text


def test_describe_bad_baudrate():
    text = describe_can_config(CanConfig(EthMode.TCP_SERVER, 7))
    assert "\tErr) baudrate : 7\n" in text


def test_message_dlc():
    msg = CanMessage(0x123, bytes([1, 2, 3]))
    assert msg.dlc == 3


def test_message_too_long():
    with pytest.raises(ValueError):
        CanMessage(0x10, bytes(9))


def test_ring_fifo():
    ring = RxRingBuffer(capacity=8)
    ring.reset()
    msgs = [CanMessage(i, bytes([i])) for i in range(5)]
    for m in msgs:
        assert ring.push(m) is True
    assert len(ring) == 5
    assert [ring.pop() for _ in msgs] == msgs
    assert len(ring) == 0


def test_ring_empty_pop():
    ring = RxRingBuffer(capacity=4)
    ring.reset()
    with pytest.raises(IndexError):
        ring.pop()


def test_ring_disabled_drops():
    ring = RxRingBuffer(capacity=4)
    assert ring.push(CanMessage(1)) is False
    with pytest.raises(IndexError):
        ring.pop()


def test_ring_wraps():
    ring = RxRingBuffer(capacity=3)
    ring.reset()
    for i in range(20):
        msg = CanMessage(i, bytes([i % 256]))
        ring.push(msg)
        assert ring.pop() == msg


def test_ring_full_lap_loses_unread():
    ring = RxRingBuffer(capacity=3)
    ring.reset()
    for i in range(4):
        ring.push(CanMessage(i))
    assert len(ring) == 0
    with pytest.raises(IndexError):
        ring.pop()


def test_ring_reset_clears():
    ring = RxRingBuffer(capacity=4)
    ring.reset()
    ring.push(CanMessage(5))
    ring.reset()
    assert ring.rx_enabled is True
    with pytest.raises(IndexError):
        ring.pop()


def test_ring_bad_capacity():
    with pytest.raises(ValueError):
        RxRingBuffer(capacity=0)