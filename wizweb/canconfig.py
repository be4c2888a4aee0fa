"""CAN bridge configuration and the receive ring buffer that feeds it."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

DATA_BUF_MAX_SIZE = 1024 * 2
MAX_DLC = 8

CAN_ERR_FORMAT = -1
CAN_ERR_ID_OVERFLOW = -2


class EthMode(IntEnum):
    """How the Ethernet side of the bridge connects."""

    TCP_SERVER = 0
    TCP_CLIENT = 1


class Baudrate(IntEnum):
    """Selectable CAN bus speeds."""

    KBPS_125 = 0
    KBPS_250 = 1
    KBPS_500 = 2


_BITRATES = {
    Baudrate.KBPS_125: 125000,
    Baudrate.KBPS_250: 250000,
    Baudrate.KBPS_500: 500000,
}

_MODE_NAMES = {
    EthMode.TCP_SERVER: "TCP Server",
    EthMode.TCP_CLIENT: "TCP Client",
}

_BAUD_NAMES = {
    Baudrate.KBPS_125: "125kbps",
    Baudrate.KBPS_250: "250kbps",
    Baudrate.KBPS_500: "500kbps",
}


@dataclass
class CanConfig:
    """Settings of the CAN-to-Ethernet bridge."""

    eth_mode: EthMode = EthMode.TCP_SERVER
    baudrate: Baudrate = Baudrate.KBPS_125

    @classmethod
    def default(cls) -> "CanConfig":
        """The factory settings: TCP server at 125 kbps."""
        return cls(eth_mode=EthMode.TCP_SERVER, baudrate=Baudrate.KBPS_125)


@dataclass(frozen=True)
class CanMessage:
    """A CAN frame: identifier and up to eight data bytes."""

    id: int
    data: bytes = b""

    def __post_init__(self) -> None:
        if len(self.data) > MAX_DLC:
            raise ValueError(f"a CAN frame carries at most {MAX_DLC} data bytes")
        if self.id < 0:
            raise ValueError("CAN identifier must not be negative")

    @property
    def dlc(self) -> int:
        """Number of data bytes."""
        return len(self.data)


@dataclass
class RxRingBuffer:
    """Ring buffer of received CAN frames waiting to go out over Ethernet.

    Frames are only stored while ``rx_enabled`` is set. Indices wrap after
    ``capacity`` slots have been passed; pushing a full lap without popping
    makes the write position meet the read position, so everything unread is
    lost and the buffer reads as empty.
    """

    capacity: int = DATA_BUF_MAX_SIZE
    rx_enabled: bool = False
    _slots: list = field(init=False, repr=False)
    _push_idx: int = field(init=False, default=0, repr=False)
    _pop_idx: int = field(init=False, default=0, repr=False)

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError("capacity must be positive")
        self._slots = [None] * (self.capacity + 1)

    def _advance(self, idx: int) -> int:
        return idx + 1 if idx < self.capacity else 0

    def push(self, msg: CanMessage) -> bool:
        """Store ``msg`` if reception is enabled; return whether it was stored."""
        if not self.rx_enabled:
            return False
        self._slots[self._push_idx] = msg
        self._push_idx = self._advance(self._push_idx)
        return True

    def pop(self) -> CanMessage:
        """Remove and return the oldest frame; raise IndexError when empty."""
        if self._pop_idx == self._push_idx:
            raise IndexError("no CAN frame waiting")
        msg = self._slots[self._pop_idx]
        self._slots[self._pop_idx] = None
        self._pop_idx = self._advance(self._pop_idx)
        return msg

    def reset(self) -> None:
        """Discard every stored frame and enable reception."""
        self._push_idx = 0
        self._pop_idx = 0
        self._slots = [None] * (self.capacity + 1)
        self.rx_enabled = True

    def __len__(self) -> int:
        return (self._push_idx - self._pop_idx) % (self.capacity + 1)


def bitrate(baudrate: Baudrate) -> int:
    """Bus speed in bits per second for a baud-rate selection."""
    try:
        return _BITRATES[Baudrate(baudrate)]
    except ValueError:
        raise ValueError(f"unknown baud rate selection {baudrate!r}") from None


def describe_can_config(config: CanConfig) -> str:
    """Render ``config`` as the human-readable status block."""
    lines = ["\n------------ CAN config ------------\n"]
    try:
        lines.append(f"\tmode : {_MODE_NAMES[EthMode(config.eth_mode)]}\n")
    except ValueError:
        pass
    try:
        lines.append(f"\tbaudrate : {_BAUD_NAMES[Baudrate(config.baudrate)]}\n")
    except ValueError:
        lines.append(f"\tErr) baudrate : {int(config.baudrate)}\n")
    lines.append("\n-------------------------------------\n")
    return "".join(lines)