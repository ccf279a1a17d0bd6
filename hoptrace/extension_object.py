"""ICMP extension objects (RFC 4884)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from hoptrace.packet import fmt_payload, require_size

_CLASS_NAMES = {
    1: "MultiProtocolLabelSwitchingLabelStack",
    2: "InterfaceInformationObject",
    3: "InterfaceIdentificationObject",
    4: "ExtendedInformation",
}

_LENGTH_OFFSET = 0
_CLASS_NUM_OFFSET = 2
_CLASS_SUBTYPE_OFFSET = 3


@dataclass(frozen=True)
class ClassNum:
    """The class number of an ICMP extension object."""

    number: int

    MPLS_LABEL_STACK: ClassVar[ClassNum]
    INTERFACE_INFORMATION: ClassVar[ClassNum]
    INTERFACE_IDENTIFICATION: ClassVar[ClassNum]
    EXTENDED_INFORMATION: ClassVar[ClassNum]

    def __post_init__(self) -> None:
        if not 0 <= self.number <= 0xFF:
            raise ValueError(f"class number out of range: {self.number}")

    @classmethod
    def from_id(cls, value: int) -> ClassNum:
        """Build the class number for a wire value."""
        return cls(value)

    def id(self) -> int:
        """The wire value of this class number."""
        return self.number

    @property
    def name(self) -> str:
        """The class name, or ``"Other"`` for classes without a name here."""
        return _CLASS_NAMES.get(self.number, "Other")

    def __str__(self) -> str:
        if self.number in _CLASS_NAMES:
            return self.name
        return f"Other({self.number})"


ClassNum.MPLS_LABEL_STACK = ClassNum(1)
ClassNum.INTERFACE_INFORMATION = ClassNum(2)
ClassNum.INTERFACE_IDENTIFICATION = ClassNum(3)
ClassNum.EXTENDED_INFORMATION = ClassNum(4)


class ExtensionObjectPacket:
    """A view over an ICMP extension object held in network byte order.

    Passing a ``bytearray`` allows the fields to be written; ``bytes`` gives a
    read-only view.
    """

    MINIMUM_PACKET_SIZE = 4

    def __init__(self, buf) -> None:
        self._buf = require_size("ExtensionObjectPacket", buf, self.MINIMUM_PACKET_SIZE)

    @property
    def length(self) -> int:
        """The length of the object in bytes, header included."""
        return int.from_bytes(self._buf[_LENGTH_OFFSET:_LENGTH_OFFSET + 2], "big")

    @length.setter
    def length(self, value: int) -> None:
        self._buf[_LENGTH_OFFSET:_LENGTH_OFFSET + 2] = value.to_bytes(2, "big")

    @property
    def class_num(self) -> ClassNum:
        """The class of the object."""
        return ClassNum.from_id(self._buf[_CLASS_NUM_OFFSET])

    @class_num.setter
    def class_num(self, value: ClassNum) -> None:
        self._buf[_CLASS_NUM_OFFSET] = value.id()

    @property
    def class_subtype(self) -> int:
        """The class sub-type of the object."""
        return self._buf[_CLASS_SUBTYPE_OFFSET]

    @class_subtype.setter
    def class_subtype(self, value: int) -> None:
        self._buf[_CLASS_SUBTYPE_OFFSET] = value

    @property
    def payload(self) -> bytes:
        """The object payload, as bounded by the length field."""
        return bytes(self._buf[self.MINIMUM_PACKET_SIZE:self.length])

    def set_payload(self, data: bytes) -> None:
        """Write `data` just after the object header."""
        start = self.MINIMUM_PACKET_SIZE
        end = start + len(data)
        if end > len(self._buf):
            raise ValueError(
                f"payload of {len(data)} bytes does not fit in a buffer of {len(self._buf)}"
            )
        self._buf[start:end] = data

    @property
    def packet(self) -> bytes:
        """The bytes of the whole packet."""
        return bytes(self._buf)

    def __repr__(self) -> str:
        return (
            f"ExtensionObject(length={self.length}, class_num={self.class_num}, "
            f"class_subtype={self.class_subtype}, payload={fmt_payload(self.payload)!r})"
        )