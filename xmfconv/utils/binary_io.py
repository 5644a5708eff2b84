"""
Little-endian binary I/O primitives shared by the ULT and XMF codecs.

Both formats are plain sequential byte streams:
- Integers are little-endian and unsigned unless noted (ULT stores a few
  descriptor fields as signed 32-bit values)
- XMF packs sample offsets into 3 bytes, so widths are not limited to the
  struct sizes 1/2/4
- Text fields have a fixed width; one byte maps to one character
  (latin-1), with no NUL termination
"""

import struct
from typing import BinaryIO, Union

from xmfconv.utils.validation import TruncatedInput

TEXT_ENCODING = "latin-1"
TEXT_PAD = b"\x20"


class ByteReader:
    """
    Sequential reader over a binary stream.

    Every read is exact: a short read raises TruncatedInput naming the field.

    Example:
        reader = ByteReader(io.BytesIO(data))
        count = reader.read_u8("sample count") + 1
    """

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.position = 0

    def read_bytes(self, count: int, field: str = "data") -> bytes:
        """
        Read exactly count bytes.

        Args:
            count: Number of bytes to read
            field: Field name used in the error message

        Returns:
            The bytes read

        Raises:
            TruncatedInput: If the stream ends early
        """
        if count == 0:
            return b""
        data = self.stream.read(count)
        if len(data) != count:
            raise TruncatedInput(field, count, len(data), self.position)
        self.position += count
        return data

    def read_uint(self, width: int, field: str = "integer") -> int:
        """Read a width-byte little-endian unsigned integer."""
        return int.from_bytes(self.read_bytes(width, field), "little")

    def read_u8(self, field: str = "byte") -> int:
        return self.read_bytes(1, field)[0]

    def read_u16(self, field: str = "word") -> int:
        return self.read_uint(2, field)

    def read_u32(self, field: str = "dword") -> int:
        return self.read_uint(4, field)

    def read_s32(self, field: str = "dword") -> int:
        return struct.unpack("<i", self.read_bytes(4, field))[0]

    def read_text(self, width: int, field: str = "text") -> str:
        """Read a fixed-width text field, keeping every byte as a character."""
        return self.read_bytes(width, field).decode(TEXT_ENCODING)


class ByteWriter:
    """
    Sequential writer into a binary stream, the inverse of ByteReader.
    """

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.position = 0

    def write_bytes(self, data: Union[bytes, bytearray]) -> None:
        self.stream.write(data)
        self.position += len(data)

    def write_uint(self, value: int, width: int) -> None:
        """
        Write a width-byte little-endian unsigned integer.

        Raises:
            ValueError: If value does not fit in width bytes
        """
        if not 0 <= value < 1 << (8 * width):
            raise ValueError(f"Value {value} does not fit in {width} bytes")
        self.write_bytes(value.to_bytes(width, "little"))

    def write_u8(self, value: int) -> None:
        self.write_uint(value, 1)

    def write_u16(self, value: int) -> None:
        self.write_uint(value, 2)

    def write_u32(self, value: int) -> None:
        self.write_uint(value, 4)

    def write_s32(self, value: int) -> None:
        self.write_bytes(struct.pack("<i", value))

    def write_text(self, text: str, width: int) -> None:
        """Write text truncated to width, or space-padded up to width."""
        self.write_bytes(encode_text(text, width))


def encode_text(text: str, width: int) -> bytes:
    """
    Encode a fixed-width text field.

    Args:
        text: Text to encode (characters outside latin-1 become '?')
        width: Field width in bytes

    Returns:
        Exactly width bytes: truncated if longer, padded with 0x20 if shorter
    """
    data = text.encode(TEXT_ENCODING, errors="replace")[:width]
    return data.ljust(width, TEXT_PAD)
