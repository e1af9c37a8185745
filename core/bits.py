"""Byte <-> bit conversions (little-endian within each byte and across bytes)."""


def bytes_to_bits_le(data: bytes) -> list[bool]:
    return [bool((byte >> i) & 1) for byte in data for i in range(8)]


def bits_to_bytes_le(bits) -> bytes:
    bits = list(bits)
    if len(bits) % 8 != 0:
        raise ValueError(f"Bit count {len(bits)} is not a multiple of 8")
    out = bytearray()
    for start in range(0, len(bits), 8):
        byte = 0
        for i, bit in enumerate(bits[start:start + 8]):
            if bit:
                byte |= 1 << i
        out.append(byte)
    return bytes(out)
