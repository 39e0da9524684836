"""Base64 transport encoding for blob content.

Written against the alphabet directly rather than the ``base64`` module so the
byte-grouping rules are explicit: every 3 input bytes become 4 output
characters, and a short final group is padded with ``=``. Output matches
standard base64 (RFC 4648) over the UTF-8 bytes of the input text.
"""

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
PAD = "="

_REVERSE = {char: index for index, char in enumerate(ALPHABET)}


def encode_bytes(data: bytes) -> str:
    """Encode raw bytes to a base64 string."""
    out: list[str] = []
    length = len(data)

    for i in range(0, length, 3):
        b0 = data[i]
        b1 = data[i + 1] if i + 1 < length else 0
        b2 = data[i + 2] if i + 2 < length else 0

        out.append(ALPHABET[b0 >> 2])
        out.append(ALPHABET[((b0 & 0x03) << 4) | (b1 >> 4)])
        out.append(ALPHABET[((b1 & 0x0F) << 2) | (b2 >> 6)] if i + 1 < length else PAD)
        out.append(ALPHABET[b2 & 0x3F] if i + 2 < length else PAD)

    return "".join(out)


def to_utf8(text: str) -> bytes:
    """UTF-8 bytes of ``text``, with unpaired surrogates replaced by U+FFFD.

    Surrogate pairs left split in a ``str`` are joined first, so the result
    matches what a browser ``TextEncoder`` produces for the same string.
    """
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError:
        joined = text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace")
        return joined.encode("utf-8")


def encode_base64(text: str) -> str:
    """Encode text as base64 over its UTF-8 bytes.

    Example:
        >>> encode_base64("hi")
        'aGk='
    """
    return encode_bytes(to_utf8(text))


def decode_bytes(encoded: str) -> bytes:
    """Decode a padded base64 string back to bytes.

    Raises:
        ValueError: If the input length is not a multiple of 4 or it contains
            characters outside the alphabet
    """
    if len(encoded) % 4:
        raise ValueError("base64 input length must be a multiple of 4")

    out = bytearray()
    for i in range(0, len(encoded), 4):
        group = encoded[i : i + 4]
        padding = group.count(PAD)
        if padding > 2 or (padding and group[4 - padding :] != PAD * padding):
            raise ValueError(f"misplaced padding in group {group!r}")
        if padding and i + 4 != len(encoded):
            raise ValueError("padding is only allowed in the final group")

        try:
            values = [_REVERSE[c] if c != PAD else 0 for c in group]
        except KeyError as e:
            raise ValueError(f"invalid base64 character {e.args[0]!r}") from e

        chunk = (values[0] << 18) | (values[1] << 12) | (values[2] << 6) | values[3]
        out.extend(((chunk >> 16) & 0xFF, (chunk >> 8) & 0xFF, chunk & 0xFF)[: 3 - padding])

    return bytes(out)


def decode_base64(encoded: str) -> str:
    """Inverse of ``encode_base64``."""
    return decode_bytes(encoded).decode("utf-8")
