"""UID rendering."""

from ..tag.constants import DEFAULT_UID_FORMAT, UID_FORMATS


def format_uid(uid: bytes, uid_format: str = DEFAULT_UID_FORMAT) -> str:
    """Render a tag UID.

    Args:
        uid: raw UID bytes as returned by the reader
        uid_format: 'hex', 'hex-reversed' or 'decimal'. Decimal only applies
            to UIDs of up to 4 bytes; longer UIDs fall back to hex.

    Returns:
        str: the formatted UID
    """
    if uid_format not in UID_FORMATS:
        raise ValueError(f"Invalid format: {uid_format}. Use: {', '.join(UID_FORMATS)}")

    if uid_format == 'hex-reversed':
        return bytes(reversed(uid)).hex().upper()
    if uid_format == 'decimal' and len(uid) <= 4:
        return str(int.from_bytes(uid, 'big'))
    return bytes(uid).hex().upper()
