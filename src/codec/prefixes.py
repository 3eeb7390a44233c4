"""URI identifier codes for well-known 'U' records."""

from typing import Optional, Tuple

# Index is the identifier code stored in the first payload byte.
URI_PREFIXES: Tuple[str, ...] = (
    "",                            # 0x00
    "http://www.",                 # 0x01
    "https://www.",                # 0x02
    "http://",                     # 0x03
    "https://",                    # 0x04
    "tel:",                        # 0x05
    "mailto:",                     # 0x06
    "ftp://anonymous:anonymous@",  # 0x07
    "ftp://ftp.",                  # 0x08
    "ftps://",                     # 0x09
    "sftp://",                     # 0x0A
    "smb://",                      # 0x0B
    "nfs://",                      # 0x0C
    "ftp://",                      # 0x0D
    "dav://",                      # 0x0E
    "news:",                       # 0x0F
    "telnet://",                   # 0x10
    "imap:",                       # 0x11
    "rtsp://",                     # 0x12
    "urn:",                        # 0x13
    "pop:",                        # 0x14
    "sip:",                        # 0x15
    "sips:",                       # 0x16
    "tftp:",                       # 0x17
    "btspp://",                    # 0x18
    "btl2cap://",                  # 0x19
    "btgoep://",                   # 0x1A
    "tcpobex://",                  # 0x1B
    "irdaobex://",                 # 0x1C
    "file://",                     # 0x1D
    "urn:epc:id:",                 # 0x1E
    "urn:epc:tag:",                # 0x1F
    "urn:epc:pat:",                # 0x20
    "urn:epc:raw:",                # 0x21
    "urn:epc:",                    # 0x22
    "urn:nfc:",                    # 0x23
)

HTTPS_CODE = 0x04


def uri_prefix(code: int) -> Optional[str]:
    """Prefix for an identifier code, or None if the code is not assigned."""
    if 0 <= code < len(URI_PREFIXES):
        return URI_PREFIXES[code]
    return None


def longest_prefix(uri: str) -> Tuple[int, str]:
    """Find the identifier code with the longest prefix matching ``uri``.

    Returns the code and the remaining suffix. Code 0x00 (no prefix) always
    matches.
    """
    best = 0
    for code, prefix in enumerate(URI_PREFIXES):
        if uri.startswith(prefix) and len(prefix) > len(URI_PREFIXES[best]):
            best = code
    return best, uri[len(URI_PREFIXES[best]):]
