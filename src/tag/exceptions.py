"""NFC tag and reader exceptions."""


class NFCError(Exception):
    """Base class for NFC exceptions."""
    pass


class ReaderNotFoundError(NFCError):
    """No NFC reader found."""
    pass


class ReaderConnectionError(NFCError):
    """Failed to connect to reader."""
    pass


class IOFailure(NFCError):
    """A page or UID transfer with the tag failed."""
    pass


class ReadError(IOFailure):
    """Failed to read from NFC tag."""
    pass


class WriteError(IOFailure):
    """Failed to write to tag."""
    pass


class UnknownTagFamily(NFCError):
    """Tag family could not be determined from the boundary probe."""
    pass


class TagLockedException(NFCError):
    """Raised when attempting to write to a locked tag."""
    pass
