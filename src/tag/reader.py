"""NFC reader interface and page operations."""

import logging
from typing import List, Tuple

from smartcard.Exceptions import CardConnectionException, NoCardException, SmartcardException
from smartcard.System import readers
from smartcard.util import toHexString

from .constants import APDU_COMMANDS, PAGE_SIZE
from .exceptions import IOFailure, ReadError, ReaderConnectionError, ReaderNotFoundError, WriteError


class NFCReader:
    """PC/SC reader exposing the page operations of a Type 2 tag."""

    def __init__(self):
        self.reader = None
        self.connection = None

    def connect(self) -> bool:
        """Connect to the first NFC reader."""
        try:
            available_readers = readers()
        except SmartcardException as e:
            raise ReaderConnectionError(f"Failed to list readers: {e}")
        if not available_readers:
            raise ReaderNotFoundError("No NFC readers found")

        self.reader = available_readers[0]
        logging.info(f"Found reader: {self.reader}")

        self.connection = self.reader.createConnection()
        try:
            self.connection.connect()
            logging.info("Successfully connected to reader")
        except NoCardException:
            # Expected when no card is present yet
            pass
        except CardConnectionException as e:
            raise ReaderConnectionError(f"Failed to connect to reader: {e}")
        return True

    def _transmit(self, command: List[int], description: str) -> Tuple[list, int, int]:
        """Send an APDU and return (response, sw1, sw2)."""
        if not self.connection:
            raise ReaderConnectionError("Reader not connected")

        try:
            # Reconnect in case the card was swapped since the last command
            self.connection.connect()
        except NoCardException:
            raise IOFailure("No card detected")
        except CardConnectionException as e:
            raise IOFailure(f"Card connection error: {e}")

        try:
            response, sw1, sw2 = self.connection.transmit(command)
        except CardConnectionException as e:
            raise IOFailure(f"Command transmission error: {e}")

        if sw1 != 0x90 or sw2 != 0x00:
            logging.debug(f"{description} failed. Status: {sw1:02X}{sw2:02X}")
        return response, sw1, sw2

    def get_uid(self) -> bytes:
        """Read the tag UID."""
        response, sw1, sw2 = self._transmit(APDU_COMMANDS['GET_UID'], "Reading UID")
        if sw1 != 0x90 or not response:
            raise ReadError(f"APDU failed: SW={sw1:02X}{sw2:02X}")
        logging.debug(f"UID: {toHexString(response)}")
        return bytes(response)

    def read_page(self, page: int) -> bytes:
        """Read a single page from the tag."""
        cmd = APDU_COMMANDS['READ_PAGE'] + [page, PAGE_SIZE]
        response, sw1, sw2 = self._transmit(cmd, f"Reading page {page:02X}")
        if sw1 != 0x90 or sw2 != 0x00:
            raise ReadError(f"Read page {page:02X} failed: SW={sw1:02X}{sw2:02X}")
        if len(response) < PAGE_SIZE:
            raise ReadError(f"Read page {page:02X} returned {len(response)} bytes")
        return bytes(response[:PAGE_SIZE])

    def read_page_alternative(self, page: int) -> bytes:
        """Read a page, falling back to other read commands some readers need."""
        try:
            return self.read_page(page)
        except ReadError:
            pass

        for cmd in (APDU_COMMANDS['READ_PAGE'] + [page, 0x10],
                    APDU_COMMANDS['READ_PAGE_ALT'] + [page, 0x10],
                    APDU_COMMANDS['READ_PAGE'] + [page]):
            response, sw1, _ = self._transmit(cmd, f"Alternative read of page {page:02X}")
            if sw1 == 0x90 and len(response) >= PAGE_SIZE:
                return bytes(response[:PAGE_SIZE])
        raise ReadError(f"All read methods failed for page {page:02X}")

    def write_page(self, page: int, data: bytes) -> None:
        """Write 4 bytes to a single page."""
        if len(data) != PAGE_SIZE:
            raise WriteError(f"Page write must be {PAGE_SIZE} bytes, got {len(data)}")

        status = None
        for cmd_base in (APDU_COMMANDS['WRITE_PAGE'], APDU_COMMANDS['WRITE_PAGE_ALT']):
            cmd = cmd_base + [page, len(data)] + list(data)
            _, sw1, sw2 = self._transmit(cmd, f"Writing page {page:02X}")
            if sw1 == 0x90:
                return
            status = f"{sw1:02X}{sw2:02X}"
        raise WriteError(f"Write page {page:02X} failed: SW={status}")

    def close(self):
        """Close the connection to the reader."""
        if self.connection:
            self.connection.disconnect()
            logging.info("Reader connection closed")
