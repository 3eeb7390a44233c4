"""Write a tag's own URL to it: format, then store a URI record."""

import logging
import time
from typing import Optional

from ..codec.payloads import build_uri_record
from ..codec.tlv import encode_tlv
from ..utils.uid import format_uid
from .capability import LockState, read_static_lock_bits
from .constants import (
    CC_PAGE,
    DATA_START_PAGE,
    DEFAULT_URL_HOST,
    POST_FORMAT_DELAY,
    URL_TEMPLATE,
    TagFamily,
)
from .exceptions import TagLockedException
from .formatter import execute_plan, format_tag, ndef_write_plan
from .store import PageStore


def build_tag_url(uid: bytes, host: str = DEFAULT_URL_HOST) -> str:
    """URL of the form https://<host>/r/<UID_HEX>."""
    return URL_TEMPLATE.format(host=host, uid=format_uid(uid, 'hex'))


def check_writable(store: PageStore) -> None:
    """Raise TagLockedException if static lock bits protect the CC or data pages."""
    locked = [p for p in LockState(read_static_lock_bits(store)).locked_pages if p >= CC_PAGE]
    if locked:
        raise TagLockedException(
            f"Tag is locked (static lock bits protect pages {', '.join(map(str, locked))})"
        )


def write_url(store: PageStore, url: str, family: Optional[TagFamily] = None,
              delay: float = POST_FORMAT_DELAY) -> int:
    """Format the tag and write ``url`` as a single URI record.

    The record is built before anything is written, so an over-long URL
    leaves the tag untouched. Returns the number of NDEF pages written.
    """
    tlv = encode_tlv(build_uri_record(url))

    logging.info("Formatting tag as NFC Forum Type 2...")
    format_tag(store, family)

    if delay:
        time.sleep(delay)

    pages = execute_plan(store, ndef_write_plan(tlv, DATA_START_PAGE))
    logging.info(f"Wrote URL to tag: {url}")
    return pages


def write_tag_url(store: PageStore, host: str = DEFAULT_URL_HOST, force: bool = False,
                  family: Optional[TagFamily] = None, delay: float = POST_FORMAT_DELAY) -> str:
    """Read the UID, build the tag URL and write it. Returns the URL."""
    uid = store.get_uid()
    logging.info(f"Tag UID: {format_uid(uid)}")

    if not force:
        check_writable(store)

    url = build_tag_url(uid, host)
    write_url(store, url, family, delay)
    return url
