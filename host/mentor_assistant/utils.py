# mentor_assistant/utils.py
"""
Utility functions for the mentor assistant
"""

import re
import logging

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]*>")
_HEADING_RE = re.compile(r"^\s{0,3}#{1,6}\s+", re.MULTILINE)
_EMPHASIS_RE = re.compile(r"(\*\*|__|~~|`+|\*)")


def strip_tags(text: str) -> str:
    """Remove HTML tags only; everything else (code included) is kept verbatim"""
    if not text:
        return ""
    return _TAG_RE.sub("", text).strip()


def strip_markup(text: str) -> str:
    """Remove HTML tags and inline markdown markers, keeping the words.

    Lossy on code, so only used for text that is read aloud.
    """
    cleaned = strip_tags(text)
    cleaned = _HEADING_RE.sub("", cleaned)
    cleaned = _EMPHASIS_RE.sub("", cleaned)
    return cleaned.strip()


def mask_credential(credential: str) -> str:
    """Only the last four characters of a credential ever reach the logs"""
    if not credential:
        return "<empty>"
    return f"...{credential[-4:]}"
