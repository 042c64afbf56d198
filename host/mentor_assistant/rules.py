# mentor_assistant/rules.py
"""
Platform rules document loading.

The rules document is a plain ``key: value`` text file published next to the
widget. It feeds both the intent router (parsed) and the language backend
(verbatim, as prompt context).
"""

import logging
from pathlib import Path
from typing import Dict, Optional

import requests

logger = logging.getLogger(__name__)

RulesMap = Dict[str, str]


def parse_rules(text: str) -> RulesMap:
    """Parse ``key: value`` lines into a lower-cased mapping (last key wins)"""
    rules: RulesMap = {}
    for line in (text or "").splitlines():
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        key = key.strip().lower()
        if not key:
            continue
        rules[key] = value.strip()
    return rules


class RulesLoader:
    """Fetches the rules document from a URL or a local path"""

    def __init__(self, location: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.location = location
        self.timeout = timeout
        self.session = session or requests.Session()
        self.document = ""

    def _fetch(self) -> str:
        if self.location.startswith(("http://", "https://")):
            response = self.session.get(self.location, timeout=self.timeout)
            response.raise_for_status()
            response.encoding = response.encoding or "utf-8"
            return response.text
        return Path(self.location).expanduser().read_text(encoding="utf-8")

    def load(self) -> RulesMap:
        """Load and parse the document; any failure degrades to an empty mapping"""
        try:
            text = self._fetch()
        except (requests.RequestException, OSError, UnicodeDecodeError) as e:
            logger.warning(f"rules document fetch error ({self.location}): {e}")
            self.document = ""
            return {}

        self.document = text
        rules = parse_rules(text)
        logger.debug(f"Loaded {len(rules)} rules from {self.location}")
        return rules
