"""
Size matching between step restrictions and catalog size names.

Catalog data names the same size in many ways ("2 Litre", "2L", "2 liter").
Both sides are normalized to a canonical key through an explicit alias table.
When either side is unknown to the table, matching falls back to the loose
rule: the size name must start with the restriction's leading token, so a
"Large 14\"" restriction still accepts a "Large Deep Dish" size.

Usage:
    matcher = SizeMatcher()
    matcher.matches("2 Litre", "2L")           # True
    matcher.matches("Large", "Extra Large")   # False, both sides are in the table
    matcher.find_size("Large", item.sizes)    # CatalogSize | None
"""

import logging
import re
from typing import Iterable, Mapping, Sequence

from .. import config
from ..schemas.combos import CatalogSize


logger = logging.getLogger(__name__)

_NOISE = re.compile(r"[\"'()]")
_SPACES = re.compile(r"\s+")
_INCHES = re.compile(r"\s*\d+(\.\d+)?\s*(in|inch|inches)?$")


class SizeMatcher:
    """Normalizes size text and compares it through an alias table."""

    def __init__(self, aliases: Mapping[str, str] | None = None):
        table = config.SIZE_ALIASES if aliases is None else aliases
        self._aliases = {self._clean(k): v for k, v in table.items()}

    @staticmethod
    def _clean(text: str) -> str:
        text = _NOISE.sub(" ", text.lower())
        return _SPACES.sub(" ", text).strip()

    def lookup(self, text: str) -> str | None:
        """Return the canonical key if the alias table knows this text."""
        cleaned = self._clean(text)
        if cleaned in self._aliases:
            return self._aliases[cleaned]
        # "large 14" / "medium 12 inch" -> "large" / "medium"
        without_inches = _INCHES.sub("", cleaned).strip()
        if without_inches and without_inches in self._aliases:
            return self._aliases[without_inches]
        return None

    def leading_token(self, text: str) -> str:
        cleaned = self._clean(text)
        return cleaned.split(" ")[0] if cleaned else ""

    def normalize(self, text: str) -> str:
        """Canonical key from the alias table, else the leading token."""
        return self.lookup(text) or self.leading_token(text)

    def matches(self, restriction: str, size_name: str) -> bool:
        """True when a size name satisfies a restriction."""
        wanted = self.lookup(restriction)
        offered = self.lookup(size_name)
        if wanted is not None and offered is not None:
            return wanted == offered
        token = self.leading_token(restriction)
        return bool(token) and self._clean(size_name).startswith(token)

    def is_exact(self, restriction: str, size_name: str) -> bool:
        """True when both sides are in the alias table and agree."""
        wanted = self.lookup(restriction)
        return wanted is not None and wanted == self.lookup(size_name)

    def any_match(self, restriction: str, sizes: Iterable[CatalogSize]) -> bool:
        return any(self.matches(restriction, size.name) for size in sizes)

    def find_size(self, restriction: str, sizes: Sequence[CatalogSize]) -> CatalogSize | None:
        """
        Pick the size that satisfies a restriction.

        When several sizes match, an alias-table match wins over a
        leading-token match; among equals the first in catalog order wins.
        """
        candidates = [size for size in sizes if self.matches(restriction, size.name)]
        if not candidates:
            return None
        if len(candidates) > 1:
            logger.debug(
                "Restriction '%s' matches %d sizes: %s",
                restriction, len(candidates), [s.name for s in candidates],
            )
        for size in candidates:
            if self.is_exact(restriction, size.name):
                return size
        return candidates[0]


default_size_matcher = SizeMatcher()
