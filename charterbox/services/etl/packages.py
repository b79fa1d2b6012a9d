"""Package-type detection from free-text yacht and product descriptions."""

import logging
import re
from dataclasses import dataclass
from typing import Any, NamedTuple

from .constants import (
    ECOMMERCE_FALLBACK_PACKAGE,
    ECOMMERCE_PACKAGE_KEYWORDS,
    PACKAGE_COUNTERS,
    PACKAGE_TEXT_FIELD,
    PAX_FIELD,
    SOURCE_MASTER,
    SOURCE_RUZINN,
    YACHT_ALIAS_PREFIXES,
    YACHT_KEYWORDS,
)
from .reference import ReferenceData

logger = logging.getLogger(__name__)

# ASCII hyphen, en-dash or em-dash with optional surrounding whitespace
_DASH_SEPARATOR = re.compile(r"\s*[-–—]\s*")
_PARENTHETICAL = re.compile(r"\(([^)]*)\)?")

UNCATEGORIZED_FLAG = "package_uncategorized"


class ProductLabel(NamedTuple):
    yacht_label: str
    package_text: str


def split_product_label(raw: str | None) -> ProductLabel:
    """Split "YACHT - PACKAGE" or "YACHT (PACKAGE)" into its two parts.

    Only the first dash-like separator splits. Without a separator, text
    before "(" is the yacht label and the parenthetical is the package text.
    Otherwise the whole text is the label.
    """
    text = (raw or "").strip()
    parts = _DASH_SEPARATOR.split(text, maxsplit=1)
    if len(parts) == 2:
        return ProductLabel(parts[0].strip(), parts[1].strip())
    if "(" in text:
        label, _, rest = text.partition("(")
        match = _PARENTHETICAL.match("(" + rest)
        return ProductLabel(label.strip(), match.group(1).strip() if match else "")
    return ProductLabel(text, "")


@dataclass(frozen=True)
class PackageRule:
    """Keyword rule mapping package text to package counters.

    Every group in `all_of` must have at least one keyword present in the
    text; `exact` matches the whole text instead. Keywords are upper case.
    """

    adult: str
    child: str | None = None
    all_of: tuple[tuple[str, ...], ...] = ()
    exact: tuple[str, ...] = ()
    match_full_label: bool = False

    def matches(self, package_text: str, full_label: str) -> bool:
        if self.exact:
            return package_text in self.exact
        haystack = full_label if self.match_full_label else package_text
        return all(any(k in haystack for k in group) for group in self.all_of)


DEFAULT_PACKAGE_RULES: tuple[PackageRule, ...] = (
    PackageRule("pkg_vip_adult", "pkg_vip_child", all_of=(("VIP",), ("SOFT", "DRINK", "ONLY"))),
    PackageRule("pkg_vip_alc", "pkg_vip_child", exact=("VIP", "VIP ALC", "VIP ALCOHOLIC")),
    PackageRule(
        "pkg_vip_alc",
        "pkg_vip_child",
        all_of=(("VIP",), ("PREMIUM", "UNLIMITED", "ALC")),
    ),
    PackageRule("pkg_royal_alc", "pkg_royal_child", all_of=(("ROYAL",), ("ALC",))),
    PackageRule("pkg_royal_adult", "pkg_royal_child", all_of=(("ROYAL",),)),
    PackageRule(
        "pkg_adult_top_deck_alc",
        "pkg_child_top_deck",
        all_of=(("TOP DECK",), ("ALC",)),
        match_full_label=True,
    ),
    PackageRule(
        "pkg_adult_top_deck",
        "pkg_child_top_deck",
        all_of=(("TOP DECK",),),
        match_full_label=True,
    ),
    PackageRule("pkg_adult_alc", "pkg_child", all_of=(("UNLIMITED", "PREMIUM"), ("ALC",))),
    PackageRule("pkg_adult_alc", "pkg_child", all_of=(("FOOD",), ("BAR", "ALC"))),
    PackageRule("pkg_adult_alc", "pkg_child", all_of=(("HARD", "ALC"),)),
    PackageRule(
        "pkg_adult",
        "pkg_child",
        all_of=(("FOOD", "SOFT", "ONLY", "STANDARD", "REGULAR", "DRINK"),),
    ),
)

RUZINN_PACKAGE_RULES: tuple[PackageRule, ...] = (
    PackageRule("pkg_vip_adult", all_of=(("VIP SOFT",),)),
    PackageRule("pkg_adult", all_of=(("FOOD",), ("SOFT",))),
    PackageRule("pkg_vip_alc", all_of=(("VIP UNLIMITED",),)),
    PackageRule("pkg_adult_alc", all_of=(("FOOD", "UNLIMITED"), ("ALC",))),
    PackageRule("pkg_child", all_of=(("CHILD",),)),
)


@dataclass(frozen=True)
class KeywordTables:
    """Hand-maintained keyword tables driving package and yacht inference."""

    yacht_aliases: tuple[tuple[str, str], ...] = YACHT_ALIAS_PREFIXES
    yacht_keywords: tuple[tuple[str, str], ...] = YACHT_KEYWORDS
    ecommerce_packages: tuple[tuple[str, str], ...] = ECOMMERCE_PACKAGE_KEYWORDS
    default_rules: tuple[PackageRule, ...] = DEFAULT_PACKAGE_RULES
    ruzinn_rules: tuple[PackageRule, ...] = RUZINN_PACKAGE_RULES
    fallback_counter: str = "pkg_adult"
    ecommerce_fallback: str = ECOMMERCE_FALLBACK_PACKAGE


DEFAULT_KEYWORD_TABLES = KeywordTables()


def parse_pax(text: Any) -> tuple[int, int]:
    """Parse a passenger count such as "2 + 1" into (adults, children).

    A plain number counts as adults; a third "+" part is ignored.
    """
    parts = [p.strip() for p in str(text or "").split("+")]
    counts = [_leading_int(p) for p in parts[:2]]
    adults = counts[0] or 0
    children = (counts[1] or 0) if len(counts) > 1 else 0
    return adults, children


def _leading_int(text: str) -> int | None:
    match = re.match(r"\d+", text)
    return int(match.group()) if match else None


def detect_yacht_id(
    text: str,
    default: str,
    tables: KeywordTables = DEFAULT_KEYWORD_TABLES,
) -> str:
    """Map an e-commerce product name to a yacht; first matching keyword wins."""
    lowered = (text or "").lower()
    for keyword, yacht in tables.yacht_keywords:
        if keyword in lowered:
            return yacht
    return default


def detect_package_name(text: str, tables: KeywordTables = DEFAULT_KEYWORD_TABLES) -> str:
    """Map an e-commerce product name to a package name; first matching keyword wins."""
    lowered = (text or "").lower()
    for keyword, package_name in tables.ecommerce_packages:
        if keyword in lowered:
            return package_name
    return tables.ecommerce_fallback


class PackageDetector:
    """Populates package counters and the yacht on a mapped import row.

    The keyword tables are fixed at construction; the reference data is used
    to turn yacht names found through aliases and keywords into ids.
    """

    def __init__(
        self,
        tables: KeywordTables = DEFAULT_KEYWORD_TABLES,
        reference: ReferenceData | None = None,
    ) -> None:
        self.tables = tables
        self.reference = reference or ReferenceData()

    def apply(self, raw_yacht: str, row: dict[str, Any], source: str) -> dict[str, Any]:
        """Run source-specific inference on `row` in place and return it."""
        if source == SOURCE_MASTER:
            self._fold_pax(row)
        elif source == SOURCE_RUZINN:
            self._apply_ruzinn(row)
        else:
            raw = raw_yacht or str(row.get(PACKAGE_TEXT_FIELD) or "")
            self._fold_pax(row)
            self._resolve_yacht(raw, row)
            self._apply_default(raw, row)

        self._join_client_name(row)
        row.pop(PACKAGE_TEXT_FIELD, None)
        return row

    def detect_yacht_id(self, text: str, default: str) -> str:
        found = detect_yacht_id(text, "", self.tables)
        if not found:
            return default
        return self.reference.resolve_yacht(found) or found

    def detect_package_name(self, text: str) -> str:
        return detect_package_name(text, self.tables)

    def _fold_pax(self, row: dict[str, Any]) -> None:
        pax = row.pop(PAX_FIELD, None)
        if not pax:
            return
        adults, children = parse_pax(pax)
        if adults:
            row["pkg_adult"] = (row.get("pkg_adult") or 0) + adults
        if children:
            row["pkg_child"] = (row.get("pkg_child") or 0) + children

    def _resolve_yacht(self, raw_yacht: str, row: dict[str, Any]) -> None:
        if not raw_yacht or self.reference.is_known_yacht(row.get("yacht")):
            return
        label = split_product_label(self._apply_alias(raw_yacht)).yacht_label
        resolved = self.reference.resolve_yacht(label)
        if resolved is None:
            keyword_match = detect_yacht_id(label, "", self.tables)
            if keyword_match:
                resolved = self.reference.resolve_yacht(keyword_match) or keyword_match
        row["yacht"] = resolved or label

    def _apply_alias(self, raw: str) -> str:
        text = raw.strip()
        lowered = text.lower()
        for prefix, replacement in self.tables.yacht_aliases:
            if lowered.startswith(prefix):
                return replacement + text[len(prefix) :]
        return text

    def _apply_default(self, raw_yacht: str, row: dict[str, Any]) -> None:
        package_text = split_product_label(raw_yacht).package_text.upper()
        if not package_text:
            return

        full_label = (raw_yacht or "").upper()
        adults = row.pop("pkg_adult", 0) or 0
        children = row.pop("pkg_child", 0) or 0

        for rule in self.tables.default_rules:
            if rule.matches(package_text, full_label):
                _add(row, rule.adult, adults)
                _add(row, rule.child or "pkg_child", children)
                return

        logger.debug("No package rule for %r, keeping adult/child counters", package_text)
        _add(row, "pkg_adult", adults)
        _add(row, "pkg_child", children)
        row[UNCATEGORIZED_FLAG] = package_text

    def _apply_ruzinn(self, row: dict[str, Any]) -> None:
        package_text = str(row.get(PACKAGE_TEXT_FIELD) or "").upper()
        pax = row.pop(PAX_FIELD, None)
        quantity = sum(parse_pax(pax)) if pax else 0
        quantity = quantity or row.get("pkg_adult") or 1

        for key in PACKAGE_COUNTERS:
            row.pop(key, None)

        for rule in self.tables.ruzinn_rules:
            if rule.matches(package_text, package_text):
                row[rule.adult] = quantity
                return
        row[self.tables.fallback_counter] = quantity

    @staticmethod
    def _join_client_name(row: dict[str, Any]) -> None:
        first = row.pop("client_name_first", None)
        last = row.pop("client_name_last", None)
        if first or last:
            joined = f"{(first or '').strip()} {(last or '').strip()}".strip()
            if joined:
                row["client_name"] = joined


def _add(row: dict[str, Any], key: str, quantity: int) -> None:
    if quantity > 0:
        row[key] = (row.get(key) or 0) + quantity
