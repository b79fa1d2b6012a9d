"""Unit tests for product label splitting and package detection."""

import pytest

from charterbox.services.etl.constants import SOURCE_DEFAULT, SOURCE_GYG, SOURCE_MASTER, SOURCE_RUZINN
from charterbox.services.etl.packages import (
    UNCATEGORIZED_FLAG,
    KeywordTables,
    PackageDetector,
    PackageRule,
    ProductLabel,
    detect_package_name,
    detect_yacht_id,
    parse_pax,
    split_product_label,
)
from charterbox.services.etl.reference import ReferenceData


@pytest.fixture
def detector(reference: ReferenceData) -> PackageDetector:
    return PackageDetector(reference=reference)


# =============================================================================
# Label splitting
# =============================================================================


class TestSplitProductLabel:
    def test_dash(self) -> None:
        assert split_product_label("LOTUS ROYALE - FOOD AND SOFT DRINKS") == ProductLabel(
            "LOTUS ROYALE", "FOOD AND SOFT DRINKS"
        )

    def test_en_dash(self) -> None:
        assert split_product_label("OE TOP DECK – VIP") == ProductLabel("OE TOP DECK", "VIP")

    def test_em_dash_without_spaces(self) -> None:
        assert split_product_label("CALYPSO—SOFT") == ProductLabel("CALYPSO", "SOFT")

    def test_parenthesis(self) -> None:
        assert split_product_label("OCEAN EMPRESS (VIP SOFT)") == ProductLabel("OCEAN EMPRESS", "VIP SOFT")

    def test_unclosed_parenthesis(self) -> None:
        assert split_product_label("OCEAN EMPRESS (VIP") == ProductLabel("OCEAN EMPRESS", "VIP")

    def test_only_first_dash_splits(self) -> None:
        assert split_product_label("A - B - C") == ProductLabel("A", "B - C")

    def test_no_separator(self) -> None:
        assert split_product_label("  LOTUS ROYALE ") == ProductLabel("LOTUS ROYALE", "")

    def test_empty(self) -> None:
        assert split_product_label(None) == ProductLabel("", "")


@pytest.mark.parametrize(
    "text,expected",
    [
        ("2 + 1", (2, 1)),
        ("3", (3, 0)),
        ("2+1+1", (2, 1)),
        ("4 adults", (4, 0)),
        ("", (0, 0)),
        (None, (0, 0)),
        ("abc", (0, 0)),
    ],
)
def test_parse_pax(text, expected) -> None:
    assert parse_pax(text) == expected


# =============================================================================
# E-commerce keyword tables
# =============================================================================


@pytest.mark.parametrize(
    "product,package_name",
    [
        ("Lotus Dinner Cruise - VIP Adult ALC", "VIP ALC"),
        ("Lotus Dinner Cruise - VIP Adult", "VIP ADULT"),
        ("Lotus Dinner Cruise - VIP Child", "VIP CHILD"),
        ("Royal Child Ticket", "ROYAL CHILD"),
        ("Ocean Empress - Adult ALC", "ADULT ALC"),
        ("Ocean Empress - Child (4-11)", "CHILD"),
        ("Ocean Empress - Adult", "ADULT"),
        ("Sunset Cruise Ticket", "ADULT"),
    ],
)
def test_detect_package_name(product: str, package_name: str) -> None:
    assert detect_package_name(product) == package_name


def test_detect_yacht_id_first_keyword_wins() -> None:
    assert detect_yacht_id("Lotus Royale Dinner Cruise", "DEFAULT") == "DO-yacht-lotus"
    assert detect_yacht_id("Ocean Empress Top Deck", "DEFAULT") == "DO-yacht-ocean"
    assert detect_yacht_id("Harbour Tour", "DEFAULT") == "DEFAULT"


def test_detector_resolves_keyword_yacht_names(detector: PackageDetector) -> None:
    assert detector.detect_yacht_id("Al Mansour Dinner - Adult", "") == "DO-yacht-mansour"


def test_custom_keyword_tables() -> None:
    tables = KeywordTables(
        yacht_keywords=(("sea breeze", "DO-yacht-breeze"),),
        ecommerce_packages=(("deluxe", "PREMIUM"),),
        ecommerce_fallback="BASIC",
    )
    detector = PackageDetector(tables)
    assert detector.detect_yacht_id("Sea Breeze Sunset", "X") == "DO-yacht-breeze"
    assert detector.detect_yacht_id("Lotus Royale", "X") == "X"
    assert detector.detect_package_name("Deluxe seat") == "PREMIUM"
    assert detector.detect_package_name("Standard seat") == "BASIC"


def test_package_rule_exact_match() -> None:
    rule = PackageRule("pkg_vip_alc", exact=("VIP",))
    assert rule.matches("VIP", "X - VIP")
    assert not rule.matches("VIP SOFT", "X - VIP SOFT")


# =============================================================================
# Default inference
# =============================================================================


class TestDefaultInference:
    def test_soft_drinks_with_pax(self, detector: PackageDetector) -> None:
        row = {"pkg_pax_complex": "2 + 1"}
        detector.apply("LOTUS ROYALE - FOOD AND SOFT DRINKS", row, SOURCE_DEFAULT)
        assert row == {"yacht": "DO-yacht-lotus", "pkg_adult": 2, "pkg_child": 1}

    def test_unlimited_alcoholic(self, detector: PackageDetector) -> None:
        row = {"pkg_adult": 2, "pkg_child": 1}
        detector.apply("LOTUS ROYALE - FOOD AND UNLIMITED ALCOHOLIC DRINKS", row, SOURCE_DEFAULT)
        assert row["pkg_adult_alc"] == 2
        assert row["pkg_child"] == 1
        assert "pkg_adult" not in row

    def test_vip_soft_in_parenthesis(self, detector: PackageDetector) -> None:
        row = {"pkg_adult": 3, "pkg_child": 1}
        detector.apply("OCEAN EMPRESS (VIP SOFT)", row, SOURCE_DEFAULT)
        assert row == {"yacht": "DO-yacht-ocean", "pkg_vip_adult": 3, "pkg_vip_child": 1}

    def test_alias_and_exact_vip(self, detector: PackageDetector) -> None:
        row = {"pkg_adult": 2}
        detector.apply("OE TOP DECK – VIP", row, SOURCE_DEFAULT)
        assert row == {"yacht": "DO-yacht-ocean", "pkg_vip_alc": 2}

    def test_alias_prefix_royal(self, detector: PackageDetector) -> None:
        row = {"pkg_adult": 4}
        detector.apply("Lotus Megayacht Dinner Cruise - Royal Package", row, SOURCE_DEFAULT)
        assert row == {"yacht": "DO-yacht-lotus", "pkg_royal_adult": 4}

    def test_top_deck_uses_full_label(self, detector: PackageDetector) -> None:
        row = {"pkg_adult": 2, "pkg_child": 2}
        detector.apply("OCEAN EMPRESS TOP DECK - ALCOHOLIC", row, SOURCE_DEFAULT)
        assert row == {
            "yacht": "DO-yacht-ocean",
            "pkg_adult_top_deck_alc": 2,
            "pkg_child_top_deck": 2,
        }

    def test_unknown_package_is_flagged(self, detector: PackageDetector) -> None:
        row = {"pkg_adult": 2}
        detector.apply("LOTUS ROYALE - SUNSET SPECIAL", row, SOURCE_DEFAULT)
        assert row["pkg_adult"] == 2
        assert row[UNCATEGORIZED_FLAG] == "SUNSET SPECIAL"

    def test_no_package_text_keeps_counters(self, detector: PackageDetector) -> None:
        row = {"pkg_adult": 2, "pkg_vip_adult": 1}
        detector.apply("LOTUS ROYALE", row, SOURCE_DEFAULT)
        assert row == {"yacht": "DO-yacht-lotus", "pkg_adult": 2, "pkg_vip_adult": 1}

    def test_unknown_yacht_keeps_label(self, detector: PackageDetector) -> None:
        row = {"pkg_adult": 1}
        detector.apply("Mystery Boat - Food", row, SOURCE_DEFAULT)
        assert row["yacht"] == "Mystery Boat"
        assert row["pkg_adult"] == 1

    def test_known_yacht_is_not_replaced(self, detector: PackageDetector) -> None:
        row = {"yacht": "DO-yacht-ocean", "pkg_adult": 1}
        detector.apply("LOTUS ROYALE - FOOD", row, SOURCE_DEFAULT)
        assert row["yacht"] == "DO-yacht-ocean"

    def test_marketplace_product_column(self, detector: PackageDetector) -> None:
        row = {"package_text": "Lotus Dinner Cruise - Soft Drinks", "pkg_adult": 2}
        detector.apply("", row, SOURCE_GYG)
        assert row == {"yacht": "DO-yacht-lotus", "pkg_adult": 2}

    def test_client_name_parts_are_joined(self, detector: PackageDetector) -> None:
        row = {"client_name_first": " Ann ", "client_name_last": "Lee"}
        detector.apply("", row, SOURCE_DEFAULT)
        assert row == {"client_name": "Ann Lee"}


class TestSourceSpecificInference:
    def test_master_skips_keyword_inference(self, detector: PackageDetector) -> None:
        row = {"yacht": "LOTUS ROYALE - VIP", "pkg_pax_complex": "3 + 2", "pkg_adult": 1}
        detector.apply("LOTUS ROYALE - VIP", row, SOURCE_MASTER)
        assert row == {"yacht": "LOTUS ROYALE - VIP", "pkg_adult": 4, "pkg_child": 2}

    def test_ruzinn_vip_soft(self, detector: PackageDetector) -> None:
        row = {"package_text": "Lotus - VIP Soft Drinks", "pkg_pax_complex": "2 + 1", "pkg_adult": 5}
        detector.apply("", row, SOURCE_RUZINN)
        assert row == {"pkg_vip_adult": 3}

    def test_ruzinn_alcoholic(self, detector: PackageDetector) -> None:
        row = {"package_text": "FOOD & UNLIMITED ALCOHOLIC", "pkg_adult": 2}
        detector.apply("", row, SOURCE_RUZINN)
        assert row == {"pkg_adult_alc": 2}

    def test_ruzinn_child_defaults_to_one(self, detector: PackageDetector) -> None:
        row = {"package_text": "Child Ticket"}
        detector.apply("", row, SOURCE_RUZINN)
        assert row == {"pkg_child": 1}

    def test_ruzinn_fallback_counter(self, detector: PackageDetector) -> None:
        row = {"package_text": "Sunset Cruise", "pkg_adult": 4}
        detector.apply("", row, SOURCE_RUZINN)
        assert row == {"pkg_adult": 4}
