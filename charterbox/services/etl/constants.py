"""Constants for the booking import pipeline."""

# Maximum rows per import (safety limit, overridden by etl.max_rows)
MAX_ROWS = 5000

# Import source tags
SOURCE_DEFAULT = "DEFAULT"
SOURCE_MASTER = "MASTER"
SOURCE_RUZINN = "RUZINN"
SOURCE_RAYNA = "RAYNA"
SOURCE_GYG = "GYG"

IMPORT_SOURCES = (SOURCE_DEFAULT, SOURCE_MASTER, SOURCE_RUZINN, SOURCE_RAYNA, SOURCE_GYG)

# Vocabularies of the canonical lead record
LEAD_STATUSES = (
    "Unconfirmed",
    "Confirmed",
    "Balance",
    "Checked In",
    "Completed",
    "Canceled",
    "Closed (Won)",
    "Closed (Lost)",
)
LEAD_TYPES = ("Shared Cruise", "Private Cruise", "Superyacht", "Hour Charter")
MODES_OF_PAYMENT = ("CARD", "CASH", "BANK TRANSFER", "CHEQUE", "CREDIT AGENT")
PAYMENT_CONFIRMATION_STATUSES = ("CONFIRMED", "UNCONFIRMED")

# Package counter column -> package name
PACKAGE_COUNTERS: dict[str, str] = {
    "pkg_adult": "ADULT",
    "pkg_child": "CHILD",
    "pkg_adult_alc": "ADULT ALC",
    "pkg_child_top_deck": "CHILD TOP DECK",
    "pkg_adult_top_deck": "ADULT TOP DECK",
    "pkg_adult_top_deck_alc": "ADULT TOP DECK ALC",
    "pkg_vip_child": "VIP CHILD",
    "pkg_vip_adult": "VIP ADULT",
    "pkg_vip_alc": "VIP ALC",
    "pkg_royal_child": "ROYAL CHILD",
    "pkg_royal_adult": "ROYAL ADULT",
    "pkg_royal_alc": "ROYAL ALC",
    "pkg_basic": "BASIC",
    "pkg_standard": "STANDARD",
    "pkg_premium": "PREMIUM",
    "pkg_hour_charter": "HOUR CHARTER",
}
CAKE_PACKAGE_NAME = "OTHERS (CAKE)"

# Free-text passenger count column ("2 + 1"), parsed by the package detector
PAX_FIELD = "pkg_pax_complex"
# Product description column used by RUZINN and marketplace exports
PACKAGE_TEXT_FIELD = "package_text"
PACKAGE_JSON_FIELD = "package_quantities_json"
CAKE_AMOUNT_FIELD = "addon_cake_amount"

# Field groups used by the value converter
MONEY_FIELDS = frozenset({
    "total_amount",
    "commission_percentage",
    "commission_amount",
    "net_amount",
    "paid_amount",
    "balance_amount",
    "collected_at_check_in",
    CAKE_AMOUNT_FIELD,
})
COUNT_FIELDS = frozenset({"free_guest_count"})
EVENT_DATE_FIELDS = frozenset({"month", "check_in_time"})
TIMESTAMP_FIELDS = frozenset({"created_at", "updated_at"})
USER_FIELDS = frozenset({"owner_user_id", "last_modified_by_user_id"})
EMPTY_STRING_FIELDS = frozenset({"notes", "booking_ref_no"})

# Header table: normalized header -> canonical field name
HEADER_MAPPING: dict[str, str] = {
    "id": "id",
    "status": "status",
    # event date
    "date": "month",
    "eventdate": "month",
    "event_date": "month",
    "lead/event_date": "month",
    "travel_date": "month",
    "traveldate": "month",
    "travel_date_": "month",
    # yacht
    "yacht": "yacht",
    "yachtname": "yacht",
    "yacht_name": "yacht",
    "service_nam": "yacht",
    "service_name": "yacht",
    "option": "yacht",
    "event": "yacht",
    # agent
    "agent": "agent",
    "agent_name": "agent",
    "agency_name": "agent",
    "company_na": "agent",
    "company_name": "agent",
    "companyname": "agent",
    # client
    "client": "client_name",
    "client_name": "client_name",
    "customer": "client_name",
    "customer_na": "client_name",
    "customer_name": "client_name",
    "pax_name": "client_name",
    "paxname": "client_name",
    "guest_name": "client_name",
    "traveler's_fi": "client_name_first",
    "traveler's_first_name": "client_name_first",
    "traveler's_la": "client_name_last",
    "traveler's_last_name": "client_name_last",
    "email": "customer_email",
    "customer_email": "customer_email",
    "contactno": "customer_phone",
    "contact_no": "customer_phone",
    "phone": "customer_phone",
    # payment
    "payment_status": "payment_confirmation_status",
    "pay_status": "payment_confirmation_status",
    "payment_confirmation_status": "payment_confirmation_status",
    "payment_mode": "mode_of_payment",
    "mode_of_payment": "mode_of_payment",
    "transaction": "mode_of_payment",
    # type
    "type": "type",
    "lead_type": "type",
    # identifiers
    "transaction_id": "transaction_id",
    "ticketnumber": "transaction_id",
    "ticket_number": "transaction_id",
    "trn_number": "transaction_id",
    "trn_no": "transaction_id",
    "confirmation_number": "transaction_id",
    "booking_ref_no": "booking_ref_no",
    "booking_refno": "booking_ref_no",
    "booking_ref": "booking_ref_no",
    "booking_reff": "booking_ref_no",
    "booking_ref_id": "booking_ref_no",
    "ref_no.": "booking_ref_no",
    "ref_no": "booking_ref_no",
    "inv": "booking_ref_no",
    # guests
    "free": "free_guest_count",
    "free_guests": "free_guest_count",
    "no._of_pax": PAX_FIELD,
    "no.of_pax": PAX_FIELD,
    "pax": PAX_FIELD,
    "pax_count": PAX_FIELD,
    "quantity": PAX_FIELD,
    "qty": PAX_FIELD,
    # package counters
    "ad": "pkg_adult",
    "adult": "pkg_adult",
    "adult_qty": "pkg_adult",
    "ch": "pkg_child",
    "child": "pkg_child",
    "child_qty": "pkg_child",
    "ad_alc": "pkg_adult_alc",
    "adult_alc": "pkg_adult_alc",
    "alc": "pkg_adult_alc",
    "alcoholic": "pkg_adult_alc",
    "chd_top": "pkg_child_top_deck",
    "child_top_deck": "pkg_child_top_deck",
    "adt_top": "pkg_adult_top_deck",
    "adult_top_deck": "pkg_adult_top_deck",
    "adt_top_alc": "pkg_adult_top_deck_alc",
    "adult_top_deck_alc": "pkg_adult_top_deck_alc",
    "top_alc": "pkg_adult_top_deck_alc",
    "vip_ch": "pkg_vip_child",
    "vip_child": "pkg_vip_child",
    "vip_ad": "pkg_vip_adult",
    "vip_adult": "pkg_vip_adult",
    "vip": "pkg_vip_adult",
    "vip_alc_pkg": "pkg_vip_alc",
    "vip_adult_alc": "pkg_vip_alc",
    "adult_vip_alc": "pkg_vip_alc",
    "ryl_ch": "pkg_royal_child",
    "royal_child": "pkg_royal_child",
    "ryl_ad": "pkg_royal_adult",
    "royal_adult": "pkg_royal_adult",
    "ryl_alc": "pkg_royal_alc",
    "royal_alc": "pkg_royal_alc",
    "basic": "pkg_basic",
    "std": "pkg_standard",
    "standard": "pkg_standard",
    "prem": "pkg_premium",
    "premium": "pkg_premium",
    "hrchtr": "pkg_hour_charter",
    "hour_charter": "pkg_hour_charter",
    # ticketing system package columns
    "food_&_soft_drinks": "pkg_adult",
    "food_and_soft_drinks": "pkg_adult",
    "food_&_soft_drinks_(adult)": "pkg_adult",
    "food_&_soft_drinks_(child)": "pkg_child",
    "food_and_soft_drinks_(child)": "pkg_child",
    "food_&_drinks": "pkg_adult",
    "food_and_drinks": "pkg_adult",
    "food_&_drinks_(child)": "pkg_child",
    "food_and_drinks_(child)": "pkg_child",
    "soft_drinks": "pkg_adult",
    "soft_drink": "pkg_adult",
    "soft_drinks_package": "pkg_adult",
    "soft_drinks_package_pp": "pkg_adult",
    "unlimited_soft_drinks": "pkg_adult",
    "drinks": "pkg_adult",
    "food_and_unlimited_alcoholic_drinks": "pkg_adult_alc",
    "food_&_unlimited_alcoholic_drinks": "pkg_adult_alc",
    "unlimited_alcoholic_drinks": "pkg_adult_alc",
    "unlimited_alcoholic": "pkg_adult_alc",
    "vip_soft": "pkg_vip_adult",
    "vip_soft_(adult)": "pkg_vip_adult",
    "vip_soft_(child)": "pkg_vip_child",
    "vip_premium_alcoholic_drinks": "pkg_vip_alc",
    "vip_unlimited_alcoholic_drinks": "pkg_vip_alc",
    "vip_alcoholic": "pkg_vip_alc",
    "vip_alc": "pkg_vip_alc",
    "premium_alcoholic": "pkg_vip_alc",
    # ticketing exports with numbered category columns
    "1": "pkg_adult",
    "2": "pkg_child",
    "3": "free_guest_count",
    # canonical package columns
    "pkg_adult": "pkg_adult",
    "pkg_child": "pkg_child",
    "pkg_adult_alc": "pkg_adult_alc",
    "pkg_child_top_deck": "pkg_child_top_deck",
    "pkg_adult_top_deck": "pkg_adult_top_deck",
    "pkg_adult_top_deck_alc": "pkg_adult_top_deck_alc",
    "pkg_vip_child": "pkg_vip_child",
    "pkg_vip_adult": "pkg_vip_adult",
    "pkg_vip_alc": "pkg_vip_alc",
    "pkg_royal_child": "pkg_royal_child",
    "pkg_royal_adult": "pkg_royal_adult",
    "pkg_royal_alc": "pkg_royal_alc",
    "package_details_(json)": PACKAGE_JSON_FIELD,
    "package_details_json": PACKAGE_JSON_FIELD,
    "package_quantities_json": PACKAGE_JSON_FIELD,
    # product text
    "product_name": PACKAGE_TEXT_FIELD,
    "product": PACKAGE_TEXT_FIELD,
    "item": PACKAGE_TEXT_FIELD,
    "package": PACKAGE_TEXT_FIELD,
    # money
    "addon_pack": "per_ticket_rate",
    "addon": "per_ticket_rate",
    "per_ticket_rate": "per_ticket_rate",
    "total_amt": "total_amount",
    "total_amount": "total_amount",
    "total_amount_aed": "total_amount",
    "discount_%": "commission_percentage",
    "discount_rate": "commission_percentage",
    "discount": "commission_percentage",
    "commission": "commission_amount",
    "commission_amount": "commission_amount",
    "net_amt": "net_amount",
    "net_amount": "net_amount",
    "paid": "paid_amount",
    "paid_amount": "paid_amount",
    "sales_amount(aed)": "paid_amount",
    "salesamount(aed)": "paid_amount",
    "sales_amount": "paid_amount",
    "grand_total": "paid_amount",
    "balance": "balance_amount",
    "balance_amount": "balance_amount",
    "collected": "collected_at_check_in",
    "collected_at_check_in": "collected_at_check_in",
    "others_amt_(cake)": CAKE_AMOUNT_FIELD,
    "cake": CAKE_AMOUNT_FIELD,
    "cake_amount": CAKE_AMOUNT_FIELD,
    # notes
    "note": "notes",
    "notes": "notes",
    "remarks": "notes",
    "booking_remarks": "notes",
    # audit
    "created_by": "owner_user_id",
    "modified_by": "last_modified_by_user_id",
    "date_of_creation": "created_at",
    "creation_date": "created_at",
    "sales_date": "created_at",
    "salesdate": "created_at",
    "booking_date": "created_at",
    "purchase_dat": "created_at",
    "date_of_modification": "updated_at",
    "modification_date": "updated_at",
    "scanned_on": "check_in_time",
    "scannedon": "check_in_time",
}

# Yacht label prefixes used by ticketing systems -> yacht display name
YACHT_ALIAS_PREFIXES: tuple[tuple[str, str], ...] = (
    ("lotus megayacht dinner cruise", "Lotus Royale"),
    ("al mansour dinner", "AL MANSOUR"),
    ("ocean empress dinner", "OCEAN EMPRESS"),
    ("oe top deck", "OCEAN EMPRESS"),
    ("calypso sunset", "CALYPSO SUNSET"),
)

# Keyword found in a product name -> yacht id or display name
YACHT_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("lotus", "DO-yacht-lotus"),
    ("ocean empress", "DO-yacht-ocean"),
    ("mansour", "AL MANSOUR"),
    ("calypso", "CALYPSO SUNSET"),
    ("superyacht", "DO-yacht-super"),
    ("rose royale", "ROSE ROYALE"),
)

# Keyword found in an e-commerce product name -> package name (most specific first)
ECOMMERCE_PACKAGE_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("vip adult alc", "VIP ALC"),
    ("vip adult", "VIP ADULT"),
    ("vip child", "VIP CHILD"),
    ("royal adult", "ROYAL ADULT"),
    ("royal child", "ROYAL CHILD"),
    ("adult alc", "ADULT ALC"),
    ("child", "CHILD"),
    ("adult", "ADULT"),
)
ECOMMERCE_FALLBACK_PACKAGE = "ADULT"
