# backend/gstimport/transform/synonyms.py
from datetime import date

# Canonical output columns, in export order
OUTPUT_COLUMNS = [
    "cust_code", "cust_name", "inv_date", "RE", "invno",
    "part_code", "part_name", "tariff",
    "qty", "bas_price", "ass_val",
    "c_gst", "s_gst", "igst", "amot",
    "inv_val", "igst_yes_no", "percentage",
]

# Optional inputs a mapping may supply for the IGST flag / percentage.
# They are read during derivation but never exported.
RATE_COLUMNS = ["igst_rate", "cgst_rate", "sgst_rate"]

NUMERIC_COLUMNS = {
    "qty", "bas_price", "ass_val", "c_gst", "s_gst", "igst", "amot",
    "inv_val", "percentage",
    *RATE_COLUMNS,
}

# Summed per invoice group; inv_val is recomputed instead
SUM_COLUMNS = ["qty", "bas_price", "ass_val", "c_gst", "s_gst", "igst", "amot"]

MONTH_CODES = {
    1: "A", 2: "B", 3: "C", 4: "D", 5: "E", 6: "F",
    7: "G", 8: "H", 9: "I", 10: "J", 11: "K", 12: "L",
}

YEAR_CODE_MISSING = "year_code_missing"
MONTH_CODE_MISSING = "month_code_missing"

DEFAULT_YEAR_MAP = {
    2025: "R",
    2024: "Q",
    2023: "P",
    2022: "O",
    2021: "N",
}

# target column -> (accepted source headers in priority order, parser, required)
DEFAULT_COLUMN_MAPPINGS = [
    ("cust_code", ["cust_cde", "customer_code", "cust_code", "custcode"], None, True),
    ("cust_name", ["cust_name", "customer_name", "client_name", "custname"], None, False),
    ("inv_date", ["io_date", "invoice_date", "inv_date", "date", "invoicedate"], "date", True),
    ("invno", ["invno", "invoice_number", "invoice_no", "invoiceno"], None, True),
    ("part_code", ["prod_cde", "prod_cust_no", "part_code", "product_code", "prodcode"], None, False),
    ("part_name", ["prod_name_ko", "part_name", "product_name", "prodname"], None, False),
    ("tariff", ["tariff_code", "tariff", "hs_code", "tariffcode"], None, False),
    ("qty", ["io_qty", "qty", "quantity", "ioqty"], "number", False),
    ("bas_price", ["rate_pre_unit", "bas_price", "base_price", "unit_price", "ratepreunit"], "number", False),
    ("ass_val", ["assessable_value", "ass_val", "assessable", "assessablevalue"], "number", False),
    ("c_gst", ["cgst_amt", "c_gst", "cgst", "cgstamt"], "number", False),
    ("s_gst", ["sgst_amt", "s_gst", "sgst", "sgstamt"], "number", False),
    ("igst", ["igst_amt", "igst", "igstamt"], "number", False),
    ("amot", ["amortisation_cost", "amot", "amortization", "amortisationcost", "Total_Amorization"], "number", False),
    ("inv_val", ["total_inv_value", "invoice_total", "grand_total", "inv_val", "totalinvvalue",
                 "grandtotal", "Total_Inv_Value"], "number", False),
]

# Advisory term -> variants table used for header suggestions
INDIAN_EXPORT_SYNONYMS = {
    "customer": ["cust", "client", "buyer"],
    "invoice": ["inv", "bill"],
    "product": ["prod", "item", "part"],
    "quantity": ["qty", "qnty"],
    "amount": ["amt", "value", "val"],
}

# Columns the engine refuses to run without
REQUIRED_TARGETS = ["cust_code", "inv_date", "invno"]


def basic_year_map() -> dict[int, str]:
    return {date.today().year: "A"}
