"""Shared fixtures: a default engine and a factory for raw import lines.

Raw lines use the header spelling of the usual ERP sales register export
(``CUST_CDE``, ``IO_DATE``, ``Invno`` ...), which the default column mappings
resolve by exact match.
"""

import pytest

from gstimport.transform.engine import TransformationEngine

HEADERS = [
    "CUST_CDE", "Cust_Name", "IO_DATE", "Invno", "PROD_CDE", "Prod_name_ko",
    "Tariff_code", "IO_QTY", "Rate_pre_unit", "ASSESSABLE_VALUE",
    "CGST_AMT", "SGST_AMT", "IGST_AMT", "Amortisation_cost", "Total_Inv_Value",
]


@pytest.fixture
def engine() -> TransformationEngine:
    return TransformationEngine()


@pytest.fixture
def headers() -> list[str]:
    return list(HEADERS)


@pytest.fixture
def raw_line():
    def make(invno="INV1", ass=0, cgst=0, sgst=0, igst=0, *, date="15/01/2024",
             cust="C001", name="Acme Traders", qty=1, price=None, amot=0, part="P-1"):
        return {
            "CUST_CDE": cust,
            "Cust_Name": name,
            "IO_DATE": date,
            "Invno": invno,
            "PROD_CDE": part,
            "Prod_name_ko": f"Part {part}",
            "Tariff_code": "8708",
            "IO_QTY": str(qty),
            "Rate_pre_unit": str(price if price is not None else ass),
            "ASSESSABLE_VALUE": str(ass),
            "CGST_AMT": str(cgst),
            "SGST_AMT": str(sgst),
            "IGST_AMT": str(igst),
            "Amortisation_cost": str(amot),
            "Total_Inv_Value": "",
        }
    return make
