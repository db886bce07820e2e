"""Sample dispensing rows and CSV writer shared by the tests."""
from __future__ import annotations

import csv
from pathlib import Path

from nhs_dispensing.data.schemas import SOURCE_COLUMNS

HEADER = [c.value.upper() for c in SOURCE_COLUMNS]

ICB_A = ("QWE", "NHS NORTH EAST ICB")
ICB_B = ("QHG", "NHS SOUTH WEST ICB")


def make_row(**overrides) -> dict[str, str]:
    row = {
        "year_month": "2025-09",
        "icb_code": ICB_A[0],
        "icb_name": ICB_A[1],
        "hwb_code": "E08000021",
        "hwb_name": "NEWCASTLE UPON TYNE",
        "lpc_code": "L01",
        "lpc_name": "NORTH OF TYNE LPC",
        "pharmacy_account_type": "Community Pharmacy",
        "contractor_code": "FA001",
        "contractor_name": "BOOTS",
        "address_1": "1 HIGH STREET",
        "address_2": "",
        "address_3": "NEWCASTLE",
        "address_4": "",
        "postcode": "NE1 1AA",
        "content_group": "Drugs",
        "content": "Paracetamol",
        "value": "1",
    }
    row.update(overrides)
    return row


def sample_rows() -> list[dict[str, str]]:
    """Four contractors across two ICBs; 1,500 products in total."""
    return [
        make_row(value="1,200"),
        make_row(contractor_code="FA002", contractor_name="PHARMA TWO", postcode="NE1 2BB",
                 content="Ibuprofen", value="50"),
        make_row(icb_code=ICB_B[0], icb_name=ICB_B[1], hwb_code="E06000026", hwb_name="PLYMOUTH",
                 lpc_code="L02", lpc_name="DEVON LPC", pharmacy_account_type="Appliance",
                 contractor_code="FA003", contractor_name="APPLIANCE CO", postcode="PL1 1CC",
                 content_group="Appliances", content="Stoma bag", value="0"),
        make_row(icb_code=ICB_B[0], icb_name=ICB_B[1], hwb_code="", hwb_name="",
                 lpc_code="", lpc_name="", contractor_code="FA004", contractor_name="PHARMA FOUR",
                 postcode="PL2 2DD", value="250"),
    ]


def write_csv(
    path: Path,
    rows: list[dict[str, str]],
    header: list[str] | None = None,
    delimiter: str = ",",
) -> Path:
    header = header or HEADER
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, delimiter=delimiter)
        writer.writerow(header)
        for row in rows:
            writer.writerow([row.get(c.value, "") for c in SOURCE_COLUMNS])
    return path
