"""
E2E tests for the statement-to-report flow.

No network: text goes through /v1/statements/parse, the extracted payments
are fed to /v1/calculations and the stored run is rendered as report data.

Scenario: R$ 200,00 at 2% a.m. paid off by two HISCRE debits
(R$ 150,00 and R$ 152,35), so the second debit crosses into credit.
"""

from decimal import Decimal
from fastapi.testclient import TestClient


def _calculate(client: TestClient, text: str, double_restitution: bool) -> dict:
    extracted = client.post("/v1/statements/parse", json={"text": text})
    assert extracted.status_code == 200

    response = client.post(
        "/v1/calculations",
        json={
            "client": {"name": "José Pereira", "cpf": "987.654.321-00"},
            "contract": {
                "principal": "200,00",
                "monthly_rate": "2",
                "double_restitution": double_restitution,
                "fees_percent": "10",
            },
            "payments": extracted.json()["payments"],
        },
    )
    assert response.status_code == 200
    return response.json()


def test_overpaid_contract_simple_restitution(client: TestClient, hiscre_text: str):
    """
    Jul/2020: 200.00 + 4.00 interest - 150.00 = 54.00
    Aug/2020: 54.00 + 1.08 interest - 152.35 = -97.27 (credit)
    """
    data = _calculate(client, hiscre_text, double_restitution=True)

    balances = [Decimal(row["current_balance"]) for row in data["evolution"]]
    assert balances == [Decimal("54.00"), Decimal("-97.27")]
    # Both months are before the cutoff, so no doubling even with the flag on
    assert all(Decimal(row["restitution_amount"]) == 0 for row in data["evolution"])

    summary = data["summary"]
    assert Decimal(summary["total_paid"]) == Decimal("302.35")
    assert Decimal(summary["current_debt_balance"]) == 0
    assert Decimal(summary["simple_restitution"]) == Decimal("97.27")
    assert Decimal(summary["total_restitution"]) == Decimal("97.27")

    report = client.get(f"/v1/calculations/{data['calculation_id']}/report").json()
    assert report["parameters"]["double_restitution_label"].startswith("Sim")
    # Only the part that cleared the debt is shown as amortized
    assert [Decimal(r["amortization"]) for r in report["evolution"]] == [Decimal("146.00"), Decimal("54.00")]
    assert Decimal(report["summary"]["fees"]) == Decimal("9.73")
    assert Decimal(report["summary"]["total_award"]) == Decimal("107.00")


def test_overpaid_contract_double_restitution(client: TestClient, hiscre_text: str):
    """Same statement one year later, after the cutoff: the overshoot is doubled"""
    data = _calculate(client, hiscre_text.replace("/2020", "/2021"), double_restitution=True)

    assert [row["reference_date"] for row in data["evolution"]] == ["2021-07-01", "2021-08-01"]
    assert Decimal(data["evolution"][1]["restitution_amount"]) == Decimal("194.54")

    summary = data["summary"]
    assert Decimal(summary["simple_restitution"]) == Decimal("97.27")
    assert Decimal(summary["doubling_surcharge"]) == Decimal("194.54")
    assert Decimal(summary["total_restitution"]) == Decimal("291.81")

    report = client.get(f"/v1/calculations/{data['calculation_id']}/report").json()
    assert Decimal(report["totals"]["restitution_amount"]) == Decimal("194.54")
    assert Decimal(report["summary"]["total_restitution"]) == Decimal("291.81")
