"""Static sample report used when no generated report is supplied."""

from __future__ import annotations

from typing import Any, Dict

from report_editor.models.schemas import ReportData


SAMPLE_NOTES = """**Note 1: Summary of Significant Accounting Policies**
The financial statements are general purpose financial statements prepared in accordance with the Australian Accounting Standards.

**(a) Basis of Preparation**
The financial statements have been prepared on an accruals basis and are based on historical costs.

**Note 2: Revenue**
| Revenue stream | 2025 | 2024 |
|:---|---:|---:|
| Sales revenue | 1,250,000 | 1,100,000 |
| Interest income | 15,000 | 12,000 |
| **Total revenue** | **1,265,000** | **1,112,000** |

**Note 3: Cash and Cash Equivalents**
| Item | 2025 | 2024 |
|---|---|---|
| Cash at bank | 240,000 | 180,000 |
| Term deposits | 60,000 | 50,000 |

**Events After the Reporting Period**
No matters or circumstances have arisen since the end of the financial year that significantly affected the company."""


sample_report_payload: Dict[str, Any] = {
    "companyName": "Southern Cross Trading Pty Ltd",
    "abn": "51 824 753 556",
    "summary": "Revenue grew 13.8% on the prior year while net profit improved on stable costs.",
    "kpis": [
        {"name": "Revenue", "value2025": "$1,265,000", "value2024": "$1,112,000", "changePercentage": 13.8},
        {"name": "Net Profit", "value2025": "$215,000", "value2024": "$172,000", "changePercentage": 25.0},
    ],
    "directorsDeclaration": {
        "directors": [
            {"name": "Jordan Lee", "title": "Director"},
            {"name": "Sam Patel", "title": "Director"},
        ],
        "date": "15 August 2025",
    },
    "incomeStatement": {
        "revenue": [
            {"item": "Sales revenue", "amount2025": 1250000, "amount2024": 1100000, "noteRef": 2},
            {"item": "Interest income", "amount2025": 15000, "amount2024": 12000, "noteRef": 2},
        ],
        "expenses": [
            {"item": "Cost of sales", "amount2025": -700000, "amount2024": -640000},
            {"item": "Employee benefits expense", "amount2025": -250000, "amount2024": -230000},
            {"item": "Depreciation", "amount2025": -40000, "amount2024": -38000},
            {"item": "Other expenses", "amount2025": -60000, "amount2024": -32000},
        ],
        "grossProfit": {"amount2025": 550000, "amount2024": 460000},
        "operatingIncome": {"amount2025": 215000, "amount2024": 172000},
        "netProfit": {"amount2025": 215000, "amount2024": 172000},
    },
    "balanceSheet": {
        "currentAssets": [
            {"item": "Cash and cash equivalents", "amount2025": 300000, "amount2024": 230000, "noteRef": 3},
            {"item": "Trade and other receivables", "amount2025": 145000, "amount2024": 130000},
            {"item": "Inventories", "amount2025": 90000, "amount2024": 85000},
        ],
        "nonCurrentAssets": [
            {"item": "Property, plant and equipment", "amount2025": 410000, "amount2024": 395000},
        ],
        "currentLiabilities": [
            {"item": "Trade and other payables", "amount2025": 120000, "amount2024": 118000},
            {"item": "Current tax liabilities", "amount2025": 35000, "amount2024": 27000},
        ],
        "nonCurrentLiabilities": [
            {"item": "Borrowings", "amount2025": 150000, "amount2024": 190000, "noteRef": 4},
        ],
        "equity": [
            {"item": "Issued capital", "amount2025": 100000, "amount2024": 100000},
            {"item": "Retained earnings", "amount2025": 540000, "amount2024": 405000},
        ],
        "totalAssets": {"amount2025": 945000, "amount2024": 840000},
        "totalLiabilities": {"amount2025": 305000, "amount2024": 335000},
        "totalEquity": {"amount2025": 640000, "amount2024": 505000},
    },
    "cashFlowStatement": {
        "operatingActivities": [
            {"item": "Receipts from customers", "amount2025": 1235000, "amount2024": 1080000},
            {"item": "Payments to suppliers and employees", "amount2025": -1010000, "amount2024": -930000},
        ],
        "investingActivities": [
            {"item": "Purchase of plant and equipment", "amount2025": -55000, "amount2024": -42000},
        ],
        "financingActivities": [
            {"item": "Repayment of borrowings", "amount2025": -40000, "amount2024": -35000},
            {"item": "Dividends paid", "amount2025": -60000, "amount2024": -50000},
        ],
        "netChangeInCash": {"amount2025": 70000, "amount2024": 23000},
    },
    "notesToFinancialStatements": SAMPLE_NOTES,
}


def get_sample_report() -> ReportData:
    """Return a fresh copy of the sample report."""
    return ReportData.model_validate(sample_report_payload)
