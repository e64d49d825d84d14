# src/polyquery/schemas/responses/financials.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Financial statement records.

Only the commonly used line items are declared. Statements keep every other
upstream field as extra attributes (``model_extra``) so nothing is lost when
polygon.io adds new line items.
"""

from __future__ import annotations

from pydantic import ConfigDict

from .base import PolygonRecord, list_decoder


class _Statement(PolygonRecord):
    model_config = ConfigDict(extra="allow")

    cik: str | None = None
    tickers: list[str] | None = None
    filing_date: str | None = None
    period_end: str | None = None
    fiscal_year: float | None = None
    fiscal_quarter: float | None = None
    timeframe: str | None = None


class BalanceSheet(_Statement):
    total_assets: float | None = None
    total_current_assets: float | None = None
    cash_and_equivalents: float | None = None
    receivables: float | None = None
    inventories: float | None = None
    goodwill: float | None = None
    total_liabilities: float | None = None
    total_current_liabilities: float | None = None
    long_term_debt_and_capital_lease_obligations: float | None = None
    total_equity: float | None = None
    retained_earnings_deficit: float | None = None
    total_liabilities_and_equity: float | None = None


class CashFlowStatement(_Statement):
    net_income: float | None = None
    net_cash_from_operating_activities: float | None = None
    net_cash_from_investing_activities: float | None = None
    net_cash_from_financing_activities: float | None = None
    purchase_of_property_plant_and_equipment: float | None = None
    depreciation_depletion_and_amortization: float | None = None
    dividends: float | None = None
    change_in_cash_and_equivalents: float | None = None


class IncomeStatement(_Statement):
    revenue: float | None = None
    cost_of_revenue: float | None = None
    gross_profit: float | None = None
    operating_income: float | None = None
    total_operating_expenses: float | None = None
    research_development: float | None = None
    selling_general_administrative: float | None = None
    income_before_income_taxes: float | None = None
    income_taxes: float | None = None
    consolidated_net_income_loss: float | None = None
    basic_earnings_per_share: float | None = None
    diluted_earnings_per_share: float | None = None
    ebitda: float | None = None


class FinancialRatio(PolygonRecord):
    """Valuation and liquidity ratios for a ticker on a date."""

    model_config = ConfigDict(extra="allow")

    ticker: str | None = None
    cik: str | None = None
    date: str | None = None
    price: float | None = None
    market_cap: float | None = None
    enterprise_value: float | None = None
    earnings_per_share: float | None = None
    price_to_earnings: float | None = None
    price_to_book: float | None = None
    price_to_sales: float | None = None
    ev_to_ebitda: float | None = None
    debt_to_equity: float | None = None
    dividend_yield: float | None = None
    current: float | None = None
    quick: float | None = None
    return_on_assets: float | None = None
    return_on_equity: float | None = None
    free_cash_flow: float | None = None


decode_balance_sheets = list_decoder(BalanceSheet)
decode_cash_flow_statements = list_decoder(CashFlowStatement)
decode_income_statements = list_decoder(IncomeStatement)
decode_ratios = list_decoder(FinancialRatio)
