# src/polyquery/rest/financials.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Financial statement endpoints (``/stocks/financials/v1``).

All four endpoints accept the same filters: ``cik``, ``tickers``,
``period_end``, ``filing_date``, ``fiscal_year``, ``fiscal_quarter`` and
``timeframe``, each with comparison variants such as ``filing_date.gte`` or
``tickers.any_of``, plus ``limit`` and ``sort``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from polyquery.query.builder import Query
from polyquery.rest.catalog import BALANCE_SHEETS, CASH_FLOW_STATEMENTS, INCOME_STATEMENTS, RATIOS

if TYPE_CHECKING:
    from polyquery.client import Polygon

__all__ = ["balance_sheets", "cash_flow_statements", "income_statements", "ratios"]


def balance_sheets(client: Polygon) -> Query[str]:
    return BALANCE_SHEETS.query(client)


def cash_flow_statements(client: Polygon) -> Query[str]:
    return CASH_FLOW_STATEMENTS.query(client)


def income_statements(client: Polygon) -> Query[str]:
    return INCOME_STATEMENTS.query(client)


def ratios(client: Polygon) -> Query[str]:
    return RATIOS.query(client)
