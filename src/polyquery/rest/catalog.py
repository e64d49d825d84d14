# src/polyquery/rest/catalog.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Endpoint catalog.

Each polygon.io operation is described once by an :class:`EndpointSpec`:

* the URL template and which arguments fill it,
* the argument table (name, JSON type, required flag, description) used both
  for the tool-facing JSON Schema and for validating dynamic argument bags,
* the query-string allow-list handed to :class:`Query`,
* the default typed decoder and the output column table.

The catalog is immutable and built at import time. Module and endpoint
names are part of the tool contract (``"Aggs"``, ``"aggregates"``...).
"""

from __future__ import annotations

import keyword
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from functools import cached_property
from typing import TYPE_CHECKING, Any, Final, Literal
from urllib.parse import quote

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    create_model,
)

from polyquery.domain.exceptions.polygon import InvalidArguments, UnknownEndpoint, UnknownModule
from polyquery.domain.value_objects import SortOrder, Timespan
from polyquery.query.builder import Query
from polyquery.query.encode import OMIT, encode, render
from polyquery.schemas.responses import aggs as agg_records
from polyquery.schemas.responses import financials as fin_records
from polyquery.schemas.responses import tickers as ticker_records

if TYPE_CHECKING:
    from polyquery.client import Polygon

__all__ = [
    "CATALOG",
    "MODULES",
    "EndpointSpec",
    "OutputColumn",
    "ParamSpec",
    "get_endpoint",
    "get_module",
]

JsonType = Literal["string", "integer", "number", "boolean"]

_U32_MAX: Final[int] = 2**32 - 1

NO_PARAMS_SCHEMA: Final[dict[str, Any]] = {
    "type": "object",
    "properties": {},
    "description": "No parameters required",
}

_PY_TYPES: Final[dict[str, Any]] = {
    "string": StrictStr,
    "integer": StrictInt,
    "number": StrictFloat | StrictInt,
    "boolean": StrictBool,
}


@dataclass(frozen=True, slots=True)
class ParamSpec:
    """One endpoint argument.

    Attributes:
        name: Argument name in the tool contract.
        type: JSON Schema type.
        description: Human-readable description.
        required: Whether the argument must be supplied.
        location: ``"path"`` fills the URL template, ``"query"`` is sent as
            a query parameter.
        wire_name: Upstream query parameter name when it differs from ``name``.
        enum: Allowed string values, if closed.
        timespan: Parse the value leniently as a :class:`Timespan`.
    """

    name: str
    type: JsonType
    description: str
    required: bool = False
    location: Literal["path", "query"] = "query"
    wire_name: str | None = None
    enum: tuple[str, ...] | None = None
    timespan: bool = False

    @property
    def field_name(self) -> str:
        return f"{self.name}_" if keyword.iskeyword(self.name) else self.name

    @property
    def query_name(self) -> str:
        return self.wire_name or self.name

    def json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.enum:
            schema["enum"] = list(self.enum)
        if self.type == "integer":
            schema["minimum"] = 0
        return schema

    def annotation(self) -> Any:
        if self.timespan:
            return Timespan
        if self.type == "integer":
            return StrictInt
        return _PY_TYPES[self.type]


@dataclass(frozen=True, slots=True)
class OutputColumn:
    """Column of the tabular output: upstream key, readable alias, dtype."""

    name: str
    alias: str
    dtype: str


@dataclass(frozen=True)
class EndpointSpec:
    """Static description of one polygon.io operation."""

    module: str
    name: str
    description: str
    path: str
    params: tuple[ParamSpec, ...] = ()
    allowed: tuple[str, ...] = ()
    decoder: Callable[[Any], Any] | None = None
    columns: tuple[OutputColumn, ...] = ()
    label: str = field(init=False, default="")

    def __post_init__(self) -> None:
        object.__setattr__(self, "label", f"{self.module}.{self.name}")

    # -- schema ---------------------------------------------------------- #

    def json_schema(self) -> dict[str, Any]:
        """JSON Schema of the argument object accepted by ``call_endpoint``."""
        if not self.params:
            return {**NO_PARAMS_SCHEMA, "properties": {}}
        schema: dict[str, Any] = {
            "title": self.label,
            "description": self.description,
            "type": "object",
            "properties": {p.name: p.json_schema() for p in self.params},
        }
        required = [p.name for p in self.params if p.required]
        if required:
            schema["required"] = required
        return schema

    @cached_property
    def arguments_model(self) -> type[BaseModel]:
        """Pydantic model validating a dynamic argument bag."""
        fields: dict[str, Any] = {}
        for p in self.params:
            annotation = p.annotation()
            constraints: dict[str, Any] = {}
            if p.type == "integer":
                constraints.update(ge=0, le=_U32_MAX)
            if p.required:
                fields[p.field_name] = (
                    annotation,
                    Field(..., alias=p.name, description=p.description, **constraints),
                )
            else:
                fields[p.field_name] = (
                    annotation | None,
                    Field(None, alias=p.name, description=p.description, **constraints),
                )
        model_name = "".join(part.title() for part in (self.module, *self.name.split("_")))
        return create_model(
            f"{model_name}Arguments",
            __config__=ConfigDict(extra="ignore", populate_by_name=True),
            **fields,
        )

    def validate_arguments(self, arguments: Mapping[str, Any] | None) -> dict[str, Any]:
        """Validate ``arguments`` and return them keyed by argument name.

        Keys that name no parameter are dropped.

        Raises:
            InvalidArguments: On a missing required argument, a wrong type or
                a value outside the allowed set.
        """
        try:
            parsed = self.arguments_model.model_validate(dict(arguments or {}))
        except ValidationError as exc:
            errors = [
                {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                for err in exc.errors()
            ]
            raise InvalidArguments(
                f"Invalid arguments for {self.label}: {exc.error_count()} error(s)",
                errors=errors,
            ) from exc
        values = parsed.model_dump(by_alias=True)
        for p in self.params:
            if p.enum and values.get(p.name) is not None and values[p.name] not in p.enum:
                raise InvalidArguments(
                    f"Invalid arguments for {self.label}: '{p.name}' must be one of {list(p.enum)}",
                    errors=[{"loc": [p.name], "msg": "not an allowed value", "type": "enum"}],
                )
        return values

    # -- request building --------------------------------------------------- #

    def url(self, client: Polygon, path_values: Mapping[str, Any]) -> str:
        """Fill the URL template; each value is encoded as one path segment."""
        segments: dict[str, str] = {}
        for p in self.params:
            if p.location != "path":
                continue
            encoded = encode(path_values[p.name])
            if encoded is OMIT:
                raise InvalidArguments(f"Path argument '{p.name}' of {self.label} is required")
            segments[p.name] = quote(render(encoded), safe=":")
        return client.url(self.path.format(**segments))

    def query(self, client: Polygon, path_values: Mapping[str, Any] | None = None) -> Query[str]:
        """Return a raw :class:`Query` for this endpoint with its allow-list set."""
        q: Query[str] = Query(
            client,
            self.url(client, path_values or {}),
            endpoint=self.label,
            default_decoder=self.decoder,
        )
        for name in self.allowed:
            q.optional(name)
        return q

    def build(self, client: Polygon, arguments: Mapping[str, Any] | None) -> Query[str]:
        """Build a raw query from a dynamic argument bag."""
        values = self.validate_arguments(arguments)
        q = self.query(client, {p.name: values[p.name] for p in self.params if p.location == "path"})
        for p in self.params:
            if p.location != "query":
                continue
            value = values.get(p.name)
            if value is None:
                continue
            if p.name in ("sort", "order") and isinstance(value, str):
                value = SortOrder.parse(value)
            q.param(p.query_name, value)
        return q


# --------------------------------------------------------------------------- #
# Argument fragments
# --------------------------------------------------------------------------- #

_TICKER_PATH = ParamSpec(
    "ticker", "string", 'Ticker symbol (e.g., "AAPL" for Apple Inc.)', True, "path"
)
_ADJUSTED = ParamSpec("adjusted", "boolean", "Whether results are adjusted for splits (default: true)")
_SORT_DIRECTION = ("asc", "desc")

_AGG_COLUMNS: Final[tuple[OutputColumn, ...]] = (
    OutputColumn("o", "open", "float64"),
    OutputColumn("h", "high", "float64"),
    OutputColumn("l", "low", "float64"),
    OutputColumn("c", "close", "float64"),
    OutputColumn("v", "volume", "float64"),
    OutputColumn("vw", "vwap", "float64"),
    OutputColumn("t", "timestamp", "int64"),
    OutputColumn("n", "transactions", "int64"),
)
_TICKER_COLUMNS: Final[tuple[OutputColumn, ...]] = (
    OutputColumn("ticker", "ticker", "string"),
    OutputColumn("name", "name", "string"),
    OutputColumn("market", "market", "string"),
    OutputColumn("locale", "locale", "string"),
    OutputColumn("primary_exchange", "primary_exchange", "string"),
    OutputColumn("type", "type", "string"),
    OutputColumn("active", "active", "bool"),
    OutputColumn("currency_name", "currency_name", "string"),
    OutputColumn("cik", "cik", "string"),
    OutputColumn("composite_figi", "composite_figi", "string"),
    OutputColumn("last_updated_utc", "last_updated_utc", "string"),
)
_STATEMENT_COLUMNS: Final[tuple[OutputColumn, ...]] = (
    OutputColumn("tickers", "tickers", "object"),
    OutputColumn("cik", "cik", "string"),
    OutputColumn("filing_date", "filing_date", "string"),
    OutputColumn("period_end", "period_end", "string"),
    OutputColumn("fiscal_year", "fiscal_year", "float64"),
    OutputColumn("fiscal_quarter", "fiscal_quarter", "float64"),
    OutputColumn("timeframe", "timeframe", "string"),
)


def _same(*names: str, dtype: str = "float64") -> tuple[OutputColumn, ...]:
    return tuple(OutputColumn(n, n, dtype) for n in names)


def _filters(*fields: str, ops: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(name for f in fields for name in (f, *(f"{f}.{op}" for op in ops)))


_RANGE_OPS: Final[tuple[str, ...]] = ("gt", "gte", "lt", "lte")

_FINANCIALS_ALLOWED: Final[tuple[str, ...]] = (
    *_filters("cik", ops=("any_of", *_RANGE_OPS)),
    *_filters("tickers", ops=("all_of", "any_of")),
    *_filters("period_end", "filing_date", "fiscal_year", "fiscal_quarter", ops=_RANGE_OPS),
    *_filters("timeframe", ops=("any_of", *_RANGE_OPS)),
    "limit",
    "sort",
)

# Tool arguments go out under the /stocks/financials/v1 filter names (tickers, period_end, sort).
_FINANCIALS_PARAMS: Final[tuple[ParamSpec, ...]] = (
    ParamSpec("ticker", "string", "Ticker symbol to filter by", wire_name="tickers"),
    ParamSpec("cik", "string", "Central Index Key (CIK) of the company"),
    ParamSpec("filing_date", "string", "Filing date (YYYY-MM-DD)"),
    ParamSpec(
        "period_of_report_date",
        "string",
        "Period of report date (YYYY-MM-DD)",
        wire_name="period_end",
    ),
    ParamSpec("limit", "integer", "Maximum number of results to return"),
    ParamSpec("order", "string", "Sort order for results (asc or desc)", wire_name="sort"),
)


def _financials(
    name: str,
    description: str,
    path: str,
    decoder: Callable[[Any], Any],
    columns: tuple[OutputColumn, ...],
) -> EndpointSpec:
    return EndpointSpec(
        module="Financials",
        name=name,
        description=description,
        path=path,
        params=_FINANCIALS_PARAMS,
        allowed=_FINANCIALS_ALLOWED,
        decoder=decoder,
        columns=columns,
    )


# --------------------------------------------------------------------------- #
# Catalog
# --------------------------------------------------------------------------- #

AGGREGATES = EndpointSpec(
    module="Aggs",
    name="aggregates",
    description="Get OHLCV bars over date range",
    path="/v2/aggs/ticker/{ticker}/range/{multiplier}/{timespan}/{from}/{to}",
    params=(
        _TICKER_PATH,
        ParamSpec("multiplier", "integer", "The size of the timespan multiplier", True, "path"),
        ParamSpec(
            "timespan",
            "string",
            "The size of the time window (e.g., minute, hour, day, week, month, quarter, year)",
            True,
            "path",
            enum=tuple(t.value for t in Timespan),
            timespan=True,
        ),
        ParamSpec(
            "from",
            "string",
            "Start of the aggregate time window (YYYY-MM-DD or millisecond timestamp)",
            True,
            "path",
        ),
        ParamSpec(
            "to",
            "string",
            "End of the aggregate time window (YYYY-MM-DD or millisecond timestamp)",
            True,
            "path",
        ),
        _ADJUSTED,
        ParamSpec("sort", "string", "Sort order for results (asc or desc)", enum=_SORT_DIRECTION),
        ParamSpec(
            "limit",
            "integer",
            "Maximum number of base aggregates queried (max: 50000, default: 5000)",
        ),
    ),
    allowed=("adjusted", "sort", "limit"),
    decoder=agg_records.decode_aggregates,
    columns=_AGG_COLUMNS,
)

PREVIOUS_CLOSE = EndpointSpec(
    module="Aggs",
    name="previous_close",
    description="Get previous day close",
    path="/v2/aggs/ticker/{ticker}/prev",
    params=(_TICKER_PATH, _ADJUSTED),
    allowed=("adjusted",),
    decoder=agg_records.decode_previous_close,
    columns=(OutputColumn("T", "ticker", "string"), *_AGG_COLUMNS[:7]),
)

GROUPED_DAILY = EndpointSpec(
    module="Aggs",
    name="grouped_daily",
    description="Get daily bars for entire market",
    path="/v2/aggs/grouped/locale/us/market/stocks/{date}",
    params=(
        ParamSpec("date", "string", "Date to get grouped daily bars for (YYYY-MM-DD)", True, "path"),
        _ADJUSTED,
        ParamSpec("include_otc", "boolean", "Include OTC (Over-the-Counter) securities in the results"),
    ),
    allowed=("adjusted", "include_otc"),
    decoder=agg_records.decode_grouped_daily,
    columns=(OutputColumn("T", "ticker", "string"), *_AGG_COLUMNS),
)

DAILY_OPEN_CLOSE = EndpointSpec(
    module="Aggs",
    name="daily_open_close",
    description="Get open/close for specific date",
    path="/v1/open-close/{ticker}/{date}",
    params=(
        _TICKER_PATH,
        ParamSpec("date", "string", "Date to get open/close data for (YYYY-MM-DD)", True, "path"),
        _ADJUSTED,
    ),
    allowed=("adjusted",),
    decoder=agg_records.decode_daily_open_close,
    columns=(
        OutputColumn("symbol", "ticker", "string"),
        OutputColumn("from", "date", "string"),
        *_same("open", "high", "low", "close", "volume"),
        OutputColumn("preMarket", "pre_market", "float64"),
        OutputColumn("afterHours", "after_hours", "float64"),
    ),
)

TICKERS_ALL = EndpointSpec(
    module="Tickers",
    name="all",
    description="List all tickers with filters",
    path="/v3/reference/tickers",
    params=(
        ParamSpec("ticker", "string", 'Ticker symbol to filter by (e.g., "AAPL" for Apple Inc.)'),
        ParamSpec(
            "type",
            "string",
            'Type of ticker (e.g., "CS" for common stock, "ETF" for exchange-traded fund)',
        ),
        ParamSpec("market", "string", 'Market type (e.g., "stocks", "crypto", "fx")'),
        ParamSpec(
            "exchange",
            "string",
            "Primary exchange MIC (Market Identifier Code) according to ISO 10383",
        ),
        ParamSpec("limit", "integer", "Maximum number of results to return (default: 100, max: 1000)"),
        ParamSpec("sort", "string", "Field to sort by"),
        ParamSpec("order", "string", "Sort order for results (asc or desc)"),
    ),
    allowed=("ticker", "type", "market", "exchange", "limit", "sort", "order"),
    decoder=ticker_records.decode_all,
    columns=_TICKER_COLUMNS,
)

TICKERS_DETAILS = EndpointSpec(
    module="Tickers",
    name="details",
    description="Get detailed info about a ticker",
    path="/v3/reference/tickers/{ticker}",
    params=(
        _TICKER_PATH,
        ParamSpec("date", "string", "Date to retrieve details for (YYYY-MM-DD)"),
    ),
    allowed=("date",),
    decoder=ticker_records.decode_details,
    columns=_TICKER_COLUMNS,
)

TICKERS_RELATED = EndpointSpec(
    module="Tickers",
    name="related",
    description="Get related companies",
    path="/v1/related-companies/{ticker}",
    params=(_TICKER_PATH,),
    decoder=ticker_records.decode_related,
    columns=(OutputColumn("ticker", "ticker", "string"),),
)

TICKERS_TYPES = EndpointSpec(
    module="Tickers",
    name="types",
    description="Get all ticker types",
    path="/v3/reference/tickers/types",
    allowed=("asset_class", "locale"),
    decoder=ticker_records.decode_types,
    columns=_same("code", "description", "asset_class", "locale", dtype="string"),
)

TICKERS_EVENTS = EndpointSpec(
    module="Tickers",
    name="events",
    description="Get corporate events",
    path="/vX/reference/tickers/{ticker}/events",
    params=(
        _TICKER_PATH,
        ParamSpec("types", "string", "Event types to filter by (comma-separated)"),
    ),
    allowed=("types",),
    decoder=ticker_records.decode_events,
)

TICKERS_NEWS = EndpointSpec(
    module="Tickers",
    name="news",
    description="Get recent news",
    path="/v2/reference/news",
    params=(
        ParamSpec("ticker", "string", 'Ticker symbol to filter news by (e.g., "AAPL" for Apple Inc.)'),
        ParamSpec("limit", "integer", "Maximum number of results to return"),
        ParamSpec("order", "string", "Sort order for results (asc or desc)"),
    ),
    allowed=("ticker", "limit", "order"),
    decoder=ticker_records.decode_news,
    columns=(
        *_same("id", "title", "author", "published_utc", "article_url", dtype="string"),
        OutputColumn("tickers", "tickers", "object"),
    ),
)

BALANCE_SHEETS = _financials(
    "balance_sheets",
    "Get balance sheet data",
    "/stocks/financials/v1/balance-sheets",
    fin_records.decode_balance_sheets,
    (
        *_STATEMENT_COLUMNS,
        *_same("total_assets", "total_liabilities", "total_equity", "cash_and_equivalents"),
    ),
)

CASH_FLOW_STATEMENTS = _financials(
    "cash_flow_statements",
    "Get cash flow statements",
    "/stocks/financials/v1/cash-flow-statements",
    fin_records.decode_cash_flow_statements,
    (
        *_STATEMENT_COLUMNS,
        *_same(
            "net_income",
            "net_cash_from_operating_activities",
            "net_cash_from_investing_activities",
            "net_cash_from_financing_activities",
        ),
    ),
)

INCOME_STATEMENTS = _financials(
    "income_statements",
    "Get income statements",
    "/stocks/financials/v1/income-statements",
    fin_records.decode_income_statements,
    (
        *_STATEMENT_COLUMNS,
        *_same("revenue", "gross_profit", "operating_income", "diluted_earnings_per_share"),
    ),
)

RATIOS = _financials(
    "ratios",
    "Get financial ratios",
    "/stocks/financials/v1/ratios",
    fin_records.decode_ratios,
    (
        *_same("ticker", "cik", "date", dtype="string"),
        *_same("price", "market_cap", "price_to_earnings", "price_to_book", "debt_to_equity"),
    ),
)

#: Module name → description, in presentation order.
MODULES: Final[dict[str, str]] = {
    "Tickers": "Ticker symbols, company details, news, events",
    "Aggs": "OHLCV aggregate data, historical prices",
    "Financials": "Financial statements, balance sheets, ratios",
}

#: Module name → endpoint name → spec.
CATALOG: Final[dict[str, dict[str, EndpointSpec]]] = {
    "Tickers": {
        spec.name: spec
        for spec in (
            TICKERS_ALL,
            TICKERS_DETAILS,
            TICKERS_RELATED,
            TICKERS_TYPES,
            TICKERS_EVENTS,
            TICKERS_NEWS,
        )
    },
    "Aggs": {
        spec.name: spec
        for spec in (AGGREGATES, PREVIOUS_CLOSE, GROUPED_DAILY, DAILY_OPEN_CLOSE)
    },
    "Financials": {
        spec.name: spec
        for spec in (BALANCE_SHEETS, CASH_FLOW_STATEMENTS, INCOME_STATEMENTS, RATIOS)
    },
}


def get_module(module: str) -> dict[str, EndpointSpec]:
    """Return the endpoints of ``module``.

    Raises:
        UnknownModule: If ``module`` is not in the catalog.
    """
    try:
        return CATALOG[module]
    except KeyError:
        raise UnknownModule(module) from None


def get_endpoint(module: str, endpoint: str) -> EndpointSpec:
    """Return the spec for ``(module, endpoint)``.

    Raises:
        UnknownEndpoint: If the pair is not in the catalog.
    """
    spec = CATALOG.get(module, {}).get(endpoint)
    if spec is None:
        raise UnknownEndpoint(module, endpoint)
    return spec
