"""Request pipeline: encoding, building, classification and processing."""

from __future__ import annotations

from .builder import API_KEY_PARAM, Query
from .encode import OMIT, encode
from .processors import Decoder, Raw, Table
from .response import TransportResponse

__all__ = ["API_KEY_PARAM", "OMIT", "Decoder", "Query", "Raw", "Table", "TransportResponse", "encode"]
