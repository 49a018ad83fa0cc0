"""Statement ingestion: file reading, parsing and summaries."""

from .parser import (
    ColumnLayout,
    HeaderMatcher,
    MerchantMatcher,
    StatementParser,
    parse_amount,
    parse_statement,
    parse_statement_date,
)
from .reader import read_grid
from .summary import StatementSummary, summarize

__all__ = [
    "ColumnLayout",
    "HeaderMatcher",
    "MerchantMatcher",
    "StatementParser",
    "StatementSummary",
    "parse_amount",
    "parse_statement",
    "parse_statement_date",
    "read_grid",
    "summarize",
]
