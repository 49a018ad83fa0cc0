"""Bank statement grid parsing.

The parser works on a plain grid of cell strings (see ``reader.py`` for how
files become grids). It locates the header row, re-detects the column layout
for the file, filters credit rows for one merchant and decomposes each
credited amount into a menu order.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..exceptions import HeaderNotFound
from ..menu.decomposer import AmountDecomposer
from ..models import STATUS_SUCCESS, Transaction
from ..utils.logging import get_logger

logger = get_logger(__name__)

Cell = Optional[str]
Grid = Sequence[Sequence[Cell]]
DateRange = Tuple[Optional[date], Optional[date]]

DEFAULT_HEADER_MARKERS = ("transaction date", "txn date", "tran date", "value date")

# Column aliases, matched case-insensitively as substrings of the header cell.
# Order matters: "value date" must be claimed before the generic "date".
COLUMN_ALIASES: Dict[str, Tuple[str, ...]] = {
    "value_date": ("value date", "value dt"),
    "date": ("transaction date", "txn date", "tran date", "posting date", "date"),
    "particulars": ("particulars", "narration", "description", "details", "remarks"),
    "debit": ("debit", "withdrawal", "dr amount", "dr"),
    "credit": ("credit", "deposit", "cr amount", "cr"),
    "balance": ("balance",),
}
REQUIRED_COLUMNS = ("date", "particulars", "credit")

DATE_FORMATS = (
    "%d-%b-%Y",
    "%d-%b-%y",
    "%d %b %Y",
    "%d %b %y",
    "%d/%m/%Y",
    "%d/%m/%y",
    "%d-%m-%Y",
    "%d-%m-%y",
    "%d.%m.%Y",
    "%Y-%m-%d",
    "%d %B %Y",
    "%b %d, %Y",
)

_NUMERIC_JUNK = re.compile(r"[^0-9.\-+]")


def clean_cell(value: Cell) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_amount(value: Cell) -> Decimal:
    """Parse a money cell like ``"₹1,250.00"`` or ``"INR 89"``.

    Everything but digits, sign and decimal point is dropped first. Cells
    that still do not parse count as zero.
    """
    text = _NUMERIC_JUNK.sub("", clean_cell(value))
    if not text or text in {"-", "+", ".", "-.", "+."}:
        return Decimal("0")
    try:
        return Decimal(text)
    except InvalidOperation:
        return Decimal("0")


def parse_statement_date(value: Cell) -> Optional[date]:
    """Best-effort parse of a statement date cell; ``None`` when unknown."""
    text = clean_cell(value)
    if not text:
        return None
    # Exports sometimes append a time ("18-Oct-2026 10:42:11").
    candidates = [text]
    head = text.split(" ")
    if len(head) > 1 and ":" in head[-1]:
        candidates.append(" ".join(head[:-1]))
    if "T" in text and text[:4].isdigit():
        candidates.append(text.split("T", 1)[0])
    for candidate in candidates:
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(candidate, fmt).date()
            except ValueError:
                continue
    return None


class HeaderMatcher:
    """Recognize the statement header row by marker tokens.

    A row is a header when its first or second cell contains any marker,
    case-insensitively.
    """

    def __init__(self, markers: Iterable[str] = DEFAULT_HEADER_MARKERS, cells_to_check: int = 2) -> None:
        self.markers = tuple(m.lower() for m in markers if m)
        if not self.markers:
            raise ValueError("At least one header marker is required")
        self.cells_to_check = cells_to_check

    def is_header_cell(self, value: Cell) -> bool:
        text = clean_cell(value).lower()
        return bool(text) and any(marker in text for marker in self.markers)

    def is_header(self, row: Sequence[Cell]) -> bool:
        return any(self.is_header_cell(cell) for cell in list(row)[: self.cells_to_check])

    def locate(self, grid: Grid) -> int:
        """Return the index of the first header row or raise HeaderNotFound."""
        for index, row in enumerate(grid):
            if row and self.is_header(row):
                return index
        raise HeaderNotFound(self.markers)


@dataclass(frozen=True)
class ColumnLayout:
    """Column indexes for one statement file."""

    date: int
    value_date: Optional[int]
    particulars: int
    debit: Optional[int]
    credit: int
    balance: Optional[int]

    @classmethod
    def default(cls) -> "ColumnLayout":
        return cls(date=0, value_date=1, particulars=2, debit=3, credit=4, balance=5)

    @classmethod
    def detect(cls, header: Sequence[Cell]) -> "ColumnLayout":
        """Map header cells to columns, falling back to the classic layout."""
        found: Dict[str, int] = {}
        for index, cell in enumerate(header):
            text = clean_cell(cell).lower()
            if not text:
                continue
            for column, aliases in COLUMN_ALIASES.items():
                if column in found:
                    continue
                if any(_alias_matches(alias, text) for alias in aliases):
                    found[column] = index
                    break

        if not all(column in found for column in REQUIRED_COLUMNS):
            logger.debug("Header %r not fully recognized, using default layout", list(header))
            return cls.default()

        return cls(
            date=found["date"],
            value_date=found.get("value_date"),
            particulars=found["particulars"],
            debit=found.get("debit"),
            credit=found["credit"],
            balance=found.get("balance"),
        )

    @property
    def min_columns(self) -> int:
        return max(self.date, self.particulars, self.credit) + 1


def _alias_matches(alias: str, text: str) -> bool:
    # Short aliases ("dr", "cr") must be whole words, not fragments of "credit".
    if len(alias) <= 2:
        return alias in re.split(r"[^a-z]+", text)
    return alias in text


class MerchantMatcher:
    """Configurable merchant-narration predicate.

    ``mode`` is ``"suffix"`` (narration ends with the keyword) or
    ``"substring"`` (keyword anywhere). An empty keyword matches every row.
    """

    MODES = ("suffix", "substring")

    def __init__(self, keyword: str = "", mode: str = "suffix", case_sensitive: bool = False) -> None:
        if mode not in self.MODES:
            raise ValueError(f"Unknown merchant match mode: {mode!r}")
        self.keyword = (keyword or "").strip()
        self.mode = mode
        self.case_sensitive = case_sensitive

    def matches(self, narration: Cell) -> bool:
        if not self.keyword:
            return True
        text = clean_cell(narration)
        keyword = self.keyword
        if not self.case_sensitive:
            text, keyword = text.lower(), keyword.lower()
        if self.mode == "suffix":
            return text.endswith(keyword)
        return keyword in text


class StatementParser:
    """Turn a statement grid into normalized credit Transactions."""

    def __init__(
        self,
        decomposer: Optional[AmountDecomposer] = None,
        header_matcher: Optional[HeaderMatcher] = None,
    ) -> None:
        self.decomposer = decomposer or AmountDecomposer()
        self.header_matcher = header_matcher or HeaderMatcher()

    def parse(
        self,
        grid: Grid,
        merchant: "MerchantMatcher | str" = "",
        date_range: Optional[DateRange] = None,
    ) -> List[Transaction]:
        matcher = merchant if isinstance(merchant, MerchantMatcher) else MerchantMatcher(merchant)
        header_index = self.header_matcher.locate(grid)
        layout = ColumnLayout.detect(grid[header_index])
        logger.info("Header found on row %d, layout %s", header_index + 1, layout)

        run_token = uuid.uuid4().hex[:8]
        transactions: List[Transaction] = []
        skipped = 0
        for index in range(header_index + 1, len(grid)):
            row = list(grid[index] or [])
            if len(row) < layout.min_columns:
                skipped += 1
                continue

            date_text = clean_cell(row[layout.date])
            details = clean_cell(row[layout.particulars])
            if not date_text or not details:
                skipped += 1
                continue
            if self.header_matcher.is_header_cell(date_text):
                continue

            credit = parse_amount(row[layout.credit])
            if credit <= 0:
                continue
            if not matcher.matches(details):
                continue
            if date_range and not self._within(date_text, date_range):
                continue

            decomposition = self.decomposer.decompose(credit)
            transactions.append(
                Transaction.from_decomposition(
                    txn_id=f"txn-{run_token}-{index + 1}",
                    date=date_text,
                    value_date=_optional_cell(row, layout.value_date),
                    details=details,
                    decomposition=decomposition,
                    status=STATUS_SUCCESS,
                    row_number=index + 1,
                )
            )

        logger.debug("Skipped %d malformed rows", skipped)
        logger.info("Parsed %d credit transactions", len(transactions))
        return transactions

    @staticmethod
    def _within(date_text: str, date_range: DateRange) -> bool:
        start, end = date_range
        parsed = parse_statement_date(date_text)
        if parsed is None:
            # Unknown formats are kept rather than silently dropped.
            logger.debug("Could not parse date %r, keeping row", date_text)
            return True
        if start is not None and parsed < start:
            return False
        if end is not None and parsed > end:
            return False
        return True


def _optional_cell(row: Sequence[Cell], index: Optional[int]) -> str:
    if index is None or index >= len(row):
        return ""
    return clean_cell(row[index])


def parse_statement(
    grid: Grid,
    merchant_keyword: str = "",
    date_range: Optional[DateRange] = None,
    *,
    match_mode: str = "suffix",
    case_sensitive: bool = False,
    decomposer: Optional[AmountDecomposer] = None,
    header_markers: Iterable[str] = DEFAULT_HEADER_MARKERS,
) -> List[Transaction]:
    """Convenience wrapper around :class:`StatementParser`."""
    parser = StatementParser(decomposer=decomposer, header_matcher=HeaderMatcher(header_markers))
    matcher = MerchantMatcher(merchant_keyword, mode=match_mode, case_sensitive=case_sensitive)
    return parser.parse(grid, matcher, date_range)
