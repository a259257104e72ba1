from __future__ import annotations

import logging
import math
from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from core.domain.entities.quote_entity import QuoteEntity

# Column layout of the PSX market-watch table.
_COL_SYMBOL = 0
_COL_SECTOR = 2
_COL_LDCP = 3
_COL_OPEN = 4
_COL_HIGH = 5
_COL_LOW = 6
_COL_CURRENT = 7
_COL_CHANGE = 8
_COL_CHANGE_PERCENT = 9
_COL_VOLUME = 10

_MIN_CELLS = 10


class SnapshotParserService:
    """
    Parses the PSX market-watch HTML page into quotes.

    Lenient by design: the page is not a stable machine format, so any row
    that does not look like a quote row is skipped instead of failing the
    whole snapshot.

    Numeric values are read from the `data-order` attribute of each cell
    (the unformatted value the table sorts on), not from the display text.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    def parse(self, html: str | bytes) -> List[QuoteEntity]:
        soup = BeautifulSoup(html or "", "html.parser")
        quotes: List[QuoteEntity] = []

        for row in soup.find_all("tr"):
            cells = row.find_all("td")
            if len(cells) < _MIN_CELLS:
                continue

            quote = self._parse_row(cells)
            if quote is None:
                continue

            if quote.has_change_percent_discrepancy():
                self._logger.debug(
                    "Change percent mismatch symbol=%s upstream=%.4f implied=%.4f",
                    quote.symbol,
                    quote.change_percent,
                    quote.implied_change_percent(),
                )
            quotes.append(quote)

        return quotes

    def _parse_row(self, cells: List[Tag]) -> Optional[QuoteEntity]:
        symbol_el = cells[_COL_SYMBOL].find("strong")
        company_el = cells[_COL_SYMBOL].find("a")
        if symbol_el is None or company_el is None:
            self._logger.debug("Skipping row without symbol/company elements")
            return None

        if len(cells) <= _COL_VOLUME:
            self._logger.debug("Skipping row without volume cell symbol=%s", symbol_el.get_text(strip=True))
            return None

        change = _order_float(cells[_COL_CHANGE])
        return QuoteEntity(
            symbol=symbol_el.get_text(strip=True),
            company=str(company_el.get("data-title") or ""),
            sector=cells[_COL_SECTOR].get_text(strip=True),
            ldcp=_order_float(cells[_COL_LDCP]),
            open=_order_float(cells[_COL_OPEN]),
            high=_order_float(cells[_COL_HIGH]),
            low=_order_float(cells[_COL_LOW]),
            current=_order_float(cells[_COL_CURRENT]),
            change=change,
            change_percent=_order_float(cells[_COL_CHANGE_PERCENT]),
            volume=_order_int(cells[_COL_VOLUME]),
            is_positive=change >= 0,
        )


def _order_float(cell: Tag) -> float:
    raw = cell.get("data-order") or "0"
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def _order_int(cell: Tag) -> int:
    raw = cell.get("data-order") or "0"
    try:
        return int(float(raw))
    except (TypeError, ValueError, OverflowError):
        return 0
