"""Typed values produced by a fetch cycle."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from coinchart.contracts.errors import Failure


@dataclass(frozen=True, slots=True)
class Selection:
    """The (coin, currency, range) tuple driving one fetch cycle."""
    coin_id: str
    currency_id: str
    range_days: int

    def __post_init__(self) -> None:
        if not isinstance(self.coin_id, str) or not self.coin_id.strip():
            raise ValueError("coin_id must be a non-empty string")
        if not isinstance(self.currency_id, str) or not self.currency_id.strip():
            raise ValueError("currency_id must be a non-empty string")
        if isinstance(self.range_days, bool) or not isinstance(self.range_days, int) or self.range_days <= 0:
            raise ValueError(f"range_days must be a positive integer, got {self.range_days!r}")
        # Normalized ids keep equality stable across 'USD' and 'usd'
        object.__setattr__(self, 'coin_id', self.coin_id.strip().lower())
        object.__setattr__(self, 'currency_id', self.currency_id.strip().lower())


@dataclass(frozen=True, slots=True)
class CoinSnapshot:
    id: str
    name: str
    symbol: str
    image_url: str = ''
    current_price: Decimal = Decimal(0)
    price_change_pct_24h: Decimal = Decimal(0)

    @property
    def has_logo(self) -> bool:
        return bool(self.image_url)


@dataclass(frozen=True, slots=True)
class PricePoint:
    label: str
    price: Decimal


PriceSeries = Tuple[PricePoint, ...]


class FetchStatus(str, Enum):
    LOADING = "loading"
    SUCCESS = "success"
    FAILED = "failed"
    EMPTY = "empty"
    # Internal only: a superseded cycle. Never stored in view state.
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Outcome of a fetch cycle. Snapshot and series always come from the same cycle."""
    status: FetchStatus
    selection: Optional[Selection] = None
    snapshot: Optional[CoinSnapshot] = None
    series: PriceSeries = field(default_factory=tuple)
    failure: Optional[Failure] = None

    @classmethod
    def loading(cls, selection: Selection, previous: Optional["FetchResult"] = None) -> "FetchResult":
        """Loading state. Data of previous is kept only when it belongs to the same selection."""
        if previous is not None and previous.selection == selection and previous.has_data:
            return cls(FetchStatus.LOADING, selection, previous.snapshot, previous.series)
        return cls(FetchStatus.LOADING, selection)

    @classmethod
    def success(cls, selection: Selection, snapshot: CoinSnapshot, series: PriceSeries) -> "FetchResult":
        if not series:
            return cls(FetchStatus.EMPTY, selection, snapshot, ())
        return cls(FetchStatus.SUCCESS, selection, snapshot, tuple(series))

    @classmethod
    def failed(cls, selection: Selection, failure: Failure) -> "FetchResult":
        return cls(FetchStatus.FAILED, selection, failure=failure)

    @classmethod
    def cancelled(cls, selection: Selection) -> "FetchResult":
        return cls(FetchStatus.CANCELLED, selection)

    @property
    def has_data(self) -> bool:
        return self.snapshot is not None

    @property
    def is_terminal(self) -> bool:
        return self.status in (FetchStatus.SUCCESS, FetchStatus.FAILED, FetchStatus.EMPTY)


class AnalysisStatus(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    status: AnalysisStatus = AnalysisStatus.IDLE
    text: str = ''
    failure: Optional[Failure] = None

    @classmethod
    def idle(cls) -> "AnalysisResult":
        return cls()

    @classmethod
    def generating(cls) -> "AnalysisResult":
        return cls(AnalysisStatus.GENERATING)

    @classmethod
    def succeeded(cls, text: str) -> "AnalysisResult":
        return cls(AnalysisStatus.SUCCEEDED, text=text)

    @classmethod
    def failed(cls, failure: Failure) -> "AnalysisResult":
        return cls(AnalysisStatus.FAILED, failure=failure)
