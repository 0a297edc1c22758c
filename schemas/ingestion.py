"""
Pydantic schemas for the ingestion invocation contract and diagnostics
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime, timedelta
from core.exceptions import InvalidWindowError
from core.utils import format_timestamp, parse_datetime, utcnow
from models.base import RunStatus


# ============================================================================
# Invocation
# ============================================================================

class IngestionRequest(BaseModel):
    """
    Input accepted from the scheduler / HTTP trigger.

    Either startDate (optionally with endDate) or daysBack selects the
    window; daysBack defaults to 7 when neither bound is given.
    """
    start_date: Optional[str] = Field(None, alias="startDate")
    end_date: Optional[str] = Field(None, alias="endDate")
    days_back: Optional[int] = Field(None, alias="daysBack", ge=0)

    class Config:
        populate_by_name = True


class FetchWindow(BaseModel):
    """Immutable [start, end] range one invocation is asked to cover"""
    start: datetime
    end: datetime

    class Config:
        frozen = True

    @classmethod
    def resolve(
        cls,
        request: IngestionRequest,
        now: Optional[datetime] = None,
        default_days_back: int = 7
    ) -> "FetchWindow":
        """
        Build the window from an invocation request.

        Raises:
            InvalidWindowError: endDate without startDate, an unparseable
                bound, or start after end
        """
        now = now or utcnow()

        if request.end_date and not request.start_date:
            raise InvalidWindowError(
                "endDate requires startDate to be specified",
                context={"end_date": request.end_date}
            )

        end = now
        if request.end_date:
            end = parse_datetime(request.end_date)
            if end is None:
                raise InvalidWindowError(
                    "endDate is not a valid timestamp",
                    context={"end_date": request.end_date}
                )

        if request.start_date:
            start = parse_datetime(request.start_date)
            if start is None:
                raise InvalidWindowError(
                    "startDate is not a valid timestamp",
                    context={"start_date": request.start_date}
                )
        else:
            days_back = request.days_back if request.days_back is not None else default_days_back
            start = now - timedelta(days=days_back)

        if start > end:
            raise InvalidWindowError(
                "startDate must not be after endDate",
                context={"start": start.isoformat(), "end": end.isoformat()}
            )

        return cls(start=start, end=end)

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    def partitions(self, current_year: int) -> List[int]:
        """Every year touched by the window, capped at current_year, newest first"""
        last = min(self.end.year, current_year)
        return list(range(last, self.start.year - 1, -1))

    def to_range(self) -> Dict[str, str]:
        return {"start": format_timestamp(self.start), "end": format_timestamp(self.end)}


# ============================================================================
# Diagnostics
# ============================================================================

class MismatchedItem(BaseModel):
    """Item found under a partition tag that disagrees with its own date"""
    id: str
    headline: str = ""
    post_date_time: str = ""
    actual_year: int
    tagged_years: List[int] = Field(default_factory=list)


class PartitionDiagnostics(BaseModel):
    """What one partition's fetch looked like"""
    year: int
    tag_formats_used: List[str] = Field(default_factory=list)
    tag_format_results: Dict[str, int] = Field(default_factory=dict)
    failed_formats: List[str] = Field(default_factory=list)
    pages_fetched: Dict[str, int] = Field(default_factory=dict)
    total_items_fetched: int = 0
    duplicates_removed: int = 0
    items_in_window: int = 0
    mismatched_items: List[MismatchedItem] = Field(default_factory=list)


class Diagnostics(BaseModel):
    """Per-invocation accumulator; logged and returned, never persisted"""
    partitions: List[PartitionDiagnostics] = Field(default_factory=list)
    cross_partition_duplicates: int = 0
    malformed_items: int = 0

    @property
    def duplicates_removed(self) -> int:
        return self.cross_partition_duplicates + sum(p.duplicates_removed for p in self.partitions)

    @property
    def mismatched_count(self) -> int:
        return sum(len(p.mismatched_items) for p in self.partitions)

    def summary(self) -> Dict[str, Any]:
        return {
            "partitions": [p.year for p in self.partitions],
            "tag_format_results": {str(p.year): p.tag_format_results for p in self.partitions},
            "failed_formats": {str(p.year): p.failed_formats for p in self.partitions if p.failed_formats},
            "duplicates_removed": self.duplicates_removed,
            "mismatched_items": self.mismatched_count,
            "malformed_items": self.malformed_items,
        }


# ============================================================================
# Results
# ============================================================================

class StorageResult(BaseModel):
    """Counters returned by the storage writer"""
    inserted: int = 0
    skipped: int = 0
    failed: int = 0
    links_inserted: int = 0
    links_failed: int = 0


class IngestionResult(BaseModel):
    """Payload returned to the scheduler / HTTP trigger"""
    status_code: int = Field(200, alias="statusCode")
    status: RunStatus = RunStatus.SUCCESS
    source: str
    inserted: int = 0
    skipped: int = 0
    failed: int = 0
    links_inserted: Optional[int] = Field(None, alias="linksInserted")
    processed: int = 0
    date_range: Dict[str, str] = Field(..., alias="dateRange")
    diagnostics: Optional[Dict[str, Any]] = None

    class Config:
        populate_by_name = True
        use_enum_values = True

    def to_payload(self) -> Dict[str, Any]:
        return self.dict(by_alias=True, exclude_none=True)
