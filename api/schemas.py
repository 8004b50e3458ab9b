"""
Pydantic Request and Response Schemas
=====================================
Type-safe models for the back-office API.

JSON bodies use camelCase field names; Python attributes are snake_case.
Date and time fields are normalized by the schema validators, so every
write stores the canonical form and every read displays it.
"""

from typing import Optional, List, Dict, Union
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

from backoffice.normalization import normalize_date, normalize_time
from backoffice.storage.tables import CODE_LENGTH, DATE_LENGTH, NAME_LENGTH, SKU_LENGTH, TIME_LENGTH


class CamelModel(BaseModel):
    """Base model serialising to camelCase and accepting either spelling."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =====================================================================
# ENUMS
# =====================================================================

class ExceptionType(str, Enum):
    NO_TRACKING = "NoTracking"
    OUT_OF_STOCK = "OutOfStock"
    WRONG_SHIPMENT = "WrongShipment"


class ContainerType(str, Enum):
    FULL_CONTAINER = "FullContainer"
    LOOSE_CARGO = "LooseCargo"
    PALLET = "Pallet"


class ContainerStatus(str, Enum):
    COMPLETED = "Completed"
    PENDING_UNLOAD = "PendingUnload"
    PENDING_VERIFICATION = "PendingVerification"
    HAS_ISSUE = "HasIssue"


class TimeRange(str, Enum):
    ALL = "all"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    HALF_YEAR = "halfYear"
    YEAR = "year"


# =====================================================================
# SHARED
# =====================================================================

class DatedRecord(CamelModel):
    """Fields and normalization common to every record."""
    date: str = Field(min_length=1, max_length=DATE_LENGTH, description="Record date, stored as MM/DD/YYYY")

    @field_validator('date')
    @classmethod
    def canonical_date(cls, value: str) -> str:
        normalized = normalize_date(value)
        # Zero padding and the appended year can lengthen the input
        if len(normalized) > DATE_LENGTH:
            raise ValueError(f"normalized date exceeds {DATE_LENGTH} characters")
        return normalized


class StoredRecord(CamelModel):
    """Server-assigned fields returned with every record."""
    id: str
    created_at: datetime


class MessageResponse(BaseModel):
    """Plain message body, used for deletions and every error."""
    message: str


# =====================================================================
# EXPRESS VOLUME SCHEMAS
# =====================================================================

class ExpressRecordCreate(DatedRecord):
    """Daily courier volume as entered (create and full update)."""
    legacy_system_total: int = Field(ge=0)
    new_system_total: int = Field(ge=0)
    fedex_total: int = Field(ge=0)
    ups_total: int = Field(ge=0)
    fedex_a008_count: int = Field(ge=0, description="A008 orders within the FedEx total")
    ups_a008_count: int = Field(ge=0, description="A008 orders within the UPS total")
    battery_panel_count: int = Field(ge=0)
    fedex_storage_count: int = Field(ge=0)
    ups_storage_count: int = Field(ge=0)
    completion_time: str = Field(min_length=1, max_length=TIME_LENGTH, description="Completion time, HH:mm")
    headcount: int = Field(ge=0)
    note: str = ""

    @field_validator('completion_time')
    @classmethod
    def canonical_time(cls, value: str) -> str:
        return normalize_time(value)


class ExpressRecord(ExpressRecordCreate, StoredRecord):
    pass


class ExpressDailyTrend(CamelModel):
    date: Optional[str] = None
    total_orders: int = 0
    fedex_total: int = 0
    ups_total: int = 0
    total_a008: int = 0
    a008_percentage: float = 0.0
    completion_time: Optional[str] = None
    headcount: int = 0
    unit_time_efficiency: Optional[float] = None


class ExpressSummary(CamelModel):
    """Courier volume totals over a look-back range."""
    time_range: TimeRange
    record_count: int = 0
    total_orders: int = 0
    legacy_system_total: int = 0
    new_system_total: int = 0
    fedex_total: int = 0
    ups_total: int = 0
    fedex_a008_count: int = 0
    ups_a008_count: int = 0
    total_a008: int = 0
    a008_percentage: float = 0.0
    battery_panel_count: int = 0
    fedex_storage_count: int = 0
    ups_storage_count: int = 0
    average_completion_time: str = "00:00"
    average_unit_time_efficiency: Optional[float] = None
    daily_trend: List[ExpressDailyTrend] = []


# =====================================================================
# EXCEPTION SCHEMAS
# =====================================================================

class ExceptionRecordCreate(DatedRecord):
    """Shipment exception as entered (create and full update)."""
    exception_type: ExceptionType
    customer_code: str = Field(min_length=1, max_length=CODE_LENGTH)
    tracking_number: str = Field(min_length=1, max_length=CODE_LENGTH)
    sku: str = Field(min_length=1, max_length=SKU_LENGTH)
    note: str = ""


class ExceptionRecord(ExceptionRecordCreate, StoredRecord):
    pass


class MonthExceptionStats(CamelModel):
    """Exception counts for one calendar month."""
    total_exceptions: int = 0
    no_tracking: int = 0
    out_of_stock: int = 0
    wrong_shipment: int = 0
    shipment_volume: int = 0
    exception_rate: float = 0.0


class ExceptionChangeRates(CamelModel):
    """Month-over-month change, in percent."""
    total: float = 0.0
    no_tracking: float = 0.0
    out_of_stock: float = 0.0
    wrong_shipment: float = 0.0


class ExceptionStatsReport(CamelModel):
    current_month: MonthExceptionStats
    last_month: MonthExceptionStats
    change_rate: ExceptionChangeRates
    monthly_average: Union[int, float] = 0


class SkuExceptionCount(CamelModel):
    sku: str
    count: int = 0
    no_tracking: int = 0
    out_of_stock: int = 0
    wrong_shipment: int = 0


class CourierStats(BaseModel):
    fedex: int = 0
    ups: int = 0
    unknown: int = 0


class DailyExceptionCount(CamelModel):
    date: str
    total: int = 0
    no_tracking: int = 0
    out_of_stock: int = 0
    wrong_shipment: int = 0


class ExceptionAnalysis(CamelModel):
    """SKU, courier, type and per-day breakdown of exceptions."""
    top_skus: List[SkuExceptionCount] = []
    courier_stats: CourierStats = CourierStats()
    type_stats: Dict[str, int] = {}
    daily_stats: List[DailyExceptionCount] = []


# =====================================================================
# CONTAINER SCHEMAS
# =====================================================================

class ContainerRecordCreate(DatedRecord):
    """Container or pallet arrival as entered (create and full update)."""
    container_number: str = Field(min_length=1, max_length=CODE_LENGTH)
    type: ContainerType
    customer_code: str = Field(min_length=1, max_length=CODE_LENGTH)
    arrival_time: Optional[str] = Field("", max_length=TIME_LENGTH, description="Arrival time, HH:mm")
    status: ContainerStatus
    issue_note: str = Field(min_length=1)

    @field_validator('arrival_time')
    @classmethod
    def canonical_time(cls, value: Optional[str]) -> str:
        return normalize_time(value or "")


class ContainerRecord(ContainerRecordCreate, StoredRecord):
    pass


class ContainerSummary(CamelModel):
    total: int = 0
    by_type: Dict[str, int] = {}
    by_status: Dict[str, int] = {}
    with_issue_note: int = 0


class ContainerWeek(CamelModel):
    """Containers of one work week, for display."""
    week_key: str
    label: str
    record_count: int = 0
    records: List[ContainerRecord] = []


# =====================================================================
# INVENTORY SCHEMAS
# =====================================================================

class InventoryRecordCreate(DatedRecord):
    """Inventory discrepancy as entered (create and full update)."""
    customer_code: str = Field(min_length=1, max_length=CODE_LENGTH)
    sku: str = Field(min_length=1, max_length=SKU_LENGTH)
    product_name: str = Field(min_length=1, max_length=NAME_LENGTH)
    actual_stock: int
    system_stock: int
    location: str = Field(min_length=1, max_length=CODE_LENGTH)
    note: str = ""


class InventoryRecord(InventoryRecordCreate, StoredRecord):

    @computed_field
    @property
    def difference(self) -> int:
        """Actual minus system stock."""
        return self.actual_stock - self.system_stock


class InventorySummary(CamelModel):
    total_records: int = 0
    current_month_records: int = 0
    total_absolute_difference: int = 0
    shortage_count: int = 0
    surplus_count: int = 0


# =====================================================================
# HEALTH SCHEMAS
# =====================================================================

class HealthStatus(BaseModel):
    """Health check response."""
    status: str = Field(description="Overall API status")
    db: str = Field(description="Database connection status")
    version: str = Field(description="API version")
    timestamp: datetime


class ServerStatus(BaseModel):
    status: str
    message: str
