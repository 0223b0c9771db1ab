"""
Pydantic schemas for store records and pipeline results.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .models import ProductStatus, UnitType
from .progress import PipelineStatus


class ProductRecord(BaseModel):
    """Product as stored, identified by its 13-digit code."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str = Field(..., pattern=r"^[0-9]{13}$")
    name: str
    regular_price: Decimal = Field(..., gt=0)
    club_price: Decimal = Decimal("0")
    unit_type: UnitType
    status: ProductStatus = ProductStatus.ACTIVE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    restored_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == ProductStatus.ACTIVE


class ReasonRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str = Field(..., pattern=r"^[0-9]{2}$")
    description: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EntryRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_code: str
    product_name: str
    quantity: Decimal = Field(..., ge=0)
    reason_id: int
    entry_date: Optional[datetime] = None
    flushed: bool = False
    chosen_unit_type: Optional[UnitType] = None


class EntryCreate(BaseModel):
    """Schema for recording a loss entry."""
    product_code: str = Field(..., min_length=1, max_length=13)
    reason_id: int
    quantity: Decimal = Field(..., ge=0)
    unit_type: Optional[UnitType] = None


class ImportRecord(BaseModel):
    id: int
    file_name: str
    import_date: datetime
    items_inserted: int
    items_updated: int
    source: str


# Import

class ImportLineError(BaseModel):
    line_number: int
    line_content: str
    reason: str


class ImportResult(BaseModel):
    inserted: int = 0
    updated: int = 0
    errors: list[ImportLineError] = Field(default_factory=list)
    cancelled: bool = False
    status: PipelineStatus = PipelineStatus.IDLE
    file_name: str = ""
    message: str = ""

    @property
    def success(self) -> bool:
        return self.status == PipelineStatus.COMPLETED

    @property
    def total_processed(self) -> int:
        return self.inserted + self.updated + len(self.errors)


# Export

class ConsolidatedGroup(BaseModel):
    product_code: str
    quantity: Decimal
    product_name: str = ""
    entry_ids: list[int] = Field(default_factory=list)


class ExportedFile(BaseModel):
    reason: str
    file_name: str
    location: str
    entries_count: int
    warnings: list[str] = Field(default_factory=list)


class ExportError(BaseModel):
    reason: str
    error: str


class ExportResult(BaseModel):
    total_reasons: int = 0
    successful_exports: int = 0
    failed_exports: int = 0
    exported_files: list[ExportedFile] = Field(default_factory=list)
    errors: list[ExportError] = Field(default_factory=list)
    cancelled: bool = False


# Products

class SanitizationResult(BaseModel):
    total: int = 0
    corrected: int = 0
    errors: list[dict] = Field(default_factory=list)


class PriceRange(BaseModel):
    min: float = 0.0
    max: float = 0.0
    average: float = 0.0


class ProductStatistics(BaseModel):
    total: int
    by_unit_type: dict[str, int]
    price_range: PriceRange
    last_updated: datetime
