"""
Comfort API request and response models

Create and refund requests are JSON arrays on the wire; their models wrap the
list in ``items`` and serialize to the bare array.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..exceptions import ValidationError
from .base import Model, raise_if_invalid, require


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"
    XLSX = "xlsx"


@dataclass
class Recipient(Model):
    last_name: str
    first_name: str
    patronymic: str
    phone: str
    document_type: Optional[str] = None
    document_number: Optional[str] = None
    document_series: Optional[str] = None
    document_issued_country: Optional[str] = None


@dataclass
class CreateOperationItem(Model):
    amount: str
    guid: Optional[str] = None
    purpose: Optional[str] = None
    payout_pan: Optional[str] = None
    refund_on_failed_payout: Optional[bool] = None
    recipient: Optional[Recipient] = None


@dataclass
class CreateOperationsRequest:
    """Create operations (POST /v1/operations/create), sent as a JSON array"""
    items: List[CreateOperationItem] = field(default_factory=list)

    def to_dict(self) -> List[Dict[str, Any]]:
        return [item.to_dict() for item in self.items]

    def validate(self) -> None:
        ve = ValidationError()
        if not self.items:
            ve.add("items", "is required")
        for i, item in enumerate(self.items):
            require(ve, f"items[{i}].amount", item.amount)
        raise_if_invalid(ve)


@dataclass
class CreateOperationsResponseItem(Model):
    guid: str = ""
    public_id: str = ""


@dataclass
class RefundOperationsRequest:
    """Refund operations by guid (POST /v1/operations/refund), sent as a JSON array"""
    guids: List[str] = field(default_factory=list)

    def to_dict(self) -> List[str]:
        return list(self.guids)

    def validate(self) -> None:
        ve = ValidationError()
        if not self.guids:
            ve.add("guids", "is required")
        for i, guid in enumerate(self.guids):
            require(ve, f"guids[{i}]", guid)
        raise_if_invalid(ve)


@dataclass
class OperationsStatusRequest(Model):
    guid: Optional[str] = None


@dataclass
class OperationsStatusResponse(Model):
    status: str = ""
    public_id: str = ""


@dataclass
class RecipientData(Model):
    last_name: str
    first_name: str
    patronymic: str
    document_type: Optional[str] = None
    document_number: Optional[str] = None
    document_series: Optional[str] = None
    document_issued_country: Optional[str] = None


@dataclass
class ChangeRecipientDataRequest(Model):
    """Change recipient data (POST /v1/operations/change-recipient-data)"""
    guid: str
    recipient: RecipientData

    def validate(self) -> None:
        ve = ValidationError()
        require(ve, "guid", self.guid)
        if self.recipient is None:
            ve.add("recipient", "is required")
        else:
            require(ve, "recipient.last_name", self.recipient.last_name)
            require(ve, "recipient.first_name", self.recipient.first_name)
            require(ve, "recipient.patronymic", self.recipient.patronymic)
        raise_if_invalid(ve)


@dataclass
class ExportOperationsRequest(Model):
    """Export operations (POST /v1/export-operations)"""
    from_date: str
    to_date: str
    recepient_email: str
    format: Optional[ExportFormat] = None

    def validate(self) -> None:
        ve = ValidationError()
        require(ve, "from_date", self.from_date)
        require(ve, "to_date", self.to_date)
        require(ve, "recepient_email", self.recepient_email)
        raise_if_invalid(ve)


@dataclass
class ExportOperationsResponse(Model):
    export_id: str = ""
    status: str = ""
    requested_at: str = ""


@dataclass
class BalanceResponse(Model):
    balance: float = 0.0
