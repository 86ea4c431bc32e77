"""
Acquiring (External API) request and response models
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..exceptions import ValidationError
from .base import Model, json_field, raise_if_invalid, require, require_positive


@dataclass
class CreateSessionRequest(Model):
    """Create session (POST /v1/session)"""
    merchant_id: str
    client_phone: str
    client_first_name: Optional[str] = None
    client_last_name: Optional[str] = None
    client_patronymic: Optional[str] = None
    client_email: Optional[str] = None
    callback_url: Optional[str] = None
    success_url: Optional[str] = None
    fail_url: Optional[str] = None
    success_redirect_timeout: Optional[int] = None
    metadata: Optional[Any] = None

    def validate(self) -> None:
        ve = ValidationError()
        require(ve, "merchant_id", self.merchant_id)
        require(ve, "client_phone", self.client_phone)
        raise_if_invalid(ve)


@dataclass
class CreateSessionResponse(Model):
    id: str = ""
    metadata: Optional[Any] = None


@dataclass
class Delivery(Model):
    volume_weight: float
    weight: float
    recipient_city: str
    recipient_warehouse: str


@dataclass
class Product(Model):
    description: str
    count: int
    price: float


@dataclass
class AddPaymentRequest(Model):
    """Add payment (POST /v1/payment)"""
    merchant_id: str
    session_id: str
    amount: float
    external_id: Optional[str] = None
    use_hold: Optional[bool] = None
    identifier: Optional[str] = None
    delivery: Optional[Delivery] = None
    products: Optional[List[Product]] = None

    def validate(self) -> None:
        ve = ValidationError()
        require(ve, "merchant_id", self.merchant_id)
        require(ve, "session_id", self.session_id)
        require_positive(ve, "amount", self.amount)
        if self.delivery is not None:
            if not self.use_hold:
                ve.add("use_hold", "must be true when delivery is provided")
            d = self.delivery
            require_positive(ve, "delivery.volume_weight", d.volume_weight)
            require_positive(ve, "delivery.weight", d.weight)
            require(ve, "delivery.recipient_city", d.recipient_city)
            require(ve, "delivery.recipient_warehouse", d.recipient_warehouse)
        for i, p in enumerate(self.products or []):
            require(ve, f"products[{i}].description", p.description)
            require_positive(ve, f"products[{i}].count", p.count)
            require_positive(ve, f"products[{i}].price", p.price)
        raise_if_invalid(ve)


@dataclass
class AddPaymentResponse(Model):
    id: str = ""
    url: str = ""
    delivery_price: Optional[float] = None


@dataclass
class SessionRequest(Model):
    """Payload for endpoints that take merchant_id + session_id"""
    merchant_id: str
    session_id: str

    def validate(self) -> None:
        ve = ValidationError()
        require(ve, "merchant_id", self.merchant_id)
        require(ve, "session_id", self.session_id)
        raise_if_invalid(ve)


@dataclass
class CompleteHoldOperation(Model):
    id: str
    amount: float
    recipient_identifier: str


@dataclass
class CompleteHoldRequest(Model):
    """Complete hold (POST /v1/complete-hold)"""
    merchant_id: str
    session_id: str
    amount: Optional[float] = None
    operations: Optional[List[CompleteHoldOperation]] = None

    def validate(self) -> None:
        ve = ValidationError()
        require(ve, "merchant_id", self.merchant_id)
        require(ve, "session_id", self.session_id)
        if self.amount is not None and self.amount <= 0:
            ve.add("amount", "must be > 0")
        for i, op in enumerate(self.operations or []):
            require(ve, f"operations[{i}].id", op.id)
            require_positive(ve, f"operations[{i}].amount", op.amount)
            require(ve, f"operations[{i}].recipient_identifier", op.recipient_identifier)
        raise_if_invalid(ve)


@dataclass
class ConfirmDeliveryHoldResponse(Model):
    id: str = ""
    express_waybill: str = ""
    ref_id: str = ""
    metadata: Optional[Any] = None


@dataclass
class DeliveryPriceRequest(Model):
    """Delivery price (POST /v1/delivery-price)"""
    merchant_id: str
    recipient_city: str
    recipient_warehouse: str
    volume_weight: float
    weight: float
    amount: float

    def validate(self) -> None:
        ve = ValidationError()
        require(ve, "merchant_id", self.merchant_id)
        require(ve, "recipient_city", self.recipient_city)
        require(ve, "recipient_warehouse", self.recipient_warehouse)
        require_positive(ve, "volume_weight", self.volume_weight)
        require_positive(ve, "weight", self.weight)
        require_positive(ve, "amount", self.amount)
        raise_if_invalid(ve)


# Delivery price response schema is not fully documented
DeliveryPriceResponse = Dict[str, Any]


@dataclass
class OperationInfo(Model):
    amount: float = 0.0
    external_id: Optional[str] = None


@dataclass
class GetStatusResponse(Model):
    """Get status (POST /v1/get-status)"""
    id: str = ""
    status: str = ""
    paytype: str = ""
    created_at: str = ""
    metadata: Optional[Any] = None
    approval_code: Optional[str] = None
    terminal_name: Optional[str] = None
    client_phone: Optional[str] = None
    client_first_name: Optional[str] = None
    client_last_name: Optional[str] = None
    client_patronymic: Optional[str] = None
    pan: Optional[str] = None
    operations: Optional[List[OperationInfo]] = None


@dataclass
class PostbackCard(Model):
    pan: str = ""
    card_bank: str = ""
    card_country: str = ""
    card_type: str = ""


@dataclass
class PostbackPayment(Model):
    amount: float = 0.0
    external_id: Optional[str] = None
    products: Optional[List[Product]] = None


@dataclass
class Postback(Model):
    """Callback payload sent by NovaPay (verify its x-sign before parsing)"""
    id: str = ""
    status: str = ""
    paytype: str = ""
    terminal_name: str = ""
    rrn: str = json_field("RRN", default="")
    approval: int = json_field("APPROVAL", default=0)
    created_at: str = ""
    metadata: Optional[Any] = None
    client_first_name: str = ""
    client_last_name: str = ""
    client_patronymic: Optional[str] = None
    client_phone: str = ""
    client_email: Optional[str] = None
    client_ip: Optional[str] = None
    processing_result: str = ""
    card_details: Optional[PostbackCard] = None
    payments: Optional[List[PostbackPayment]] = None

    @property
    def total_amount(self) -> float:
        return sum(p.amount for p in self.payments or [])
