"""
Checkout (External API) request and response models
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..exceptions import ValidationError
from .base import Model, raise_if_invalid, require, require_positive


@dataclass
class Delivery(Model):
    volume_weight: float
    weight: float


@dataclass
class CreateSessionRequest(Model):
    """Create checkout session (POST /v1/checkout/session)"""
    merchant_id: str
    callback_url: str
    success_url: Optional[str] = None
    fail_url: Optional[str] = None
    client_phone: Optional[str] = None
    create_express_waybill: Optional[bool] = None
    delivery: Optional[Delivery] = None

    def validate(self) -> None:
        ve = ValidationError()
        require(ve, "merchant_id", self.merchant_id)
        require(ve, "callback_url", self.callback_url)
        if self.create_express_waybill and self.delivery is None:
            ve.add("delivery", "is required when create_express_waybill is true")
        if self.delivery is not None:
            if not self.create_express_waybill:
                ve.add("create_express_waybill", "must be true when delivery is provided")
            require_positive(ve, "delivery.volume_weight", self.delivery.volume_weight)
            require_positive(ve, "delivery.weight", self.delivery.weight)
        raise_if_invalid(ve)


@dataclass
class Product(Model):
    count: int
    price: float
    description: Optional[str] = None
    image: Optional[str] = None


@dataclass
class AddPaymentRequest(Model):
    """Add checkout payment (POST /v1/checkout/payment)"""
    merchant_id: str
    session_id: str
    amount: float
    external_id: Optional[str] = None
    use_hold: Optional[bool] = None
    identifier: Optional[str] = None
    products: Optional[List[Product]] = None

    def validate(self) -> None:
        ve = ValidationError()
        require(ve, "merchant_id", self.merchant_id)
        require(ve, "session_id", self.session_id)
        require_positive(ve, "amount", self.amount)
        for i, p in enumerate(self.products or []):
            require_positive(ve, f"products[{i}].count", p.count)
            require_positive(ve, f"products[{i}].price", p.price)
        raise_if_invalid(ve)


@dataclass
class SessionRequest(Model):
    merchant_id: str
    session_id: str

    def validate(self) -> None:
        ve = ValidationError()
        require(ve, "merchant_id", self.merchant_id)
        require(ve, "session_id", self.session_id)
        raise_if_invalid(ve)


# Checkout responses are returned as decoded JSON objects
GenericResponse = Dict[str, Any]
