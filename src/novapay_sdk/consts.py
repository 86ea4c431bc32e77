"""
Constants for NovaPay APIs: headers, base URLs and endpoint paths
"""

from enum import Enum

HEADER_X_SIGN = "x-sign"
HEADER_X_MERCHANT_ID = "x-merchant-id"
HEADER_ACCEPT = "Accept"
HEADER_CONTENT_TYPE = "Content-Type"

CONTENT_TYPE_JSON = "application/json"

# External API (acquiring/checkout)
DEFAULT_ACQUIRING_BASE_URL = "https://api-qecom.novapay.ua"  # test
PRODUCTION_ACQUIRING_BASE_URL = "https://api-ecom.novapay.ua"

# Comfort API
DEFAULT_COMFORT_BASE_URL = "https://contragent-api.novapay.ua"

# Acquiring (External API) endpoint paths
ACQUIRING_CREATE_SESSION_PATH = "/v1/session"
ACQUIRING_ADD_PAYMENT_PATH = "/v1/payment"
ACQUIRING_VOID_SESSION_PATH = "/v1/void"
ACQUIRING_COMPLETE_HOLD_PATH = "/v1/complete-hold"
ACQUIRING_EXPIRE_SESSION_PATH = "/v1/expire"
ACQUIRING_CONFIRM_DELIVERY_PATH = "/v1/confirm-delivery-hold"
ACQUIRING_PRINT_EXPRESS_WAYBILL_PATH = "/v1/print-express-waybill"
ACQUIRING_GET_STATUS_PATH = "/v1/get-status"
ACQUIRING_DELIVERY_PRICE_PATH = "/v1/delivery-price"

# Checkout (External API) endpoint paths
CHECKOUT_CREATE_SESSION_PATH = "/v1/checkout/session"
CHECKOUT_ADD_PAYMENT_PATH = "/v1/checkout/payment"
CHECKOUT_VOID_SESSION_PATH = "/v1/void"
CHECKOUT_GET_STATUS_PATH = "/v1/get-status"
CHECKOUT_EXPIRE_SESSION_PATH = "/v1/expire"

# Comfort API endpoint paths
COMFORT_CREATE_OPERATIONS_PATH = "/v1/operations/create"
COMFORT_REFUND_OPERATIONS_PATH = "/v1/operations/refund"
COMFORT_OPERATIONS_STATUS_PATH = "/v1/operations/status"
COMFORT_CHANGE_RECIPIENT_DATA_PATH = "/v1/operations/change-recipient-data"
COMFORT_BALANCE_PATH = "/v1/balance"
COMFORT_EXPORT_OPERATIONS_PATH = "/v1/export-operations"


class SessionStatus(str, Enum):
    """Status of an acquiring payment session"""
    CREATED = "created"
    EXPIRED = "expired"
    PROCESSING = "processing"
    HOLDED = "holded"
    HOLD_CONFIRMED = "hold_confirmed"
    PROCESSING_HOLD_COMPLETION = "processing_hold_completion"
    PAID = "paid"
    FAILED = "failed"
    PROCESSING_VOID = "processing_void"
    VOIDED = "voided"
