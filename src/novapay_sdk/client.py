"""
NovaPay API client

``NovaPayClient`` exposes the External API (Acquiring, Checkout) and the
Comfort API over two signed transports that share one HTTP session. Requests
are signed automatically with x-sign; each API family has its own signer so
the digest algorithm can differ.
"""

import logging
import posixpath
from typing import Any, List, Optional, Union
from urllib.parse import urlsplit, urlunsplit

import requests

from .config import ClientConfig
from .consts import (
    ACQUIRING_ADD_PAYMENT_PATH,
    ACQUIRING_COMPLETE_HOLD_PATH,
    ACQUIRING_CONFIRM_DELIVERY_PATH,
    ACQUIRING_CREATE_SESSION_PATH,
    ACQUIRING_DELIVERY_PRICE_PATH,
    ACQUIRING_EXPIRE_SESSION_PATH,
    ACQUIRING_GET_STATUS_PATH,
    ACQUIRING_PRINT_EXPRESS_WAYBILL_PATH,
    ACQUIRING_VOID_SESSION_PATH,
    CHECKOUT_ADD_PAYMENT_PATH,
    CHECKOUT_CREATE_SESSION_PATH,
    CHECKOUT_EXPIRE_SESSION_PATH,
    CHECKOUT_GET_STATUS_PATH,
    CHECKOUT_VOID_SESSION_PATH,
    COMFORT_BALANCE_PATH,
    COMFORT_CHANGE_RECIPIENT_DATA_PATH,
    COMFORT_CREATE_OPERATIONS_PATH,
    COMFORT_EXPORT_OPERATIONS_PATH,
    COMFORT_OPERATIONS_STATUS_PATH,
    COMFORT_REFUND_OPERATIONS_PATH,
    HEADER_X_MERCHANT_ID,
)
from .exceptions import APIError, ConfigurationError, FieldError, HTTPStatusError, ValidationError
from .http_clients import CallContext, HttpResult, SignedHttpClient, create_session
from .log import SDK_LOGGER_NAME, LogLevel, set_log_level
from .models import acquiring, checkout, comfort
from .recorder import Recorder
from .run_options import RunOptions
from .signing import RSASigner

logger = logging.getLogger(__name__)


def join_url(base_url: str, endpoint_path: str) -> str:
    """
    Join an endpoint path onto the path of ``base_url``.

    Raises:
        ConfigurationError: If the base URL has no scheme or host
    """
    parts = urlsplit(base_url)
    if not parts.scheme or not parts.netloc:
        raise ConfigurationError(f"invalid base url {base_url!r}", "INVALID_BASE_URL")
    path = posixpath.normpath(posixpath.join("/", parts.path.lstrip("/"), endpoint_path.lstrip("/")))
    return urlunsplit(parts._replace(path=path))


def _validate(request: Any) -> None:
    if request is None:
        raise ValidationError([FieldError("request", "is required")])
    request.validate()


class _Service:
    """Shared plumbing for one API family"""

    def __init__(self, client: 'NovaPayClient', base_url: str, http: SignedHttpClient):
        self._client = client
        self._base_url = base_url
        self._http = http

    def _call(
        self,
        method: str,
        endpoint_path: str,
        body: Any,
        response_model: Any,
        context: Optional[CallContext],
        options: Optional[RunOptions],
    ) -> Optional[HttpResult]:
        url = join_url(self._base_url, endpoint_path)
        if options is not None and options.handle_dry_run(method, url, body, self._client.logger):
            return None
        try:
            return self._http.do_json(method, url, body, response_model, context)
        except APIError:
            raise
        except HTTPStatusError as e:
            raise APIError(e.status_code, e.body) from e

    def _data(self, *args) -> Any:
        result = self._call(*args)
        return result.data if result is not None else None

    def do(
        self,
        method: str,
        endpoint_path: str,
        body: Any = None,
        response_model: Any = None,
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> Any:
        """
        Send a signed request to any endpoint of this API.

        Returns:
            Decoded response (None without ``response_model`` or on dry run)
        """
        return self._data(method, endpoint_path, body, response_model, context, options)


class AcquiringService(_Service):
    """Acquiring (External API) endpoints"""

    def create_session(
        self,
        request: acquiring.CreateSessionRequest,
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> Optional[acquiring.CreateSessionResponse]:
        """Create a payment session."""
        _validate(request)
        return self._data("POST", ACQUIRING_CREATE_SESSION_PATH, request,
                          acquiring.CreateSessionResponse, context, options)

    def add_payment(
        self,
        request: acquiring.AddPaymentRequest,
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> Optional[acquiring.AddPaymentResponse]:
        """Add order information to a session and get the payment URL."""
        _validate(request)
        return self._data("POST", ACQUIRING_ADD_PAYMENT_PATH, request,
                          acquiring.AddPaymentResponse, context, options)

    def void_session(
        self,
        request: acquiring.SessionRequest,
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> None:
        _validate(request)
        self._call("POST", ACQUIRING_VOID_SESSION_PATH, request, None, context, options)

    def complete_hold(
        self,
        request: acquiring.CompleteHoldRequest,
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> None:
        _validate(request)
        self._call("POST", ACQUIRING_COMPLETE_HOLD_PATH, request, None, context, options)

    def expire_session(
        self,
        request: acquiring.SessionRequest,
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> None:
        _validate(request)
        self._call("POST", ACQUIRING_EXPIRE_SESSION_PATH, request, None, context, options)

    def confirm_delivery_hold(
        self,
        request: acquiring.SessionRequest,
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> Optional[acquiring.ConfirmDeliveryHoldResponse]:
        _validate(request)
        return self._data("POST", ACQUIRING_CONFIRM_DELIVERY_PATH, request,
                          acquiring.ConfirmDeliveryHoldResponse, context, options)

    def print_express_waybill(
        self,
        request: acquiring.SessionRequest,
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> Optional[bytes]:
        """Download the express waybill document as raw bytes."""
        _validate(request)
        result = self._call("POST", ACQUIRING_PRINT_EXPRESS_WAYBILL_PATH, request, None, context, options)
        return result.body if result is not None else None

    def get_status(
        self,
        request: acquiring.SessionRequest,
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> Optional[acquiring.GetStatusResponse]:
        _validate(request)
        return self._data("POST", ACQUIRING_GET_STATUS_PATH, request,
                          acquiring.GetStatusResponse, context, options)

    def delivery_price(
        self,
        request: acquiring.DeliveryPriceRequest,
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> Optional[acquiring.DeliveryPriceResponse]:
        _validate(request)
        return self._data("POST", ACQUIRING_DELIVERY_PRICE_PATH, request,
                          acquiring.DeliveryPriceResponse, context, options)


class CheckoutService(_Service):
    """Checkout (External API) endpoints"""

    def create_session(
        self,
        request: checkout.CreateSessionRequest,
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> Optional[checkout.GenericResponse]:
        _validate(request)
        return self._data("POST", CHECKOUT_CREATE_SESSION_PATH, request,
                          checkout.GenericResponse, context, options)

    def add_payment(
        self,
        request: checkout.AddPaymentRequest,
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> Optional[checkout.GenericResponse]:
        _validate(request)
        return self._data("POST", CHECKOUT_ADD_PAYMENT_PATH, request,
                          checkout.GenericResponse, context, options)

    def void_session(
        self,
        request: checkout.SessionRequest,
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> None:
        _validate(request)
        self._call("POST", CHECKOUT_VOID_SESSION_PATH, request, None, context, options)

    def get_status(
        self,
        request: checkout.SessionRequest,
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> Optional[checkout.GenericResponse]:
        _validate(request)
        return self._data("POST", CHECKOUT_GET_STATUS_PATH, request,
                          checkout.GenericResponse, context, options)

    def expire_session(
        self,
        request: checkout.SessionRequest,
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> None:
        _validate(request)
        self._call("POST", CHECKOUT_EXPIRE_SESSION_PATH, request, None, context, options)


class ComfortService(_Service):
    """
    Comfort API endpoints

    Every call requires ``comfort_merchant_id``, sent as the x-merchant-id
    header.
    """

    def _ensure_ready(self) -> None:
        if not self._client.config.comfort_merchant_id:
            raise ConfigurationError(
                "comfort merchant id is not configured; set ClientConfig.comfort_merchant_id",
                "COMFORT_MERCHANT_ID_MISSING",
            )

    def create_operations(
        self,
        request: Union[comfort.CreateOperationsRequest, List[comfort.CreateOperationItem]],
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> Optional[List[comfort.CreateOperationsResponseItem]]:
        """Send payout instructions."""
        self._ensure_ready()
        if isinstance(request, list):
            request = comfort.CreateOperationsRequest(items=request)
        _validate(request)
        return self._data("POST", COMFORT_CREATE_OPERATIONS_PATH, request,
                          List[comfort.CreateOperationsResponseItem], context, options)

    def refund_operations(
        self,
        request: Union[comfort.RefundOperationsRequest, List[str]],
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> Optional[List[str]]:
        """Refund operations by guid."""
        self._ensure_ready()
        if isinstance(request, list):
            request = comfort.RefundOperationsRequest(guids=request)
        _validate(request)
        return self._data("POST", COMFORT_REFUND_OPERATIONS_PATH, request,
                          List[str], context, options)

    def operations_status(
        self,
        request: Optional[comfort.OperationsStatusRequest] = None,
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> Optional[comfort.OperationsStatusResponse]:
        self._ensure_ready()
        if request is None:
            request = comfort.OperationsStatusRequest()
        return self._data("POST", COMFORT_OPERATIONS_STATUS_PATH, request,
                          comfort.OperationsStatusResponse, context, options)

    def change_recipient_data(
        self,
        request: comfort.ChangeRecipientDataRequest,
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> None:
        self._ensure_ready()
        _validate(request)
        self._call("POST", COMFORT_CHANGE_RECIPIENT_DATA_PATH, request, None, context, options)

    def balance(
        self,
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> Optional[comfort.BalanceResponse]:
        """Current Comfort balance (GET, signed over an empty body)."""
        self._ensure_ready()
        return self._data("GET", COMFORT_BALANCE_PATH, None,
                          comfort.BalanceResponse, context, options)

    def export_operations(
        self,
        request: comfort.ExportOperationsRequest,
        context: Optional[CallContext] = None,
        options: Optional[RunOptions] = None,
    ) -> Optional[comfort.ExportOperationsResponse]:
        self._ensure_ready()
        _validate(request)
        return self._data("POST", COMFORT_EXPORT_OPERATIONS_PATH, request,
                          comfort.ExportOperationsResponse, context, options)

    def do(self, method: str, endpoint_path: str, body: Any = None, response_model: Any = None,
           context: Optional[CallContext] = None, options: Optional[RunOptions] = None) -> Any:
        self._ensure_ready()
        return super().do(method, endpoint_path, body, response_model, context, options)


class NovaPayClient:
    """
    Main NovaPay SDK client

    Usage:
        config = ClientConfig().with_private_key_file("merchant.pem")
        with NovaPayClient(config) as client:
            session = client.acquiring.create_session(request)
    """

    def __init__(self, config: Optional[ClientConfig] = None, session: Optional[requests.Session] = None):
        """
        Initialize the client

        Args:
            config: Client configuration (defaults when omitted)
            session: Shared requests session (created and owned when omitted)
        """
        self.config = config or ClientConfig()
        self.logger = self.config.logger or logging.getLogger(SDK_LOGGER_NAME)
        self._owns_session = session is None
        self.session = session or create_session()

        self.external_signer = RSASigner(
            private_key=self.config.private_key,
            public_key=self.config.public_key,
            hash_algorithm=self.config.external_hash,
        )
        self.comfort_signer = RSASigner(
            private_key=self.config.private_key,
            public_key=self.config.public_key,
            hash_algorithm=self.config.comfort_hash,
        )

        comfort_headers = {}
        if self.config.comfort_merchant_id:
            comfort_headers[HEADER_X_MERCHANT_ID] = self.config.comfort_merchant_id

        retry_policy = self.config.retry_policy()
        self.external_http = SignedHttpClient(
            session=self.session,
            signer=self.external_signer,
            logger=self.logger,
            retry_policy=retry_policy,
            recorder=self.config.recorder,
            log_bodies=self.config.log_http_bodies,
            timeout=self.config.timeout,
        )
        self.comfort_http = SignedHttpClient(
            session=self.session,
            signer=self.comfort_signer,
            logger=self.logger,
            retry_policy=retry_policy,
            default_headers=comfort_headers,
            recorder=self.config.recorder,
            log_bodies=self.config.log_http_bodies,
            timeout=self.config.timeout,
        )

        self.acquiring = AcquiringService(self, self.config.acquiring_base_url, self.external_http)
        self.checkout = CheckoutService(self, self.config.checkout_base_url, self.external_http)
        self.comfort = ComfortService(self, self.config.comfort_base_url, self.comfort_http)

        logger.debug(
            f"NovaPay client initialized: acquiring={self.config.acquiring_base_url} "
            f"checkout={self.config.checkout_base_url} comfort={self.config.comfort_base_url}"
        )

    def sign(self, body: bytes) -> str:
        """Sign a payload for the External API (Acquiring/Checkout)."""
        return self.external_signer.sign(body)

    def sign_comfort(self, body: bytes) -> str:
        return self.comfort_signer.sign(body)

    def verify(self, body: bytes, x_sign: str) -> None:
        """
        Verify an x-sign value (e.g. a postback) with the External API digest.

        Raises:
            VerificationError: If the signature does not match the body
        """
        self.external_signer.verify(body, x_sign)

    def verify_comfort(self, body: bytes, x_sign: str) -> None:
        self.comfort_signer.verify(body, x_sign)

    def set_log_level(self, level: Union[LogLevel, int]) -> None:
        set_log_level(self.logger, level)

    def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self.external_http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def create_client(session: Optional[requests.Session] = None, **kwargs) -> NovaPayClient:
    """
    Create a NovaPay client from keyword configuration.

    Besides ``ClientConfig`` fields, accepts ``private_key_pem``,
    ``private_key_file``, ``public_key_pem`` and ``public_key_file``.

    Returns:
        NovaPayClient: Configured client
    """
    private_key_pem = kwargs.pop('private_key_pem', None)
    private_key_file = kwargs.pop('private_key_file', None)
    public_key_pem = kwargs.pop('public_key_pem', None)
    public_key_file = kwargs.pop('public_key_file', None)

    config = ClientConfig(**kwargs)
    if private_key_pem is not None:
        config.with_private_key_pem(private_key_pem)
    if private_key_file is not None:
        config.with_private_key_file(private_key_file)
    if public_key_pem is not None:
        config.with_public_key_pem(public_key_pem)
    if public_key_file is not None:
        config.with_public_key_file(public_key_file)
    return NovaPayClient(config, session=session)


def create_client_with_recorder(recorder: Recorder, **kwargs) -> NovaPayClient:
    """Create a NovaPay client with a recorder attached."""
    kwargs['recorder'] = recorder
    return create_client(**kwargs)
