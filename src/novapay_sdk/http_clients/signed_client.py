"""
Signed HTTP transport for NovaPay APIs

This module sends JSON requests signed with the x-sign header, retries transient
failures with exponential backoff, and decodes JSON responses. The body is
encoded exactly once per attempt and that buffer is both signed and sent.
"""

import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from requests.structures import CaseInsensitiveDict

from ..canonical_json import encode_body
from ..consts import CONTENT_TYPE_JSON, HEADER_ACCEPT, HEADER_CONTENT_TYPE, HEADER_X_SIGN
from ..exceptions import (
    DeadlineExceededError,
    DecodeError,
    HTTPStatusError,
    NovaPaySDKError,
    SigningError,
    TransportError,
)
from ..log import describe_body
from ..models.base import convert
from ..recorder import Recorder
from ..signing.types import Signer
from ..version import __version__
from .context import CallContext
from .retry import RetryPolicy, is_retryable

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
USER_AGENT = f"NovaPay-Python-SDK/{__version__}"


@dataclass
class HttpResult:
    """Outcome of a successful call"""
    status_code: int
    body: bytes
    data: Any = None
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    request_id: str = ""


def new_request_id() -> str:
    """Per-attempt correlation id (UUID v4). Never sent to the server."""
    return str(uuid.uuid4())


def create_session(pool_maxsize: int = 10) -> requests.Session:
    """
    Create the shared HTTP session.

    Adapter level retries are disabled: ``SignedHttpClient`` owns every retry
    decision.
    """
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=0, pool_maxsize=pool_maxsize)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update({'User-Agent': USER_AGENT})
    return session


def decode_response(raw: bytes, response_model: Any, status_code: int) -> Any:
    """
    Decode a 2xx body into ``response_model``.

    Raises:
        DecodeError: If the body is not JSON or does not fit the model
    """
    if response_model is None:
        return None
    try:
        parsed = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as e:
        raise DecodeError(f"decode json response: {e}", status_code, raw) from e
    try:
        return convert(response_model, parsed)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"decode json response: {e}", status_code, raw) from e


class SignedHttpClient:
    """
    HTTP client that signs request bodies and retries transient failures.

    Features:
    - Canonical JSON bodies signed byte-for-byte with x-sign
    - Bounded retries with exponential backoff (429, 5xx except 501, network errors)
    - Cancellation through ``CallContext`` before each attempt and during backoff
    - Recorder hooks correlated by a per-attempt request id
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        signer: Optional[Signer] = None,
        logger: Optional[logging.Logger] = None,
        retry_policy: Optional[RetryPolicy] = None,
        default_headers: Optional[Dict[str, str]] = None,
        recorder: Optional[Recorder] = None,
        log_bodies: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the signed transport

        Args:
            session: Shared requests session (created if omitted)
            signer: x-sign producer; no signature header is sent without one
            logger: Logger for request/response lines
            retry_policy: Attempt budget and initial backoff wait
            default_headers: Extra headers for every request (copied)
            recorder: Optional traffic observer
            log_bodies: Log request/response bodies instead of sizes
            timeout: Per-attempt HTTP timeout in seconds
        """
        self.session = session or create_session()
        self.signer = signer
        self.logger = logger or logging.getLogger(__name__)
        self.retry_policy = retry_policy or RetryPolicy()
        self.default_headers = dict(default_headers or {})
        self.recorder = recorder
        self.log_bodies = log_bodies
        self.timeout = timeout if timeout and timeout > 0 else DEFAULT_TIMEOUT

    def do_json(
        self,
        method: str,
        url: str,
        body: Any = None,
        response_model: Any = None,
        context: Optional[CallContext] = None,
    ) -> HttpResult:
        """
        Send a signed request, retrying transient failures.

        Args:
            method: HTTP method
            url: Absolute request URL
            body: Request value (model, dict/list, str, bytes or None)
            response_model: Shape to decode a 2xx body into (None to skip)
            context: Cancellation/deadline handle for the whole call

        Returns:
            HttpResult: Status, raw body and decoded data

        Raises:
            NovaPaySDKError: The terminal failure, or the last retryable one
                once attempts are exhausted
        """
        context = context or CallContext.background()
        attempts = self.retry_policy.max_attempts

        for attempt in range(1, attempts + 1):
            self.logger.debug(f"[NovaPay HTTP] request: method={method} url={url} attempt={attempt}/{attempts}")
            try:
                result = self.send_once(method, url, body, response_model, context)
            except NovaPaySDKError as e:
                if not is_retryable(e) or attempt == attempts:
                    self._log_failure(method, url, e)
                    raise
                wait = self.retry_policy.wait_for(attempt)
                self.logger.warning(
                    f"[NovaPay HTTP] request retry: method={method} url={url} "
                    f"attempt={attempt} wait={wait:.3f}s err={e}"
                )
                context.wait(wait)
                continue

            self.logger.debug(
                f"[NovaPay HTTP] response: method={method} url={url} status={result.status_code} "
                f"response={describe_body(result.body, self.log_bodies)}"
            )
            return result

        raise AssertionError("unreachable: retry loop exited without result")

    def send_once(
        self,
        method: str,
        url: str,
        body: Any = None,
        response_model: Any = None,
        context: Optional[CallContext] = None,
        request_id: Optional[str] = None,
    ) -> HttpResult:
        """
        Perform exactly one signed HTTP attempt.

        Raises:
            EncodeError, SigningError: Before dispatch (terminal)
            CancelledError, DeadlineExceededError: Context ended before or during the attempt
            TransportError: Network level failure
            HTTPStatusError: Non-2xx response
            DecodeError: 2xx body does not fit ``response_model``
        """
        context = context or CallContext.background()
        request_id = request_id or new_request_id()

        try:
            body_bytes = encode_body(body)
            sig_input = body_bytes if body_bytes is not None else b""
            headers = self._build_headers(body_bytes is not None, sig_input)
            context.check()
            timeout = self._attempt_timeout(context)
        except NovaPaySDKError as e:
            self._record_error(request_id, e)
            raise

        self.logger.debug(
            f"[NovaPay HTTP] request prepared: request_id={request_id} method={method} url={url} "
            f"payload={describe_body(sig_input, self.log_bodies)}"
        )
        self._record_request(request_id, sig_input)

        try:
            response = self.session.request(
                method,
                url,
                data=body_bytes,
                headers=headers,
                timeout=timeout,
            )
            raw = response.content or b""
        except requests.exceptions.RequestException as e:
            # a timeout cut short by the call deadline is the deadline's failure
            err = context.error() or TransportError(f"{method} {url}: {e}", e)
            self._record_error(request_id, err)
            raise err from e
        self._record_response(request_id, raw)

        self.logger.debug(
            f"[NovaPay HTTP] response received: request_id={request_id} method={method} url={url} "
            f"status={response.status_code} response={describe_body(raw, self.log_bodies)}"
        )

        if response.status_code < 200 or response.status_code >= 300:
            status_err = HTTPStatusError(response.status_code, raw)
            self._record_error(request_id, status_err)
            raise status_err

        try:
            data = decode_response(raw, response_model, response.status_code)
        except DecodeError as e:
            self._record_error(request_id, e)
            raise

        return HttpResult(
            status_code=response.status_code,
            body=raw,
            data=data,
            headers=CaseInsensitiveDict(response.headers or {}),
            request_id=request_id,
        )

    def _build_headers(self, has_body: bool, sig_input: bytes) -> CaseInsensitiveDict:
        headers = CaseInsensitiveDict()
        headers[HEADER_ACCEPT] = CONTENT_TYPE_JSON
        if has_body:
            headers[HEADER_CONTENT_TYPE] = CONTENT_TYPE_JSON
        for key, value in self.default_headers.items():
            if not key or not value:
                continue
            headers[key] = value
        # signature goes last so no default header can replace it
        if self.signer is not None:
            try:
                headers[HEADER_X_SIGN] = self.signer.sign(sig_input)
            except NovaPaySDKError:
                raise
            except Exception as e:
                raise SigningError(f"sign request body: {e}", "SIGNER_FAILED") from e
        return headers

    def _attempt_timeout(self, context: CallContext) -> float:
        remaining = context.remaining()
        if remaining is None:
            return self.timeout
        if remaining <= 0:
            raise DeadlineExceededError()
        return min(self.timeout, remaining)

    def _log_failure(self, method: str, url: str, error: NovaPaySDKError) -> None:
        status = getattr(error, 'status_code', None)
        if status is not None:
            self.logger.error(
                f"[NovaPay HTTP] request failed: method={method} url={url} status={status} err={error} "
                f"response={describe_body(getattr(error, 'body', b''), self.log_bodies)}"
            )
        else:
            self.logger.error(f"[NovaPay HTTP] request failed: method={method} url={url} err={error}")

    def _record_request(self, request_id: str, body: bytes) -> None:
        if self.recorder is None:
            return
        try:
            self.recorder.record_request(request_id, body)
        except Exception as e:
            self.logger.warning(f"[NovaPay HTTP] cannot record request: {e}")

    def _record_response(self, request_id: str, body: bytes) -> None:
        if self.recorder is None:
            return
        try:
            self.recorder.record_response(request_id, body)
        except Exception as e:
            self.logger.warning(f"[NovaPay HTTP] cannot record response: {e}")

    def _record_error(self, request_id: str, error: BaseException) -> None:
        if self.recorder is None or error is None:
            return
        try:
            self.recorder.record_error(request_id, error)
        except Exception as e:
            self.logger.warning(f"[NovaPay HTTP] cannot record error: {e}")

    def close(self) -> None:
        """Close the HTTP session."""
        if self.session is not None:
            self.session.close()
            self.logger.debug("HTTP session closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
