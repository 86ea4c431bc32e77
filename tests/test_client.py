"""
Unit tests for the NovaPay client and API services
"""

import json
import logging
from unittest.mock import Mock, patch

import pytest

from novapay_sdk import (
    APIError,
    ClientConfig,
    ConfigurationError,
    LogLevel,
    MemoryRecorder,
    NovaPayClient,
    ValidationError,
    VerificationError,
    create_client,
    create_client_with_recorder,
    dry_run,
    join_url,
)
from novapay_sdk.models import acquiring, checkout, comfort
from novapay_sdk.signing import HashAlgorithm, RSASigner, format_private_key_pem

from fakes import make_response, make_session


class TestJoinURL:
    """Test endpoint URL building"""

    def test_join(self):
        assert join_url("https://api-qecom.novapay.ua", "/v1/session") == "https://api-qecom.novapay.ua/v1/session"
        assert join_url("https://host/api/", "/v1/session") == "https://host/api/v1/session"
        assert join_url("https://host/api", "v1/session") == "https://host/api/v1/session"

    def test_invalid_base(self):
        with pytest.raises(ConfigurationError):
            join_url("not a url", "/v1/session")


class TestNovaPayClient:
    """Test client construction and signing helpers"""

    def setup_method(self):
        self.logger = logging.getLogger("tests.novapay.client")
        self.logger.setLevel(logging.NOTSET)

    def _client(self, private_key, public_key, *outcomes, **config):
        session = make_session(*outcomes)
        config.setdefault('logger', self.logger)
        cfg = ClientConfig(private_key=private_key, public_key=public_key, **config)
        return NovaPayClient(cfg, session=session), session

    def test_external_and_comfort_hashes(self, private_key, public_key):
        client, _ = self._client(private_key, public_key)
        body = b'{"id":"1"}'

        client.verify(body, client.sign(body))
        client.verify_comfort(body, client.sign_comfort(body))

        external = RSASigner(public_key=public_key, hash_algorithm=HashAlgorithm.SHA256)
        comfort_signer = RSASigner(public_key=public_key, hash_algorithm=HashAlgorithm.SHA1)
        external.verify(body, client.sign(body))
        comfort_signer.verify(body, client.sign_comfort(body))
        with pytest.raises(VerificationError):
            client.verify(body, client.sign_comfort(body))

    def test_acquiring_create_session(self, private_key, public_key):
        client, session = self._client(
            private_key, public_key,
            make_response(200, b'{"id":"sess-1","metadata":{"order":"42"}}'),
        )

        out = client.acquiring.create_session(
            acquiring.CreateSessionRequest(merchant_id="m1", client_phone="+380000000000")
        )

        assert out.id == "sess-1"
        assert out.metadata == {"order": "42"}
        args, kwargs = session.request.call_args
        assert args == ("POST", "https://api-qecom.novapay.ua/v1/session")
        assert json.loads(kwargs['data']) == {"merchant_id": "m1", "client_phone": "+380000000000"}
        client.verify(kwargs['data'], kwargs['headers']['x-sign'])
        assert 'x-merchant-id' not in kwargs['headers']

    def test_comfort_sends_merchant_header_and_sha1(self, private_key, public_key):
        client, session = self._client(
            private_key, public_key,
            make_response(200, b'[{"guid":"g1","public_id":"p1"}]'),
            comfort_merchant_id=" 777 ",
        )

        out = client.comfort.create_operations([comfort.CreateOperationItem(amount="100.00", guid="g1")])

        assert out == [comfort.CreateOperationsResponseItem(guid="g1", public_id="p1")]
        args, kwargs = session.request.call_args
        assert args[1] == "https://contragent-api.novapay.ua/v1/operations/create"
        assert kwargs['data'] == b'[{"amount":"100.00","guid":"g1"}]'
        assert kwargs['headers']['x-merchant-id'] == "777"
        client.verify_comfort(kwargs['data'], kwargs['headers']['x-sign'])

    def test_comfort_balance_is_get_without_body(self, private_key, public_key):
        client, session = self._client(
            private_key, public_key,
            make_response(200, b'{"balance":1500.5}'),
            comfort_merchant_id="777",
        )

        out = client.comfort.balance()

        assert out.balance == 1500.5
        args, kwargs = session.request.call_args
        assert args[0] == "GET"
        assert kwargs['data'] is None
        client.verify_comfort(b"", kwargs['headers']['x-sign'])

    def test_comfort_requires_merchant_id(self, private_key, public_key):
        client, session = self._client(private_key, public_key)
        with pytest.raises(ConfigurationError, match="comfort merchant id is not configured"):
            client.comfort.balance()
        session.request.assert_not_called()

    def test_print_express_waybill_returns_raw_bytes(self, private_key, public_key):
        pdf = b"%PDF-1.4 binary"
        client, _ = self._client(private_key, public_key, make_response(200, pdf, {'Content-Type': 'application/pdf'}))

        out = client.acquiring.print_express_waybill(acquiring.SessionRequest(merchant_id="m1", session_id="s1"))

        assert out == pdf

    def test_checkout_returns_generic_object(self, private_key, public_key):
        client, session = self._client(private_key, public_key, make_response(200, b'{"url":"https://pay"}'))

        out = client.checkout.create_session(
            checkout.CreateSessionRequest(merchant_id="m1", callback_url="https://shop/callback")
        )

        assert out == {"url": "https://pay"}
        assert session.request.call_args[0][1] == "https://api-qecom.novapay.ua/v1/checkout/session"

    def test_status_error_becomes_api_error(self, private_key, public_key):
        client, _ = self._client(private_key, public_key, make_response(422, b'{"error":"bad session"}'))

        with pytest.raises(APIError) as exc_info:
            client.acquiring.void_session(acquiring.SessionRequest(merchant_id="m1", session_id="s1"))

        err = exc_info.value
        assert err.status_code == 422
        assert err.body == b'{"error":"bad session"}'
        assert str(err) == 'novapay api error: status 422: {"error":"bad session"}'

    def test_validation_runs_before_request(self, private_key, public_key):
        client, session = self._client(private_key, public_key)

        with pytest.raises(ValidationError) as exc_info:
            client.acquiring.add_payment(acquiring.AddPaymentRequest(merchant_id="", session_id="", amount=0))

        assert [f.field for f in exc_info.value.fields] == ["merchant_id", "session_id", "amount"]
        assert str(exc_info.value) == "validation error: 3 fields"
        session.request.assert_not_called()

    def test_missing_request(self, private_key, public_key):
        client, _ = self._client(private_key, public_key)
        with pytest.raises(ValidationError, match="validation error: request: is required"):
            client.acquiring.get_status(None)

    def test_retry_settings_applied(self, private_key, public_key):
        client, session = self._client(
            private_key, public_key,
            make_response(502), make_response(200, b'{"id":"1","status":"paid"}'),
            retry_attempts=2, retry_wait=0.001,
        )

        out = client.acquiring.get_status(acquiring.SessionRequest(merchant_id="m1", session_id="s1"))

        assert out.status == "paid"
        assert session.request.call_count == 2

    def test_do_custom_endpoint(self, private_key, public_key):
        client, session = self._client(private_key, public_key, make_response(200, b'{"ok":true}'))

        out = client.acquiring.do("POST", "/v1/custom", {"a": 1}, response_model=dict)

        assert out == {"ok": True}
        assert session.request.call_args[0][1] == "https://api-qecom.novapay.ua/v1/custom"

    def test_set_log_level(self, private_key, public_key):
        client, _ = self._client(private_key, public_key)
        client.set_log_level(LogLevel.ERROR)
        assert self.logger.level == logging.ERROR
        client.set_log_level(LogLevel.OFF)
        assert not self.logger.isEnabledFor(logging.CRITICAL)

    def test_close_only_owned_session(self, private_key, public_key):
        client, session = self._client(private_key, public_key)
        client.close()
        session.close.assert_not_called()


class TestDryRun:
    """Test dry-run call options"""

    def test_custom_handler_receives_payload(self, private_key):
        session = make_session()
        client = NovaPayClient(ClientConfig(private_key=private_key), session=session)
        handler = Mock()
        request = acquiring.SessionRequest(merchant_id="m1", session_id="s1")

        out = client.acquiring.expire_session(request, options=dry_run(handler))

        assert out is None
        handler.assert_called_once_with("POST", "https://api-qecom.novapay.ua/v1/expire", request)
        session.request.assert_not_called()

    def test_default_handler_logs_payload(self, caplog):
        session = make_session()
        logger = logging.getLogger("tests.novapay.dryrun")
        client = NovaPayClient(ClientConfig(logger=logger), session=session)

        with caplog.at_level(logging.INFO, logger="tests.novapay.dryrun"):
            client.checkout.add_payment(
                checkout.AddPaymentRequest(merchant_id="m1", session_id="s1", amount=12.5),
                options=dry_run(),
            )

        assert "Dry run: skipping request POST https://api-qecom.novapay.ua/v1/checkout/payment" in caplog.text
        assert '"amount": 12.5' in caplog.text
        session.request.assert_not_called()

    def test_dry_run_still_validates(self):
        client = NovaPayClient(session=make_session())
        with pytest.raises(ValidationError):
            client.checkout.create_session(
                checkout.CreateSessionRequest(merchant_id="m1", callback_url=""),
                options=dry_run(Mock()),
            )


class TestFactories:
    """Test client factory helpers"""

    def test_create_client_with_pem(self, private_key, public_key):
        pem = format_private_key_pem(private_key)
        client = create_client(session=make_session(), private_key_pem=pem, comfort_merchant_id="1")
        assert client.config.private_key.private_numbers() == private_key.private_numbers()
        assert client.comfort_http.default_headers == {'x-merchant-id': "1"}

    def test_create_client_with_recorder(self, private_key):
        recorder = MemoryRecorder()
        session = make_session(make_response(200, b'{"id":"s"}'))
        client = create_client_with_recorder(recorder, session=session, private_key=private_key)

        client.acquiring.create_session(acquiring.CreateSessionRequest(merchant_id="m", client_phone="1"))

        assert [e.kind for e in recorder.events] == ['request', 'response']

    def test_context_manager_closes_owned_session(self):
        client = NovaPayClient()
        with patch.object(client.session, 'close') as close:
            with client:
                pass
        close.assert_called_once()
