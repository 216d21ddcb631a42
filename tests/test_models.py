from datetime import datetime

import pytest

from shippingapi.constants import (
    SHIPMENT_PATH,
    TRACKING_PATH,
    TRANSACTIONS_REPORT_PATH,
)
from shippingapi.models.base import AuthToken, ErrorDetail, ShippingApiResponse, token_is_valid
from shippingapi.models.shipping import (
    CancelShipmentRequest,
    Country,
    ReportRequest,
    Shipment,
    TrackingRequest,
)


class TestShippingApiResponse:
    def test_success_requires_2xx_and_no_errors(self):
        assert ShippingApiResponse(http_status=200).success
        assert ShippingApiResponse(http_status=201).success
        assert not ShippingApiResponse(http_status=500).success
        assert not ShippingApiResponse(http_status=0).success
        assert not ShippingApiResponse(
            http_status=200, errors=[ErrorDetail(error_code="X", message="y")]
        ).success

    def test_success_follows_errors(self):
        response = ShippingApiResponse(http_status=200)
        response.add_error("Client Timeout")

        assert not response.success
        assert response.errors[0].message == "Client Timeout"

    def test_failure(self):
        response = ShippingApiResponse.failure(404, "NOT-FOUND", "No such shipment")

        assert response.http_status == 404
        assert response.errors == [ErrorDetail(error_code="NOT-FOUND", message="No such shipment")]
        assert str(response) == "HTTP 404 failed: NOT-FOUND: No such shipment"

    def test_dump_includes_success(self):
        data = ShippingApiResponse(http_status=200, api_response={"a": 1}).model_dump()

        assert data["success"] is True
        assert data["api_response"] == {"a": 1}


class TestErrorDetail:
    def test_parses_wire_names(self):
        detail = ErrorDetail.model_validate(
            {"errorCode": "PB-1", "message": "bad", "additionalInfo": "field x"}
        )

        assert detail.error_code == "PB-1"
        assert detail.additional_info == "field x"
        assert str(detail) == "PB-1: bad"


class TestAuthToken:
    def test_parses_token_endpoint_body(self):
        token = AuthToken.model_validate({
            "access_token": "abc",
            "tokenType": "BearerToken",
            "issuedAt": 1562000000000,
            "expiresIn": 35999,
            "clientID": "client",
        })

        assert token.access_token == "abc"
        assert token.expires_in == 35999
        assert token.client_id == "client"
        assert token.is_valid()

    def test_without_access_token_is_invalid(self):
        assert not AuthToken().is_valid()
        assert not token_is_valid(None)

    def test_without_expiry_is_valid(self):
        assert AuthToken(access_token="abc").is_valid()

    def test_expires_ahead_of_server_lifetime(self):
        token = AuthToken(access_token="abc", expires_in=3600)
        received = token._received_at

        assert token.is_valid(now=received + 3500)
        assert not token.is_valid(now=received + 3580)
        assert not token.is_valid(now=received + 3600)

    def test_short_lifetime_caps_the_margin(self):
        token = AuthToken(access_token="abc", expires_in=20)
        received = token._received_at

        assert token.is_valid(now=received)
        assert token.is_valid(now=received + 9)
        assert not token.is_valid(now=received + 10)


class TestShippingApiRequest:
    def test_headers(self):
        shipment = Shipment(transaction_id="tx-1", rate_plan="PLAN_A")

        assert shipment.headers() == {
            "X-PB-TransactionId": "tx-1",
            "X-PB-Shipper-Rate-Plan": "PLAN_A",
        }

    def test_body_excludes_placed_fields_and_authorization(self):
        shipment = Shipment(
            transaction_id="tx-1",
            include_delivery_commitment=True,
            authorization="secret",
            fromAddress={"postalCode": "06484"},
        )

        assert shipment.body("/shippingservices/v1/shipments") == {"fromAddress": {"postalCode": "06484"}}

    def test_query_fields_go_to_query_with_body(self):
        shipment = Shipment(include_delivery_commitment=True, fromAddress={"postalCode": "06484"})

        assert shipment.query_params("/shippingservices/v1/rates", has_body=True) == {
            "includeDeliveryCommitment": True
        }

    def test_resource_path_quotes_values(self):
        request = TrackingRequest(tracking_number="94 05/1")

        assert request.resource_path(TRACKING_PATH) == "/shippingservices/v1/tracking/94%2005%2F1"

    def test_resource_path_requires_values(self):
        with pytest.raises(ValueError):
            Shipment().resource_path(SHIPMENT_PATH)

    def test_body_less_query_uses_aliases(self):
        request = TrackingRequest(tracking_number="9405")

        assert request.query_params(TRACKING_PATH, has_body=False) == {
            "carrier": "USPS",
            "packageIdentifierType": "TrackingNumber",
        }

    def test_cancel_body(self):
        request = CancelShipmentRequest(shipment_id="S1", transaction_id="tx-9")

        assert request.body(SHIPMENT_PATH) == {"carrier": "USPS", "cancelInitiator": "SHIPPER"}
        assert request.headers() == {"X-PB-TransactionId": "tx-9"}

    def test_report_query(self):
        request = ReportRequest(
            developer_id="44397664",
            from_date=datetime(2024, 1, 1),
            to_date=datetime(2024, 1, 31, 23, 59, 59),
        )

        assert request.resource_path(TRANSACTIONS_REPORT_PATH).endswith("/developers/44397664/transactions/reports")
        assert request.query_params(TRANSACTIONS_REPORT_PATH, has_body=False) == {
            "fromDate": "2024-01-01T00:00:00",
            "toDate": "2024-01-31T23:59:59",
            "page": 0,
            "size": 20,
        }

    def test_unknown_response_fields_are_kept(self):
        country = Country.model_validate({"countryCode": "CA", "countryName": "Canada", "region": "NA"})

        assert country.country_code == "CA"
        assert country.model_dump(by_alias=True)["region"] == "NA"
