import pytest

from shippingapi import methods
from shippingapi.constants import (
    ADDRESS_VERIFY_PATH,
    COUNTRIES_PATH,
    MANIFESTS_PATH,
    PICKUP_CANCEL_PATH,
    PICKUP_SCHEDULE_PATH,
    RATES_PATH,
    RATING_SERVICES_PATH,
    SHIPMENT_PATH,
    SHIPMENTS_PATH,
    TRACKING_PATH,
    HttpVerb,
)
from shippingapi.models.shipping import (
    Address,
    CancelPickupRequest,
    CancelPickupResponse,
    CancelShipmentRequest,
    CancelShipmentResponse,
    CarrierRule,
    CountriesRequest,
    Country,
    Manifest,
    Pickup,
    RatingServicesRequest,
    ReprintShipmentRequest,
    Shipment,
    TrackingRequest,
    TrackingStatus,
    VerifyAddressRequest,
)
from shippingapi.transport.mock import MockResponse

OPERATIONS = [
    (methods.rates, Shipment(), RATES_PATH, HttpVerb.POST, {}, Shipment),
    (methods.create_shipment, Shipment(), SHIPMENTS_PATH, HttpVerb.POST, {"shipmentId": "S1"}, Shipment),
    (methods.reprint_shipment, ReprintShipmentRequest(shipment_id="S1"), SHIPMENT_PATH, HttpVerb.GET,
     {"shipmentId": "S1"}, Shipment),
    (methods.cancel_shipment, CancelShipmentRequest(shipment_id="S1"), SHIPMENT_PATH, HttpVerb.DELETE,
     {"status": "initiated"}, CancelShipmentResponse),
    (methods.tracking, TrackingRequest(tracking_number="9405"), TRACKING_PATH, HttpVerb.GET,
     {"status": "Delivered"}, TrackingStatus),
    (methods.create_manifest, Manifest(carrier="USPS"), MANIFESTS_PATH, HttpVerb.POST,
     {"manifestId": "M1"}, Manifest),
    (methods.schedule_pickup, Pickup(carrier="USPS"), PICKUP_SCHEDULE_PATH, HttpVerb.POST,
     {"pickupId": "P1"}, Pickup),
    (methods.cancel_pickup, CancelPickupRequest(pickup_id="P1"), PICKUP_CANCEL_PATH, HttpVerb.POST,
     {"status": "Success"}, CancelPickupResponse),
    (methods.verify_address, VerifyAddressRequest(addressLines=["27 Waterview Drive"]), ADDRESS_VERIFY_PATH,
     HttpVerb.POST, {"cityTown": "Shelton"}, Address),
    (methods.rating_services, RatingServicesRequest(), RATING_SERVICES_PATH, HttpVerb.GET,
     {"carrier": "USPS"}, CarrierRule),
]


@pytest.mark.parametrize("operation, request_obj, uri, verb, body, response_type", OPERATIONS)
async def test_operation_routes_through_orchestrator(
    session, requester, operation, request_obj, uri, verb, body, response_type
):
    requester.program(uri, MockResponse(body=body))

    response = await operation(request_obj, session)

    assert response.success
    assert isinstance(response.api_response, response_type)
    call = requester.calls[0]
    assert (call.uri, call.verb) == (uri, verb)
    assert call.authorization == "token-1"
    assert session.counters.get(uri).call_count == 1


async def test_cancel_shipment_sends_body(session, requester):
    requester.program(SHIPMENT_PATH, MockResponse(body={}))

    await methods.cancel_shipment(CancelShipmentRequest(shipment_id="S1"), session)

    assert requester.calls[0].delete_body is True


async def test_countries_returns_list(session, requester):
    requester.program(COUNTRIES_PATH, MockResponse(body=[{"countryCode": "CA", "countryName": "Canada"}]))

    response = await methods.countries(CountriesRequest(), session)

    assert response.api_response == [Country(country_code="CA", country_name="Canada")]


def test_sync_variant(session, requester):
    requester.program(TRACKING_PATH, MockResponse(body={"status": "In Transit"}))

    response = methods.tracking_sync(TrackingRequest(tracking_number="9405"), session)

    assert response.api_response.status == "In Transit"
