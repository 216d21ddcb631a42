"""
Shipping API resource operations.

Each operation only chooses the endpoint, verb and response type; all
authentication, retry and error handling happens in ``web_method.execute``.
Every coroutine has a blocking ``*_sync`` counterpart.
"""

import asyncio
from typing import List, Optional

from shippingapi import web_method
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
)
from shippingapi.models.base import ShippingApiResponse
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
from shippingapi.session import Session


async def rates(shipment: Shipment, session: Optional[Session] = None) -> ShippingApiResponse:
    """
    Rate a package for one or more services before a label is purchased.

    Omitting the service id rates every service for the parcel type; omitting
    both parcel type and service id rates every combination.
    """
    return await web_method.post(RATES_PATH, shipment, Shipment, session)


async def create_shipment(shipment: Shipment, session: Optional[Session] = None) -> ShippingApiResponse:
    """Create a shipment and purchase its label."""
    return await web_method.post(SHIPMENTS_PATH, shipment, Shipment, session)


async def reprint_shipment(request: ReprintShipmentRequest, session: Optional[Session] = None) -> ShippingApiResponse:
    return await web_method.get(SHIPMENT_PATH, request, Shipment, session)


async def cancel_shipment(request: CancelShipmentRequest, session: Optional[Session] = None) -> ShippingApiResponse:
    """Cancel (void) a label. The endpoint requires a DELETE with a body."""
    return await web_method.delete_with_body(SHIPMENT_PATH, request, CancelShipmentResponse, session)


async def tracking(request: TrackingRequest, session: Optional[Session] = None) -> ShippingApiResponse:
    return await web_method.get(TRACKING_PATH, request, TrackingStatus, session)


async def create_manifest(manifest: Manifest, session: Optional[Session] = None) -> ShippingApiResponse:
    return await web_method.post(MANIFESTS_PATH, manifest, Manifest, session)


async def schedule_pickup(pickup: Pickup, session: Optional[Session] = None) -> ShippingApiResponse:
    return await web_method.post(PICKUP_SCHEDULE_PATH, pickup, Pickup, session)


async def cancel_pickup(request: CancelPickupRequest, session: Optional[Session] = None) -> ShippingApiResponse:
    return await web_method.post(PICKUP_CANCEL_PATH, request, CancelPickupResponse, session)


async def countries(request: CountriesRequest, session: Optional[Session] = None) -> ShippingApiResponse:
    """List destination countries supported by a carrier."""
    return await web_method.get(COUNTRIES_PATH, request, List[Country], session)


async def verify_address(request: VerifyAddressRequest, session: Optional[Session] = None) -> ShippingApiResponse:
    """Verify and normalize an address; the response carries city and state."""
    return await web_method.post(ADDRESS_VERIFY_PATH, request, Address, session)


async def rating_services(request: RatingServicesRequest, session: Optional[Session] = None) -> ShippingApiResponse:
    """Download the carrier rules for an origin/destination pair."""
    return await web_method.get(RATING_SERVICES_PATH, request, CarrierRule, session)


def rates_sync(shipment: Shipment, session: Optional[Session] = None) -> ShippingApiResponse:
    return asyncio.run(rates(shipment, session))


def create_shipment_sync(shipment: Shipment, session: Optional[Session] = None) -> ShippingApiResponse:
    return asyncio.run(create_shipment(shipment, session))


def reprint_shipment_sync(request: ReprintShipmentRequest, session: Optional[Session] = None) -> ShippingApiResponse:
    return asyncio.run(reprint_shipment(request, session))


def cancel_shipment_sync(request: CancelShipmentRequest, session: Optional[Session] = None) -> ShippingApiResponse:
    return asyncio.run(cancel_shipment(request, session))


def tracking_sync(request: TrackingRequest, session: Optional[Session] = None) -> ShippingApiResponse:
    return asyncio.run(tracking(request, session))


def create_manifest_sync(manifest: Manifest, session: Optional[Session] = None) -> ShippingApiResponse:
    return asyncio.run(create_manifest(manifest, session))


def schedule_pickup_sync(pickup: Pickup, session: Optional[Session] = None) -> ShippingApiResponse:
    return asyncio.run(schedule_pickup(pickup, session))


def cancel_pickup_sync(request: CancelPickupRequest, session: Optional[Session] = None) -> ShippingApiResponse:
    return asyncio.run(cancel_pickup(request, session))


def countries_sync(request: CountriesRequest, session: Optional[Session] = None) -> ShippingApiResponse:
    return asyncio.run(countries(request, session))


def verify_address_sync(request: VerifyAddressRequest, session: Optional[Session] = None) -> ShippingApiResponse:
    return asyncio.run(verify_address(request, session))


def rating_services_sync(request: RatingServicesRequest, session: Optional[Session] = None) -> ShippingApiResponse:
    return asyncio.run(rating_services(request, session))
