"""
Request and response models.

``base`` holds the envelope types every call uses; ``shipping`` holds the thin
resource models for the individual endpoints.
"""

from shippingapi.models.base import (
    AuthToken,
    EmptyRequest,
    ErrorDetail,
    ShippingApiRequest,
    ShippingApiResponse,
    token_is_valid,
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
    Document,
    Manifest,
    Page,
    Pickup,
    Rate,
    RatingServicesRequest,
    ReportRequest,
    ReprintShipmentRequest,
    Shipment,
    TrackingRequest,
    TrackingStatus,
    Transaction,
    TransactionsPage,
    VerifyAddressRequest,
)

__all__ = [
    "Address",
    "AuthToken",
    "CancelPickupRequest",
    "CancelPickupResponse",
    "CancelShipmentRequest",
    "CancelShipmentResponse",
    "CarrierRule",
    "CountriesRequest",
    "Country",
    "Document",
    "EmptyRequest",
    "ErrorDetail",
    "Manifest",
    "Page",
    "Pickup",
    "Rate",
    "RatingServicesRequest",
    "ReportRequest",
    "ReprintShipmentRequest",
    "Shipment",
    "ShippingApiRequest",
    "ShippingApiResponse",
    "TrackingRequest",
    "TrackingStatus",
    "Transaction",
    "TransactionsPage",
    "VerifyAddressRequest",
    "token_is_valid",
]
