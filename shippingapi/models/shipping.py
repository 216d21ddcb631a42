"""
Thin shipping resource models.

Only the fields the client itself reads or routes (path parameters, headers,
query parameters) are declared. Everything else the API accepts or returns is
carried through unchanged as pydantic extra fields, so callers can pass the
provider's JSON documents as-is.
"""

from datetime import datetime
from typing import ClassVar, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from shippingapi.models.base import ShippingApiRequest


class WireModel(BaseModel):
    """Response-side model that keeps unknown fields."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class Page(WireModel):
    """A single page of a multi-page document."""

    contents: Optional[str] = None


class Document(WireModel):
    """Label, customs form or manifest document."""

    type: Optional[str] = None
    content_type: Optional[str] = Field(default=None, alias="contentType")
    file_format: Optional[str] = Field(default=None, alias="fileFormat")
    size: Optional[str] = None
    print_dialog_option: Optional[str] = Field(default=None, alias="printDialogOption")
    contents: Optional[str] = None
    pages: Optional[List[Page]] = None


class Rate(WireModel):
    carrier: Optional[str] = None
    service_id: Optional[str] = Field(default=None, alias="serviceId")
    parcel_type: Optional[str] = Field(default=None, alias="parcelType")
    total_carrier_charge: Optional[float] = Field(default=None, alias="totalCarrierCharge")


class Shipment(ShippingApiRequest):
    """
    Shipment used for rating, label creation and reprint responses.

    ``transaction_id`` travels as the ``X-PB-TransactionId`` header and
    ``rate_plan`` as ``X-PB-Shipper-Rate-Plan``.
    """

    header_fields: ClassVar[Dict[str, str]] = {
        "transaction_id": "X-PB-TransactionId",
        "rate_plan": "X-PB-Shipper-Rate-Plan",
    }
    query_fields: ClassVar[Tuple[str, ...]] = ("include_delivery_commitment",)

    transaction_id: Optional[str] = None
    rate_plan: Optional[str] = None
    include_delivery_commitment: Optional[bool] = Field(default=None, alias="includeDeliveryCommitment")

    shipment_id: Optional[str] = Field(default=None, alias="shipmentId")
    parcel_tracking_number: Optional[str] = Field(default=None, alias="parcelTrackingNumber")
    rates: Optional[List[Rate]] = None
    documents: Optional[List[Document]] = None


class ReprintShipmentRequest(ShippingApiRequest):
    shipment_id: str


class CancelShipmentRequest(ShippingApiRequest):
    """Cancels a label; the API expects this on a DELETE with a JSON body."""

    header_fields: ClassVar[Dict[str, str]] = {"transaction_id": "X-PB-TransactionId"}

    shipment_id: str
    transaction_id: Optional[str] = None
    carrier: str = "USPS"
    cancel_initiator: str = Field(default="SHIPPER", alias="cancelInitiator")


class CancelShipmentResponse(WireModel):
    carrier: Optional[str] = None
    total_carrier_charge: Optional[float] = Field(default=None, alias="totalCarrierCharge")
    parcel_tracking_number: Optional[str] = Field(default=None, alias="parcelTrackingNumber")
    status: Optional[str] = None


class TrackingRequest(ShippingApiRequest):
    tracking_number: str
    carrier: str = "USPS"
    package_identifier_type: str = Field(default="TrackingNumber", alias="packageIdentifierType")


class TrackingStatus(WireModel):
    tracking_number: Optional[str] = Field(default=None, alias="trackingNumber")
    status: Optional[str] = None
    scan_details_list: Optional[List[Dict]] = Field(default=None, alias="scanDetailsList")


class Manifest(ShippingApiRequest):
    header_fields: ClassVar[Dict[str, str]] = {"transaction_id": "X-PB-TransactionId"}

    transaction_id: Optional[str] = None
    carrier: Optional[str] = None
    submission_date: Optional[str] = Field(default=None, alias="submissionDate")
    manifest_id: Optional[str] = Field(default=None, alias="manifestId")
    documents: Optional[List[Document]] = None


class Pickup(ShippingApiRequest):
    header_fields: ClassVar[Dict[str, str]] = {"transaction_id": "X-PB-TransactionId"}

    transaction_id: Optional[str] = None
    carrier: Optional[str] = None
    pickup_date: Optional[str] = Field(default=None, alias="pickupDate")
    pickup_id: Optional[str] = Field(default=None, alias="pickupId")
    pickup_date_time: Optional[str] = Field(default=None, alias="pickupDateTime")


class CancelPickupRequest(ShippingApiRequest):
    header_fields: ClassVar[Dict[str, str]] = {"transaction_id": "X-PB-TransactionId"}

    pickup_id: str
    transaction_id: Optional[str] = None


class CancelPickupResponse(WireModel):
    status: Optional[str] = None


class CountriesRequest(ShippingApiRequest):
    carrier: str = "USPS"
    origin_country_code: str = Field(default="US", alias="originCountryCode")


class Country(WireModel):
    country_code: str = Field(..., alias="countryCode")
    country_name: Optional[str] = Field(default=None, alias="countryName")


class VerifyAddressRequest(ShippingApiRequest):
    """Address verification; the address itself is sent as extra fields."""

    query_fields: ClassVar[Tuple[str, ...]] = ("minimal_address_validation",)

    minimal_address_validation: Optional[bool] = Field(default=None, alias="minimalAddressValidation")


class Address(WireModel):
    address_lines: Optional[List[str]] = Field(default=None, alias="addressLines")
    city_town: Optional[str] = Field(default=None, alias="cityTown")
    state_province: Optional[str] = Field(default=None, alias="stateProvince")
    postal_code: Optional[str] = Field(default=None, alias="postalCode")
    country_code: Optional[str] = Field(default=None, alias="countryCode")
    status: Optional[str] = None


class RatingServicesRequest(ShippingApiRequest):
    carrier: str = "USPS"
    origin_country_code: str = Field(default="US", alias="originCountryCode")
    destination_country_code: str = Field(default="US", alias="destinationCountryCode")


class CarrierRule(WireModel):
    carrier: Optional[str] = None
    origin_country: Optional[str] = Field(default=None, alias="originCountry")
    destination_country: Optional[str] = Field(default=None, alias="destinationCountry")
    service_rules: Optional[List[Dict]] = Field(default=None, alias="serviceRules")


class ReportRequest(ShippingApiRequest):
    developer_id: str
    from_date: Optional[datetime] = Field(default=None, alias="fromDate")
    to_date: Optional[datetime] = Field(default=None, alias="toDate")
    page: int = 0
    size: int = 20


class Transaction(WireModel):
    transaction_id: Optional[str] = Field(default=None, alias="transactionId")
    transaction_type: Optional[str] = Field(default=None, alias="transactionType")
    transaction_date_time: Optional[str] = Field(default=None, alias="transactionDateTime")
    credit_card_fee: Optional[float] = Field(default=None, alias="creditCardFee")


class TransactionsPage(WireModel):
    content: List[Transaction] = Field(default_factory=list)
    last: bool = True
    total_pages: Optional[int] = Field(default=None, alias="totalPages")
    number: Optional[int] = None
