"""Shipping API constants and configuration values."""

# Endpoints
SANDBOX_ENDPOINT = "https://api-sandbox.pitneybowes.com"
PRODUCTION_ENDPOINT = "https://api.pitneybowes.com"
TOKEN_PATH = "/oauth/token"

# Retry / timeout defaults
DEFAULT_RETRIES = 3
DEFAULT_TIMEOUT_MILLISECONDS = 5000
DEFAULT_HTTP_TIMEOUT = 30.0

# Error codes the provider documents as safe to retry
TRANSIENT_ERROR_CODES = frozenset({"PB-APIM-ERR-1003"})

# Synthetic client-side error codes
CLIENT_TIMEOUT = "Client Timeout"
DESERIALIZATION_ERROR = "Deserialization error"
NETWORK_ERROR = "Network error"
CONFIGURATION_ERROR = "Configuration error"

# Counters
HISTOGRAM_BUCKET_MS = 10

# Country rule cache lifetime
COUNTRY_RULE_TTL_SECONDS = 3600

# Configuration keys understood by Session.get_config_item
CONFIG_KEYS = {
    "ApiKey": "api_key",
    "ApiSecret": "api_secret",
    "ShipperID": "shipper_id",
    "DeveloperID": "developer_id",
    "RatePlan": "rate_plan",
    "Mock": "mock",
}

# HTTP Methods
class HttpVerb:
    POST = "POST"
    GET = "GET"
    PUT = "PUT"
    DELETE = "DELETE"

SUPPORTED_HTTP_METHODS = [HttpVerb.POST, HttpVerb.GET, HttpVerb.PUT, HttpVerb.DELETE]

# Resource paths
RATES_PATH = "/shippingservices/v1/rates"
SHIPMENTS_PATH = "/shippingservices/v1/shipments"
SHIPMENT_PATH = "/shippingservices/v1/shipments/{shipment_id}"
TRACKING_PATH = "/shippingservices/v1/tracking/{tracking_number}"
MANIFESTS_PATH = "/shippingservices/v1/manifests"
PICKUP_SCHEDULE_PATH = "/shippingservices/v1/pickups/schedule"
PICKUP_CANCEL_PATH = "/shippingservices/v1/pickups/{pickup_id}/cancel"
COUNTRIES_PATH = "/shippingservices/v1/countries"
ADDRESS_VERIFY_PATH = "/shippingservices/v1/addresses/verify"
RATING_SERVICES_PATH = "/shippingservices/v1/information/rules/rating-services"
TRANSACTIONS_REPORT_PATH = "/shippingservices/v1/ledger/developers/{developer_id}/transactions/reports"
