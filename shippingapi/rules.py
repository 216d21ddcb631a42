"""Cached country-code rules used for address validation."""

import threading
import time
from typing import Dict, Optional

from shippingapi import methods
from shippingapi.constants import COUNTRY_RULE_TTL_SECONDS
from shippingapi.models.shipping import CountriesRequest
from shippingapi.session import Session, resolve_session


class CountryRule:
    """
    Country code to country name map, downloaded from the countries endpoint.

    The map is reloaded when it is older than ``ttl`` seconds. A failed reload
    is reported through the session's error hook and keeps the previous map.

    Loading blocks on its own event loop, so use it outside of async code.
    """

    def __init__(
        self,
        session: Optional[Session] = None,
        carrier: str = "USPS",
        origin_country_code: str = "US",
        ttl: float = COUNTRY_RULE_TTL_SECONDS
    ):
        self.session = resolve_session(session)
        self.carrier = carrier
        self.origin_country_code = origin_country_code
        self.ttl = ttl
        self.last_update: Optional[float] = None
        self._rules: Dict[str, str] = {}
        self._lock = threading.Lock()

    def _stale(self) -> bool:
        return self.last_update is None or time.monotonic() - self.last_update > self.ttl

    def load(self, force: bool = False) -> None:
        """Download the country list if the cache is stale (or ``force`` is set)."""
        with self._lock:
            if not force and not self._stale():
                return
            request = CountriesRequest(carrier=self.carrier, origin_country_code=self.origin_country_code)
            response = methods.countries_sync(request, self.session)
            if response.success:
                self._rules = {c.country_code: c.country_name or "" for c in response.api_response or []}
                self.last_update = time.monotonic()
            else:
                self.session.log_error(f"Country rules could not be loaded: {response}")

    @property
    def rules(self) -> Dict[str, str]:
        self.load()
        with self._lock:
            return dict(self._rules)

    def validate(self, country_code: str) -> bool:
        """Return True if ``country_code`` is in the carrier's country list."""
        self.load()
        with self._lock:
            return country_code in self._rules
