"""Client network and location metadata.

Edge proxies (Cloudflare and friends) describe the visitor in request
headers: the connecting IP, the forwarded-for chain and, with visitor
location headers enabled, country, city, coordinates and timezone.
``GeoInfo`` collects whatever is present; fields the proxy did not send
stay ``None``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from edgebin.http.headers import Headers

# Header name -> GeoInfo field
_LOCATION_HEADERS: dict[str, str] = {
    "cf-ipcontinent": "continent",
    "cf-ipcountry": "country",
    "cf-region": "region",
    "cf-region-code": "region_code",
    "cf-ipcity": "city",
    "cf-postal-code": "postal_code",
    "cf-timezone": "timezone",
    "cf-metro-code": "metro_code",
    "cf-asn": "asn",
    "cf-as-organization": "as_organization",
}

# GeoInfo field -> key used in JSON responses
_JSON_KEYS: dict[str, str] = {
    "region_code": "regionCode",
    "postal_code": "postalCode",
    "metro_code": "metroCode",
    "as_organization": "asOrganization",
}


def client_ip(headers: Headers, client: tuple[str, int] | None = None) -> str | None:
    """Infer the originating client IP.

    Preference order: ``CF-Connecting-IP``, the first hop of
    ``X-Forwarded-For``, ``X-Real-IP``, then the socket peer address.
    """
    connecting = headers.get("cf-connecting-ip")
    if connecting:
        return connecting.strip()
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if client is not None:
        return client[0]
    return None


def _parse_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class GeoInfo:
    """Approximate visitor location as reported by the edge proxy."""

    continent: str | None = None
    country: str | None = None
    region: str | None = None
    region_code: str | None = None
    city: str | None = None
    postal_code: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    timezone: str | None = None
    metro_code: str | None = None
    asn: str | None = None
    as_organization: str | None = None
    colo: str | None = None

    @classmethod
    def from_headers(cls, headers: Headers) -> GeoInfo:
        """Collect location fields from proxy headers."""
        values: dict[str, Any] = {
            field: headers.get(header) for header, field in _LOCATION_HEADERS.items()
        }
        values["latitude"] = _parse_float(headers.get("cf-iplatitude"))
        values["longitude"] = _parse_float(headers.get("cf-iplongitude"))
        # CF-Ray ends with the IATA code of the data center, e.g. "8a1b2c-SJC"
        ray = headers.get("cf-ray")
        if ray and "-" in ray:
            values["colo"] = ray.rsplit("-", 1)[1]
        return cls(**values)

    def to_json(self) -> dict[str, Any]:
        """Fields keyed the way the JSON API reports them."""
        return {_JSON_KEYS.get(key, key): value for key, value in asdict(self).items()}
