"""
Country → timezone lookup.

Maps an ISO 3166-1 alpha-2 country code to one representative IANA timezone.
Used only as the reference frame for company-local day boundaries in billing.
Anything missing or unknown degrades to UTC and never raises.
"""

from functools import lru_cache
from typing import Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger


UTC_ZONE = "UTC"

# One zone per country. Multi-zone countries use the capital / most populated zone.
COUNTRY_TIMEZONES: Dict[str, str] = {
    # South America
    "AR": "America/Argentina/Buenos_Aires",
    "BO": "America/La_Paz",
    "BR": "America/Sao_Paulo",
    "CL": "America/Santiago",
    "CO": "America/Bogota",
    "EC": "America/Guayaquil",
    "GY": "America/Guyana",
    "PE": "America/Lima",
    "PY": "America/Asuncion",
    "SR": "America/Paramaribo",
    "UY": "America/Montevideo",
    "VE": "America/Caracas",
    # Central America & Caribbean
    "BZ": "America/Belize",
    "CR": "America/Costa_Rica",
    "CU": "America/Havana",
    "DO": "America/Santo_Domingo",
    "GT": "America/Guatemala",
    "HN": "America/Tegucigalpa",
    "HT": "America/Port-au-Prince",
    "JM": "America/Jamaica",
    "NI": "America/Managua",
    "PA": "America/Panama",
    "PR": "America/Puerto_Rico",
    "SV": "America/El_Salvador",
    # North America
    "CA": "America/Toronto",
    "MX": "America/Mexico_City",
    "US": "America/New_York",
    # Europe
    "AT": "Europe/Vienna",
    "BE": "Europe/Brussels",
    "CH": "Europe/Zurich",
    "CZ": "Europe/Prague",
    "DE": "Europe/Berlin",
    "DK": "Europe/Copenhagen",
    "ES": "Europe/Madrid",
    "FI": "Europe/Helsinki",
    "FR": "Europe/Paris",
    "GB": "Europe/London",
    "GR": "Europe/Athens",
    "IE": "Europe/Dublin",
    "IT": "Europe/Rome",
    "NL": "Europe/Amsterdam",
    "NO": "Europe/Oslo",
    "PL": "Europe/Warsaw",
    "PT": "Europe/Lisbon",
    "RO": "Europe/Bucharest",
    "RU": "Europe/Moscow",
    "SE": "Europe/Stockholm",
    "TR": "Europe/Istanbul",
    "UA": "Europe/Kyiv",
    # Asia & Oceania
    "AE": "Asia/Dubai",
    "AU": "Australia/Sydney",
    "CN": "Asia/Shanghai",
    "HK": "Asia/Hong_Kong",
    "ID": "Asia/Jakarta",
    "IL": "Asia/Jerusalem",
    "IN": "Asia/Kolkata",
    "JP": "Asia/Tokyo",
    "KR": "Asia/Seoul",
    "KZ": "Asia/Almaty",
    "NZ": "Pacific/Auckland",
    "PH": "Asia/Manila",
    "SA": "Asia/Riyadh",
    "SG": "Asia/Singapore",
    "TH": "Asia/Bangkok",
    "UZ": "Asia/Tashkent",
    "VN": "Asia/Ho_Chi_Minh",
    # Africa
    "EG": "Africa/Cairo",
    "KE": "Africa/Nairobi",
    "MA": "Africa/Casablanca",
    "NG": "Africa/Lagos",
    "ZA": "Africa/Johannesburg",
}


@lru_cache(maxsize=None)
def _is_loadable(zone_id: str) -> bool:
    try:
        ZoneInfo(zone_id)
        return True
    except (ZoneInfoNotFoundError, ValueError):
        return False


def resolve_timezone(country_code: Optional[str]) -> str:
    """
    Return the IANA timezone id for a country code.

    None, blank, unknown codes and zones missing from the host's tz database
    all resolve to "UTC".
    """
    if not country_code or not country_code.strip():
        return UTC_ZONE

    zone_id = COUNTRY_TIMEZONES.get(country_code.strip().upper())
    if zone_id is None:
        logger.debug(f"No timezone for country '{country_code}', using UTC")
        return UTC_ZONE

    if not _is_loadable(zone_id):
        logger.warning(f"Timezone '{zone_id}' not available on this host, using UTC")
        return UTC_ZONE

    return zone_id


def get_zone(country_code: Optional[str]) -> ZoneInfo:
    """ZoneInfo for a country code (UTC fallback)."""
    return ZoneInfo(resolve_timezone(country_code))
