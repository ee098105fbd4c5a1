"""
named weather locations and valley/summit elevation pairs per region.

lookups are by exact region name; unknown regions fall back to Beskid Śląski.
"""

from typing import Dict, List, NamedTuple

from skitour_scout.models import WeatherInput

FALLBACK_REGION = "Beskid Śląski"


class ElevationPair(NamedTuple):
    name: str
    valley: WeatherInput
    summit: WeatherInput


def _point(latitude: float, longitude: float, altitude: int) -> WeatherInput:
    return WeatherInput(latitude=latitude, longitude=longitude, altitude=altitude)


REGION_LOCATIONS: Dict[str, Dict[str, WeatherInput]] = {
    "Tatry": {
        "Kasprowy Wierch": _point(49.2317, 19.9817, 1987),
        "Morskie Oko": _point(49.2014, 20.0714, 1395),
        "Zakopane": _point(49.2992, 19.9496, 838),
        "Dolina Pięciu Stawów": _point(49.2125, 20.0458, 1650),
        "Hala Gąsienicowa": _point(49.2383, 20.0033, 1520),
    },
    "Beskid Śląski": {
        "Skrzyczne": _point(49.6847, 19.0306, 1257),
        "Pilsko": _point(49.5456, 19.3297, 1557),
        "Rycerzowa": _point(49.4728, 19.1039, 1226),
        "Barania Góra": _point(49.5711, 19.0389, 1220),
        "Błatnia": _point(49.6583, 19.0028, 917),
        "Szczyrk": _point(49.7181, 19.0339, 500),
    },
    "Beskid Żywiecki": {
        "Babia Góra": _point(49.5731, 19.5294, 1725),
        "Pilsko": _point(49.5456, 19.3297, 1557),
        "Romanka": _point(49.5583, 19.3556, 1366),
        "Hala Miziowa": _point(49.5617, 19.3417, 1330),
    },
}

ELEVATION_PAIRS: Dict[str, List[ElevationPair]] = {
    "Beskid Śląski": [
        ElevationPair("Skrzyczne", _point(49.7181, 19.0339, 500), _point(49.6847, 19.0306, 1257)),
        ElevationPair("Pilsko", _point(49.5617, 19.3417, 700), _point(49.5456, 19.3297, 1557)),
        ElevationPair("Barania Góra", _point(49.5850, 19.0450, 650), _point(49.5711, 19.0389, 1220)),
    ],
    "Beskid Żywiecki": [
        ElevationPair("Babia Góra", _point(49.5850, 19.5200, 650), _point(49.5731, 19.5294, 1725)),
        ElevationPair("Pilsko", _point(49.5617, 19.3417, 700), _point(49.5456, 19.3297, 1557)),
    ],
    "Tatry": [
        ElevationPair("Kasprowy Wierch", _point(49.2700, 19.9817, 1000), _point(49.2317, 19.9817, 1987)),
        ElevationPair("Morskie Oko → Rysy", _point(49.2014, 20.0714, 1395), _point(49.1794, 20.0881, 2499)),
        ElevationPair("Hala Gąsienicowa → Świnica", _point(49.2383, 20.0033, 1520), _point(49.2186, 20.0047, 2301)),
    ],
}


def get_region_locations(region: str) -> Dict[str, WeatherInput]:
    """named weather points for a region"""
    return REGION_LOCATIONS.get(region, REGION_LOCATIONS[FALLBACK_REGION])


def get_elevation_pairs(region: str) -> List[ElevationPair]:
    """valley/summit pairs for the main peaks of a region"""
    return ELEVATION_PAIRS.get(region, ELEVATION_PAIRS[FALLBACK_REGION])
