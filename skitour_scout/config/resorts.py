"""
ski resorts per region.

resorts supplement backcountry data: snow depth and temperature from the
resort page, and lift-served descent options for nearby touring routes.
"""

from typing import Dict, List

from skitour_scout.models import ResortConfig

RESORTS: Dict[str, List[ResortConfig]] = {
    "Beskid Śląski": [
        ResortConfig(
            id="szczyrk-cos",
            name="Szczyrk COS",
            region="Beskid Śląski",
            source_url="https://www.cos.pl/osrodek-przygotowania-olimpijskiego-szczyrk/",
            nearby_routes=["Skrzyczne", "Klimczok"],
        ),
        ResortConfig(
            id="szczyrk-bsa",
            name="Szczyrk Mountain Resort",
            region="Beskid Śląski",
            source_url="https://beskidsportarena.pl/pogoda-szczyrk",
            nearby_routes=["Skrzyczne", "Barania Góra"],
        ),
    ],
    "Beskid Żywiecki": [
        ResortConfig(
            id="pilsko-korbielow",
            name="Pilsko Korbielów",
            region="Beskid Żywiecki",
            source_url="https://www.pilsko.net/",
            nearby_routes=["Pilsko", "Hala Miziowa"],
        ),
    ],
    "Tatry": [
        ResortConfig(
            id="kasprowy",
            name="Kasprowy Wierch PKL",
            region="Tatry",
            source_url="https://pkl.pl/kasprowy-wierch/",
            nearby_routes=["Kasprowy Wierch", "Hala Gąsienicowa"],
        ),
    ],
}


def get_resort_configs(region: str) -> List[ResortConfig]:
    """resorts of a region, empty for unknown regions (no fallback region)"""
    return list(RESORTS.get(region, []))
