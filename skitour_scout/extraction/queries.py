"""search query construction for web condition reports."""

from typing import List, Optional

from skitour_scout.config import settings


def build_search_queries(
    region: str,
    locations: Optional[List[str]] = None,
    *,
    year: int,
    max_queries: Optional[int] = None,
) -> List[str]:
    """
    build the search queries for a region.

    one or two target locations get location-specific queries; otherwise the
    region-wide seasonal queries run, plus up to two location queries for
    variety. the list is capped at max_queries.

    example:
        >>> build_search_queries("Tatry", ["Kasprowy Wierch"], year=2025, max_queries=2)
        ['Kasprowy Wierch warunki narciarskie 2025', 'Kasprowy Wierch skituring warunki']
    """
    locations = [loc.strip() for loc in (locations or []) if loc and loc.strip()]
    queries: List[str] = []

    if 1 <= len(locations) <= 2:
        for location in locations:
            queries.extend(
                template.format(location=location, year=year)
                for template in settings.LOCATION_QUERY_TEMPLATES
            )
    else:
        queries.extend(
            template.format(region=region, year=year)
            for template in settings.REGION_QUERY_TEMPLATES
        )
        queries.extend(
            settings.REGION_LOCATION_QUERY_TEMPLATE.format(location=location)
            for location in locations[:settings.MAX_REGION_LOCATION_QUERIES]
        )

    if max_queries is not None:
        queries = queries[:max_queries]
    return queries
