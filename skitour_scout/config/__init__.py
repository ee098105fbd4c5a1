from .search_domains import get_search_domains, SearchDomains, domain_matches
from .regions import get_region_locations, get_elevation_pairs, ElevationPair
from .resorts import get_resort_configs
from .default import get_default_scout_config, get_fast_scout_config

__all__ = [
    "get_search_domains",
    "SearchDomains",
    "domain_matches",
    "get_region_locations",
    "get_elevation_pairs",
    "ElevationPair",
    "get_resort_configs",
    "get_default_scout_config",
    "get_fast_scout_config",
]
