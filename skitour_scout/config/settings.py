"""
module level constants for the condition engine.

upstream endpoints are overridable through environment variables so the
engine can be pointed at a proxy or a local fixture server.
"""

import os
from typing import Dict, List, Tuple

# ===== UPSTREAM ENDPOINTS =====
WEATHER_API_URL = os.getenv("SKITOUR_WEATHER_API_URL", "https://api.open-meteo.com/v1/forecast")
HAZARD_BULLETIN_URL = os.getenv("SKITOUR_HAZARD_BULLETIN_URL", "https://lawiny.topr.pl/")
SEARCH_URL = os.getenv("SKITOUR_SEARCH_URL", "https://html.duckduckgo.com/html/")
OPENROUTER_BASE_URL = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
OPENROUTER_MODEL = os.getenv("OPENROUTER_MODEL", "meta-llama/llama-3.3-70b-instruct")

USER_AGENT = "Mozilla/5.0 (compatible; SkitourScout/0.4; +https://github.com/skitour-scout)"

# ===== WEATHER =====
WEATHER_SOURCE = "Open-Meteo"
CURRENT_FIELDS = [
    "temperature_2m",
    "apparent_temperature",
    "weather_code",
    "wind_speed_10m",
    "wind_direction_10m",
    "relative_humidity_2m",
    "visibility",
    "snowfall",
    "snow_depth",
]
POINT_FIELDS = CURRENT_FIELDS[:5]

DEFAULT_VISIBILITY_M = 10000
DEFAULT_FREEZING_LEVEL_M = 2500
# secondary summit fetch fallbacks for elevation pairs
ELEVATION_FREEZING_LEVEL_M = 1500
ELEVATION_FRESH_SNOW_CM = 0.0

COMPASS_POINTS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]

# ===== HAZARD BULLETIN =====
HAZARD_COVERAGE_MARKER = "tatry"
HAZARD_SOURCE_PREFIX = "TOPR"
HAZARD_FALLBACK_SOURCE = "TOPR (lawiny.topr.pl)"
DEFAULT_ALTITUDE_BAND: Tuple[int, int] = (1800, 2500)
ALTITUDE_BAND_TOP = 2500
# "above treeline" in the bulletin's height field
TREELINE_HEIGHT_SENTINEL = 999
DEFAULT_EXPIRY_HOUR = 20
COMMENT_MAX_CHARS = 150

PROBLEM_CODES: Dict[str, str] = {
    "prwd": "Wind-drifted snow",
    "prnn": "No distinct avalanche problem",
    "prns": "New snow",
    "prps": "Persistent weak layers",
    "prww": "Wet snow",
    "prgd": "Gliding snow",
}
AFTERNOON_INCREASE_PROBLEM = "Increasing danger in afternoon"
NO_PROBLEMS_PLACEHOLDER = "Check report for details"
FALLBACK_PROBLEMS_PLACEHOLDER = "Check lawiny.topr.pl for details"

DANGER_DESCRIPTIONS: Dict[int, str] = {
    1: "Low - Generally favorable conditions",
    2: "Moderate - Heightened conditions on specific terrain",
    3: "Considerable - Dangerous conditions on specific terrain",
    4: "High - Very dangerous conditions",
    5: "Very High - Extraordinarily dangerous conditions",
}

DANGER_RECOMMENDATIONS: Dict[int, List[str]] = {
    1: [
        "Standard precautions apply",
        "Favorable conditions for ski touring",
        "Be aware of isolated danger spots",
    ],
    2: [
        "Careful route selection recommended",
        "Avoid steep slopes with unfavorable aspects",
        "Travel one at a time on suspect terrain",
    ],
    3: [
        "Experienced judgment essential",
        "Avoid steep slopes (>30°) on indicated aspects",
        "Conservative terrain choices strongly advised",
        "Check conditions with locals before departure",
    ],
    4: [
        "Restrict travel to low-angle terrain",
        "Avoid all avalanche terrain",
        "Natural avalanches likely",
        "Consider postponing trip",
    ],
    5: [
        "Avoid all avalanche terrain",
        "Travel not recommended",
        "Stay off steep slopes entirely",
        "Widespread natural avalanches expected",
    ],
}

# ===== WEB SEARCH =====
SEARCH_SOURCE = "Web Search (DuckDuckGo)"
SEARCH_ENGINE_HOST = "duckduckgo.com"

LOCATION_QUERY_TEMPLATES = [
    "{location} warunki narciarskie {year}",
    "{location} skituring warunki",
    "{location} śnieg zima",
    "{location} narty",
]
REGION_QUERY_TEMPLATES = [
    "{region} warunki narciarskie {year}",
    "{region} skituring",
    "{region} warunki śniegowe zima {year}",
]
REGION_LOCATION_QUERY_TEMPLATE = "{location} warunki narciarskie"
MAX_REGION_LOCATION_QUERIES = 2

# relevance keyword tables, matched case-insensitively as substrings
TOURING_TERMS = [
    "skitur", "ski tour", "skialpin", "ski alp", "foki", "podejście", "zjazd",
    "splitboard", "backcountry", "freeride",
]
TRIP_REPORT_TERMS = [
    "relacja", "wycieczka", "warunki", "trip report", "conditions", "byliśmy",
    "dzisiaj", "wczoraj", "today", "yesterday",
]
SNOW_TERMS = [
    "śnieg", "snieg", "snow", "puch", "powder", "firn", "szreń", "lawin", "avalanche",
]
COMMERCIAL_TERMS = [
    "karnet", "skipass", "ski pass", "wyciąg", "kolej linowa", "gondola", "cennik",
    "lift", "stok narciarski", "szkółka narciarska", "wypożyczalnia",
]
LODGING_TERMS = [
    "nocleg", "hotel", "apartament", "pensjonat", "booking", "rezerwacja", "pokoje",
]

RELEVANCE_WEIGHTS: Dict[str, int] = {
    "touring": 3,
    "trip_report": 2,
    "snow": 1,
    "trusted_domain": 2,
    "current_year": 1,
    "lodging": -3,
}

# ===== INTEL EXTRACTION =====
SNOW_TYPE_PATTERNS: List[Tuple[str, str]] = [
    (r"puch|powder|świeży śnieg|fresh snow", "Powder"),
    (r"firn|corn|wiosenn", "Corn snow"),
    (r"szreń|crust|skorup", "Crust"),
    (r"beton|hard|tward|lód|ice|oblodz", "Hard-packed"),
    (r"cukier|sugar|granu", "Sugar snow"),
    (r"kamien|rock|stone|skał", "Thin cover"),
    (r"mokr|wet|wilgotn", "Wet snow"),
]
# normalised llm snow types mapped to display labels
LLM_SNOW_TYPES: Dict[str, str] = {
    "puch": "Powder",
    "powder": "Powder",
    "firn": "Corn snow",
    "szren": "Crust",
    "szreń": "Crust",
    "crust": "Crust",
    "beton": "Hard-packed",
    "cukier": "Sugar snow",
    "kamienie": "Thin cover",
    "mokry": "Wet snow",
    "wet": "Wet snow",
}

HAZARD_PATTERNS: List[Tuple[str, str]] = [
    (r"lawin|avalanche", "Avalanche risk"),
    (r"lód|ice|oblodz", "Icy surface"),
    (r"mgła|fog|zamglen", "Poor visibility"),
    (r"wiatr|wind|halny", "Strong wind"),
    (r"kamien|rock|skał", "Exposed rocks"),
    (r"niebezp|danger|uwaga|warn", "Caution advised"),
]

CONDITION_PATTERNS: List[Tuple[str, str]] = [
    (r"puch|powder", "Powder"),
    (r"firn|corn", "Corn snow"),
    (r"lód|ice|oblodz", "Icy"),
    (r"twardy|hard", "Hard-packed"),
    (r"słońce|słonecz|sunny", "Sunny"),
    (r"mgła|fog", "Fog"),
    (r"wiatr|wind", "Windy"),
    (r"opady|śnieg|snow", "Snowing"),
    (r"dobra widoczność|good visibility", "Good visibility"),
    (r"słaba widoczność|poor visibility", "Poor visibility"),
]

KNOWN_LOCATIONS = [
    "Skrzyczne", "Pilsko", "Rycerzowa", "Barania Góra", "Babia Góra",
    "Kasprowy", "Rysy", "Świnica", "Hala Miziowa", "Klimczok", "Szyndzielnia",
    "Romanka", "Morskie Oko", "Hala Gąsienicowa", "Kościelec", "Zawrat", "Błatnia",
    "Szczyrk", "Tatry", "Beskid",
]

POSITIVE_WORDS = [
    "świetne", "doskonałe", "rewelacyjne", "super", "great", "excellent",
    "perfect", "amazing", "polecam", "recommend", "bajka", "idealne",
]
NEGATIVE_WORDS = [
    "złe", "słabe", "niebezpieczne", "dangerous", "bad", "poor", "avoid",
    "odradzam", "uwaga", "warning", "ryzyko", "risk", "lawina", "avalanche",
]

TODAY_WORDS = ["dzisiaj", "today"]
YESTERDAY_WORDS = ["wczoraj", "yesterday"]

SUMMARY_MAX_CHARS = 300
LLM_SUMMARY_MAX_CHARS = 200
MAX_LLM_OBSERVATIONS = 3

# ===== AGENT METADATA =====
WEATHER_CACHE_TTL_SECONDS = 30 * 60
HAZARD_CACHE_TTL_SECONDS = 60 * 60
SEARCH_CACHE_TTL_SECONDS = 30 * 60
RESORT_CACHE_TTL_SECONDS = 60 * 60

# ===== SKI RESORTS =====
# first pattern that matches and passes the sanity bounds wins
SNOW_DEPTH_PATTERNS = [
    r"(\d+)\s*cm",
    r"pokrywa[:\s]+(\d+)",
    r"śnieg[:\s]+(\d+)",
    r"snow[:\s]+(\d+)",
]
SNOW_DEPTH_BOUNDS_CM: Tuple[int, int] = (0, 500)
# (?!m) keeps "20 cm" from reading as 20 °C
TEMPERATURE_PATTERNS = [
    r"(-?\d+(?:\.\d+)?)\s*°?\s*C(?!m)",
    r"temperatura[:\s]+(-?\d+)",
    r"temp[:\s]+(-?\d+)",
]
TEMPERATURE_BOUNDS_C: Tuple[float, float] = (-50, 50)
RESORT_CLOSED_WORDS = ["zamknięt", "nieczynny", "closed"]
RESORT_OPEN_WORDS = ["otwart", "czynny", "open"]
