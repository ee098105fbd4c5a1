"""
skitour_scout: condition engine for ski touring routes.

aggregates weather telemetry, the regional avalanche bulletin and web search
intel into scored, explainable route evaluations.
"""

__version__ = "0.4.0"
