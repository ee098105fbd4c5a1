from . import conditions, intel, elevation, resorts, health

__all__ = ["conditions", "intel", "elevation", "resorts", "health"]
