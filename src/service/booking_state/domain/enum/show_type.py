"""
Show Type Enum - Domain Value Object

Theater shows and bus trips share one seat/price model; only the label differs.
"""

from enum import StrEnum


class ShowType(StrEnum):
    SHOW = 'show'
    TRIP = 'trip'
