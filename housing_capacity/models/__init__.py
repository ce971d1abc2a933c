"""Data models for traffic and housing records."""

from .traffic import Traffic, TrafficPayload
from .housing import Housing, HousingPayload, HousingResponse
from .validators import coerce_payload

__all__ = [
    'Traffic',
    'TrafficPayload',
    'Housing',
    'HousingPayload',
    'HousingResponse',
    'coerce_payload',
]
