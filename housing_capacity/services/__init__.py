"""Traffic registry, capacity calculation and housing allocation services."""

from .locks import KeyedLock
from .traffic_registry import TrafficRegistry
from .capacity_calculator import CapacityCalculator, CapacityUsage
from .housing_allocator import HousingAllocator
from .capacity_service import CapacityService, OperationResult

__all__ = [
    'KeyedLock',
    'TrafficRegistry',
    'CapacityCalculator',
    'CapacityUsage',
    'HousingAllocator',
    'CapacityService',
    'OperationResult',
]
