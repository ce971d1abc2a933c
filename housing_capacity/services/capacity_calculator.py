"""Remaining-capacity computation for traffic records."""

from dataclasses import dataclass
from typing import Dict
import logging

from ..storage import RecordStore
from ..utils.error_handling import NotFoundError

logger = logging.getLogger(__name__)


@dataclass
class CapacityUsage:
    """Snapshot of how much of a traffic's limit is in use."""
    
    traffic_id: str
    traffic_limit: int
    total_residents: int
    remaining_limit: int
    
    @property
    def utilization(self) -> float:
        return self.total_residents / self.traffic_limit if self.traffic_limit else 0.0
    
    @property
    def is_over_allocated(self) -> bool:
        return self.total_residents > self.traffic_limit


class CapacityCalculator:
    """Aggregates housing residents per traffic record.
    
    The traffic to housing relationship is not indexed; every query scans the
    whole housing partition.
    """
    
    def __init__(self, traffic_store: RecordStore, housing_store: RecordStore):
        self.traffic_store = traffic_store
        self.housing_store = housing_store
    
    def get_total_residents(self, traffic_id: str) -> int:
        """Sum residents of all housing records referencing traffic_id."""
        housings = self.housing_store.scan(lambda housing: housing.traffic_id == traffic_id)
        return sum(housing.number_of_residents for housing in housings)
    
    def get_remaining_limit(self, traffic_id: str) -> int:
        """
        Return the traffic's limit minus allocated residents, floored at zero.
        
        Never raises. An empty or unknown identifier, or any store failure,
        yields 0, so callers cannot tell a missing traffic from a full one.
        """
        if not traffic_id:
            return 0
        
        try:
            total_residents = self.get_total_residents(traffic_id)
            traffic = self.traffic_store.get(traffic_id)
            if traffic is None:
                return 0
            return max(0, traffic.traffic_limit - total_residents)
        except Exception as e:
            logger.error(f"Error computing remaining limit for traffic {traffic_id}: {e}")
            return 0
    
    def get_usage(self, traffic_id: str) -> CapacityUsage:
        """Return a usage snapshot, raising NotFoundError for unknown traffic."""
        traffic = self.traffic_store.get(traffic_id) if traffic_id else None
        if traffic is None:
            raise NotFoundError(
                f"Traffic record with ID={traffic_id} not found.",
                record_type="traffic",
                record_id=traffic_id
            )
        
        total_residents = self.get_total_residents(traffic_id)
        return CapacityUsage(
            traffic_id=traffic_id,
            traffic_limit=traffic.traffic_limit,
            total_residents=total_residents,
            remaining_limit=max(0, traffic.traffic_limit - total_residents),
        )
    
    def residents_by_traffic(self) -> Dict[str, int]:
        """Resident totals for every traffic id referenced by a housing record."""
        totals: Dict[str, int] = {}
        for housing in self.housing_store.values():
            totals[housing.traffic_id] = totals.get(housing.traffic_id, 0) + housing.number_of_residents
        return totals
