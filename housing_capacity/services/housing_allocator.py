"""Housing allocator: accepts or rejects housing records against traffic capacity."""

from datetime import datetime
from typing import Any, Callable, List, Mapping, Optional, Union
import logging

from ..models import Housing, HousingPayload, HousingResponse, coerce_payload
from ..models.housing import SUCCESS_MESSAGE
from ..storage import RecordStore
from ..utils.error_handling import CapacityExceededError, NotFoundError
from ..utils.identifiers import current_time, generate_record_id
from .capacity_calculator import CapacityCalculator
from .locks import KeyedLock
from .traffic_registry import TrafficRegistry

logger = logging.getLogger(__name__)


class HousingAllocator:
    """Owns the housing partition and enforces the per-traffic resident limit.
    
    The capacity check and the insert for one traffic id run under that
    traffic's lock, so concurrent allocations cannot jointly overshoot the
    limit. The check is a snapshot: records accepted earlier are never
    re-examined.
    """
    
    def __init__(self, store: RecordStore,
                 traffic_registry: TrafficRegistry,
                 calculator: CapacityCalculator,
                 clock: Callable[[], datetime] = current_time,
                 id_factory: Callable[[], str] = generate_record_id,
                 locks: Optional[KeyedLock] = None,
                 strict_traffic_reference: bool = True):
        self.store = store
        self.traffic_registry = traffic_registry
        self.calculator = calculator
        self.clock = clock
        self.id_factory = id_factory
        self.locks = locks if locks is not None else traffic_registry.locks
        self.strict_traffic_reference = strict_traffic_reference
    
    def create_housing(self, payload: Union[HousingPayload, Mapping[str, Any]]) -> HousingResponse:
        """
        Create a housing record if its traffic has room for its residents.
        
        Args:
            payload: HousingPayload or mapping with housing_name,
                number_of_residents and traffic_id
        
        Returns:
            HousingResponse whose remaining_limit is the headroom before this record
        
        Raises:
            ValidationError: If the payload is invalid
            NotFoundError: If traffic_id does not resolve and strict references are on
            CapacityExceededError: If the residents exceed the remaining limit
        """
        payload = coerce_payload(payload, HousingPayload, "creating housing record")
        traffic_id = payload.traffic_id
        
        with self.locks.hold(traffic_id):
            if self.strict_traffic_reference:
                self.traffic_registry.get_traffic(traffic_id)
            
            remaining_limit = self.calculator.get_remaining_limit(traffic_id)
            is_success = remaining_limit >= payload.number_of_residents
            
            if not is_success:
                raise CapacityExceededError(
                    "Error: The number of residents exceeds the available limit for this traffic. "
                    f"Remaining Limit: {remaining_limit}",
                    traffic_id=traffic_id,
                    requested=payload.number_of_residents,
                    remaining_limit=remaining_limit
                )
            
            housing_id = self.id_factory()
            housing = Housing(
                id=housing_id,
                housing_name=payload.housing_name,
                number_of_residents=payload.number_of_residents,
                traffic_id=traffic_id,
                created_at=self.clock(),
                updated_at=None,
            )
            self.store.insert(housing_id, housing)
        
        logger.info(
            f"Allocated housing {housing_id} ({housing.housing_name}) with "
            f"{housing.number_of_residents} residents to traffic {traffic_id}; "
            f"remaining before allocation {remaining_limit}"
        )
        return HousingResponse(
            msg=SUCCESS_MESSAGE,
            is_success=is_success,
            remaining_limit=remaining_limit,
            housing_id=housing_id,
        )
    
    def get_housing(self, housing_id: str) -> Housing:
        """Return the housing record or raise NotFoundError."""
        housing = self.store.get(housing_id) if housing_id else None
        if housing is None:
            raise NotFoundError(
                f"Housing record with ID={housing_id} not found.",
                record_type="housing",
                record_id=housing_id
            )
        return housing
    
    def list_housing(self, traffic_id: Optional[str] = None) -> List[Housing]:
        """Return housing records, optionally only those bound to traffic_id."""
        if traffic_id is None:
            housings = self.store.values()
        else:
            housings = self.store.scan(lambda housing: housing.traffic_id == traffic_id)
        return sorted(housings, key=lambda h: h.created_at)
