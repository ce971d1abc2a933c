"""Traffic registry: creation, limit edits and lookups of traffic records."""

from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, List, Mapping, Optional, Union
import logging

from ..models import Traffic, TrafficPayload, coerce_payload
from ..storage import RecordStore
from ..utils.error_handling import NotFoundError, ValidationError, safe_execute
from ..utils.identifiers import current_time, generate_record_id
from .locks import KeyedLock

logger = logging.getLogger(__name__)


class TrafficRegistry:
    """Owns the traffic partition of the record store."""
    
    def __init__(self, store: RecordStore,
                 clock: Callable[[], datetime] = current_time,
                 id_factory: Callable[[], str] = generate_record_id,
                 locks: Optional[KeyedLock] = None,
                 usage_lookup: Optional[Callable[[str], int]] = None):
        self.store = store
        self.clock = clock
        self.id_factory = id_factory
        self.locks = locks if locks is not None else KeyedLock()
        # Returns current resident total for a traffic id; used for warnings only
        self.usage_lookup = usage_lookup
    
    def create_traffic(self, payload: Union[TrafficPayload, Mapping[str, Any]]) -> str:
        """
        Create a traffic record.
        
        Args:
            payload: TrafficPayload or mapping with road_name and limit
        
        Returns:
            Identifier of the new traffic record
        
        Raises:
            ValidationError: If road_name is empty or limit is not a positive integer
        """
        payload = coerce_payload(payload, TrafficPayload, "creating traffic record")
        
        traffic_id = self.id_factory()
        traffic = Traffic(
            id=traffic_id,
            road_name=payload.road_name,
            traffic_limit=payload.limit,
            created_at=self.clock(),
            updated_at=None,
        )
        self.store.insert(traffic_id, traffic)
        
        logger.info(f"Created traffic {traffic_id} ({traffic.road_name}) with limit {traffic.traffic_limit}")
        return traffic_id
    
    def edit_traffic_limit(self, traffic_id: str,
                           payload: Union[TrafficPayload, Mapping[str, Any]]) -> Traffic:
        """
        Overwrite the road name and limit of an existing traffic record.
        
        Housing records already allocated against the traffic are not
        re-validated, so a lowered limit can leave the traffic over-allocated.
        
        Raises:
            ValidationError: If the identifier or payload is invalid
            NotFoundError: If no traffic record has this identifier
        """
        if not isinstance(traffic_id, str) or not traffic_id:
            raise ValidationError(
                "Invalid ID for editing traffic limit.",
                field_name='id',
                invalid_value=traffic_id
            )
        
        with self.locks.hold(traffic_id):
            current = self.get_traffic(traffic_id)
            payload = coerce_payload(payload, TrafficPayload, "editing traffic limit")
            
            updated = replace(current)
            updated.apply_edit(payload, self.clock())
            self.store.insert(traffic_id, updated)
            
            self._warn_if_over_allocated(updated)
        
        logger.info(f"Edited traffic {traffic_id}: limit {current.traffic_limit} -> {updated.traffic_limit}")
        return updated
    
    def get_traffic(self, traffic_id: str) -> Traffic:
        """Return the traffic record or raise NotFoundError."""
        traffic = self.store.get(traffic_id) if traffic_id else None
        if traffic is None:
            raise NotFoundError(
                f"Traffic record with ID={traffic_id} not found.",
                record_type="traffic",
                record_id=traffic_id
            )
        return traffic
    
    def find_traffic(self, traffic_id: str) -> Optional[Traffic]:
        return self.store.get(traffic_id) if traffic_id else None
    
    def list_traffic(self) -> List[Traffic]:
        """Return all traffic records ordered by creation time."""
        return sorted(self.store.values(), key=lambda t: t.created_at)
    
    def _warn_if_over_allocated(self, traffic: Traffic) -> None:
        if self.usage_lookup is None:
            return
        # The edit is already stored; a failed lookup only skips the warning
        used = safe_execute(
            self.usage_lookup, traffic.id,
            default_return=None,
            context="usage check after traffic edit"
        )
        if used is not None and used > traffic.traffic_limit:
            logger.warning(
                f"Traffic {traffic.id} limit {traffic.traffic_limit} is below current usage {used}; "
                f"existing housing allocations were kept"
            )
