"""Traffic record and payload models with validation."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional
import logging

from .validators import (
    format_timestamp,
    parse_timestamp,
    require_mapping,
    require_positive_int,
    require_text,
    require_timestamp,
)

logger = logging.getLogger(__name__)


@dataclass
class TrafficPayload:
    """Request body for creating a traffic record or editing its limit."""
    
    road_name: str
    limit: int
    
    def __post_init__(self):
        """Validate the payload."""
        self.validate()
    
    def validate(self) -> None:
        require_text(self.road_name, 'road_name')
        require_positive_int(self.limit, 'limit')
    
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'TrafficPayload':
        data = require_mapping(data, ('road_name', 'limit'))
        return cls(road_name=data['road_name'], limit=data['limit'])


@dataclass
class Traffic:
    """A named capacity pool that housing records draw residents from."""
    
    id: str
    road_name: str
    traffic_limit: int
    created_at: datetime
    updated_at: Optional[datetime] = field(default=None)
    
    def __post_init__(self):
        """Validate the traffic record."""
        self.validate()
    
    def validate(self) -> None:
        """Validate all fields in the traffic record."""
        require_text(self.id, 'id')
        require_text(self.road_name, 'road_name')
        require_positive_int(self.traffic_limit, 'traffic_limit')
        require_timestamp(self.created_at, 'created_at')
        require_timestamp(self.updated_at, 'updated_at', optional=True)
        
        logger.debug(f"Traffic validated for id {self.id}")
    
    def apply_edit(self, payload: TrafficPayload, now: datetime) -> None:
        """Overwrite the name and limit from payload and stamp the edit time."""
        self.road_name = payload.road_name
        self.traffic_limit = payload.limit
        self.updated_at = now
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'road_name': self.road_name,
            'traffic_limit': self.traffic_limit,
            'created_at': format_timestamp(self.created_at),
            'updated_at': format_timestamp(self.updated_at),
        }
    
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Traffic':
        data = require_mapping(data, ('id', 'road_name', 'traffic_limit', 'created_at'))
        return cls(
            id=data['id'],
            road_name=data['road_name'],
            traffic_limit=data['traffic_limit'],
            created_at=parse_timestamp(data['created_at']),
            updated_at=parse_timestamp(data.get('updated_at')),
        )
