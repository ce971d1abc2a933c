"""Housing record, payload and response models with validation."""

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

SUCCESS_MESSAGE = "Success: Housing data has been successfully created."


@dataclass
class HousingPayload:
    """Request body for creating a housing record."""
    
    housing_name: str
    number_of_residents: int
    traffic_id: str
    
    def __post_init__(self):
        """Validate the payload."""
        self.validate()
    
    def validate(self) -> None:
        require_text(self.housing_name, 'housing_name')
        require_positive_int(self.number_of_residents, 'number_of_residents')
        require_text(self.traffic_id, 'traffic_id')
    
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'HousingPayload':
        data = require_mapping(data, ('housing_name', 'number_of_residents', 'traffic_id'))
        return cls(
            housing_name=data['housing_name'],
            number_of_residents=data['number_of_residents'],
            traffic_id=data['traffic_id'],
        )


@dataclass
class Housing:
    """A capacity-consuming unit bound to exactly one traffic record."""
    
    id: str
    housing_name: str
    number_of_residents: int
    traffic_id: str
    created_at: datetime
    updated_at: Optional[datetime] = field(default=None)
    
    def __post_init__(self):
        """Validate the housing record."""
        self.validate()
    
    def validate(self) -> None:
        """Validate all fields in the housing record."""
        require_text(self.id, 'id')
        require_text(self.housing_name, 'housing_name')
        require_positive_int(self.number_of_residents, 'number_of_residents')
        require_text(self.traffic_id, 'traffic_id')
        require_timestamp(self.created_at, 'created_at')
        require_timestamp(self.updated_at, 'updated_at', optional=True)
        
        logger.debug(f"Housing validated for id {self.id}")
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'housing_name': self.housing_name,
            'number_of_residents': self.number_of_residents,
            'traffic_id': self.traffic_id,
            'created_at': format_timestamp(self.created_at),
            'updated_at': format_timestamp(self.updated_at),
        }
    
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Housing':
        data = require_mapping(
            data, ('id', 'housing_name', 'number_of_residents', 'traffic_id', 'created_at')
        )
        return cls(
            id=data['id'],
            housing_name=data['housing_name'],
            number_of_residents=data['number_of_residents'],
            traffic_id=data['traffic_id'],
            created_at=parse_timestamp(data['created_at']),
            updated_at=parse_timestamp(data.get('updated_at')),
        )


@dataclass
class HousingResponse:
    """Outcome of an accepted housing creation.
    
    remaining_limit is the headroom measured before the new record was stored.
    """
    
    msg: str
    is_success: bool
    remaining_limit: int
    housing_id: Optional[str] = None
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'msg': self.msg,
            'isSuccess': self.is_success,
            'remainingLimit': self.remaining_limit,
        }
