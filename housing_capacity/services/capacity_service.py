"""Operation surface returning explicit success/failure outcomes."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Generic, List, Mapping, Optional, TypeVar, Union
import logging

from ..config.config_manager import SystemConfig
from ..models import Housing, HousingPayload, HousingResponse, Traffic, TrafficPayload
from ..storage import RecordStore, create_stores
from ..utils.error_handling import CapacitySystemError, InternalError, handle_error, safe_execute
from ..utils.identifiers import current_time, generate_record_id
from .capacity_calculator import CapacityCalculator, CapacityUsage
from .housing_allocator import HousingAllocator
from .locks import KeyedLock
from .traffic_registry import TrafficRegistry

logger = logging.getLogger(__name__)

V = TypeVar('V')


@dataclass
class OperationResult(Generic[V]):
    """Outcome of one operation: a value when ok, otherwise the error."""
    
    ok: bool
    value: Optional[V] = None
    error: Optional[CapacitySystemError] = field(default=None)
    
    @classmethod
    def success(cls, value: V) -> 'OperationResult[V]':
        return cls(ok=True, value=value)
    
    @classmethod
    def failure(cls, error: CapacitySystemError) -> 'OperationResult[V]':
        return cls(ok=False, error=error)
    
    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error is not None else None
    
    @property
    def error_code(self) -> Optional[str]:
        return self.error.error_code if self.error is not None else None
    
    def unwrap(self) -> V:
        """Return the value or raise the stored error."""
        if not self.ok:
            raise self.error
        return self.value


class CapacityService:
    """Wires the registry, calculator and allocator behind one operation surface.
    
    No operation raises: typed failures come back in the OperationResult and
    anything unexpected is logged and wrapped in an InternalError.
    """
    
    def __init__(self, traffic_store: RecordStore, housing_store: RecordStore,
                 clock: Callable[[], datetime] = current_time,
                 id_factory: Callable[[], str] = generate_record_id,
                 strict_traffic_reference: bool = True,
                 warn_on_limit_below_usage: bool = True):
        self.traffic_store = traffic_store
        self.housing_store = housing_store
        self.locks = KeyedLock()
        self.calculator = CapacityCalculator(traffic_store, housing_store)
        self.traffic_registry = TrafficRegistry(
            traffic_store,
            clock=clock,
            id_factory=id_factory,
            locks=self.locks,
            usage_lookup=self.calculator.get_total_residents if warn_on_limit_below_usage else None,
        )
        self.housing_allocator = HousingAllocator(
            housing_store,
            self.traffic_registry,
            self.calculator,
            clock=clock,
            id_factory=id_factory,
            locks=self.locks,
            strict_traffic_reference=strict_traffic_reference,
        )
    
    @classmethod
    def from_config(cls, config: SystemConfig, **kwargs) -> 'CapacityService':
        """Build a service whose stores and policies come from config."""
        traffic_store, housing_store = create_stores(config)
        kwargs.setdefault('strict_traffic_reference', config.strict_traffic_reference)
        kwargs.setdefault('warn_on_limit_below_usage', config.warn_on_limit_below_usage)
        return cls(traffic_store, housing_store, **kwargs)
    
    def _run(self, func: Callable[..., V], *args, failure_prefix: str, context: str) -> OperationResult[V]:
        try:
            return OperationResult.success(func(*args))
        except CapacitySystemError as e:
            return OperationResult.failure(e)
        except Exception as e:
            handle_error(e, context)
            return OperationResult.failure(InternalError(f"{failure_prefix}: {e}", cause=e))
    
    def create_traffic(self, payload: Union[TrafficPayload, Mapping[str, Any]]) -> OperationResult[str]:
        return self._run(
            self.traffic_registry.create_traffic, payload,
            failure_prefix="Failed to create traffic record",
            context="create_traffic"
        )
    
    def edit_traffic_limit(self, traffic_id: str,
                           payload: Union[TrafficPayload, Mapping[str, Any]]) -> OperationResult[Traffic]:
        return self._run(
            self.traffic_registry.edit_traffic_limit, traffic_id, payload,
            failure_prefix="Failed to edit traffic limit",
            context="edit_traffic_limit"
        )
    
    def create_housing(self, payload: Union[HousingPayload, Mapping[str, Any]]) -> OperationResult[HousingResponse]:
        return self._run(
            self.housing_allocator.create_housing, payload,
            failure_prefix="Failed to create housing record",
            context="create_housing"
        )
    
    def get_traffic_remaining_limit(self, traffic_id: str) -> int:
        """Remaining limit for traffic_id; 0 for unknown ids or on any failure."""
        return safe_execute(
            self.calculator.get_remaining_limit, traffic_id,
            default_return=0,
            context="get_traffic_remaining_limit"
        )
    
    def get_traffic(self, traffic_id: str) -> OperationResult[Traffic]:
        return self._run(
            self.traffic_registry.get_traffic, traffic_id,
            failure_prefix="Failed to get traffic record",
            context="get_traffic"
        )
    
    def get_housing(self, housing_id: str) -> OperationResult[Housing]:
        return self._run(
            self.housing_allocator.get_housing, housing_id,
            failure_prefix="Failed to get housing record",
            context="get_housing"
        )
    
    def get_usage(self, traffic_id: str) -> OperationResult[CapacityUsage]:
        return self._run(
            self.calculator.get_usage, traffic_id,
            failure_prefix="Failed to compute traffic usage",
            context="get_usage"
        )
    
    def list_traffic(self) -> List[Traffic]:
        return self.traffic_registry.list_traffic()
    
    def list_housing(self, traffic_id: Optional[str] = None) -> List[Housing]:
        return self.housing_allocator.list_housing(traffic_id)
