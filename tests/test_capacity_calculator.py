"""Tests for the capacity calculator."""

import pytest
from datetime import datetime
from unittest.mock import Mock

from housing_capacity.models import Housing, Traffic
from housing_capacity.services import CapacityCalculator
from housing_capacity.storage import InMemoryRecordStore
from housing_capacity.utils import NotFoundError

CREATED = datetime(2024, 1, 1, 9, 0)


class TestCapacityCalculator:
    """Test CapacityCalculator class."""
    
    @pytest.fixture
    def traffic_store(self):
        store = InMemoryRecordStore("traffic")
        store.insert("t-1", Traffic(id="t-1", road_name="Main St", traffic_limit=10, created_at=CREATED))
        store.insert("t-2", Traffic(id="t-2", road_name="Oak Ave", traffic_limit=5, created_at=CREATED))
        return store
    
    @pytest.fixture
    def housing_store(self):
        return InMemoryRecordStore("housing")
    
    @pytest.fixture
    def calculator(self, traffic_store, housing_store):
        return CapacityCalculator(traffic_store, housing_store)
    
    def add_housing(self, store, housing_id, traffic_id, residents):
        store.insert(housing_id, Housing(
            id=housing_id,
            housing_name=f"Block {housing_id}",
            number_of_residents=residents,
            traffic_id=traffic_id,
            created_at=CREATED,
        ))
    
    def test_full_limit_without_housing(self, calculator):
        assert calculator.get_remaining_limit("t-1") == 10
        assert calculator.get_total_residents("t-1") == 0
    
    def test_only_matching_housing_is_counted(self, calculator, housing_store):
        self.add_housing(housing_store, "h-1", "t-1", 3)
        self.add_housing(housing_store, "h-2", "t-1", 2)
        self.add_housing(housing_store, "h-3", "t-2", 4)
        
        assert calculator.get_total_residents("t-1") == 5
        assert calculator.get_remaining_limit("t-1") == 5
        assert calculator.get_remaining_limit("t-2") == 1
    
    def test_unknown_traffic_returns_zero(self, calculator):
        assert calculator.get_remaining_limit("missing") == 0
    
    def test_empty_id_returns_zero(self, calculator):
        assert calculator.get_remaining_limit("") == 0
        assert calculator.get_remaining_limit(None) == 0
    
    def test_floor_at_zero_when_over_allocated(self, calculator, traffic_store, housing_store):
        self.add_housing(housing_store, "h-1", "t-1", 8)
        traffic_store.insert("t-1", Traffic(id="t-1", road_name="Main St", traffic_limit=3, created_at=CREATED))
        
        assert calculator.get_remaining_limit("t-1") == 0
    
    def test_store_failure_returns_zero(self, traffic_store):
        broken_store = Mock()
        broken_store.scan.side_effect = RuntimeError("disk gone")
        calculator = CapacityCalculator(traffic_store, broken_store)
        
        assert calculator.get_remaining_limit("t-1") == 0
    
    def test_get_usage(self, calculator, housing_store):
        self.add_housing(housing_store, "h-1", "t-1", 6)
        
        usage = calculator.get_usage("t-1")
        
        assert usage.traffic_limit == 10
        assert usage.total_residents == 6
        assert usage.remaining_limit == 4
        assert usage.utilization == pytest.approx(0.6)
        assert not usage.is_over_allocated
    
    def test_get_usage_over_allocated(self, calculator, traffic_store, housing_store):
        self.add_housing(housing_store, "h-1", "t-2", 5)
        traffic_store.insert("t-2", Traffic(id="t-2", road_name="Oak Ave", traffic_limit=2, created_at=CREATED))
        
        usage = calculator.get_usage("t-2")
        
        assert usage.remaining_limit == 0
        assert usage.is_over_allocated
    
    def test_get_usage_unknown_traffic(self, calculator):
        with pytest.raises(NotFoundError):
            calculator.get_usage("missing")
    
    def test_residents_by_traffic(self, calculator, housing_store):
        self.add_housing(housing_store, "h-1", "t-1", 3)
        self.add_housing(housing_store, "h-2", "t-1", 2)
        self.add_housing(housing_store, "h-3", "ghost", 1)
        
        assert calculator.residents_by_traffic() == {"t-1": 5, "ghost": 1}
