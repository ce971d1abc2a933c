"""Tests for the capacity service operation surface."""

import os
import tempfile
import pytest
from unittest.mock import patch

from housing_capacity.config import SystemConfig
from housing_capacity.models import TrafficPayload
from housing_capacity.services import CapacityService, OperationResult
from housing_capacity.storage import InMemoryRecordStore, JsonFileRecordStore
from housing_capacity.utils import CapacityExceededError, InternalError, NotFoundError


@pytest.fixture
def service():
    return CapacityService(InMemoryRecordStore("traffic"), InMemoryRecordStore("housing"))


class TestOperationResult:
    """Test OperationResult helpers."""
    
    def test_success(self):
        result = OperationResult.success("t-1")
        
        assert result.ok
        assert result.unwrap() == "t-1"
        assert result.error_message is None
        assert result.error_code is None
    
    def test_failure_unwrap_raises(self):
        error = NotFoundError("gone", record_type="traffic", record_id="x")
        result = OperationResult.failure(error)
        
        assert not result.ok
        assert result.error_message == "gone"
        assert result.error_code == "NOT_FOUND"
        with pytest.raises(NotFoundError):
            result.unwrap()


class TestCapacityService:
    """Test CapacityService class."""
    
    def test_main_street_scenario(self, service):
        created = service.create_traffic({'road_name': "Main St", 'limit': 10})
        assert created.ok
        traffic_id = created.value
        
        assert service.get_traffic_remaining_limit(traffic_id) == 10
        
        block_a = service.create_housing(
            {'housing_name': "Block A", 'number_of_residents': 6, 'traffic_id': traffic_id}
        )
        assert block_a.ok
        assert block_a.value.to_dict() == {
            'msg': "Success: Housing data has been successfully created.",
            'isSuccess': True,
            'remainingLimit': 10,
        }
        assert service.get_traffic_remaining_limit(traffic_id) == 4
        
        block_b = service.create_housing(
            {'housing_name': "Block B", 'number_of_residents': 5, 'traffic_id': traffic_id}
        )
        assert not block_b.ok
        assert isinstance(block_b.error, CapacityExceededError)
        assert block_b.error.remaining_limit == 4
        assert len(service.list_housing(traffic_id)) == 1
    
    def test_create_traffic_validation_failure(self, service):
        result = service.create_traffic({'road_name': "", 'limit': 10})
        
        assert not result.ok
        assert result.error_code == "VALIDATION_ERROR"
        assert result.error_message.startswith("Invalid payload for creating traffic record.")
        assert service.list_traffic() == []
    
    def test_edit_traffic_limit(self, service):
        traffic_id = service.create_traffic(TrafficPayload(road_name="Main St", limit=10)).unwrap()
        
        result = service.edit_traffic_limit(traffic_id, {'road_name': "Main St", 'limit': 25})
        
        assert result.ok
        assert result.value.traffic_limit == 25
        assert result.value.updated_at is not None
        assert service.get_traffic_remaining_limit(traffic_id) == 25
    
    def test_edit_unknown_traffic(self, service):
        result = service.edit_traffic_limit("missing", {'road_name': "Main St", 'limit': 5})
        
        assert not result.ok
        assert result.error_code == "NOT_FOUND"
        assert result.error_message == "Traffic record with ID=missing not found."
        assert service.list_traffic() == []
    
    def test_create_housing_unknown_traffic(self, service):
        result = service.create_housing({'housing_name': "Block A", 'number_of_residents': 1, 'traffic_id': "ghost"})
        
        assert not result.ok
        assert isinstance(result.error, NotFoundError)
    
    def test_remaining_limit_for_unknown_id(self, service):
        assert service.get_traffic_remaining_limit("missing") == 0
    
    def test_remaining_limit_never_raises(self, service):
        with patch.object(service.calculator, 'get_remaining_limit', side_effect=RuntimeError("boom")):
            assert service.get_traffic_remaining_limit("t-1") == 0
    
    def test_unexpected_error_is_wrapped(self, service):
        traffic_id = service.create_traffic({'road_name': "Main St", 'limit': 10}).unwrap()
        
        with patch.object(service.housing_store, 'insert', side_effect=RuntimeError("disk full")):
            result = service.create_housing(
                {'housing_name': "Block A", 'number_of_residents': 1, 'traffic_id': traffic_id}
            )
        
        assert not result.ok
        assert isinstance(result.error, InternalError)
        assert result.error_message == "Failed to create housing record: disk full"
        assert service.list_housing() == []
    
    def test_get_usage(self, service):
        traffic_id = service.create_traffic({'road_name': "Main St", 'limit': 10}).unwrap()
        service.create_housing({'housing_name': "Block A", 'number_of_residents': 7, 'traffic_id': traffic_id})
        
        usage = service.get_usage(traffic_id).unwrap()
        
        assert usage.total_residents == 7
        assert usage.remaining_limit == 3
    
    def test_get_traffic_and_housing(self, service):
        traffic_id = service.create_traffic({'road_name': "Main St", 'limit': 10}).unwrap()
        housing_id = service.create_housing(
            {'housing_name': "Block A", 'number_of_residents': 2, 'traffic_id': traffic_id}
        ).unwrap().housing_id
        
        assert service.get_traffic(traffic_id).unwrap().road_name == "Main St"
        assert service.get_housing(housing_id).unwrap().number_of_residents == 2
        assert service.get_housing("missing").error_code == "NOT_FOUND"

    
    def test_registry_and_allocator_share_service_locks(self, service):
        assert service.traffic_registry.locks is service.locks
        assert service.housing_allocator.locks is service.locks
    
    def test_returned_traffic_cannot_change_stored_record(self, service):
        traffic_id = service.create_traffic({'road_name': "Main St", 'limit': 10}).unwrap()
        
        service.get_traffic(traffic_id).unwrap().traffic_limit = -3
        service.list_traffic()[0].road_name = "Changed"
        
        stored = service.get_traffic(traffic_id).unwrap()
        assert stored.traffic_limit == 10
        assert stored.road_name == "Main St"
        assert stored.updated_at is None
        assert service.get_traffic_remaining_limit(traffic_id) == 10
    
    def test_returned_housing_cannot_change_stored_record(self, service):
        traffic_id = service.create_traffic({'road_name': "Main St", 'limit': 10}).unwrap()
        housing_id = service.create_housing(
            {'housing_name': "Block A", 'number_of_residents': 4, 'traffic_id': traffic_id}
        ).unwrap().housing_id
        
        service.get_housing(housing_id).unwrap().number_of_residents = 1
        service.list_housing(traffic_id)[0].traffic_id = "elsewhere"
        
        assert service.get_traffic_remaining_limit(traffic_id) == 6
    
    def test_edit_succeeds_when_usage_check_fails(self, service):
        traffic_id = service.create_traffic({'road_name': "Main St", 'limit': 10}).unwrap()
        
        with patch.object(service.traffic_registry, 'usage_lookup', side_effect=RuntimeError("scan failed")):
            result = service.edit_traffic_limit(traffic_id, {'road_name': "Main St", 'limit': 4})
        
        assert result.ok
        assert service.get_traffic_remaining_limit(traffic_id) == 4

class TestCapacityServiceFromConfig:
    """Test building the service from SystemConfig."""
    
    def test_lenient_reference_from_config(self):
        service = CapacityService.from_config(SystemConfig(strict_traffic_reference=False))
        
        result = service.create_housing({'housing_name': "Block A", 'number_of_residents': 1, 'traffic_id': "ghost"})
        
        assert isinstance(result.error, CapacityExceededError)
        assert result.error.remaining_limit == 0
    
    def test_json_backend_survives_restart(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            config = SystemConfig(storage_backend="json", data_dir=temp_dir)
            service = CapacityService.from_config(config)
            assert isinstance(service.traffic_store, JsonFileRecordStore)
            
            traffic_id = service.create_traffic({'road_name': "Main St", 'limit': 10}).unwrap()
            service.create_housing({'housing_name': "Block A", 'number_of_residents': 4, 'traffic_id': traffic_id})
            
            restarted = CapacityService.from_config(config)
            
            assert os.path.exists(os.path.join(temp_dir, "housing.json"))
            assert restarted.get_traffic_remaining_limit(traffic_id) == 6
