"""Tests for the capacity report."""

import pytest

from housing_capacity.reports import REPORT_COLUMNS, build_capacity_report, summarize_report
from housing_capacity.services import CapacityService
from housing_capacity.storage import InMemoryRecordStore


class TestCapacityReport:
    """Test build_capacity_report and summarize_report."""
    
    @pytest.fixture
    def service(self):
        return CapacityService(InMemoryRecordStore("traffic"), InMemoryRecordStore("housing"))
    
    def build(self, service):
        return build_capacity_report(service.traffic_store, service.housing_store)
    
    def test_empty_report(self, service):
        report = self.build(service)
        
        assert report.empty
        assert list(report.columns) == REPORT_COLUMNS
        assert summarize_report(report)['traffic_count'] == 0
    
    def test_rows_per_traffic(self, service):
        main_st = service.create_traffic({'road_name': "Main St", 'limit': 10}).unwrap()
        oak_ave = service.create_traffic({'road_name': "Oak Ave", 'limit': 4}).unwrap()
        service.create_housing({'housing_name': "Block A", 'number_of_residents': 6, 'traffic_id': main_st})
        service.create_housing({'housing_name': "Block B", 'number_of_residents': 2, 'traffic_id': main_st})
        
        report = self.build(service)
        
        assert list(report['road_name']) == ["Main St", "Oak Ave"]
        main_row = report.iloc[0]
        assert main_row['traffic_id'] == main_st
        assert main_row['total_residents'] == 8
        assert main_row['remaining_limit'] == 2
        assert main_row['housing_count'] == 2
        assert main_row['utilization'] == pytest.approx(0.8)
        
        oak_row = report.iloc[1]
        assert oak_row['traffic_id'] == oak_ave
        assert oak_row['total_residents'] == 0
        assert oak_row['remaining_limit'] == 4
        assert oak_row['housing_count'] == 0
    
    def test_over_allocated_after_edit(self, service):
        traffic_id = service.create_traffic({'road_name': "Main St", 'limit': 10}).unwrap()
        service.create_housing({'housing_name': "Block A", 'number_of_residents': 8, 'traffic_id': traffic_id})
        service.edit_traffic_limit(traffic_id, {'road_name': "Main St", 'limit': 5})
        
        report = self.build(service)
        row = report.iloc[0]
        
        assert row['remaining_limit'] == 0
        assert bool(row['over_allocated'])
        assert summarize_report(report)['over_allocated_count'] == 1
    
    def test_summary_totals(self, service):
        first = service.create_traffic({'road_name': "Main St", 'limit': 10}).unwrap()
        service.create_traffic({'road_name': "Oak Ave", 'limit': 10})
        service.create_housing({'housing_name': "Block A", 'number_of_residents': 5, 'traffic_id': first})
        
        summary = summarize_report(self.build(service))
        
        assert summary == {
            'traffic_count': 2,
            'total_limit': 20,
            'total_residents': 5,
            'total_remaining': 15,
            'over_allocated_count': 0,
            'overall_utilization': 0.25,
        }
