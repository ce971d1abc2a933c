#!/usr/bin/env python3
"""
Basic usage example for the traffic capacity allocation system.
Walks through creating traffic, allocating housing against it and editing limits.
"""

from housing_capacity.config import SystemConfig
from housing_capacity.reports import build_capacity_report, summarize_report
from housing_capacity.services import CapacityService
from housing_capacity.utils import setup_logging


def main():
    """Demonstrate the operation surface."""
    
    setup_logging(log_level="INFO")
    print("Traffic Capacity Allocation - Basic Usage Example")
    print("=" * 60)
    
    service = CapacityService.from_config(SystemConfig(storage_backend="memory"))
    
    # 1. Create a traffic record
    print("\n1. Creating traffic:")
    traffic_id = service.create_traffic({'road_name': "Main St", 'limit': 10}).unwrap()
    print(f"   Traffic id: {traffic_id}")
    print(f"   Remaining limit: {service.get_traffic_remaining_limit(traffic_id)}")
    
    # 2. Allocate housing
    print("\n2. Allocating housing:")
    result = service.create_housing({
        'housing_name': "Block A",
        'number_of_residents': 6,
        'traffic_id': traffic_id,
    })
    print(f"   Block A: {result.value.to_dict()}")
    print(f"   Remaining limit: {service.get_traffic_remaining_limit(traffic_id)}")
    
    result = service.create_housing({
        'housing_name': "Block B",
        'number_of_residents': 5,
        'traffic_id': traffic_id,
    })
    print(f"   Block B rejected: {result.error_message}")
    
    # 3. Edit the limit
    print("\n3. Editing traffic limit:")
    updated = service.edit_traffic_limit(traffic_id, {'road_name': "Main St", 'limit': 4}).unwrap()
    print(f"   New limit: {updated.traffic_limit} (updated at {updated.updated_at})")
    
    # 4. Report
    print("\n4. Capacity report:")
    report = build_capacity_report(service.traffic_store, service.housing_store)
    print(report.to_string(index=False))
    print(f"   Summary: {summarize_report(report)}")


if __name__ == "__main__":
    main()
