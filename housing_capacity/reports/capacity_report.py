"""Per-traffic capacity report built as a pandas DataFrame."""

from typing import Any, Dict
import logging

import numpy as np
import pandas as pd

from ..storage import RecordStore

logger = logging.getLogger(__name__)

REPORT_COLUMNS = [
    'traffic_id',
    'road_name',
    'traffic_limit',
    'total_residents',
    'remaining_limit',
    'utilization',
    'housing_count',
    'over_allocated',
]


def build_capacity_report(traffic_store: RecordStore, housing_store: RecordStore) -> pd.DataFrame:
    """
    Build one row per traffic record with its allocated residents and headroom.
    
    Housing records that reference an unknown traffic id are left out.
    
    Args:
        traffic_store: Traffic partition
        housing_store: Housing partition
    
    Returns:
        DataFrame with REPORT_COLUMNS, sorted by road name
    """
    traffic_frame = pd.DataFrame(
        [{'traffic_id': t.id, 'road_name': t.road_name, 'traffic_limit': t.traffic_limit}
         for t in traffic_store.values()],
        columns=['traffic_id', 'road_name', 'traffic_limit']
    )
    
    if traffic_frame.empty:
        return pd.DataFrame(columns=REPORT_COLUMNS)
    
    housing_frame = pd.DataFrame(
        [{'traffic_id': h.traffic_id, 'number_of_residents': h.number_of_residents}
         for h in housing_store.values()],
        columns=['traffic_id', 'number_of_residents']
    )
    
    if housing_frame.empty:
        usage = pd.DataFrame(columns=['traffic_id', 'total_residents', 'housing_count'])
    else:
        usage = (
            housing_frame
            .groupby('traffic_id')
            .agg(total_residents=('number_of_residents', 'sum'),
                 housing_count=('number_of_residents', 'size'))
            .reset_index()
        )
    
    report = traffic_frame.merge(usage, on='traffic_id', how='left')
    report['total_residents'] = report['total_residents'].fillna(0).astype(int)
    report['housing_count'] = report['housing_count'].fillna(0).astype(int)
    report['traffic_limit'] = report['traffic_limit'].astype(int)
    
    limits = report['traffic_limit'].to_numpy()
    residents = report['total_residents'].to_numpy()
    report['remaining_limit'] = np.clip(limits - residents, 0, None).astype(int)
    report['utilization'] = np.round(residents / limits, 4)
    report['over_allocated'] = residents > limits
    
    orphaned = set(usage['traffic_id']) - set(report['traffic_id'])
    if orphaned:
        logger.warning(f"{len(orphaned)} traffic ids referenced by housing records do not exist")
    
    return report[REPORT_COLUMNS].sort_values('road_name').reset_index(drop=True)


def summarize_report(report: pd.DataFrame) -> Dict[str, Any]:
    """Totals across all rows of a capacity report."""
    if report.empty:
        return {
            'traffic_count': 0,
            'total_limit': 0,
            'total_residents': 0,
            'total_remaining': 0,
            'over_allocated_count': 0,
            'overall_utilization': 0.0,
        }
    
    total_limit = int(report['traffic_limit'].sum())
    total_residents = int(report['total_residents'].sum())
    return {
        'traffic_count': int(len(report)),
        'total_limit': total_limit,
        'total_residents': total_residents,
        'total_remaining': int(report['remaining_limit'].sum()),
        'over_allocated_count': int(report['over_allocated'].sum()),
        'overall_utilization': round(total_residents / total_limit, 4) if total_limit else 0.0,
    }
