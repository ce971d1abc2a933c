"""Keyed record stores for traffic and housing partitions."""

from .record_store import RecordStore, InMemoryRecordStore, JsonFileRecordStore, create_stores

__all__ = ['RecordStore', 'InMemoryRecordStore', 'JsonFileRecordStore', 'create_stores']
