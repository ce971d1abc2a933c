"""Tabular capacity reports."""

from .capacity_report import REPORT_COLUMNS, build_capacity_report, summarize_report

__all__ = ['REPORT_COLUMNS', 'build_capacity_report', 'summarize_report']
