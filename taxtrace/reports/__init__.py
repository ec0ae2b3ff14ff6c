"""Report generation for taxtrace."""

from taxtrace.reports.form8949 import Form8949Generator
from taxtrace.reports.summary import ReturnSummaryGenerator

__all__ = [
    "Form8949Generator",
    "ReturnSummaryGenerator",
]
