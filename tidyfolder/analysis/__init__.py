"""
Analysis module for building move plans.

This module classifies the entries of a target directory using the
configured categories and rules, and aggregates the results into a plan.
"""

from .classifier import Classifier, classify
from .conditions import DirectoryFacts, is_category_directory, unwrap_single_nested
from .metadata import METADATA_GATE, read_capture_date
from .scanner import PlanScanner, generate_plan

__all__ = [
    "Classifier",
    "classify",
    "DirectoryFacts",
    "is_category_directory",
    "unwrap_single_nested",
    "METADATA_GATE",
    "read_capture_date",
    "PlanScanner",
    "generate_plan",
]
