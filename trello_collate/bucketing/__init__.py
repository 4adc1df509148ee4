"""Bucketing module.

Extracts bucket tags from card titles, groups cards into buckets, and
reconciles rollup checklists against bucket membership.
"""

from .tags import TagExtractor
from .classifier import BucketClassifier
from .reconciler import ChecklistReconciler

__all__ = ["TagExtractor", "BucketClassifier", "ChecklistReconciler"]
