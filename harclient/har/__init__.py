"""
HAR archive building blocks: the content record, the body classifier that
fills it, the entry builder that wraps it and the log that collects entries.
"""

from .classifier import ContentClassifier
from .content import HarContentRecord
from .entry import HarEntryBuilder
from .log import HarLog

__all__ = ['ContentClassifier', 'HarContentRecord', 'HarEntryBuilder', 'HarLog']
