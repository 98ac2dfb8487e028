"""
Query parameter models for list endpoints.

Each model renders to ordered ``(name, value)`` pairs using the API's
camelCase parameter names.
"""
from dataclasses import dataclass
from typing import List, Tuple, Any, Optional


@dataclass
class CompetitionsList:
    """Filters for ``GET /competitions/list``."""
    group: str = ''
    category: str = ''
    sort_by: str = ''
    page: int = 1
    search: str = ''

    def to_query(self) -> List[Tuple[str, Any]]:
        return [
            ('group', self.group),
            ('category', self.category),
            ('sortBy', self.sort_by),
            ('page', self.page),
            ('search', self.search),
        ]


@dataclass
class DatasetsList:
    """Filters for ``GET /datasets/list``."""
    group: str = ''
    sort_by: str = ''
    size: str = ''
    filetype: str = ''
    license: str = ''
    tagids: str = ''
    search: str = ''
    user: str = ''
    page: int = 1
    max_size: Optional[int] = None
    min_size: Optional[int] = None

    def to_query(self) -> List[Tuple[str, Any]]:
        query = [
            ('group', self.group),
            ('sortBy', self.sort_by),
            ('size', self.size),
            ('filetype', self.filetype),
            ('license', self.license),
            ('tagids', self.tagids),
            ('search', self.search),
            ('user', self.user),
            ('page', self.page),
        ]
        if self.max_size is not None:
            query.append(('maxSize', self.max_size))
        if self.min_size is not None:
            query.append(('minSize', self.min_size))
        return query


@dataclass
class KernelsList:
    """Filters for ``GET /kernels/list``."""
    page: int = 1
    page_size: int = 20
    search: str = ''
    group: str = ''
    user: str = ''
    language: str = ''
    kernel_type: str = ''
    output_type: str = ''
    sort_by: str = ''
    dataset: str = ''
    competition: str = ''
    parent_kernel: str = ''

    def to_query(self) -> List[Tuple[str, Any]]:
        return [
            ('page', self.page),
            ('pageSize', self.page_size),
            ('search', self.search),
            ('group', self.group),
            ('user', self.user),
            ('language', self.language),
            ('kernelType', self.kernel_type),
            ('outputType', self.output_type),
            ('sortBy', self.sort_by),
            ('dataset', self.dataset),
            ('competition', self.competition),
            ('parentKernel', self.parent_kernel),
        ]
