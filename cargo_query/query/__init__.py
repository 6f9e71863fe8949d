"""
Query Package

카테고리 해석, 후보 열거, 대화형 선택, 결과 변환 파이프라인.
"""

from .catalog import TargetCatalog
from .categories import BuildMode, CandidateSource, CategoryRegistry, CategorySpec, QueryCategory
from .mapper import BuildDispatch, ResultMapper
from .pipeline import run_query
from .session import Aborted, Accepted, InquirerPicker, Picker, SelectionSession

__all__ = [
    "TargetCatalog",
    "BuildMode",
    "CandidateSource",
    "CategoryRegistry",
    "CategorySpec",
    "QueryCategory",
    "BuildDispatch",
    "ResultMapper",
    "run_query",
    "Aborted",
    "Accepted",
    "InquirerPicker",
    "Picker",
    "SelectionSession",
]
