"""
Workspace Package

cargo 워크스페이스 메타데이터 로드와 프로파일 해석을 제공합니다.
"""

from .loader import load_workspace
from .models import Package, Target, WorkspaceMetadata
from .profiles import Profiles

__all__ = [
    "load_workspace",
    "Package",
    "Target",
    "WorkspaceMetadata",
    "Profiles",
]
