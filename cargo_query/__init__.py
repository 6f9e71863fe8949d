"""
cargo-query

cargo 워크스페이스의 빌드 타겟과 프로파일을 fuzzy picker로 선택하는 cargo 확장.
"""

import importlib.metadata

try:
    __version__ = importlib.metadata.version("cargo-query")
except importlib.metadata.PackageNotFoundError:
    __version__ = "unknown"
