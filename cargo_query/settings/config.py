"""
Settings Schema
빌드 설정(CLI 전달값)과 cargo-query 자체 설정(picker, logging)
"""

import re
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_PROFILE = "dev"
RELEASE_PROFILE = "release"

_HEIGHT_PATTERN = re.compile(r"^(auto|\d{1,3}%|\d+)$")


class BuildConfig(BaseModel):
    """
    호스트 빌드 도구가 워크스페이스와 컴파일 옵션을 해석할 때 필요한 설정.

    cargo-query는 requested_profile 과 packages 외에는 해석하지 않고
    워크스페이스 로더에 그대로 전달합니다.
    """

    model_config = ConfigDict(frozen=True)

    features: List[str] = Field(default_factory=list, description="활성화할 feature")
    all_features: bool = Field(False, description="--all-features")
    no_default_features: bool = Field(False, description="--no-default-features")
    jobs: Optional[int] = Field(None, description="병렬 빌드 작업 수")
    message_format: List[str] = Field(default_factory=list, description="--message-format")
    profile: Optional[str] = Field(None, description="요청한 빌드 프로파일")
    release: bool = Field(False, description="--release (release 프로파일)")
    target: List[str] = Field(default_factory=list, description="target triple")
    manifest_path: Optional[Path] = Field(None, description="Cargo.toml 경로")
    packages: List[str] = Field(default_factory=list, description="타겟을 열거할 패키지")

    @field_validator("features", mode="before")
    @classmethod
    def split_features(cls, v):
        """`-F a,b -F "c d"` 형식을 개별 feature 목록으로 정규화"""
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        features: List[str] = []
        for item in v:
            for feature in re.split(r"[,\s]+", item):
                if feature and feature not in features:
                    features.append(feature)
        return features

    @field_validator("jobs")
    @classmethod
    def validate_jobs(cls, v: Optional[int]) -> Optional[int]:
        if v == 0:
            raise ValueError("jobs may not be 0")
        return v

    @model_validator(mode="after")
    def validate_profile_flags(self) -> "BuildConfig":
        if self.release and self.profile not in (None, RELEASE_PROFILE):
            raise ValueError(
                f"conflicting usage of --profile={self.profile} and --release"
            )
        return self

    @property
    def requested_profile(self) -> str:
        if self.release:
            return RELEASE_PROFILE
        return self.profile or DEFAULT_PROFILE


class PickerConfig(BaseModel):
    """Fuzzy picker 표시 설정 (정확성에는 영향 없음)"""

    height: str = Field("40%", description='"40%" 같은 비율, "auto", 또는 줄 수')
    max_height: int = Field(20, ge=3, description='height가 "auto"일 때 최대 줄 수')
    prompt: str = Field("{category}> ", description="프롬프트. {category} 치환 지원")
    border: bool = Field(False, description="picker 테두리 표시")
    info: bool = Field(True, description="일치 개수 표시")

    @field_validator("height", mode="before")
    @classmethod
    def validate_height(cls, v):
        v = str(v).strip()
        if not _HEIGHT_PATTERN.match(v):
            raise ValueError(f'height must be a percentage, a line count or "auto": {v!r}')
        return v

    def render_prompt(self, category: str) -> str:
        return self.prompt.replace("{category}", category)


class LoggingConfig(BaseModel):
    """로깅 설정"""

    level: str = Field("WARNING", description="DEBUG, INFO, CLI, WARNING, ERROR")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "CLI", "WARNING", "ERROR"):
            raise ValueError(f"unknown log level: {v}")
        return v


class QueryConfig(BaseModel):
    """cargo-query 설정 파일 (.cargo-query.yaml) 루트"""

    picker: PickerConfig = Field(default_factory=PickerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
