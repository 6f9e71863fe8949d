"""
cargo-query - Core Test Fixtures
실제 모델 객체와 스크립트된 picker로 터미널 없이 파이프라인을 검증합니다.
"""

import signal

import pytest

from cargo_query.workspace.models import Package, WorkspaceMetadata
from tests.helpers.picker_doubles import FakeTTY
from tests.helpers.workspace_builder import WorkspaceBuilder


# ═══════════════════════════════════════════════════════════════════════════════
# 1. WORKSPACE FIXTURES
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app_package() -> Package:
    build_target = WorkspaceBuilder.build_target
    return WorkspaceBuilder.build_package(
        "app",
        [
            build_target("app", "lib"),
            build_target("server"),
            build_target("client"),
            build_target("demo", "example"),
            build_target("integration", "test"),
            build_target("throughput", "bench"),
        ],
        features={"default": ["tls"], "tls": [], "json": []},
    )


@pytest.fixture
def tools_package() -> Package:
    build_target = WorkspaceBuilder.build_target
    return WorkspaceBuilder.build_package(
        "tools",
        [
            build_target("toolbox"),
            build_target("client"),
            build_target("plugin", "example"),
            build_target("smoke", "test"),
        ],
    )


@pytest.fixture
def sample_workspace(app_package: Package, tools_package: Package) -> WorkspaceMetadata:
    return WorkspaceBuilder.build_workspace([app_package, tools_package])


@pytest.fixture
def lib_only_workspace() -> WorkspaceMetadata:
    package = WorkspaceBuilder.build_package(
        "lib-only", [WorkspaceBuilder.build_target("lib-only", "lib")]
    )
    return WorkspaceBuilder.build_workspace([package])


# ═══════════════════════════════════════════════════════════════════════════════
# 2. TERMINAL FIXTURES
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture
def fake_tty() -> FakeTTY:
    return FakeTTY()


@pytest.fixture
def restore_signals():
    """테스트가 바꾼 시그널 핸들러를 원복"""
    saved = {signum: signal.getsignal(signum) for signum in (signal.SIGTERM, signal.SIGHUP)}
    yield saved
    for signum, handler in saved.items():
        signal.signal(signum, handler)


# ═══════════════════════════════════════════════════════════════════════════════
# 3. LOGGING FIXTURES
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture(autouse=True)
def reset_cargo_query_logger():
    """setup_log_level 이 붙인 핸들러(캡처된 stderr 참조)를 테스트마다 제거"""
    import logging

    cq_logger = logging.getLogger("cargo_query")
    saved_level, saved_propagate = cq_logger.level, cq_logger.propagate
    yield cq_logger
    for handler in cq_logger.handlers[:]:
        cq_logger.removeHandler(handler)
    cq_logger.setLevel(saved_level)
    cq_logger.propagate = saved_propagate
