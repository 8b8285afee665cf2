"""Core API подмодуль crate_release.core.

Содержит высокоуровневые фасады и утилиты, которые могут использоваться
драйвером публикации и внешними скриптами (например, CI-джобами).
"""

from __future__ import annotations

# Переэкспорт реализаций из корня пакета
from ..availability import AvailabilityError, RetryPolicy, wait_until_available  # noqa: F401
from ..cargo import CargoWorkspace  # noqa: F401
from ..cargo_utils import CargoError, Crate, PackageNotFoundError  # noqa: F401
from ..config import Config, load_config  # noqa: F401
from ..packages import DEFAULT_CRATES, PublishPlan, build_plan  # noqa: F401
from ..registry import RegistryClient  # noqa: F401

__all__ = [
    "AvailabilityError",
    "RetryPolicy",
    "wait_until_available",
    "CargoWorkspace",
    "CargoError",
    "Crate",
    "PackageNotFoundError",
    "Config",
    "load_config",
    "DEFAULT_CRATES",
    "PublishPlan",
    "build_plan",
    "RegistryClient",
]
