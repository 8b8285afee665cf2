"""Публикация крейтов workspace в реестр в порядке зависимостей.

Запуск (два эквивалентных варианта):
    uv run crate-release [CRATE ...] [--config PATH] [--manifest-dir DIR] [--dry-run]
    # или
    uv run python -m crate_release.publisher [CRATE ...]

Действия по каждому крейту (строго по очереди):
1. Локальная версия из `cargo metadata`.
2. Если реестр уже знает эту версию — пропускаем.
3. `cargo publish --manifest-path <path> [flags] [--token ...]`.
4. Ждём, пока версия появится в реестре, плюс пауза на CDN.

Первая фатальная ошибка останавливает весь запуск: публикация не по порядку
ломает сборку зависимых крейтов.
"""
from __future__ import annotations

import argparse
import enum
import sys
import time
from dataclasses import dataclass, field
from typing import Callable, Protocol, Sequence

from .availability import DEFAULT_POLICY, AvailabilityError, RetryPolicy, wait_until_available
from .cargo import CargoWorkspace
from .cargo_utils import CargoError
from .config import load_config
from .packages import PublishPlan, build_plan
from .registry import RegistryClient


class CrateState(enum.Enum):
    PENDING = "pending"
    ALREADY_PUBLISHED = "already_published"
    PUBLISHED = "published"
    FAILED = "failed"


@dataclass(slots=True)
class RunResult:
    """Итог запуска: состояние каждого крейта и причина остановки (если была)."""

    states: dict[str, CrateState] = field(default_factory=dict)
    error: str | None = None
    exit_code: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    def count(self, state: CrateState) -> int:
        return sum(1 for s in self.states.values() if s is state)


class Workspace(Protocol):
    def local_version(self, name: str) -> str: ...

    def publish(self, name: str, token: str | None = None, extra_flags: Sequence[str] = (), dry_run: bool = False) -> None: ...


class Registry(Protocol):
    def published_at(self, name: str, version: str) -> str | None: ...


def publish_crate(
    name: str,
    plan: PublishPlan,
    cargo: Workspace,
    registry: Registry,
    policy: RetryPolicy = DEFAULT_POLICY,
    sleep: Callable[[float], None] = time.sleep,
) -> CrateState:
    """Проводит один крейт через проверку, публикацию и ожидание.

    Ошибки (`CargoError`, `AvailabilityError`) не перехватываются: решение
    об остановке принимает `publish_all`.
    """
    version = cargo.local_version(name)
    published_at = registry.published_at(name, version)
    print(f"[publish] {name}: локальная версия {version}")
    if published_at:
        print(f"[publish]   🟡 {name} {version} уже опубликован {published_at}, пропускаем")
        return CrateState.ALREADY_PUBLISHED

    print(f"[publish]   📦 публикуем крейт {name}...")
    cargo.publish(name, token=plan.token, extra_flags=plan.extra_flags, dry_run=plan.dry_run)
    if plan.dry_run:
        return CrateState.PUBLISHED

    wait_until_available(registry, name, version, policy=policy, sleep=sleep)
    print(f"[publish]   ✅ {name} {version} опубликован")
    return CrateState.PUBLISHED


def publish_all(
    plan: PublishPlan,
    *,
    cargo: Workspace,
    registry: Registry,
    policy: RetryPolicy = DEFAULT_POLICY,
    sleep: Callable[[float], None] | None = None,
) -> RunResult:
    """Публикует крейты плана по порядку, останавливаясь на первой ошибке."""
    sleep = sleep or time.sleep
    result = RunResult(states={name: CrateState.PENDING for name in plan.crates})

    print(f"[publish] Пытаемся опубликовать крейт(ы): {plan}")
    for name in plan.crates:
        try:
            result.states[name] = publish_crate(name, plan, cargo, registry, policy=policy, sleep=sleep)
        except (CargoError, AvailabilityError) as exc:
            result.states[name] = CrateState.FAILED
            result.error = f"{name}: {exc}"
            # код cargo publish пробрасываем как есть
            result.exit_code = getattr(exc, "returncode", 1) or 1
            return result

    return result


def run(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Publish workspace crates to the registry in dependency order")
    parser.add_argument("crates", nargs="*", help="крейты для публикации (заменяют список по умолчанию)")
    parser.add_argument("--config", default=None, help="путь к crate_release.toml")
    parser.add_argument("--manifest-dir", default=None, help="корень cargo workspace")
    parser.add_argument("--dry-run", action="store_true", help="только показать команды cargo publish")
    args = parser.parse_args(argv)

    cfg = load_config(args.config)
    print(f"[publish] Конфигурация: {cfg.get('_config_source', 'неизвестно')}")

    plan = build_plan(cfg, args.crates, dry_run=args.dry_run)
    try:
        cargo = CargoWorkspace(args.manifest_dir or cfg["manifest_dir"])
    except ValueError as exc:
        print(f"[publish] ❌ {exc}", file=sys.stderr)
        sys.exit(1)
    registry = RegistryClient(
        cfg["registry_url"],
        user_agent=cfg.get("user_agent"),
        timeout=float(cfg.get("http_timeout", 30)),
    )

    result = publish_all(plan, cargo=cargo, registry=registry)
    if not result.ok:
        print(f"[publish] ❌ {result.error}", file=sys.stderr)
        sys.exit(result.exit_code)

    print(
        f"[publish] ✅ Завершено. Опубликовано: {result.count(CrateState.PUBLISHED)}, "
        f"пропущено: {result.count(CrateState.ALREADY_PUBLISHED)}"
    )


if __name__ == "__main__":
    run()
