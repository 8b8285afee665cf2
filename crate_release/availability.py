from __future__ import annotations

"""Ожидание появления только что опубликованного крейта в реестре.

После `cargo publish` новая версия становится видна через API не сразу,
а следующий крейт из списка может от неё зависеть. Поэтому:

1. до ``max_attempts`` попыток, перед каждой — пауза ``inter_delay``;
2. первая непустая дата публикации завершает ожидание;
3. после успеха — ещё одна пауза ``settle_delay`` на распространение через CDN;
4. если все попытки пусты — ``AvailabilityError``.
"""

import time
from dataclasses import dataclass
from typing import Callable, Protocol

__all__ = ["AvailabilityError", "RetryPolicy", "DEFAULT_POLICY", "wait_until_available"]


class AvailabilityError(RuntimeError):
    """Крейт так и не появился в реестре за отведённое число попыток."""


class VersionLookup(Protocol):
    def published_at(self, name: str, version: str) -> str | None: ...


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Параметры ожидания: без экспоненты, только фиксированные паузы."""

    max_attempts: int = 5
    inter_delay: float = 5.0
    settle_delay: float = 10.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")


DEFAULT_POLICY = RetryPolicy()


def wait_until_available(
    registry: VersionLookup,
    name: str,
    version: str,
    policy: RetryPolicy = DEFAULT_POLICY,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """Блокирует, пока *name* *version* не станет видна в *registry*.

    Возвращает дату публикации, которую вернул реестр.
    """
    print(f"[poll] Ждём, пока крейт {name} {version} станет доступен в реестре...")
    for attempt in range(1, policy.max_attempts + 1):
        sleep(policy.inter_delay)
        published_at = registry.published_at(name, version)
        if published_at:
            print(f"[poll]   ✅ крейт {name} доступен (опубликован {published_at})")
            break
        if attempt < policy.max_attempts:
            print(f"[poll]   пока недоступен ({attempt}/{policy.max_attempts}), ждём ещё несколько секунд...")
    else:
        raise AvailabilityError(
            f"крейт {name} {version} должен был стать доступным после {policy.max_attempts} попыток"
        )

    print(f"[poll]   ждём ещё {policy.settle_delay:g} с, пока версия разойдётся по CDN...")
    sleep(policy.settle_delay)
    return published_at
