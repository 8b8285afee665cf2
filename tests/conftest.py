"""Общие фейки для тестов crate_release: workspace, реестр и часы."""

from __future__ import annotations

import pytest

from crate_release.cargo_utils import CargoError, PackageNotFoundError


class FakeRegistry:
    """Реестр в памяти. ``visible_after`` — сколько запросов версия ещё «не видна»."""

    def __init__(self, published: dict[tuple[str, str], str] | None = None) -> None:
        self.published = dict(published or {})
        self.pending: dict[tuple[str, str], int] = {}
        self.queries: list[tuple[str, str]] = []
        self.never_visible: set[str] = set()

    def published_at(self, name: str, version: str) -> str | None:
        self.queries.append((name, version))
        key = (name, version)
        if key in self.pending:
            self.pending[key] -= 1
            if self.pending[key] < 0:
                del self.pending[key]
                self.published[key] = "2024-01-01T00:00:00Z"
        return self.published.get(key)

    def accept(self, name: str, version: str, visible_after: int = 0) -> None:
        if name in self.never_visible:
            return
        self.pending[(name, version)] = visible_after


class FakeWorkspace:
    """cargo workspace в памяти; публикация кладёт версию в FakeRegistry."""

    def __init__(self, versions: dict[str, str], registry: FakeRegistry, visible_after: int = 0) -> None:
        self.versions = versions
        self.registry = registry
        self.visible_after = visible_after
        self.published: list[str] = []
        self.publish_calls: list[dict] = []
        self.failing: dict[str, int] = {}

    def local_version(self, name: str) -> str:
        try:
            return self.versions[name]
        except KeyError:
            raise PackageNotFoundError(f"крейт {name} не найден в cargo metadata") from None

    def publish(self, name, token=None, extra_flags=(), dry_run=False) -> None:
        self.publish_calls.append({"name": name, "token": token, "extra_flags": list(extra_flags), "dry_run": dry_run})
        if name in self.failing:
            raise CargoError(f"cargo publish для {name} завершился с кодом {self.failing[name]}", self.failing[name])
        if dry_run:
            return
        self.published.append(name)
        self.registry.accept(name, self.versions[name], self.visible_after)


class FakeClock:
    def __init__(self) -> None:
        self.sleeps: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.sleeps.append(seconds)


@pytest.fixture()
def registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()
