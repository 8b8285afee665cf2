from __future__ import annotations

"""Список публикуемых крейтов и сборка плана публикации.

Единая точка, где решается, *что* публикуем и с какими флагами: список
крейтов (из CLI, конфига или встроенный), токен из окружения и
дополнительные флаги `cargo publish`.
"""

import os
import shlex
from dataclasses import dataclass, field
from typing import Mapping, Sequence

# ----------------------------------------------------------------------------
# Default crate order
# ----------------------------------------------------------------------------

# Порядок важен: каждый следующий крейт зависит от одного или нескольких
# предыдущих. Это ручная топологическая сортировка, не менять без нужды.
DEFAULT_CRATES: tuple[str, ...] = (
    "ibc-primitives",
    "ibc-core-host-types",
    "ibc-core-router-types",
    "ibc-core-commitment-types",
    "ibc-core-client-types",
    "ibc-core-connection-types",
    "ibc-core-channel-types",
    "ibc-core-handler-types",
    "ibc-core-client-context",
    "ibc-core-host",
    "ibc-core-router",
    "ibc-core-client",
    "ibc-core-connection",
    "ibc-core-channel",
    "ibc-core-handler",
    "ibc-core",
    "ibc-client-tendermint-types",
    "ibc-client-tendermint",
    "ibc-clients",
    "ibc-app-transfer-types",
    "ibc-app-transfer",
    "ibc-apps",
    "ibc-core-host-cosmos",
    "ibc-data-types",
    "ibc",
    "ibc-query",
    "ibc-testkit",
)

# ----------------------------------------------------------------------------
# Data structures
# ----------------------------------------------------------------------------


@dataclass(slots=True)
class PublishPlan:
    """Всё, что драйверу нужно знать о запуске, собранное один раз на старте."""

    crates: list[str]
    token: str | None = None
    extra_flags: list[str] = field(default_factory=list)
    dry_run: bool = False

    def __str__(self) -> str:  # noqa: D401
        return " ".join(self.crates)


# ----------------------------------------------------------------------------
# Public helpers
# ----------------------------------------------------------------------------


def _as_list(value: str | Sequence[str] | None) -> list[str]:
    """Значение из конфига → список строк.

    Строка разбивается как командная строка: ``"--allow-dirty --locked"``
    и ``"ibc-core ibc"`` допустимы наравне с TOML-массивами.
    """
    if not value:
        return []
    if isinstance(value, str):
        return shlex.split(value)
    return [str(item) for item in value]


def resolve_crates(cli_crates: Sequence[str] | None, cfg: Mapping) -> list[str]:
    """Возвращает упорядоченный список крейтов.

    Приоритет: позиционные аргументы CLI → ``crates`` из конфига →
    ``DEFAULT_CRATES``. Источник заменяет список целиком, без слияния.
    """
    if cli_crates:
        return list(cli_crates)
    configured = _as_list(cfg.get("crates"))
    if configured:
        return configured
    return list(DEFAULT_CRATES)


def build_plan(
    cfg: Mapping,
    cli_crates: Sequence[str] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    dry_run: bool = False,
) -> PublishPlan:
    """Собирает `PublishPlan` из конфига, аргументов CLI и окружения."""
    env = os.environ if environ is None else environ
    token = (env.get(str(cfg.get("token_env", "CRATES_TOKEN"))) or "").strip() or None
    return PublishPlan(
        crates=resolve_crates(cli_crates, cfg),
        token=token,
        extra_flags=_as_list(cfg.get("publish_flags")),
        dry_run=dry_run or bool(cfg.get("dry_run", False)),
    )
