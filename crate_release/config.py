"""Загрузка конфигурации crate_release.

Используется класс `Config` с дефолтными значениями.
Источник ищется в следующем порядке:

1. ``crate_release.toml`` в корне workspace;
2. ``crate_release/crate_release.toml`` (рядом с пакетом);
3. ``pyproject.toml`` секция ``[tool.crate_release]``;
4. встроенные значения по умолчанию.
"""

from __future__ import annotations

import pathlib
import sys
from typing import Any, Iterator

import tomlkit  # type: ignore  # third-party

from .registry import DEFAULT_REGISTRY_URL

# ---------------------------------------------------------------------------
# Config dataclass-like Mapping
# ---------------------------------------------------------------------------


class Config(dict):  # pylint: disable=too-many-ancestors
    """Словарь-обёртка с дефолтами и парсингом TOML.

    Наследуемся от ``dict``: драйвер и план публикации читают значения через
    ``cfg["key"]`` и ``cfg.get()``.
    """

    _DEFAULTS: dict[str, Any] = {
        # пустой список → packages.DEFAULT_CRATES
        "crates": [],
        "manifest_dir": ".",
        "registry_url": DEFAULT_REGISTRY_URL,
        "token_env": "CRATES_TOKEN",
        "publish_flags": [],
        "http_timeout": 30,
        "user_agent": "crate_release (+https://github.com/cosmos/ibc-rs)",
        # служебное
        "dry_run": False,
    }

    # --- construction --------------------------------------------------

    def __init__(self, data: dict[str, Any] | None = None, *, source: str = "<default>") -> None:  # noqa: D401
        merged = dict(self._DEFAULTS)
        if data:
            merged.update(_plain(data))
        super().__init__(merged)
        self["_config_source"] = source

    def __repr__(self) -> str:  # noqa: D401
        return f"<Config {dict(self)!r} from {self['_config_source']}>"

    # ------------------------------------------------------------------
    # Parsing helpers
    # ------------------------------------------------------------------

    @classmethod
    def _iter_candidate_files(cls) -> Iterator[pathlib.Path]:
        root = pathlib.Path.cwd()
        yield root / "crate_release.toml"
        yield root / "crate_release" / "crate_release.toml"
        yield root / "pyproject.toml"

    @classmethod
    def _parse_toml(cls, path: pathlib.Path) -> dict[str, Any] | None:
        """Читает файл TOML и возвращает секцию tool.crate_release (или весь TOML).

        Для ``pyproject.toml`` без нужной секции возвращает ``None``.
        """
        raw_text = path.read_text(encoding="utf-8")
        data: Any = tomlkit.parse(raw_text)

        # Если это pyproject.toml, нужная секция внутри tool.*
        if path.name == "pyproject.toml":
            try:
                return data["tool"]["crate_release"]  # type: ignore[index]
            except KeyError:
                return None
        # иначе это standalone crate_release.toml – ожидаем верхний уровень
        return data.get("tool", {}).get("crate_release", data)  # support both

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, config_path: str | pathlib.Path | None = None) -> "Config":  # noqa: D401
        """Загружает конфиг из указанного пути или ищет кандидатов."""

        if config_path is not None:
            path = pathlib.Path(config_path)
            if not path.exists():
                print(f"[crate_release] Конфигурационный файл не найден: {path}", file=sys.stderr)
                raise SystemExit(1)
            return cls(cls._parse_toml(path), source=_display_path(path))

        # auto-discovery
        for candidate in cls._iter_candidate_files():
            if not candidate.exists():
                continue
            data = cls._parse_toml(candidate)
            if data is None:
                # pyproject.toml без [tool.crate_release] – не наш
                continue
            return cls(data, source=_display_path(candidate))

        # ни одного файла – возвращаем конфиг по умолчанию
        print("[crate_release] Конфигурационный файл не найден – используются значения по умолчанию", file=sys.stderr)
        return cls()


def _plain(value: Any) -> Any:
    """tomlkit-контейнеры → обычные dict/list/str."""
    unwrap = getattr(value, "unwrap", None)
    if callable(unwrap):
        return unwrap()
    return value


def _display_path(path: pathlib.Path) -> str:
    try:
        return str(path.resolve().relative_to(pathlib.Path.cwd().resolve()))
    except ValueError:
        return str(path)


def load_config(config_path: pathlib.Path | str | None = None) -> Config:  # noqa: D401
    """Совместимая обёртка поверх ``Config.load``."""

    return Config.load(config_path)
