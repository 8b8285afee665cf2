"""Утилиты для работы с `cargo` через subprocess."""
from __future__ import annotations

import json
import pathlib
import subprocess
from dataclasses import dataclass
from typing import Any, List, Sequence


class CargoError(RuntimeError):
    """Исключение cargo-операций."""

    def __init__(self, message: str, returncode: int = 1) -> None:
        super().__init__(message)
        self.returncode = returncode


class PackageNotFoundError(CargoError):
    """Крейт отсутствует в метаданных локального workspace."""


@dataclass(slots=True)
class Crate:
    """Крейт workspace так, как его видит `cargo metadata`."""

    name: str
    version: str
    manifest_path: pathlib.Path


def _run_cargo(path: pathlib.Path, args: List[str], capture: bool = True) -> subprocess.CompletedProcess[str]:
    """Выполнить cargo-команду в каталоге *path*.

    Parameters
    ----------
    path : pathlib.Path
        Корень cargo workspace.
    args : List[str]
        Аргументы команды после `cargo`.
    capture : bool, default True
        Захватывать stdout/err.
    """
    kwargs = {
        "text": True,
        "encoding": "utf-8",
        "check": False,
        "cwd": str(path),
    }
    if capture:
        kwargs |= {"stdout": subprocess.PIPE, "stderr": subprocess.PIPE}
    try:
        result = subprocess.run(["cargo", *args], **kwargs)  # type: ignore[arg-type]
    except OSError as exc:
        raise CargoError(f"не удалось запустить cargo: {exc}") from exc
    return result


def read_metadata(path: pathlib.Path) -> dict[str, Any]:
    """Возвращает разобранный JSON `cargo metadata` (только члены workspace)."""
    proc = _run_cargo(path, ["metadata", "--format-version", "1", "--no-deps"])
    if proc.returncode != 0:
        raise CargoError(proc.stderr or "cargo metadata failed", proc.returncode)
    try:
        return json.loads(proc.stdout)
    except json.JSONDecodeError as exc:
        raise CargoError(f"cargo metadata вернул некорректный JSON: {exc}") from exc


def find_crate(path: pathlib.Path, name: str) -> Crate:
    """Ищет крейт *name* в метаданных workspace.

    Метаданные читаются заново при каждом вызове: между публикациями
    ничего не кешируется.
    """
    for pkg in read_metadata(path).get("packages", []):
        if pkg.get("name") == name:
            return Crate(
                name=name,
                version=str(pkg["version"]),
                manifest_path=pathlib.Path(pkg["manifest_path"]),
            )
    raise PackageNotFoundError(f"крейт {name} не найден в cargo metadata ({path})")


def build_publish_args(manifest_path: pathlib.Path, token: str | None = None, extra_flags: Sequence[str] = ()) -> list[str]:
    """Собирает аргументы `cargo publish` для одного манифеста."""
    args = ["publish", "--manifest-path", str(manifest_path), *extra_flags]
    if token:
        args += ["--token", token]
    return args


def format_command(args: Sequence[str]) -> str:
    """Печатное представление cargo-команды; значение токена маскируется."""
    shown: list[str] = []
    mask_next = False
    for arg in args:
        shown.append("***" if mask_next else arg)
        mask_next = arg == "--token"
    return "cargo " + " ".join(shown)
