from __future__ import annotations

"""Фасад CargoWorkspace над cargo_utils.

Позволяет писать:

    from crate_release.cargo import CargoWorkspace
    ws = CargoWorkspace(".")
    ws.local_version("ibc-primitives")
    ws.publish("ibc-primitives", token=token)
"""

from pathlib import Path
from typing import Sequence

from .cargo_utils import CargoError, _run_cargo, build_publish_args, find_crate, format_command

__all__ = ["CargoWorkspace"]


class CargoWorkspace:  # noqa: D101 – simple façade
    def __init__(self, path: str | Path) -> None:  # noqa: D401
        self.path = Path(path).resolve()
        if not (self.path / "Cargo.toml").exists():
            raise ValueError(f"{self.path} is not a cargo workspace")

    # ---------------------------------------------------------------------
    # metadata
    # ---------------------------------------------------------------------

    def manifest_path(self, name: str) -> Path:
        return find_crate(self.path, name).manifest_path

    def local_version(self, name: str) -> str:
        return find_crate(self.path, name).version

    # ---------------------------------------------------------------------
    # publish
    # ---------------------------------------------------------------------

    def publish(
        self,
        name: str,
        token: str | None = None,
        extra_flags: Sequence[str] = (),
        dry_run: bool = False,
    ) -> None:
        """Выполняет `cargo publish` для крейта *name*.

        Ненулевой код возврата превращается в `CargoError` с тем же кодом;
        повторов нет, публикация необратима.
        """
        args = build_publish_args(self.manifest_path(name), token, extra_flags)
        if dry_run:
            print(f"[publish]   [dry-run] {format_command(args)}")
            return

        # вывод cargo идёт прямо в консоль
        proc = _run_cargo(self.path, args, capture=False)
        if proc.returncode != 0:
            raise CargoError(f"cargo publish для {name} завершился с кодом {proc.returncode}", proc.returncode)
