from __future__ import annotations

"""Клиент реестра крейтов (crates.io REST API).

Единственный запрос, который нужен релизу: «опубликована ли версия X крейта
N и когда». Ответ — строка ``updated_at`` или ``None``.

Отсутствие версии и сбой запроса не различаются: оба случая дают ``None``.
Сбой при этом печатается в stderr, чтобы недоступность реестра была видна в
логе, а не маскировалась под «ещё не опубликовано».
"""

import sys

import requests

__all__ = ["DEFAULT_REGISTRY_URL", "RegistryClient"]

DEFAULT_REGISTRY_URL = "https://crates.io/api/v1/crates"


class RegistryClient:
    """Тонкая обёртка над ``requests.Session`` для чтения версий крейтов."""

    def __init__(self, base_url: str = DEFAULT_REGISTRY_URL, *, user_agent: str | None = None, timeout: float = 30) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if user_agent:
            # crates.io отклоняет запросы без User-Agent
            self.session.headers.update({"User-Agent": user_agent})

    def published_at(self, name: str, version: str) -> str | None:
        """Возвращает время публикации *version* крейта *name* или ``None``."""
        url = f"{self.base_url}/{name}"
        try:
            response = self.session.get(url, timeout=self.timeout)
            if response.status_code == 404:
                return None
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            print(f"[registry] ⚠️ запрос {url} не удался: {exc}", file=sys.stderr)
            return None

        if not isinstance(data, dict):
            return None
        for entry in data.get("versions") or []:
            if isinstance(entry, dict) and entry.get("num") == version:
                return entry.get("updated_at") or None
        return None
