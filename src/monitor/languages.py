"""Language catalogue and the per-user language selection."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

log = logging.getLogger(__name__)

FALLBACK_LANGUAGE = "en"


@dataclass(frozen=True, slots=True)
class Language:
    code: str
    name: str
    flag: str = ""
    supported: bool = True


def build_catalogue(entries: list[dict[str, Any]]) -> dict[str, Language]:
    """Parse the ``languages`` config list into a dict keyed by code."""
    catalogue: dict[str, Language] = {}
    for entry in entries:
        code = str(entry["code"])
        catalogue[code] = Language(
            code=code,
            name=str(entry.get("name", code)),
            flag=str(entry.get("flag", "")),
            supported=bool(entry.get("supported", True)),
        )
    log.info(
        "Language catalogue: %d languages (%d supported)",
        len(catalogue),
        sum(1 for lang in catalogue.values() if lang.supported),
    )
    return catalogue


class LanguageSelector:
    """Which languages the scam detector listens for.

    Unsupported ("coming soon") and unknown codes can never be selected;
    toggling them is a no-op.
    """

    def __init__(
        self,
        catalogue: dict[str, Language],
        selected: list[str] | None = None,
        detected: str = FALLBACK_LANGUAGE,
    ) -> None:
        self.catalogue = catalogue
        self._selected: list[str] = [
            c for c in (selected or [FALLBACK_LANGUAGE]) if self.is_supported(c)
        ]
        self.detected = detected

    @classmethod
    def from_config(cls, cfg: dict[str, Any]) -> LanguageSelector:
        catalogue = build_catalogue(cfg.get("languages", []))
        caller = cfg.get("caller", {})
        return cls(
            catalogue,
            selected=cfg.get("default_languages"),
            detected=str(caller.get("language", FALLBACK_LANGUAGE)),
        )

    @property
    def selected(self) -> list[str]:
        return list(self._selected)

    def is_supported(self, code: str) -> bool:
        lang = self.catalogue.get(code)
        return lang is not None and lang.supported

    def supported(self) -> list[Language]:
        return [lang for lang in self.catalogue.values() if lang.supported]

    def toggle(self, code: str) -> bool:
        """Select/deselect *code*.  Returns True if the selection changed."""
        if not self.is_supported(code):
            return False
        if code in self._selected:
            self._selected.remove(code)
        else:
            self._selected.append(code)
        return True

    def enable_all(self) -> None:
        self._selected = [lang.code for lang in self.supported()]

    def english_only(self) -> None:
        self._selected = [FALLBACK_LANGUAGE] if self.is_supported(FALLBACK_LANGUAGE) else []

    def detect(self, code: str) -> None:
        """Record the language heard on the call."""
        if code not in self.catalogue:
            log.warning("Detected language '%s' is not in the catalogue", code)
        self.detected = code

    def name_for(self, code: str) -> str:
        lang = self.catalogue.get(code)
        return lang.name if lang else code

    def label_for(self, code: str) -> str:
        lang = self.catalogue.get(code)
        if lang is None:
            return code
        return f"{lang.flag} {lang.name}".strip()


def language_listener(selector: LanguageSelector) -> Callable[[Any], None]:
    """Session listener that records the caller's language once a call is live."""

    def _on_snapshot(snap: Any) -> None:
        if snap.is_active and snap.caller.language != selector.detected:
            selector.detect(snap.caller.language)

    return _on_snapshot
