"""
Advisory text client (Gemini `generateContent` REST endpoint).

Advice is decorative: it never blocks the visit flow. Any failure (no API key,
network error, unexpected payload) is logged and the configured static message
is returned instead.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from siap.config.settings import Settings
from siap.core.http import post_json

logger = logging.getLogger(__name__)

EMPATHY_SYSTEM = (
    "Anda adalah asisten cerdas bagi pengawas sekolah senior yang mengutamakan "
    "kecerdasan emosi dan kepemimpinan transformatif."
)
LEADERSHIP_SYSTEM = "Anda adalah mentor bagi para pemimpin pendidikan Indonesia."


def _empathy_prompt(findings: Sequence[str], actions: Sequence[str]) -> str:
    return (
        "Saya adalah seorang pengawas sekolah yang baru saja melakukan kunjungan.\n"
        f"Temuan saya: {', '.join(findings)}.\n"
        f"Rencana aksi: {', '.join(actions)}.\n\n"
        "Berikan 3 poin saran singkat dalam bahasa Indonesia yang sangat empatik dan "
        "menyemangati bagi kepala sekolah.\n"
        "Gunakan gaya bahasa seorang mentor yang bijak, bukan atasan yang menghakimi.\n"
        "Fokus pada pengembangan mindset dan pertumbuhan manusia."
    )


def _leadership_prompt(name: str, region: str) -> str:
    return (
        "Berikan satu kutipan kepemimpinan transformatif yang mendalam dalam Bahasa Indonesia "
        f"untuk Bapak/Ibu {name}, seorang Pengawas Sekolah di wilayah {region}. "
        "Fokus pada semangat pengabdian dan ketulusan mendampingi guru. Maksimal 30 kata."
    )


def _extract_text(payload: Any) -> str | None:
    try:
        parts = payload["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return None
    text = "".join(str(p.get("text", "")) for p in parts if isinstance(p, dict)).strip()
    return text or None


class AdvisorClient:
    def __init__(self, settings: Settings):
        self._settings = settings

    def _generate(self, prompt: str, system: str, fallback: str) -> str:
        cfg = self._settings.advisor
        if not cfg.api_key:
            return fallback
        url = f"{cfg.base_url.rstrip('/')}/models/{cfg.model}:generateContent"
        body = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "systemInstruction": {"parts": [{"text": system}]},
        }
        try:
            payload = post_json(
                url,
                payload=body,
                headers={"x-goog-api-key": cfg.api_key},
                timeout_seconds=self._settings.app.http_timeout_seconds,
            )
        except Exception as e:
            logger.warning("Advisor request failed: %s", e)
            return fallback
        text = _extract_text(payload)
        if text is None:
            logger.warning("Advisor response had no text; using fallback")
            return fallback
        return text

    def empathetic_advice(self, findings: Sequence[str], actions: Sequence[str]) -> str:
        """Three short, encouraging suggestions for the principal."""
        return self._generate(
            _empathy_prompt(findings, actions),
            EMPATHY_SYSTEM,
            self._settings.advisor.empathy_fallback,
        )

    def leadership_quote(self, name: str, region: str) -> str:
        return self._generate(
            _leadership_prompt(name, region),
            LEADERSHIP_SYSTEM,
            self._settings.advisor.leadership_fallback,
        )
