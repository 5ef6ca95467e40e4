from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Notice:
    level: str  # "success", "info", "error"
    title: str
    message: str = ""
