from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Palette:
    background: str
    line: str
    context_line: str
    trend: str
    event: str
    grid: str
    text: str
    brush: str
    tooltip_bg: str
    tooltip_text: str


LIGHT = Palette(
    background="#FFFFFF",
    line="steelblue",
    context_line="steelblue",
    trend="#F59E0B",
    event="red",
    grid="#D1D4DC",
    text="#131722",
    brush="#4682B440",
    tooltip_bg="#F8FAFC",
    tooltip_text="#131722",
)

DARK = Palette(
    background="#131722",
    line="#42A5F5",
    context_line="#42A5F5",
    trend="#FBBF24",
    event="#EF5350",
    grid="#2A2E39",
    text="#B2B5BE",
    brush="#42A5F540",
    tooltip_bg="#0F141E",
    tooltip_text="#B2B5BE",
)


def palette_for(dark_mode: bool) -> Palette:
    return DARK if dark_mode else LIGHT
