"""Caption style presets, position mapping and style loading."""

import json
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping

from . import config
from .models import CaptionStyle

# Dashboard (camelCase) settings keys -> CaptionStyle fields
SETTINGS_FIELDS = {
    "fontFamily": "font_family",
    "fontSize": "font_size_pt",
    "textColor": "text_color",
    "highlightColor": "highlight_color",
    "outlineColor": "outline_color",
    "backgroundColor": "background_color",
    "backgroundOpacity": "background_opacity_percent",
    "outlineWidth": "outline_width_px",
    "bold": "bold",
    "italic": "italic",
    "wordsPerPage": "words_per_page",
    "verticalPosition": "vertical_position_percent",
}

DEFAULT_SETTINGS: Mapping[str, Any] = MappingProxyType(
    {
        "fontFamily": "Arial",
        "fontSize": 48,
        "textColor": "#FFFFFF",
        "highlightColor": "#FFFF00",
        "backgroundColor": "",
        "backgroundOpacity": 60,
        "outlineColor": "#000000",
        "outlineWidth": 3,
        "bold": True,
        "italic": False,
        "wordsPerPage": 4,
        "position": "bottom",
    }
)


def percent_to_position(percent: float) -> str:
    """Map a vertical percent (0 = top, 100 = bottom) to a position label."""
    if percent <= config.TOP_MAX_PERCENT:
        return "top"
    if percent <= config.CENTER_MAX_PERCENT:
        return "center"
    return "bottom"


def position_to_percent(position: str) -> float:
    """Map a position label to its anchor percent."""
    try:
        return config.POSITION_ANCHORS[position]
    except KeyError:
        raise ValueError(
            f"Unknown position {position!r}, expected one of {sorted(config.POSITION_ANCHORS)}"
        ) from None


def style_from_settings(settings: Mapping[str, Any]) -> CaptionStyle:
    """Build a CaptionStyle from user settings.

    Accepts the dashboard's camelCase keys or CaptionStyle field names.
    Missing keys fall back to DEFAULT_SETTINGS. An explicit vertical
    percent wins over the position label.

    Args:
        settings: Settings mapping

    Returns:
        Validated CaptionStyle

    Raises:
        pydantic.ValidationError: If a value is out of range
    """
    merged: Dict[str, Any] = dict(DEFAULT_SETTINGS)
    merged.update(settings)

    data: Dict[str, Any] = {}
    for key, value in merged.items():
        if key in SETTINGS_FIELDS:
            data[SETTINGS_FIELDS[key]] = value
        elif key in CaptionStyle.model_fields:
            data[key] = value

    explicit_percent = (
        "verticalPosition" in settings or "vertical_position_percent" in settings
    )
    if not explicit_percent:
        data["vertical_position_percent"] = position_to_percent(merged.get("position", "bottom"))

    return CaptionStyle(**data)


def style_to_settings(style: CaptionStyle) -> Dict[str, Any]:
    """Convert a CaptionStyle back to dashboard settings."""
    settings: Dict[str, Any] = {}
    for key, field_name in SETTINGS_FIELDS.items():
        value = getattr(style, field_name)
        if field_name.endswith("_color"):
            value = value.to_hex() if value is not None else ""
        settings[key] = value
    settings["position"] = style.position
    return settings


def load_style_from_json(path: Path) -> CaptionStyle:
    """Load caption style from JSON file.

    Args:
        path: Path to JSON style configuration

    Returns:
        CaptionStyle instance

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If JSON or its values are invalid
    """
    if not path.exists():
        raise FileNotFoundError(f"Style configuration not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Style configuration must be a JSON object: {path}")

    return style_from_settings(data)


def _preset(**overrides) -> CaptionStyle:
    return style_from_settings({**DEFAULT_SETTINGS, **overrides})


CAPTION_PRESETS: Mapping[str, CaptionStyle] = MappingProxyType(
    {
        "bold-white": _preset(),
        "neon-glow": _preset(
            highlightColor="#00FFFF",
            outlineColor="#0000FF",
            outlineWidth=4,
            wordsPerPage=3,
        ),
        "warm-pop": _preset(
            highlightColor="#FF5500",
            outlineColor="#202020",
        ),
        "minimal": _preset(
            fontFamily="Helvetica",
            fontSize=42,
            textColor="#CCCCCC",
            highlightColor="#FFFFFF",
            outlineColor="#808080",
            outlineWidth=1,
            bold=False,
            wordsPerPage=5,
        ),
        "shadow-bold": _preset(
            fontFamily="Impact",
            fontSize=52,
            highlightColor="#FFFF00",
            outlineWidth=2,
            wordsPerPage=3,
        ),
        "boxed-dark": _preset(
            fontSize=44,
            highlightColor="#FF3366",
            backgroundColor="#000000",
            backgroundOpacity=70,
            outlineWidth=0,
        ),
    }
)

PRESET_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "bold-white": "Bold White",
        "neon-glow": "Neon Glow",
        "warm-pop": "Warm Pop",
        "minimal": "Minimal",
        "shadow-bold": "Shadow Bold",
        "boxed-dark": "Boxed Dark",
    }
)


def get_preset(preset_id: str, presets: Mapping[str, CaptionStyle] = CAPTION_PRESETS) -> CaptionStyle:
    """Look up a preset style by id.

    Raises:
        KeyError: If the id is not in the catalog
    """
    try:
        return presets[preset_id]
    except KeyError:
        raise KeyError(f"Unknown caption preset {preset_id!r}, available: {sorted(presets)}") from None
