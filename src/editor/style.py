"""Demo-wide hotspot style helpers."""

from src.models.demo import (
    DEFAULT_TOOLTIP_BG_COLOR,
    DEFAULT_TOOLTIP_TEXT_COLOR,
    DEFAULT_TOOLTIP_TEXT_SIZE_PX,
    Hotspot,
    HotspotStyle,
    HotspotStylePatch,
)

HotspotsByStep = dict[str, list[Hotspot]]

DOT_FIELDS = ("dot_size", "dot_color", "dot_stroke_px", "dot_stroke_color", "animation")


def _first(*values):
    for value in values:
        if value is not None:
            return value
    return None


def derive_tooltip_style_from_hotspots(
    hotspots_by_step: HotspotsByStep,
    defaults: HotspotStyle,
) -> HotspotStyle:
    """Read the demo style back from the first hotspot found.

    Each field falls back to ``defaults`` when the hotspot leaves it unset.
    A demo with no hotspots yields a copy of ``defaults``.
    """
    for hotspots in hotspots_by_step.values():
        if not hotspots:
            continue
        h = hotspots[0]
        return HotspotStyle(
            dot_size=_first(h.dot_size, defaults.dot_size),
            dot_color=_first(h.dot_color, defaults.dot_color),
            dot_stroke_px=_first(h.dot_stroke_px, defaults.dot_stroke_px),
            dot_stroke_color=_first(h.dot_stroke_color, defaults.dot_stroke_color),
            animation=_first(h.animation, defaults.animation),
            tooltip_bg_color=_first(
                h.tooltip_bg_color, defaults.tooltip_bg_color, DEFAULT_TOOLTIP_BG_COLOR
            ),
            tooltip_text_color=_first(
                h.tooltip_text_color, defaults.tooltip_text_color, DEFAULT_TOOLTIP_TEXT_COLOR
            ),
            tooltip_text_size_px=_first(
                h.tooltip_text_size_px, defaults.tooltip_text_size_px, DEFAULT_TOOLTIP_TEXT_SIZE_PX
            ),
        )
    return defaults.model_copy()


def apply_global_style_to_hotspots(
    hotspots_by_step: HotspotsByStep,
    current: HotspotStyle,
    patch: HotspotStylePatch,
) -> HotspotsByStep:
    """Push a style change onto every hotspot of every step.

    Patched fields win; otherwise the hotspot keeps its own value, and a
    hotspot with no value takes the current demo style.
    """
    result: HotspotsByStep = {}
    for step_id, hotspots in hotspots_by_step.items():
        result[step_id] = [
            h.model_copy(
                update={
                    field: _first(getattr(patch, field), getattr(h, field), getattr(current, field))
                    for field in DOT_FIELDS
                }
            )
            for h in hotspots or []
        ]
    return result


def apply_style_defaults(hotspots: list[Hotspot] | None, defaults: HotspotStyle) -> list[Hotspot]:
    """Fill unset style fields on each hotspot for the player."""
    if not hotspots:
        return []
    filled = []
    for h in hotspots:
        update = {field: _first(getattr(h, field), getattr(defaults, field)) for field in DOT_FIELDS}
        update["tooltip_bg_color"] = _first(
            h.tooltip_bg_color, defaults.tooltip_bg_color, DEFAULT_TOOLTIP_BG_COLOR
        )
        update["tooltip_text_color"] = _first(
            h.tooltip_text_color, defaults.tooltip_text_color, DEFAULT_TOOLTIP_TEXT_COLOR
        )
        update["tooltip_text_size_px"] = _first(
            h.tooltip_text_size_px, defaults.tooltip_text_size_px, DEFAULT_TOOLTIP_TEXT_SIZE_PX
        )
        filled.append(h.model_copy(update=update))
    return filled
