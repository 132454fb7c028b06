"""Pure helpers shared by the editor and the public player."""

from src.editor.lead_config import LeadSelection, extract_lead_config
from src.editor.style import (
    apply_global_style_to_hotspots,
    apply_style_defaults,
    derive_tooltip_style_from_hotspots,
)

__all__ = [
    "LeadSelection",
    "extract_lead_config",
    "apply_global_style_to_hotspots",
    "apply_style_defaults",
    "derive_tooltip_style_from_hotspots",
]
