"""Lead step extraction from captured steps."""

from collections.abc import Sequence
from typing import Any, NamedTuple

from src.models.demo import LeadConfig


class LeadSelection(NamedTuple):
    lead_step_index: int | None
    lead_config: LeadConfig | None


def extract_lead_config(
    steps: Sequence[Any],
    full_config: LeadConfig | dict[str, Any] | None = None,
) -> LeadSelection:
    """Find the first lead-capture step and build its lead config.

    Steps are duck-typed: anything with ``is_lead_capture`` and ``lead_bg``.
    The background is black only when the step explicitly says so. When a full
    form config is supplied it is kept, with the step's background applied.
    """
    index = next(
        (i for i, step in enumerate(steps) if getattr(step, "is_lead_capture", False)),
        None,
    )
    if index is None:
        return LeadSelection(None, None)

    bg = "black" if getattr(steps[index], "lead_bg", None) == "black" else "white"
    if isinstance(full_config, LeadConfig):
        return LeadSelection(index, full_config.model_copy(update={"bg": bg}))
    if isinstance(full_config, dict):
        return LeadSelection(index, LeadConfig.model_validate({**full_config, "bg": bg}))
    return LeadSelection(index, LeadConfig(bg=bg))
