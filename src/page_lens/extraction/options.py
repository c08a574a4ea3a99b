"""
Extraction request options.

Options can be built directly, from ExtractionSettings defaults, or from
the comma-separated option strings a tool layer passes through, e.g.
"structured,main-only,importance=0.7,max=10000,sections=Pricing;FAQ".
"""

import logging
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from page_lens.config.settings import ExtractionSettings

logger = logging.getLogger(__name__)

# Smallest budget an extraction is allowed to run with
MIN_VIABLE_BUDGET = 200


class PriorityOrder(str, Enum):
    """Node ordering strategies."""
    MIXED = "mixed"
    IMPORTANCE = "importance"
    DOM_ORDER = "dom-order"


class ExtractionOptions(BaseModel):
    """
    One extraction request.
    
    Attributes:
        max_chars: Output budget; anything below 200 (including <= 0) is raised to 200
        min_importance: Nodes scoring below this are dropped
        include_structure: Render markdown-like structure markers
        priority_order: mixed, importance or dom-order
        main_content_only: Skip supplementary regions
        sections: Keep only headings mentioning one of these names
        adaptive_chunking: Gracefully cut the node that overflows the budget
    """
    max_chars: int = 20000
    min_importance: float = 0.5
    include_structure: bool = False
    priority_order: PriorityOrder = PriorityOrder.MIXED
    main_content_only: bool = False
    sections: Optional[List[str]] = None
    adaptive_chunking: bool = True
    
    model_config = ConfigDict(validate_assignment=True)
    
    @field_validator("max_chars")
    @classmethod
    def _clamp_budget(cls, value: int) -> int:
        if value < MIN_VIABLE_BUDGET:
            logger.debug(f"Budget {value} raised to {MIN_VIABLE_BUDGET}")
            return MIN_VIABLE_BUDGET
        return value
    
    @field_validator("sections")
    @classmethod
    def _drop_blank_sections(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return None
        names = [name.strip() for name in value if name and name.strip()]
        return names or None
    
    @classmethod
    def from_settings(cls, settings: ExtractionSettings, **overrides) -> "ExtractionOptions":
        """Options seeded from configured defaults."""
        values = {
            "max_chars": settings.max_chars,
            "min_importance": settings.min_importance,
            "priority_order": settings.priority_order,
            "adaptive_chunking": settings.adaptive_chunking,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
    
    @classmethod
    def from_option_string(
        cls,
        options: str,
        defaults: Optional["ExtractionOptions"] = None,
    ) -> "ExtractionOptions":
        """
        Parse a comma-separated option string.
        
        Recognized parts: structured, main-only, importance=N, max=N,
        sections=a;b, priority=importance|dom-order|mixed. Unknown or
        unparseable parts are ignored.
        
        Args:
            options: Option string (may be empty)
            defaults: Starting values, plain defaults if omitted
        """
        values = (defaults or cls()).model_dump()
        
        for part in (options or "").split(","):
            part = part.strip()
            if not part:
                continue
            if part == "structured":
                values["include_structure"] = True
            elif part == "main-only":
                values["main_content_only"] = True
            elif part.startswith("importance="):
                try:
                    values["min_importance"] = float(part[len("importance="):])
                except ValueError:
                    logger.debug(f"Ignoring option: {part}")
            elif part.startswith("max="):
                try:
                    values["max_chars"] = int(part[len("max="):])
                except ValueError:
                    logger.debug(f"Ignoring option: {part}")
            elif part.startswith("sections="):
                values["sections"] = part[len("sections="):].split(";")
            elif part.startswith("priority="):
                order = part[len("priority="):]
                if order in {p.value for p in PriorityOrder}:
                    values["priority_order"] = PriorityOrder(order)
            else:
                logger.debug(f"Unknown option: {part}")
        
        return cls(**values)
