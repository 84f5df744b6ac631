from __future__ import annotations

from enum import Enum


class ConversionMode(Enum):
    """How `convert` finds and applies rates. Closed set; `convert` handles every member.

    - DIRECT: use rate (source, target) and multiply.
    - INVERSE: use rate (target, source) and divide. Never assumes (source, target) is its reciprocal.
    - DIRECT_VIA_INTERMEDIATE: bridge through m with (source, m) and (m, target); multiply by both.
    - INVERSE_VIA_INTERMEDIATE: bridge through m with (target, m) and (m, source); divide by each leg in turn.
    """

    DIRECT = "DIRECT"
    INVERSE = "INVERSE"
    DIRECT_VIA_INTERMEDIATE = "DIRECT_VIA_INTERMEDIATE"
    INVERSE_VIA_INTERMEDIATE = "INVERSE_VIA_INTERMEDIATE"

    @property
    def uses_intermediate(self) -> bool:
        """True for the two modes that bridge through a third asset."""
        return self in (ConversionMode.DIRECT_VIA_INTERMEDIATE, ConversionMode.INVERSE_VIA_INTERMEDIATE)
