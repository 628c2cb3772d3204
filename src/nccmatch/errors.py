from __future__ import annotations

from typing import Tuple


class TemplateMatchError(ValueError):
    """
    Base class for problems detected while preparing a template search.
    """


class InvalidDimensionsError(TemplateMatchError):
    """
    Raised when the template cannot fit inside the source image.
    """

    def __init__(self, template_size: Tuple[int, int], source_size: Tuple[int, int]) -> None:
        self.template_size = template_size
        self.source_size = source_size
        super().__init__(
            f"Template size ({template_size[0]}x{template_size[1]}) does not fit "
            f"source ({source_size[0]}x{source_size[1]})"
        )


__all__ = ["InvalidDimensionsError", "TemplateMatchError"]
