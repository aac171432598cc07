"""Recipe Box tools."""

from recipebox.tools.scaling import (
    format_quantity,
    scale_amount,
    scale_ingredient,
    scale_ingredient_line,
)

__all__ = [
    "format_quantity",
    "scale_amount",
    "scale_ingredient",
    "scale_ingredient_line",
]
