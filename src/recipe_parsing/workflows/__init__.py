"""Note workflows triggered from the command line."""

from .recipe_images import extract_recipe_information
from .shopping_list import build_shopping_list
from .web_recipe import extract_recipe_from_webpage

__all__ = [
    "extract_recipe_information",
    "build_shopping_list",
    "extract_recipe_from_webpage",
]
