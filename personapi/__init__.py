"""REST API for managing people, with gender and nationality enrichment."""

__version__ = "1.0.0"