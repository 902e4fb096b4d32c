# Source-specific loaders
# Each module knows the column layout of one pair of exports

from .heureka import CatalogLoadError, HeurekaCatalogLoader, LoadedCatalogs

__all__ = ["CatalogLoadError", "HeurekaCatalogLoader", "LoadedCatalogs"]
