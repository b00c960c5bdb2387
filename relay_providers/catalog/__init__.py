"""Static model catalog (bundled YAML) and its query API."""

from .model_catalog import ModelCatalog, default_catalog_root, get_catalog, initialize

__all__ = ["ModelCatalog", "default_catalog_root", "get_catalog", "initialize"]
