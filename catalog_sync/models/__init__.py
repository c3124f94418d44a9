from catalog_sync.models.entities import Product

__all__ = ["Product"]
