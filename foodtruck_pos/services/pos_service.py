from sqlalchemy.orm import Session
from typing import Optional, List
from collections import defaultdict

from foodtruck_pos.schemas.catalog import PosCategory, ProductResponse
from foodtruck_pos.services.catalog_service import CatalogService
from foodtruck_pos.utils.cache import CacheService


class PosService:
    """
    Builds the catalog read model consumed by the point-of-sale screen.

    Categories and products are read separately from the catalog and joined
    here by category id. The result is cached in Redis until the next
    catalog write or sale.
    """

    def __init__(self, db: Session, cache: Optional[CacheService] = None):
        self.catalog = CatalogService(db, cache)
        self.cache = cache

    def pos_data(self) -> List[dict]:
        prefix = CatalogService.POS_CACHE_PREFIX
        key = CatalogService.POS_CACHE_KEY

        if self.cache is not None:
            cached = self.cache.get(prefix, key)
            if cached is not None:
                return cached

        data = self._build()

        if self.cache is not None:
            self.cache.set(prefix, key, data)

        return data

    def _build(self) -> List[dict]:
        products_by_category = defaultdict(list)
        for product in self.catalog.list_products():
            products_by_category[product.category_id].append(
                ProductResponse.model_validate(product)
            )

        return [
            PosCategory(
                id=category.id,
                name=category.name,
                products=products_by_category.get(category.id, []),
            ).model_dump(by_alias=True, mode="json")
            for category in self.catalog.list_categories()
        ]
