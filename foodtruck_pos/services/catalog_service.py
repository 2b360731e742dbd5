from sqlalchemy.orm import Session
from typing import Dict, Iterable, List, Optional
import logging

from foodtruck_pos.exceptions import NotFoundError
from foodtruck_pos.models.catalog import Category, Product
from foodtruck_pos.schemas.catalog import (
    CategoryCreate,
    CategoryUpdate,
    ProductCreate,
    ProductUpdate,
)
from foodtruck_pos.utils.cache import CacheService

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Service class for categories and products.

    This service handles:
    - Category and product CRUD for the admin panel
    - Product lookups and stock updates for the sale ledger
    - Invalidation of the cached POS read model
    """

    POS_CACHE_PREFIX = "pos"
    POS_CACHE_KEY = "data"

    def __init__(self, db: Session, cache: Optional[CacheService] = None):
        self.db = db
        self.cache = cache

    # Categories

    def list_categories(self) -> List[Category]:
        return self.db.query(Category).order_by(Category.id).all()

    def get_category(self, category_id: int) -> Category:
        category = self.db.query(Category).filter(Category.id == category_id).first()
        if not category:
            raise NotFoundError(f"Categoría con ID {category_id} no encontrada.")
        return category

    def create_category(self, category_data: CategoryCreate) -> Category:
        category = Category(name=category_data.name)
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)

        self.invalidate_pos_cache()
        return category

    def update_category(self, category_id: int, category_data: CategoryUpdate) -> Category:
        """
        Rename a category.

        Products keep the category name they were saved with; it is only
        refreshed the next time each product is written.
        """
        category = self.get_category(category_id)
        category.name = category_data.name
        self.db.commit()
        self.db.refresh(category)

        self.invalidate_pos_cache()
        return category

    def delete_category(self, category_id: int) -> None:
        """Delete a category. Products that reference it are left as they are."""
        category = self.get_category(category_id)
        self.db.delete(category)
        self.db.commit()

        self.invalidate_pos_cache()
        logger.info(f"Category #{category_id} deleted")

    # Products

    def list_products(self) -> List[Product]:
        return self.db.query(Product).order_by(Product.id).all()

    def get_product(self, product_id: int, for_update: bool = False) -> Optional[Product]:
        """
        Get a product by ID.

        Args:
            product_id: Product ID to look up
            for_update: Lock the row until the surrounding transaction ends

        Returns:
            Product instance or None if not found
        """
        query = self.db.query(Product).filter(Product.id == product_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def lock_products(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        """
        Lock a set of product rows in one query, ordered by ID.

        Concurrent callers always acquire the locks in the same order, so
        two carts listing the same products in different orders cannot
        deadlock. Missing IDs are simply absent from the result.
        """
        ids = sorted(set(product_ids))
        if not ids:
            return {}
        products = (
            self.db.query(Product)
            .filter(Product.id.in_(ids))
            .order_by(Product.id)
            .with_for_update()
            .all()
        )
        return {product.id: product for product in products}

    def require_product(self, product_id: int) -> Product:
        product = self.get_product(product_id)
        if not product:
            raise NotFoundError(f"Producto con ID {product_id} no encontrado.")
        return product

    def create_product(self, product_data: ProductCreate) -> Product:
        product = Product(
            name=product_data.name,
            price=product_data.price,
            category_id=product_data.category_id,
            category_name=self._resolve_category_name(
                product_data.category_id, product_data.category_name
            ),
            stock=product_data.stock,
            min_stock=product_data.min_stock,
            description=product_data.description,
        )
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)

        self.invalidate_pos_cache()
        return product

    def update_product(self, product_id: int, product_data: ProductUpdate) -> Product:
        """
        Update an existing product. Only provided fields are changed.

        The category name copy is re-resolved from the current category.
        When the product moves to a category that does not exist, only a
        name sent with the request is kept; the old copy is dropped.
        """
        product = self.require_product(product_id)
        previous_category_id = product.category_id

        update_data = product_data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if value is not None:
                setattr(product, field, value)

        fallback = update_data.get("category_name")
        if not fallback and product.category_id == previous_category_id:
            fallback = product.category_name
        product.category_name = self._resolve_category_name(product.category_id, fallback)

        self.db.commit()
        self.db.refresh(product)

        self.invalidate_pos_cache()
        return product

    def delete_product(self, product_id: int) -> None:
        product = self.require_product(product_id)
        self.db.delete(product)
        self.db.commit()

        self.invalidate_pos_cache()
        logger.info(f"Product #{product_id} deleted")

    def update_stock(self, product_id: int, new_stock: int, commit: bool = True) -> Optional[Product]:
        """
        Set a product's stock, clamped at zero.

        With ``commit=False`` the change is only flushed, leaving the
        surrounding transaction (e.g. a sale) in charge of committing.

        Returns:
            Updated product or None if not found
        """
        product = self.get_product(product_id, for_update=True)
        if not product:
            return None

        product.stock = max(0, new_stock)
        self.db.flush()

        if commit:
            self.db.commit()
            self.db.refresh(product)
            self.invalidate_pos_cache()

        return product

    def invalidate_pos_cache(self) -> None:
        if self.cache is not None:
            self.cache.delete(self.POS_CACHE_PREFIX, self.POS_CACHE_KEY)

    def _resolve_category_name(self, category_id: Optional[int], fallback: str) -> str:
        if category_id is None:
            return fallback or ""
        category = self.db.query(Category).filter(Category.id == category_id).first()
        if category:
            return category.name
        return fallback or ""
