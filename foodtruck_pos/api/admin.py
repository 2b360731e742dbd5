from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from foodtruck_pos.api.deps import get_cache, json_body, require_roles
from foodtruck_pos.database import get_db
from foodtruck_pos.models.user import UserRole
from foodtruck_pos.schemas.catalog import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)
from foodtruck_pos.schemas.common import MessageResponse
from foodtruck_pos.schemas.user import UserCreate, UserResponse, UserUpdate
from foodtruck_pos.services.catalog_service import CatalogService
from foodtruck_pos.services.user_service import UserService
from foodtruck_pos.utils.cache import CacheService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)


def get_catalog(
    db: Session = Depends(get_db),
    cache: CacheService = Depends(get_cache)
) -> CatalogService:
    return CatalogService(db, cache)


# Users

@router.get("/users", response_model=list[UserResponse], summary="List users")
def list_users(db: Session = Depends(get_db)):
    return UserService(db).list_users()


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
    description="Create an admin or seller account. The password is hashed before storage."
)
def create_user(
    user_data: UserCreate = Depends(json_body(UserCreate)),
    db: Session = Depends(get_db)
):
    return UserService(db).create_user(user_data)


@router.get("/users/{user_id}", response_model=UserResponse, summary="Get user by ID")
def get_user(user_id: int, db: Session = Depends(get_db)):
    return UserService(db).get_user(user_id)


@router.put(
    "/users/{user_id}",
    response_model=MessageResponse,
    summary="Update a user",
    description="Only provided fields change. Omit the password to keep the current one."
)
def update_user(
    user_id: int,
    user_data: UserUpdate = Depends(json_body(UserUpdate)),
    db: Session = Depends(get_db)
):
    UserService(db).update_user(user_id, user_data)
    return MessageResponse(message="Usuario actualizado.")


@router.delete("/users/{user_id}", response_model=MessageResponse, summary="Delete a user")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    UserService(db).delete_user(user_id)
    return MessageResponse(message="Usuario eliminado.")


# Categories

@router.get("/categories", response_model=list[CategoryResponse], summary="List categories")
def list_categories(catalog: CatalogService = Depends(get_catalog)):
    return catalog.list_categories()


@router.post(
    "/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category"
)
def create_category(
    category_data: CategoryCreate = Depends(json_body(CategoryCreate)),
    catalog: CatalogService = Depends(get_catalog)
):
    return catalog.create_category(category_data)


@router.get("/categories/{category_id}", response_model=CategoryResponse, summary="Get category by ID")
def get_category(category_id: int, catalog: CatalogService = Depends(get_catalog)):
    return catalog.get_category(category_id)


@router.put(
    "/categories/{category_id}",
    response_model=MessageResponse,
    summary="Rename a category",
    description="Products keep their stored category name until they are next edited."
)
def update_category(
    category_id: int,
    category_data: CategoryUpdate = Depends(json_body(CategoryUpdate)),
    catalog: CatalogService = Depends(get_catalog)
):
    catalog.update_category(category_id, category_data)
    return MessageResponse(message="Categoría actualizada.")


@router.delete(
    "/categories/{category_id}",
    response_model=MessageResponse,
    summary="Delete a category",
    description="Products in the category are not deleted."
)
def delete_category(category_id: int, catalog: CatalogService = Depends(get_catalog)):
    catalog.delete_category(category_id)
    return MessageResponse(message="Categoría eliminada.")


# Products

@router.get("/products", response_model=list[ProductResponse], summary="List products")
def list_products(catalog: CatalogService = Depends(get_catalog)):
    return catalog.list_products()


@router.post(
    "/products",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
    description="Create a product with price, category, initial stock and low-stock threshold."
)
def create_product(
    product_data: ProductCreate = Depends(json_body(ProductCreate)),
    catalog: CatalogService = Depends(get_catalog)
):
    return catalog.create_product(product_data)


@router.get("/products/{product_id}", response_model=ProductResponse, summary="Get product by ID")
def get_product(product_id: int, catalog: CatalogService = Depends(get_catalog)):
    return catalog.require_product(product_id)


@router.put(
    "/products/{product_id}",
    response_model=MessageResponse,
    summary="Update a product",
    description="Partial updates are supported - only include fields you want to change."
)
def update_product(
    product_id: int,
    product_data: ProductUpdate = Depends(json_body(ProductUpdate)),
    catalog: CatalogService = Depends(get_catalog)
):
    catalog.update_product(product_id, product_data)
    return MessageResponse(message="Producto actualizado.")


@router.delete("/products/{product_id}", response_model=MessageResponse, summary="Delete a product")
def delete_product(product_id: int, catalog: CatalogService = Depends(get_catalog)):
    catalog.delete_product(product_id)
    return MessageResponse(message="Producto eliminado.")
