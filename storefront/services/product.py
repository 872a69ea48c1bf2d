from typing import List, Optional
from sqlmodel import Session

from storefront.models.product import Product
from storefront.repos.product_repo import ProductRepo
from storefront.schemas.product import ProductCreate, ProductUpdate
from storefront.core.exceptions import ResourceNotFoundError
from storefront.core.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    def __init__(self, session: Session):
        self.repo = ProductRepo(session)

    def list_products(self, category_id: Optional[int] = None) -> List[Product]:
        products = self.repo.list_all(category_id)
        logger.info(f"Found {len(products)} products (category_id={category_id})")
        return products

    def get_product(self, product_id: int) -> Product:
        product = self.repo.get(product_id)
        if not product:
            logger.error(f"Product not found: product_id={product_id}")
            raise ResourceNotFoundError(f"Product not found: ID = {product_id}")
        return product

    def create_product(self, data: ProductCreate) -> Product:
        product = self.repo.save(Product(**data.model_dump()))
        logger.info(f"Product created: product_id={product.id}")
        return product

    def replace_product(self, product_id: int, data: ProductCreate) -> Product:
        """PUT semantics: every field is overwritten, missing optionals become null."""
        product = self.get_product(product_id)
        for field, value in data.model_dump().items():
            setattr(product, field, value)
        return self.repo.save(product)

    def patch_product(self, product_id: int, data: ProductUpdate) -> Product:
        product = self.get_product(product_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            # Explicit nulls are ignored, like absent fields
            if value is not None:
                setattr(product, field, value)
        return self.repo.save(product)

    def delete_product(self, product_id: int) -> None:
        logger.info(f"Deleting product: product_id={product_id}")
        product = self.repo.get(product_id)
        if not product:
            logger.error(f"Product not found, cannot delete: product_id={product_id}")
            raise ResourceNotFoundError(f"Product not found, cannot delete: ID = {product_id}")
        self.repo.delete(product)
        logger.info(f"Product deleted: product_id={product_id}")

    def count_products(self) -> int:
        return self.repo.count()
