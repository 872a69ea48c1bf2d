from typing import List, Optional
from sqlmodel import Session, select, func
from storefront.models.product import Product

class ProductRepo:
    def __init__(self, session: Session):
        self.session = session

    def get(self, product_id: int) -> Optional[Product]:
        return self.session.get(Product, product_id)

    def list_all(self, category_id: Optional[int] = None) -> List[Product]:
        query = select(Product)
        if category_id is not None:
            query = query.where(Product.category_id == category_id)
        return list(self.session.exec(query.order_by(Product.id)).all())

    def count(self) -> int:
        return self.session.exec(select(func.count()).select_from(Product)).one()

    def save(self, product: Product) -> Product:
        self.session.add(product)
        self.session.commit()
        self.session.refresh(product)
        return product

    def delete(self, product: Product) -> None:
        self.session.delete(product)
        self.session.commit()
