from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel import Session

from storefront.db.session import get_session
from storefront.schemas.product import ProductCreate, ProductRead, ProductUpdate
from storefront.services.product import ProductService

router = APIRouter()

def get_product_service(session: Session = Depends(get_session)) -> ProductService:
    return ProductService(session)

@router.get("", response_model=List[ProductRead])
def read_products(
    category_id: Optional[int] = Query(default=None, alias="categoryId"),
    service: ProductService = Depends(get_product_service)
):
    return service.list_products(category_id)

@router.get("/{product_id}", response_model=ProductRead)
def read_product(product_id: int, service: ProductService = Depends(get_product_service)):
    return service.get_product(product_id)

@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def create_product(product: ProductCreate, service: ProductService = Depends(get_product_service)):
    return service.create_product(product)

@router.put("/{product_id}", response_model=ProductRead)
def replace_product(product_id: int, product: ProductCreate, service: ProductService = Depends(get_product_service)):
    return service.replace_product(product_id, product)

@router.patch("/{product_id}", response_model=ProductRead)
def update_product(product_id: int, product: ProductUpdate, service: ProductService = Depends(get_product_service)):
    """
    Partial update. Only fields sent in the body are changed.
    """
    return service.patch_product(product_id, product)

@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: int, service: ProductService = Depends(get_product_service)):
    service.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
