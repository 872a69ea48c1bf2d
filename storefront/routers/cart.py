from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.db.session import get_session
from storefront.core.auth_gate import Identity
from storefront.routers.auth import get_current_identity
from storefront.schemas.cart import (
    AddToCartRequest,
    CartMutationResponse,
    CartView,
    CheckoutReceipt,
    SimpleResponse,
    UpdateQuantityRequest,
)
from storefront.services.cart import CartService

router = APIRouter()

def get_cart_service(session: Session = Depends(get_session)) -> CartService:
    return CartService(session)

@router.get("", response_model=CartView)
def get_cart(identity: Identity = Depends(get_current_identity), service: CartService = Depends(get_cart_service)):
    """Get the caller's cart, creating an empty one on first access"""
    return service.get_cart(identity.user_id)

@router.post("", response_model=CartMutationResponse)
def add_to_cart(
    request: AddToCartRequest,
    identity: Identity = Depends(get_current_identity),
    service: CartService = Depends(get_cart_service)
):
    """Add a product; repeat adds of the same product merge into one line"""
    # Missing quantity means one
    quantity = request.quantity if request.quantity is not None else 1
    cart = service.add_to_cart(identity.user_id, request.product_id, quantity)
    return CartMutationResponse(message="Product added to cart", cart=cart)

@router.post("/checkout", response_model=CheckoutReceipt)
def checkout(identity: Identity = Depends(get_current_identity), service: CartService = Depends(get_cart_service)):
    """Simulated checkout: empties the cart and returns its totals"""
    return service.checkout(identity.user_id)

@router.put("/{product_id}", response_model=CartView)
def update_quantity(
    product_id: int,
    update: UpdateQuantityRequest,
    identity: Identity = Depends(get_current_identity),
    service: CartService = Depends(get_cart_service)
):
    """Set the quantity of a line; 0 removes it"""
    return service.update_quantity(identity.user_id, product_id, update.quantity)

@router.delete("/{product_id}", response_model=CartView)
def remove_from_cart(
    product_id: int,
    identity: Identity = Depends(get_current_identity),
    service: CartService = Depends(get_cart_service)
):
    return service.remove_from_cart(identity.user_id, product_id)

@router.delete("", response_model=SimpleResponse)
def clear_cart(identity: Identity = Depends(get_current_identity), service: CartService = Depends(get_cart_service)):
    service.clear_cart(identity.user_id)
    return SimpleResponse(message="Cart cleared")
