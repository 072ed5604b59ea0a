"""Product API routes"""

from fastapi import APIRouter, HTTPException, Depends

from ..models.product import ProductListResponse
from ..services.api_client import StorefrontClient, ProductFetchError
from .deps import get_client

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=ProductListResponse)
async def list_products(client: StorefrontClient = Depends(get_client)):
    """
    List products from the remote catalog.

    A failed fetch returns 502 with a message the client can show next to a
    "try again" action.
    """
    try:
        products = await client.list_products()
    except ProductFetchError as e:
        raise HTTPException(status_code=502, detail=e.message)

    return ProductListResponse(products=products, total=len(products))
