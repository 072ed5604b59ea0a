"""Account and profile API routes"""

from fastapi import APIRouter, HTTPException, Depends

from ..database.orders import OrderDatabase
from ..models.user import ProfileResponse, SignInRequest, SignUpRequest, UserProfile
from ..services.accounts import AccountService
from ..services.api_client import AuthError
from .deps import get_account_service, get_order_db

router = APIRouter(prefix="/api", tags=["Account"])


@router.post("/auth/signin", response_model=UserProfile)
async def sign_in(request: SignInRequest, accounts: AccountService = Depends(get_account_service)):
    """Sign in and remember the session"""
    if not request.email or not request.password:
        raise HTTPException(status_code=400, detail="Please fill in all fields")
    try:
        return await accounts.sign_in(request.email, request.password)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))


@router.post("/auth/signup", response_model=UserProfile)
async def sign_up(request: SignUpRequest, accounts: AccountService = Depends(get_account_service)):
    """Create an account and remember the session"""
    if not request.name or not request.email or not request.password:
        raise HTTPException(status_code=400, detail="Please fill in all fields")
    try:
        return await accounts.sign_up(request.name, request.email, request.password)
    except AuthError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/auth/signout")
async def sign_out(accounts: AccountService = Depends(get_account_service)):
    """Forget the session"""
    await accounts.sign_out()
    return {"message": "Signed out"}


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    accounts: AccountService = Depends(get_account_service),
    orders: OrderDatabase = Depends(get_order_db),
):
    """Profile with best-effort statistics; unfetched stats are null"""
    return await accounts.profile(orders)
