# Authentication API routes for user registration, login, and profile lookup

from fastapi import APIRouter, Depends, status

from app.dependencies.auth import AuthenticatedUser, get_current_identity
from app.dependencies.services import get_credential_service, get_token_service
from app.schemas import AuthResponse, ErrorResponse, UserLogin, UserProfile, UserRegister
from app.services.credentials import CredentialService
from app.services.tokens import TokenService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def register_user(
    user_data: UserRegister,
    credential_service: CredentialService = Depends(get_credential_service),
    token_service: TokenService = Depends(get_token_service),
):
    """Register a new user and return a token so the client is logged in at once."""
    user = await credential_service.register(
        user_data.name, user_data.email, user_data.password
    )
    return AuthResponse(token=token_service.issue(user.id), user_id=user.id)


@router.post(
    "/login", response_model=AuthResponse, responses={401: {"model": ErrorResponse}}
)
async def login_user(
    user_data: UserLogin,
    credential_service: CredentialService = Depends(get_credential_service),
    token_service: TokenService = Depends(get_token_service),
):
    """Authenticate user and return a bearer token for API access."""
    user = await credential_service.verify_credentials(user_data.email, user_data.password)
    return AuthResponse(token=token_service.issue(user.id), user_id=user.id)


@router.get(
    "/me",
    response_model=UserProfile,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_current_user_info(
    identity: AuthenticatedUser = Depends(get_current_identity),
    credential_service: CredentialService = Depends(get_credential_service),
):
    """Retrieve current authenticated user's profile information."""
    user = await credential_service.get_profile(identity.user_id)
    return UserProfile.model_validate(user)
