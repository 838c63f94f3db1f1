"""
Authentication Router

Handles user authentication endpoints:
- Registration (email/password → session token)
- Login (email/password → session token)
- Get current user (from the session token)

Security:
=========
- Passwords are hashed with bcrypt before storage
- Plain text passwords are never logged or stored
- Session tokens are JWTs valid for 30 days; there is no refresh flow
- Login failures do not reveal whether the email is registered
"""

from fastapi import APIRouter, status

from release_tracker.dependencies import CurrentClaims, DbSession
from release_tracker.schemas.user import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    UserCreate,
    UserResponse,
)
from release_tracker.services.security import create_access_token
from release_tracker.services.users import authenticate_user, get_user, register_user

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        400: {"description": "Bad request (validation failed or email taken)"},
        401: {"description": "Unauthorized"},
    },
)


def _auth_response(user) -> AuthResponse:
    return AuthResponse(
        token=create_access_token(user.id, user.email),
        user=UserResponse.model_validate(user),
    )


# -------------------------------------------------------------------------
# Registration Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="""
    Create an account and sign in.

    **Requirements:**
    - A valid email address not already registered
    - Password of at least 6 characters
    """,
)
def register(user_data: UserCreate, db: DbSession) -> AuthResponse:
    """
    Register a new user with email and password.

    1. Validates email and password format (handled by Pydantic)
    2. Rejects an email that is already registered
    3. Hashes the password with bcrypt and stores the user
    4. Returns a session token and the new user
    """
    user = register_user(db, user_data.email, user_data.password, user_data.name)
    return _auth_response(user)


# -------------------------------------------------------------------------
# Login Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login with email and password",
)
def login(credentials: LoginRequest, db: DbSession) -> AuthResponse:
    """Exchange an email and password for a session token."""
    user = authenticate_user(db, credentials.email, credentials.password)
    return _auth_response(user)


# -------------------------------------------------------------------------
# Current User Endpoint
# -------------------------------------------------------------------------
@router.get(
    "/me",
    response_model=MeResponse,
    summary="Get current user",
    responses={
        403: {"description": "Invalid or expired token"},
        404: {"description": "User not found"},
    },
)
def get_me(claims: CurrentClaims, db: DbSession) -> MeResponse:
    """
    Return the signed-in user.

    A token can outlive its user; that case is a 404 rather than a 401.
    """
    user = get_user(db, claims.user_id)
    return MeResponse(user=UserResponse.model_validate(user))
