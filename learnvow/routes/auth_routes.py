from fastapi import APIRouter, Depends, HTTPException, status, Body
from sqlalchemy.orm import Session
import logging

from learnvow.core.database import get_db
from learnvow.core.dependencies import get_current_active_user
from learnvow.core.exceptions import ConflictError
from learnvow.core.security import verify_firebase_id_token
from learnvow.crud.user_crud import (
    create_user,
    get_user_by_firebase_uid,
    get_user_by_email,
)
from learnvow.models.user_model import User
from learnvow.models.enums import UserRole
from learnvow.schemas.user_schema import (
    UserRegisterRequest,
    UserLoginRequest,
    UserDisplay,
    AuthResponse,
    UserCreateInternal,
    TokenData
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user_after_firebase(
    payload: UserRegisterRequest = Body(...),
    db: Session = Depends(get_db)
):
    """
    Register a new customer in the local database after the client has signed
    up with Firebase.

    The client must obtain a Firebase ID token and send it in the request body.
    """
    logger.info("Registration attempt with Firebase ID token.")
    token_data: TokenData = verify_firebase_id_token(payload.firebase_id_token)

    firebase_uid = token_data.firebase_uid
    email = token_data.email
    logger.info(f"Token verified for UID: {firebase_uid}, Email: {email}")

    if get_user_by_firebase_uid(db, firebase_uid=firebase_uid):
        logger.warning(f"Registration failed: User with Firebase UID {firebase_uid} already exists.")
        raise ConflictError("User with this Firebase UID already exists.")
    if get_user_by_email(db, email=email):
        logger.warning(f"Registration failed: User with email {email} already exists.")
        raise ConflictError("User with this email already exists.")

    user_create_data = UserCreateInternal(
        firebase_uid=firebase_uid,
        email=email,
        name=payload.name or token_data.name,
        role=UserRole.CUSTOMER.value,
    )
    db_user = create_user(db, user_data=user_create_data)

    if not db_user:
        # Lost a race against a concurrent registration for the same identity
        logger.error(f"Failed to create user in database for Firebase UID: {firebase_uid}")
        raise ConflictError("User account could not be created; it may already exist.")

    logger.info(f"User {email} (UID: {firebase_uid}) registered (ID: {db_user.id}).")
    return AuthResponse(message="User registered successfully.", user=UserDisplay.model_validate(db_user))


@router.post("/login", response_model=AuthResponse)
def login_user_with_firebase(
    payload: UserLoginRequest = Body(...),
    db: Session = Depends(get_db)
):
    """
    Confirms that a Firebase-authenticated caller has a local account.
    """
    logger.info("Login attempt with Firebase ID token.")
    token_data: TokenData = verify_firebase_id_token(payload.firebase_id_token)

    firebase_uid = token_data.firebase_uid
    user = get_user_by_firebase_uid(db, firebase_uid=firebase_uid)
    if not user:
        logger.warning(f"Login failed: User with Firebase UID {firebase_uid} not found in local database.")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not registered in our system. Please complete registration.",
        )

    logger.info(f"User {user.email} (Firebase UID: {firebase_uid}) logged in successfully.")
    return AuthResponse(message="Login successful.", user=UserDisplay.model_validate(user))


@router.get("/users/me", response_model=UserDisplay)
def read_users_me(current_user: User = Depends(get_current_active_user)):
    """
    Get current authenticated user's details.
    """
    logger.info(f"Fetching details for current user: {current_user.email} (ID: {current_user.id})")
    return current_user
