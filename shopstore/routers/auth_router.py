"""
Session endpoints.

POST /api/v1/auth/login    - sign in through the identity provider
POST /api/v1/auth/signup   - register through the identity provider
POST /api/v1/auth/logout   - sign out
GET  /api/v1/auth/session  - current session snapshot

A successful login or logout response only means the provider accepted
the request. The session snapshot updates when the provider's own event
arrives; poll /session to observe it.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from ..dependencies import get_session_store
from ..domain.exceptions import AuthError
from ..logging_config import get_logger
from ..models import Credentials, ErrorResponse, MessageResponse, SessionStateResponse
from ..session.session_store import SessionStore

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])

AUTH_ERROR_STATUS = {
    AuthError.INVALID_CREDENTIAL: status.HTTP_401_UNAUTHORIZED,
    AuthError.NETWORK: status.HTTP_503_SERVICE_UNAVAILABLE,
}

AUTH_RESPONSES = {
    401: {"description": "Invalid credentials", "model": ErrorResponse},
    503: {"description": "Identity provider unreachable", "model": ErrorResponse},
}


def _auth_http_error(e: AuthError) -> HTTPException:
    return HTTPException(
        status_code=AUTH_ERROR_STATUS.get(e.code, status.HTTP_400_BAD_REQUEST),
        detail={"error": e.code, "message": e.message, "details": {}},
    )


@router.post("/login", response_model=MessageResponse, responses=AUTH_RESPONSES)
async def login(
    credentials: Credentials,
    store: SessionStore = Depends(get_session_store),
) -> MessageResponse:
    """Sign in with email and password."""
    try:
        await store.login(credentials.email, credentials.password)
    except AuthError as e:
        raise _auth_http_error(e)
    return MessageResponse(message="Sign in accepted")


@router.post(
    "/signup",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses=AUTH_RESPONSES,
)
async def signup(
    credentials: Credentials,
    store: SessionStore = Depends(get_session_store),
) -> MessageResponse:
    """Register a new account."""
    try:
        await store.signup(credentials.email, credentials.password)
    except AuthError as e:
        raise _auth_http_error(e)
    return MessageResponse(message="Registration accepted")


@router.post("/logout", response_model=MessageResponse, responses=AUTH_RESPONSES)
async def logout(store: SessionStore = Depends(get_session_store)) -> MessageResponse:
    """Sign out the current user."""
    try:
        await store.logout()
    except AuthError as e:
        raise _auth_http_error(e)
    return MessageResponse(message="Sign out accepted")


@router.get("/session", response_model=SessionStateResponse)
async def session_state(
    store: SessionStore = Depends(get_session_store),
) -> SessionStateResponse:
    """Return the latest session snapshot."""
    return SessionStateResponse.from_state(store.state)
