from datetime import timedelta
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from config import ApplicationConfig
from src.api.error import ClientError, ServerError
from src.app.services.clock import Clock
from src.app.services.mail_service import IMailService
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.rate_limiter import PasswordChangeRateLimiter, PasswordResetRateLimiter
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    ChangePasswordResponse,
    ChangePasswordUseCase,
    ConfirmPasswordResetResponse,
    ConfirmPasswordResetUseCase,
    GetPasswordStatusUseCase,
    LoginResponse,
    LoginUseCase,
    PasswordStatusResponse,
    RequestPasswordResetResponse,
    RequestPasswordResetUseCase,
    SetPasswordResponse,
    SetPasswordUseCase,
    ValidateResetTokenResponse,
    ValidateResetTokenUseCase,
)
from src.depends import (
    get_clock,
    get_current_user,
    get_mail_service,
    get_password_change_limiter,
    get_password_hasher,
    get_rate_limiter,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])

PASSWORD_ERRORS = ("PASSWORD_MISMATCH", "PASSWORD_TOO_WEAK", "PASSWORD_REUSED")


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    Validates incoming login request.
    """

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: IPasswordHasher = Depends(get_password_hasher),
    clock: Clock = Depends(get_clock),
):
    """
    User Login

    Authenticates user and returns a session-bound JWT.

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 403 Forbidden: User disabled
        - 500 Internal Server Error: Server error
    """
    use_case = LoginUseCase(
        uow,
        hasher,
        clock,
        session_ttl=timedelta(days=ApplicationConfig.SESSION_EXPIRE_DAYS),
    )
    result = await use_case.execute(request.email, request.password)

    # Handle errors
    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "USER_DISABLED":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    return result.value


class RequestPasswordResetRequest(BaseModel):
    """
    Request password reset HTTP request payload

    Only the email format is validated here; whether an account exists is
    never revealed.
    """

    email: EmailStr = Field(..., description="User email address")


@router.post(
    "/request-password-reset",
    status_code=status.HTTP_200_OK,
    response_model=RequestPasswordResetResponse,
    response_model_exclude_none=True,
)
async def request_password_reset(
    request: RequestPasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    rate_limiter: PasswordResetRateLimiter = Depends(get_rate_limiter),
    mail_service: IMailService = Depends(get_mail_service),
    clock: Clock = Depends(get_clock),
):
    """
    Request Password Reset

    Sends a reset link if the account exists. The response is the same for
    existing and unknown emails.

    Raises:
        - 422 Unprocessable Entity: Invalid email format (handled by FastAPI)
        - 429 Too Many Requests: Rate limit exceeded
        - 500 Internal Server Error: Server error
    """
    use_case = RequestPasswordResetUseCase(
        uow,
        rate_limiter,
        mail_service,
        clock,
        reset_url=ApplicationConfig.RESET_URL,
        token_expiry=timedelta(hours=ApplicationConfig.RESET_TOKEN_EXPIRY_HOURS),
    )
    result = await use_case.execute(request.email)

    if result.is_err():
        error = result.error
        if error.code == "RATE_LIMIT_EXCEEDED":
            wait_minutes = (error.details or {}).get("wait_minutes")
            raise ClientError(
                error,
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                headers={"Retry-After": str(wait_minutes * 60)} if wait_minutes else None,
            )
        raise ServerError(error)

    return result.value


@router.get(
    "/reset-token/{token}",
    status_code=status.HTTP_200_OK,
    response_model=ValidateResetTokenResponse,
)
async def validate_reset_token(
    token: str,
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Validate Password Reset Token

    Raises:
        - 400 Bad Request: Token invalid, expired or used
        - 403 Forbidden: Account deactivated
        - 500 Internal Server Error: Server error
    """
    result = await ValidateResetTokenUseCase(uow, clock).execute(token)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_RESET_TOKEN":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "ACCOUNT_DEACTIVATED":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    return result.value


class ConfirmPasswordResetRequest(BaseModel):
    """
    Confirm password reset HTTP request payload

    Password strength is checked by the use case so violations come back
    as a list instead of a generic validation error.
    """

    token: str = Field(..., min_length=1, description="Password reset token from email")
    new_password: str = Field(..., description="New password")
    confirm_password: str = Field(..., description="New password, repeated")


@router.post(
    "/confirm-password-reset",
    status_code=status.HTTP_200_OK,
    response_model=ConfirmPasswordResetResponse,
)
async def confirm_password_reset(
    request: ConfirmPasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: IPasswordHasher = Depends(get_password_hasher),
    mail_service: IMailService = Depends(get_mail_service),
    clock: Clock = Depends(get_clock),
):
    """
    Confirm Password Reset

    Sets the new password, consumes the token and signs out every session.

    Raises:
        - 400 Bad Request: Token invalid, expired or used
        - 403 Forbidden: Account deactivated
        - 422 Unprocessable Entity: Password mismatch, too weak or reused
        - 500 Internal Server Error: Server error
    """
    use_case = ConfirmPasswordResetUseCase(
        uow,
        hasher,
        mail_service,
        clock,
        history_limit=ApplicationConfig.PASSWORD_HISTORY_LIMIT,
    )
    result = await use_case.execute(
        request.token, request.new_password, request.confirm_password
    )

    if result.is_err():
        error = result.error
        if error.code == "INVALID_RESET_TOKEN":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "ACCOUNT_DEACTIVATED":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code in PASSWORD_ERRORS:
            raise ClientError(error, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)
        raise ServerError(error)

    return result.value


class ChangePasswordRequest(BaseModel):
    """Change password HTTP request payload"""

    current_password: str = Field(..., description="Current password")
    new_password: str = Field(..., description="New password")
    confirm_password: str = Field(..., description="New password, repeated")
    invalidate_other_sessions: bool = Field(
        True, description="Sign out every other device"
    )


@router.post(
    "/change-password",
    status_code=status.HTTP_200_OK,
    response_model=ChangePasswordResponse,
)
async def change_password(
    request: ChangePasswordRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: IPasswordHasher = Depends(get_password_hasher),
    mail_service: IMailService = Depends(get_mail_service),
    rate_limiter: PasswordChangeRateLimiter = Depends(get_password_change_limiter),
    clock: Clock = Depends(get_clock),
):
    """
    Change Password

    Requires a valid access token. The current session stays signed in.

    Raises:
        - 401 Unauthorized: Invalid token, revoked session or wrong current password
        - 404 Not Found: User not found
        - 409 Conflict: Account has no password
        - 422 Unprocessable Entity: Password mismatch, too weak or reused
        - 429 Too Many Requests: Too many attempts
        - 500 Internal Server Error: Server error
    """
    use_case = ChangePasswordUseCase(
        uow,
        hasher,
        mail_service,
        rate_limiter,
        clock,
        history_limit=ApplicationConfig.PASSWORD_HISTORY_LIMIT,
    )
    result = await use_case.execute(
        UUID(current_user["user"]["id"]),
        UUID(current_user["session"]["id"]),
        request.current_password,
        request.new_password,
        request.confirm_password,
        invalidate_other_sessions=request.invalidate_other_sessions,
    )

    if result.is_err():
        error = result.error
        if error.code == "RATE_LIMIT_EXCEEDED":
            retry_after = (error.details or {}).get("retry_after")
            raise ClientError(
                error,
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                headers={"Retry-After": str(retry_after)} if retry_after else None,
            )
        elif error.code == "INVALID_CURRENT_PASSWORD":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "NO_PASSWORD_EXISTS":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        elif error.code in PASSWORD_ERRORS:
            raise ClientError(error, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)
        raise ServerError(error)

    return result.value


class SetPasswordRequest(BaseModel):
    """Set password HTTP request payload (Google-only accounts)"""

    new_password: str = Field(..., description="New password")
    confirm_password: str = Field(..., description="New password, repeated")


@router.post(
    "/set-password",
    status_code=status.HTTP_200_OK,
    response_model=SetPasswordResponse,
)
async def set_password(
    request: SetPasswordRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: IPasswordHasher = Depends(get_password_hasher),
    mail_service: IMailService = Depends(get_mail_service),
    clock: Clock = Depends(get_clock),
):
    """
    Set Password

    Adds a password to a Google-only account so it can also sign in with
    email and password.

    Raises:
        - 401 Unauthorized: Invalid token or revoked session
        - 403 Forbidden: Account already has a password or is not linked to Google
        - 404 Not Found: User not found
        - 422 Unprocessable Entity: Password mismatch or too weak
        - 500 Internal Server Error: Server error
    """
    use_case = SetPasswordUseCase(
        uow,
        hasher,
        mail_service,
        clock,
        history_limit=ApplicationConfig.PASSWORD_HISTORY_LIMIT,
    )
    result = await use_case.execute(
        UUID(current_user["user"]["id"]),
        request.new_password,
        request.confirm_password,
    )

    if result.is_err():
        error = result.error
        if error.code in ("PASSWORD_ALREADY_EXISTS", "GOOGLE_ACCOUNT_REQUIRED"):
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code in PASSWORD_ERRORS:
            raise ClientError(error, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)
        raise ServerError(error)

    return result.value


@router.get(
    "/password-status",
    status_code=status.HTTP_200_OK,
    response_model=PasswordStatusResponse,
)
async def get_password_status(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Password Status

    Sign-in methods, password age recommendations and the password policy.

    Raises:
        - 401 Unauthorized: Invalid token or revoked session
        - 404 Not Found: User not found
        - 500 Internal Server Error: Server error
    """
    use_case = GetPasswordStatusUseCase(
        uow, clock, history_limit=ApplicationConfig.PASSWORD_HISTORY_LIMIT
    )
    result = await use_case.execute(UUID(current_user["user"]["id"]))

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value
