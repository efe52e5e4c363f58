"""Account routes: registration, login, verification, password reset and
account administration."""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..auth.gate import authenticated, managers, optional_claims
from ..controllers.accounts import AccountService
from ..domain import AccountPatch, Claims, Registration
from ..exceptions import ValidationFailed
from . import Pagination, get_accounts, pagination, respond

router = APIRouter()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(min_length=1)
    new_password: str = Field(alias='newPassword')


def cookie_params(request: Request):
    extra = request.app.extra
    return (extra['COOKIE_NAME'], extra['COOKIE_MAX_AGE'],
            extra['ENVIRONMENT'] == 'production')


@router.post('/register')
def register(registration: Registration,
             accounts: AccountService = Depends(get_accounts),
             actor: Optional[Claims] = Depends(optional_claims)) -> JSONResponse:
    """Create an account. An authenticated manager may only create artists."""
    account_id = accounts.register(registration, actor.role if actor else None)
    return respond('User registered successfully', {'id': account_id},
                   status_code=201)


@router.get('/verify-email')
def verify_email(token: Optional[str] = None,
                 accounts: AccountService = Depends(get_accounts)) -> JSONResponse:
    if not token:
        raise ValidationFailed('Invalid token')
    accounts.verify_email(token)
    return respond('Email verified successfully', {'is_verified': True})


@router.post('/login')
def login(request: Request, credentials: LoginRequest,
          accounts: AccountService = Depends(get_accounts)) -> JSONResponse:
    result = accounts.authenticate(credentials.email, credentials.password)
    response = respond('Login successful', {
        'id': result.account.id,
        'role': result.account.role,
        'artistId': result.artist.id if result.artist else None,
    })
    name, max_age, secure = cookie_params(request)
    response.set_cookie(name, result.token, max_age=max_age, httponly=True,
                        secure=secure, samesite='strict')
    return response


@router.post('/logout')
def logout(request: Request) -> JSONResponse:
    response = respond('Logged out successfully')
    name, _max_age, secure = cookie_params(request)
    response.delete_cookie(name, httponly=True, secure=secure,
                           samesite='strict')
    return response


@router.get('/profile')
def profile(claims: Claims = Depends(authenticated),
            accounts: AccountService = Depends(get_accounts)) -> JSONResponse:
    account, artist = accounts.get_profile(claims.id)
    data = account.public()
    data['artistId'] = artist.id if artist else None
    return respond('Profile fetched successfully', data)


@router.post('/forgot-password')
def forgot_password(body: ForgotPasswordRequest,
                    accounts: AccountService = Depends(get_accounts)) -> JSONResponse:
    accounts.initiate_password_reset(body.email)
    return respond('Password reset email sent')


@router.post('/reset-password')
def reset_password(body: ResetPasswordRequest,
                   accounts: AccountService = Depends(get_accounts)) -> JSONResponse:
    accounts.reset_password(body.token, body.new_password)
    return respond('Password has been reset successfully')


@router.get('/')
def list_accounts(claims: Claims = Depends(managers),
                  paging: Pagination = Depends(pagination),
                  accounts: AccountService = Depends(get_accounts)) -> JSONResponse:
    page = accounts.list_accounts(claims.role, paging.limit, paging.offset)
    return respond('Users fetched successfully', page.items, page=page)


@router.patch('/{account_id}')
def update_account(account_id: int, patch: AccountPatch,
                   claims: Claims = Depends(managers),
                   accounts: AccountService = Depends(get_accounts)) -> JSONResponse:
    updated = accounts.update_profile(claims.role, account_id, patch)
    return respond('User profile updated successfully', updated)


@router.delete('/{account_id}')
def remove_account(account_id: int, claims: Claims = Depends(managers),
                   accounts: AccountService = Depends(get_accounts)) -> JSONResponse:
    accounts.remove_account(claims.role, claims.id, account_id)
    return respond('User deleted successfully')
