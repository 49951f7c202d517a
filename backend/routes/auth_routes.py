import hmac
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from backend.auth import jwt_handler
from backend.auth.dependencies import get_token_payload
from backend.core import config

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

ADMIN_SUBJECT = 'admin'


class LoginRequest(BaseModel):
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = 'bearer'
    expires_in: int


def password_matches(candidate: str, expected: str) -> bool:
    return hmac.compare_digest(candidate.encode('utf-8'), expected.encode('utf-8'))


@router.post('/login', response_model=TokenResponse)
def login(data: LoginRequest):
    if not password_matches(data.password, config.ADMIN_PASSWORD):
        logger.warning('Rejected admin login attempt')
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail='Invalid password.',
        )

    token = jwt_handler.create_access_token(subject=ADMIN_SUBJECT, role=jwt_handler.ADMIN_ROLE)
    return TokenResponse(access_token=token, expires_in=config.JWT_EXPIRES_MINUTES * 60)


@router.get('/me')
def me(payload: dict = Depends(get_token_payload)):
    return {'subject': payload['sub'], 'role': payload.get('role')}
