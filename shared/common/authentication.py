# shared/common/authentication.py
"""
JWT Authentication

Tokens are issued by the identity provider and verified here with a shared
HS256 secret. The service never stores users; a request's user is built
from the token claims.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import jwt
from django.conf import settings
from rest_framework import authentication, exceptions
from rest_framework.request import Request

logger = logging.getLogger(__name__)


class JWTAuthentication(authentication.BaseAuthentication):
    """
    JWT bearer token authentication for API requests.
    """

    keyword = 'Bearer'

    def authenticate(self, request: Request) -> Optional[Tuple[Any, Dict]]:
        auth_header = authentication.get_authorization_header(request)

        if not auth_header:
            return None

        try:
            auth_parts = auth_header.decode('utf-8').split()
        except UnicodeDecodeError:
            raise exceptions.AuthenticationFailed('Invalid token header encoding')

        if len(auth_parts) != 2:
            raise exceptions.AuthenticationFailed('Invalid token header format')

        if auth_parts[0].lower() != self.keyword.lower():
            return None

        return self.authenticate_token(auth_parts[1])

    def authenticate_token(self, token: str) -> Tuple['TokenUser', Dict]:
        """Validate and decode JWT token"""
        try:
            payload = jwt.decode(
                token,
                settings.JWT_SETTINGS['VERIFYING_KEY'],
                algorithms=[settings.JWT_SETTINGS['ALGORITHM']],
                issuer=settings.JWT_SETTINGS['ISSUER'],
                options={'require': ['exp', 'iat', 'sub', 'iss']}
            )
        except jwt.ExpiredSignatureError:
            raise exceptions.AuthenticationFailed('Token has expired')
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid token: {e}")
            raise exceptions.AuthenticationFailed('Invalid token')

        try:
            user = TokenUser(payload)
        except ValueError:
            raise exceptions.AuthenticationFailed('Token subject is not a valid user id')

        return (user, payload)

    def authenticate_header(self, request: Request) -> str:
        return self.keyword


class TokenUser:
    """
    User object created from JWT token payload.
    """

    def __init__(self, payload: Dict):
        self.payload = payload
        self.id = uuid.UUID(str(payload.get('sub')))
        self.email = payload.get('email')
        self.roles: List[str] = payload.get('roles', [])
        self.is_active = True
        self.is_authenticated = True
        self.is_anonymous = False

    def __str__(self) -> str:
        return f"TokenUser({self.email or self.id})"


class JWTTokenGenerator:
    """
    Generate JWT tokens. Used by tests and local tooling; production tokens
    come from the identity provider.
    """

    @staticmethod
    def generate_access_token(
        user_id: str,
        roles: list = None,
        email: str = None,
        extra_claims: Dict = None
    ) -> str:
        now = datetime.now(timezone.utc)

        payload = {
            'sub': str(user_id),
            'email': email,
            'roles': roles or [],
            'iat': now,
            'exp': now + settings.JWT_SETTINGS['ACCESS_TOKEN_LIFETIME'],
            'iss': settings.JWT_SETTINGS['ISSUER'],
        }

        if extra_claims:
            payload.update(extra_claims)

        return jwt.encode(
            payload,
            settings.JWT_SETTINGS['SIGNING_KEY'],
            algorithm=settings.JWT_SETTINGS['ALGORITHM']
        )
