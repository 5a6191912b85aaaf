"""
Ouderschaps API: Request Dependencies
=======================================

What:  FastAPI dependencies shared by the routers.
How:   `current_user` resolves the request's credentials into a Gebruiker and
       turns a failed AuthResult into a 401. `get_lookup_cache` hands out the
       process-wide lookup cache; tests override both through
       `app.dependency_overrides`.
"""

import logging

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.database import get_db_session
from ouderschaps_api.exceptions import AuthenticationError
from ouderschaps_api.models import Gebruiker
from ouderschaps_api.services.credential_resolver import CredentialResolver, credential_resolver
from ouderschaps_api.services.lookup_cache import LookupCache, lookup_cache

logger = logging.getLogger(__name__)


def get_credential_resolver() -> CredentialResolver:
    return credential_resolver


def get_lookup_cache() -> LookupCache:
    return lookup_cache


async def current_user(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    resolver: CredentialResolver = Depends(get_credential_resolver),
) -> Gebruiker:
    """
    The authenticated user of this request.

    Raises:
        AuthenticationError: 401 "Unauthorized: <reason>"
    """
    result = await resolver.resolve(db, request.headers)
    if not result.authenticated:
        logger.info("Authentication failed for %s %s: %s", request.method, request.url.path, result.error)
        raise AuthenticationError(result.error)
    request.state.user_id = result.user.id
    return result.user
