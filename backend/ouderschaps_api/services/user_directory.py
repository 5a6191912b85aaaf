"""
Ouderschaps API: User Directory
=================================

What:  Maps verified identity claims (`sub`, `email`, `name`) to a row in
       `gebruikers`, creating the row on first sight.
How:   1. Look up by auth0_id; refresh `laatste_login`.
       2. Otherwise link an existing row with the same email (an invited user
          logging in for the first time) by writing the auth0_id onto it.
       3. Otherwise insert a new row.
Who:   services/credential_resolver.py.

Users are never deleted here.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.models import Gebruiker
from ouderschaps_api.models.columns import utcnow
from ouderschaps_api.stores import StoreRegistry, stores

logger = logging.getLogger(__name__)

EMAIL_LIKE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass
class IdentityClaims:
    sub: str
    email: Optional[str] = None
    name: Optional[str] = None


def normalize_email_and_name(email: Optional[str], name: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Some identity providers put the email address in `name`. Such a name is
    never stored as a name: it becomes the email unless a real email claim is
    present, and the name is cleared.
    """
    if name and EMAIL_LIKE.match(name):
        return email or name, None
    return email, name


class UserDirectory:
    def __init__(self, registry: StoreRegistry = stores):
        self.users = registry.users

    async def resolve(self, db: AsyncSession, claims: IdentityClaims) -> Gebruiker:
        email, name = normalize_email_and_name(claims.email, claims.name)

        user = await self.users.get_by_auth0_id(db, claims.sub)
        if user is not None:
            return await self.users.update(db, user, {"laatste_login": utcnow()})

        if email:
            invited = await self.users.get_by_email(db, email)
            if invited is not None and not invited.auth0_id:
                logger.info("Linking identity %s to existing user %d by email", claims.sub, invited.id)
                values = {"auth0_id": claims.sub, "laatste_login": utcnow()}
                if name and not invited.naam:
                    values["naam"] = name
                return await self.users.update(db, invited, values)

        user = await self.users.create(db, auth0_id=claims.sub, email=email, naam=name)
        logger.info("Created user %d for identity %s", user.id, claims.sub)
        return user


# Module-level singleton
user_directory = UserDirectory()
