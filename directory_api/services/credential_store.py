"""Credential Store — registration, login and email verification against the accounts table.

Invariants:
    - register_account returns None when the email is taken (never raises for it)
    - authenticate returns None for unknown email and wrong password alike, at equal cost
    - verify_account flips verified at most once; later calls with the same code return False
    - Email lookups are case-insensitive

Design Decisions:
    - bcrypt work runs in a worker thread (asyncio.to_thread): the event loop keeps
      serving other requests while a hash is computed
    - The verified flip is a conditional UPDATE (WHERE verified = false) so two
      concurrent verifications cannot both report success
"""

import asyncio
import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from directory_api.core.credentials import (
    PasswordHasher,
    codes_match,
    decode_verification_code,
    encode_verification_code,
    new_verification_code,
)
from directory_api.core.domain_types import AccountId, RegisteredAccount
from directory_api.models.account import Account

logger = logging.getLogger(__name__)


def _email_matches(email_address: str):
    return func.lower(Account.email_address) == email_address.lower()


class CredentialStore:
    """Account credential operations bound to one request's session."""

    def __init__(self, db: AsyncSession, hasher: PasswordHasher):
        self.db = db
        self.hasher = hasher

    async def _find_account(self, email_address: str) -> Account | None:
        result = await self.db.execute(
            select(Account).where(_email_matches(email_address)).limit(1),
        )
        return result.scalar_one_or_none()

    async def register_account(
        self, email_address: str, password: str,
    ) -> RegisteredAccount | None:
        """Create an unverified account. None when the email is already registered."""
        if await self._find_account(email_address) is not None:
            return None

        code = new_verification_code()
        password_hash = await asyncio.to_thread(self.hasher.hash, password)
        account = Account(
            email_address=email_address,
            password_hash=password_hash,
            verified=False,
            verification_code=code,
        )
        self.db.add(account)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same address
            await self.db.rollback()
            logger.info("Registration lost race on unique email")
            return None

        logger.info("Account registered", extra={"account_id": account.id})
        return RegisteredAccount(
            id=AccountId(account.id),
            verification_code=encode_verification_code(code),
        )

    async def authenticate(
        self, email_address: str, password: str,
    ) -> AccountId | None:
        account = await self._find_account(email_address)
        password_hash = account.password_hash if account else None
        valid = await asyncio.to_thread(self.hasher.verify, password, password_hash)
        if account is None or not valid:
            return None
        return AccountId(account.id)

    async def verify_account(self, email_address: str, code: str) -> bool:
        submitted = decode_verification_code(code)
        if submitted is None:
            return False

        result = await self.db.execute(
            select(Account.id, Account.verification_code)
            .where(_email_matches(email_address))
            .where(Account.verified.is_(False))
            .limit(1),
        )
        row = result.one_or_none()
        if row is None or not codes_match(row.verification_code, submitted):
            return False

        flipped = await self.db.execute(
            update(Account)
            .where(Account.id == row.id)
            .where(Account.verified.is_(False))
            .values(verified=True)
            .execution_options(synchronize_session=False),
        )
        await self.db.commit()
        if flipped.rowcount != 1:
            return False
        logger.info("Account verified", extra={"account_id": row.id})
        return True
