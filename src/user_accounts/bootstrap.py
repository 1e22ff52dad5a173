"""Composition helpers wiring the account service to its runtime dependencies."""

from __future__ import annotations

import logging

from user_accounts.application.services.account_service import AccountService
from user_accounts.config.settings import Settings, load_settings
from user_accounts.infrastructure.db.account_repository import SqlAlchemyAccountRepository
from user_accounts.infrastructure.db.session import create_session_factory
from user_accounts.infrastructure.logging import configure_logging
from user_accounts.infrastructure.security.password_hasher import (
    DEFAULT_BCRYPT_ROUNDS,
    BcryptPasswordHasher,
)

logger = logging.getLogger(__name__)


def build_account_service(
    database_url: str,
    *,
    avatar_base_url: str = "",
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
) -> AccountService:
    """Build account service with SQLAlchemy-backed dependencies."""

    session_factory = create_session_factory(database_url)
    return AccountService(
        accounts=SqlAlchemyAccountRepository(session_factory),
        password_hasher=BcryptPasswordHasher(rounds=bcrypt_rounds),
        avatar_base_url=avatar_base_url,
    )


def build_account_service_from_settings(settings: Settings | None = None) -> AccountService:
    """Configure logging and build the account service from environment settings."""

    resolved = settings or load_settings()
    configure_logging(level=resolved.log_level, sql_echo=resolved.sql_echo)
    logger.info("account_service_configured bcrypt_rounds=%s", resolved.bcrypt_rounds)
    return build_account_service(
        resolved.database_url,
        avatar_base_url=resolved.avatar_base_url,
        bcrypt_rounds=resolved.bcrypt_rounds,
    )
