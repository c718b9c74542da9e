"""Create an operator account, or promote an existing one.

Usage:
    python -m scripts.create_operator --email ops@example.com

The password is read from --password or the OPERATOR_PASSWORD env var.
"""

import argparse
import logging
import os
import sys

from app.application.identity.sign_up import MIN_PASSWORD_LENGTH
from app.core.config import settings
from app.infrastructure.database import create_db_engine, init_db
from app.infrastructure.identity.sql_identity_adapter import SqlIdentityAdapter
from app.shared.logging import configure_logging

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create or promote an operator account.")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", default=os.environ.get("OPERATOR_PASSWORD"))
    parser.add_argument(
        "--reset-password",
        action="store_true",
        help="Overwrite the password of an existing account.",
    )
    args = parser.parse_args(argv)

    configure_logging(level=settings.log_level)
    engine = create_db_engine(settings.database_url)
    init_db(engine)
    identity = SqlIdentityAdapter(engine=engine, secret=settings.jwt_secret)

    existing = identity.get_by_email(args.email)
    if existing is None:
        if not args.password or len(args.password) < MIN_PASSWORD_LENGTH:
            logger.error(
                "A password of at least %d characters is required for a new account.",
                MIN_PASSWORD_LENGTH,
            )
            return 2
        existing = identity.sign_up(args.email, args.password)
        logger.info("Created account %s (%s)", existing.user_id, existing.email)
    elif args.reset_password:
        if not args.password or len(args.password) < MIN_PASSWORD_LENGTH:
            logger.error(
                "A password of at least %d characters is required.", MIN_PASSWORD_LENGTH
            )
            return 2
        identity.set_password(existing.user_id, args.password)
        logger.info("Password reset for %s", existing.email)

    identity.grant_operator(existing.user_id)
    logger.info("Operator role granted to %s (%s)", existing.user_id, existing.email)
    return 0


if __name__ == "__main__":
    sys.exit(main())
