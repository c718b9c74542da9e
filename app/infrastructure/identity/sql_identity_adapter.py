"""
Adapter: SQL-backed identity service.

Implements IdentityPort. Passwords are hashed with passlib, sessions are
rows in the ``sessions`` table and the bearer token is a signed JWT
(python-jose) carrying the session id, so signing out revokes the token
server-side.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID, uuid4

from jose import JWTError, jwt
from passlib.hash import pbkdf2_sha256
from sqlalchemy import func, insert, select, update
from sqlalchemy.engine import Engine

from app.domain.identity.entities import Identity, SessionToken
from app.domain.identity.errors import EmailAlreadyRegisteredError, InvalidCredentialsError
from app.domain.identity.ports import IdentityPort
from app.domain.settlement.errors import ConstraintViolationError
from app.infrastructure.database import as_utc, sessions, user_roles, users
from app.infrastructure.settlement.sql_errors import translate_db_errors
from app.shared.clock import utcnow

logger = logging.getLogger(__name__)

OPERATOR_ROLE = "admin"


class SqlIdentityAdapter(IdentityPort):
    """Accounts, sessions and roles stored next to the settlement tables.

    Args:
        engine: SQLAlchemy engine.
        secret: HMAC key for signing tokens.
        algorithm: JWT algorithm.
        ttl_minutes: Session lifetime.
        clock: Source of the current UTC time.
    """

    def __init__(
        self,
        engine: Engine,
        secret: str,
        algorithm: str = "HS256",
        ttl_minutes: int = 720,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._engine = engine
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = timedelta(minutes=ttl_minutes)
        self._clock = clock

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def sign_up(self, email: str, password: str) -> Identity:
        email = email.strip().lower()
        user_id = uuid4()
        try:
            with translate_db_errors("sign up"):
                with self._engine.begin() as conn:
                    if conn.execute(select(users.c.id).where(users.c.email == email)).first():
                        raise EmailAlreadyRegisteredError(email)
                    conn.execute(
                        insert(users).values(
                            id=user_id,
                            email=email,
                            password_hash=pbkdf2_sha256.hash(password),
                            created_at=self._clock(),
                        )
                    )
        except ConstraintViolationError as exc:
            # A concurrent sign-up with the same email loses on the unique index.
            raise EmailAlreadyRegisteredError(email) from exc
        return Identity(user_id=user_id, email=email, is_operator=False)

    def get_by_email(self, email: str) -> Optional[Identity]:
        with translate_db_errors("get account"):
            with self._engine.connect() as conn:
                row = conn.execute(
                    select(users.c.id, users.c.email).where(
                        users.c.email == email.strip().lower()
                    )
                ).first()
                if row is None:
                    return None
                return Identity(
                    user_id=row.id, email=row.email, is_operator=self._is_operator(conn, row.id)
                )

    def grant_operator(self, user_id: UUID) -> None:
        with translate_db_errors("grant operator"):
            with self._engine.begin() as conn:
                if not self._is_operator(conn, user_id):
                    conn.execute(insert(user_roles).values(user_id=user_id, role=OPERATOR_ROLE))
        logger.info("Operator role granted: user=%s", user_id)

    def set_password(self, user_id: UUID, password: str) -> None:
        """Replace an account's password (used by the operator script)."""
        with translate_db_errors("set password"):
            with self._engine.begin() as conn:
                conn.execute(
                    update(users)
                    .where(users.c.id == user_id)
                    .values(password_hash=pbkdf2_sha256.hash(password))
                )

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def sign_in(self, email: str, password: str) -> SessionToken:
        email = email.strip().lower()
        now = self._clock()
        with translate_db_errors("sign in"):
            with self._engine.begin() as conn:
                row = conn.execute(select(users).where(users.c.email == email)).first()
                if row is None or not pbkdf2_sha256.verify(password, row.password_hash):
                    logger.info("Sign-in rejected")
                    raise InvalidCredentialsError()
                session_id = uuid4()
                expires_at = now + self._ttl
                conn.execute(
                    insert(sessions).values(
                        id=session_id,
                        user_id=row.id,
                        created_at=now,
                        expires_at=expires_at,
                    )
                )
                identity = Identity(
                    user_id=row.id, email=row.email, is_operator=self._is_operator(conn, row.id)
                )

        token = jwt.encode(
            {
                "sub": str(row.id),
                "sid": str(session_id),
                "iat": int(now.timestamp()),
                "exp": int(expires_at.timestamp()),
            },
            self._secret,
            algorithm=self._algorithm,
        )
        return SessionToken(access_token=token, expires_at=expires_at, identity=identity)

    def sign_out(self, access_token: str) -> None:
        claims = self._decode(access_token)
        if claims is None:
            return
        with translate_db_errors("sign out"):
            with self._engine.begin() as conn:
                conn.execute(
                    update(sessions)
                    .where((sessions.c.id == claims["sid"]) & sessions.c.revoked_at.is_(None))
                    .values(revoked_at=self._clock())
                )

    def resolve_session(self, access_token: str) -> Optional[Identity]:
        claims = self._decode(access_token)
        if claims is None:
            return None
        now = self._clock()
        with translate_db_errors("resolve session"):
            with self._engine.connect() as conn:
                row = conn.execute(
                    select(sessions.c.expires_at, sessions.c.revoked_at, users.c.id, users.c.email)
                    .join(users, users.c.id == sessions.c.user_id)
                    .where(sessions.c.id == claims["sid"])
                ).first()
                if row is None or row.revoked_at is not None:
                    return None
                if as_utc(row.expires_at) <= now or row.id != claims["uid"]:
                    return None
                return Identity(
                    user_id=row.id, email=row.email, is_operator=self._is_operator(conn, row.id)
                )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _decode(self, access_token: str) -> Optional[dict[str, Any]]:
        try:
            # Expiry is enforced by the session row against the injected clock.
            claims = jwt.decode(
                access_token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
            return {"sid": UUID(claims["sid"]), "uid": UUID(claims["sub"])}
        except (JWTError, KeyError, ValueError, TypeError):
            return None

    @staticmethod
    def _is_operator(conn: Any, user_id: UUID) -> bool:
        count = conn.execute(
            select(func.count())
            .select_from(user_roles)
            .where((user_roles.c.user_id == user_id) & (user_roles.c.role == OPERATOR_ROLE))
        ).scalar_one()
        return count > 0
