"""
Resolve the client record behind a signed-in identity.

Applications are submitted before an account exists, so the first
time a user loads anything client-specific their identity is linked
to the application that carries the same email.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from app.domain.settlement.entities import Client
from app.domain.settlement.events import ChangeEvent, ChangeOp, Collection
from app.domain.settlement.ports import ChangeFeedPort, ClientRepository

logger = logging.getLogger(__name__)


def resolve_client(
    client_repo: ClientRepository,
    change_feed: ChangeFeedPort,
    user_id: UUID,
    email: str,
    now: datetime,
) -> Optional[Client]:
    """Return the caller's client, linking it by email on first use.

    Args:
        client_repo: Client persistence port.
        change_feed: Publishes the link as a client update.
        user_id: The caller's identity.
        email: The caller's account email.
        now: Timestamp for ``last_updated`` when a link is written.

    Returns:
        The linked client, or None if the caller never applied.
    """
    client = client_repo.get_by_user_id(user_id)
    if client is not None:
        return client

    if not email:
        return None
    client = client_repo.get_by_email(email)
    if client is None:
        return None
    if client.user_id is not None and client.user_id != user_id:
        logger.warning("Client %s already linked to another identity", client.id)
        return None

    client.user_id = user_id
    client.last_updated = now
    client_repo.save(client)
    logger.info("Linked client %s to identity %s", client.id, user_id)
    change_feed.publish(
        ChangeEvent(
            collection=Collection.CLIENTS,
            op=ChangeOp.UPDATE,
            record_id=str(client.id),
            client_id=client.id,
        )
    )
    return client
