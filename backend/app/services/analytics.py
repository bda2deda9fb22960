"""
Send analytics: one event per send attempt, for audit and abuse monitoring.

Best effort. A missing sink skips the write, and a failing sink is logged
and ignored. Neither changes the outcome of the send being recorded.

Event layout (stable order -- downstream queries index by position):
    indexes: [tracking_id]
    blobs:   [user_id, conversation_id, display_name, recipient, provider_id, status]
    doubles: [text_length]
"""

import logging
from dataclasses import dataclass
from typing import Literal, Optional, Protocol, Sequence

import asyncpg

logger = logging.getLogger(__name__)

SendStatus = Literal["sent", "failed"]


@dataclass(frozen=True)
class SendEvent:
    tracking_id: str
    user_id: str
    conversation_id: Optional[str]
    display_name: str
    recipient: str
    provider_id: Optional[str]
    status: SendStatus
    text_length: int

    @property
    def indexes(self) -> list[str]:
        return [self.tracking_id]

    @property
    def blobs(self) -> list[str]:
        return [
            self.user_id,
            self.conversation_id or "",
            self.display_name,
            self.recipient,
            self.provider_id or "",
            self.status,
        ]

    @property
    def doubles(self) -> list[float]:
        return [float(self.text_length)]


class AnalyticsSink(Protocol):
    async def write_data_point(
        self,
        indexes: Sequence[str],
        blobs: Sequence[str],
        doubles: Sequence[float],
    ) -> None: ...


class PostgresAnalyticsSink:
    """Writes events to the email_send_events table."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    async def write_data_point(
        self,
        indexes: Sequence[str],
        blobs: Sequence[str],
        doubles: Sequence[float],
    ) -> None:
        user_id, conversation_id, display_name, recipient, provider_id, status = blobs
        await self._pool.execute("""
            INSERT INTO email_send_events
                (tracking_id, user_id, conversation_id, display_name,
                 recipient, provider_id, status, text_length)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
        """,
            indexes[0],
            user_id,
            conversation_id,
            display_name,
            recipient,
            provider_id,
            status,
            doubles[0],
        )


def get_default_sink() -> Optional[AnalyticsSink]:
    """Postgres sink when the analytics pool is up, else None."""
    from app.db import get_pool

    pool = get_pool()
    if pool is None:
        return None
    return PostgresAnalyticsSink(pool)


async def record_send_event(sink: Optional[AnalyticsSink], event: SendEvent) -> None:
    if sink is None:
        logger.debug("No analytics sink configured, skipping event %s", event.tracking_id)
        return

    try:
        await sink.write_data_point(event.indexes, event.blobs, event.doubles)
    except Exception as e:
        logger.warning("Failed to record send event %s: %s", event.tracking_id, e)
