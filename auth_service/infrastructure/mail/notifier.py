# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Hand-off points between reset requests and whatever sends the mail."""

from __future__ import annotations

import itertools
import queue
from dataclasses import dataclass

from auth_service.domain.users.entities import PasswordResetNotification
from auth_service.domain.users.repositories import ResetNotifier
from auth_service.shared.logging import logger


class LoggingResetNotifier(ResetNotifier):
    """Development notifier: records that a reset mail would be sent."""

    def send_reset(self, notification: PasswordResetNotification) -> None:
        logger.info(
            f"mail.reset: would send to={notification.email} "
            f"exp={notification.expires_at.isoformat()} token={notification.token[:6]}…"
        )


@dataclass(slots=True)
class OutboxMessage:
    message_id: int
    notification: PasswordResetNotification


class OutboxResetNotifier(ResetNotifier):
    """Bounded in-process outbox drained by an external mail worker."""

    def __init__(self, max_size: int = 1000) -> None:
        self._queue: queue.Queue[OutboxMessage] = queue.Queue(maxsize=max_size)
        self._ids = itertools.count(1)

    def send_reset(self, notification: PasswordResetNotification) -> None:
        message = OutboxMessage(message_id=next(self._ids), notification=notification)
        try:
            self._queue.put_nowait(message)
        except queue.Full:
            logger.error(f"mail.outbox: full, dropping message_id={message.message_id}")
            return
        logger.debug(f"mail.outbox: put message_id={message.message_id}")

    def drain(self) -> list[OutboxMessage]:
        messages: list[OutboxMessage] = []
        while True:
            try:
                messages.append(self._queue.get_nowait())
            except queue.Empty:
                break
        if messages:
            logger.debug(f"mail.outbox: drained count={len(messages)}")
        return messages

    def __len__(self) -> int:
        return self._queue.qsize()


__all__ = ["LoggingResetNotifier", "OutboxMessage", "OutboxResetNotifier"]
