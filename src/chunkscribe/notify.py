"""User-facing notifications. Fire-and-forget."""

from __future__ import annotations

from typing import Any, Protocol

from chunkscribe.utils.progress import log, log_warning


class NotificationSender(Protocol):
    def notify(
        self,
        title: str,
        body: str,
        *,
        identifier: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None: ...


class ConsoleNotifier:
    """Prints notifications to the console."""

    def notify(
        self,
        title: str,
        body: str,
        *,
        identifier: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        log(f"[bold magenta]{title}[/bold magenta] {body}", style="")


def notify_safely(
    sender: NotificationSender | None,
    title: str,
    body: str,
    *,
    identifier: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> None:
    """Send a notification; delivery errors are logged, never raised."""
    if sender is None:
        return
    try:
        sender.notify(title, body, identifier=identifier, metadata=metadata)
    except Exception as e:
        log_warning(f"Notification '{title}' could not be delivered: {e}")
