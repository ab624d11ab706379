"""
Transient toast notifications for the landing page form.

Only one toast is visible at a time. A toast disappears after
AUTO_DISMISS_SECONDS or when the visitor clicks it.
"""

import asyncio
import itertools
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

AUTO_DISMISS_SECONDS = 5.0

SEVERITY_COLORS = {
    "success": "#10b981",
    "error": "#ef4444",
    "info": "#3b82f6",
}


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]


def loop_scheduler(delay: float, callback: Callable[[], None]) -> TimerHandle:
    """Default scheduler: runs callback on the running event loop after delay seconds."""
    return asyncio.get_running_loop().call_later(delay, callback)


@dataclass
class Toast:
    id: int
    message: str
    severity: str
    color: str


class NotificationView(Protocol):
    def render_notification(self, toast: Toast) -> None: ...

    def remove_notification(self, toast: Toast) -> None: ...


class NotificationCenter:
    def __init__(self, view: NotificationView, schedule: Scheduler = loop_scheduler):
        self.view = view
        self.schedule = schedule
        self.current: Optional[Toast] = None
        self._timer: Optional[TimerHandle] = None
        self._ids = itertools.count(1)

    def show(self, message: str, severity: str = "info") -> Toast:
        """Replaces any visible toast with a new one and arms its auto-dismiss timer."""
        if self.current is not None:
            self.dismiss(self.current)

        if severity not in SEVERITY_COLORS:
            severity = "info"
        toast = Toast(
            id=next(self._ids),
            message=message,
            severity=severity,
            color=SEVERITY_COLORS[severity],
        )
        self.current = toast
        self.view.render_notification(toast)
        self._timer = self.schedule(AUTO_DISMISS_SECONDS, lambda: self.dismiss(toast))
        return toast

    def dismiss(self, toast: Toast) -> None:
        """Removes toast if it is still the visible one. Also used as the click handler."""
        if self.current is None or self.current.id != toast.id:
            return
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.current = None
        self.view.remove_notification(toast)
