"""
Contact form controller.

Headless model of the landing page form: validates input with the same rules
as the relay, drives the submit button through
idle -> submitting -> success|error -> idle, and reports every outcome as a
toast. Rendering is left to a FormView implementation.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Mapping, Optional, Protocol

import httpx

from leadrelay.client.notifications import (
    NotificationCenter,
    Scheduler,
    Toast,
    loop_scheduler,
)
from leadrelay.shared.relay.input_validation import validate_name, validate_contact

BUTTON_RESET_SECONDS = 4.0

IDLE_LABEL = "Отправить заявку"
SUBMITTING_LABEL = "Отправляется..."
SUCCESS_LABEL = "✅ Заявка отправлена!"
ERROR_LABEL = "❌ Ошибка отправки"

REQUIRED_FIELDS_MESSAGE = "Пожалуйста, заполните обязательные поля: Имя и Telegram"
INVALID_NAME_MESSAGE = "Пожалуйста, введите корректное имя (только буквы)"
INVALID_CONTACT_MESSAGE = "Пожалуйста, введите корректный Telegram username (например: @username или username)"
SUCCESS_MESSAGE = "Спасибо! Ваша заявка отправлена. Мы свяжемся с вами в Telegram в ближайшее время."
FAILURE_MESSAGE = "Произошла ошибка при отправке заявки. Попробуйте еще раз или напишите нам в Telegram напрямую."


class ButtonState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class SubmitResult:
    success: bool
    message: str


SubmitHandler = Callable[[Mapping[str, str]], Awaitable[SubmitResult]]


class FormView(Protocol):
    """What the controller needs from the page."""

    def on_submit(self, handler: SubmitHandler) -> None: ...

    def set_submit_state(self, state: ButtonState, label: str, disabled: bool) -> None: ...

    def reset_form(self) -> None: ...

    def render_notification(self, toast: Toast) -> None: ...

    def remove_notification(self, toast: Toast) -> None: ...


class FormController:
    def __init__(
        self,
        view: FormView,
        relay_url: str,
        schedule: Scheduler = loop_scheduler,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        idle_label: str = IDLE_LABEL,
    ):
        self.view = view
        self.relay_url = relay_url
        self.schedule = schedule
        self.transport = transport
        self.idle_label = idle_label
        self.notifications = NotificationCenter(view, schedule)
        self.state = ButtonState.IDLE
        # Relay session cookie, kept across submissions
        self.cookies = httpx.Cookies()

    def bind(self) -> None:
        self.view.on_submit(self.submit)

    def _set_state(self, state: ButtonState, label: str, disabled: bool) -> None:
        self.state = state
        self.view.set_submit_state(state, label, disabled)

    def _reset_button(self) -> None:
        self._set_state(ButtonState.IDLE, self.idle_label, disabled=False)

    def _reject(self, message: str) -> SubmitResult:
        self.notifications.show(message, "error")
        return SubmitResult(success=False, message=message)

    async def send_lead(self, name: str, contact: str, message: str) -> SubmitResult:
        """POSTs the lead to the relay. Never raises; failures come back as SubmitResult."""
        try:
            async with httpx.AsyncClient(transport=self.transport, cookies=self.cookies) as client:
                response = await client.post(
                    self.relay_url,
                    json={"name": name, "contact": contact, "message": message},
                )
                self.cookies.update(client.cookies)
            result = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logging.error(f"Backend error: {e}")
            return SubmitResult(success=False, message=f"Ошибка соединения с сервером: {e}")
        except Exception as e:
            logging.error(f"Unexpected error sending lead: {str(e)}", exc_info=True)
            return SubmitResult(success=False, message=f"Ошибка соединения с сервером: {e}")

        if isinstance(result, dict) and result.get("success"):
            return SubmitResult(success=True, message="Заявка успешно отправлена!")

        relay_message = result.get("message") if isinstance(result, dict) else None
        relay_message = relay_message or "Ошибка отправки"
        logging.error(f"Backend error: {relay_message}")
        return SubmitResult(success=False, message=f"Ошибка соединения с сервером: {relay_message}")

    async def submit(self, form: Mapping[str, str]) -> SubmitResult:
        """
        Handle one form submission.

        Validation failures show an error toast and make no request. Otherwise
        the button is disabled for the request and returns to idle
        BUTTON_RESET_SECONDS after the outcome is shown.
        """
        if self.state != ButtonState.IDLE:
            return SubmitResult(success=False, message="Заявка уже отправляется")

        name = (form.get("name") or "").strip()
        contact = (form.get("contact") or "").strip()
        message = (form.get("message") or "").strip()

        if not name or not contact:
            return self._reject(REQUIRED_FIELDS_MESSAGE)

        if not validate_name(name):
            return self._reject(INVALID_NAME_MESSAGE)

        if not validate_contact(contact):
            return self._reject(INVALID_CONTACT_MESSAGE)

        self._set_state(ButtonState.SUBMITTING, SUBMITTING_LABEL, disabled=True)

        result = await self.send_lead(name, contact, message)

        if result.success:
            self._set_state(ButtonState.SUCCESS, SUCCESS_LABEL, disabled=True)
            self.view.reset_form()
            self.notifications.show(SUCCESS_MESSAGE, "success")
        else:
            self._set_state(ButtonState.ERROR, ERROR_LABEL, disabled=True)
            self.notifications.show(FAILURE_MESSAGE, "error")

        self.schedule(BUTTON_RESET_SECONDS, self._reset_button)
        return result
