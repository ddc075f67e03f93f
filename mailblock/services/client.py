"""Async client for the Mailblock transactional email API."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

import httpx

from mailblock.config import settings
from mailblock.errors import (
    DEFAULT_SUGGESTION,
    NETWORK_SUGGESTION,
    ConfigurationError,
    EmailValidationError,
    ErrorType,
    categorize_error,
    get_error_suggestion,
)
from mailblock.schemas.common import ErrorEnvelope, ResultEnvelope, SuccessEnvelope
from mailblock.services.builder import EmailBuilder
from mailblock.utils.email_validator import (
    to_wire_timestamp,
    validate_email_id,
    validate_email_ids,
    validate_send_request,
    validate_update_request,
)
from mailblock.utils.redaction import mask_addresses, redact_payload

logger = logging.getLogger(__name__)

SEND_PATH = "/v1/send-email"
CANCEL_PATH = "/v1/cancel-email"
UPDATE_PATH = "/v1/update-scheduled-email"

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(number: int) -> str:
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits)) or "0"


def generate_request_id() -> str:
    """
    Build a correlation id for logs and the X-Request-ID header.

    Time-based with a random prefix; fine for log correlation, not unique
    enough to serve as an idempotency key.
    """
    return f"req_{uuid4().hex[:9]}{_to_base36(int(time.time() * 1000))}"


@dataclass
class RequestContext:
    """Per-call correlation and timing state."""

    request_id: str = field(default_factory=generate_request_id)
    started: float = field(default_factory=time.monotonic)
    timestamp: str = field(
        default_factory=lambda: to_wire_timestamp(datetime.now(timezone.utc))
    )

    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self.started) * 1000)


SuccessHandler = Callable[[Any], tuple[Any, str]]


class Mailblock:
    """
    Client for sending, cancelling and rescheduling emails.

    Every operation returns a result envelope instead of raising; only
    construction with a bad API key raises.

    Args:
        api_key: API key; falls back to MAILBLOCK_API_KEY
        debug: Emit diagnostic log entries; falls back to MAILBLOCK_DEBUG
        logger: Sink with debug/info/error methods (default: stdlib logger)
        base_url: Backend URL; falls back to MAILBLOCK_BASE_URL
        http_client: httpx.AsyncClient to send requests through. When
            omitted the client creates and owns one.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        debug: bool | None = None,
        logger: Any = None,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        if api_key is None:
            api_key = settings.MAILBLOCK_API_KEY
        if not api_key:
            raise ConfigurationError("API key is required")
        if not isinstance(api_key, str) or not api_key.strip():
            raise ConfigurationError("API key must be a non-empty string")

        self.api_key = api_key.strip()
        self.base_url = base_url.rstrip("/") if base_url else settings.base_url
        self.debug = settings.MAILBLOCK_DEBUG if debug is None else debug
        self.logger = logger or logging.getLogger("mailblock.client")

        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=settings.MAILBLOCK_HTTP_TIMEOUT
        )

    async def __aenter__(self) -> "Mailblock":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP transport if this client created it."""
        if self._owns_http:
            await self._http.aclose()

    def email(self) -> EmailBuilder:
        """Start a fluent send request bound to this client."""
        return EmailBuilder(self)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def send_email(
        self,
        to: str | list[str] | None = None,
        from_: str | None = None,
        subject: str | None = None,
        text: str | None = None,
        html: str | None = None,
        cc: str | list[str] | None = None,
        bcc: str | list[str] | None = None,
        scheduled_at: datetime | str | None = None,
    ) -> ResultEnvelope:
        """
        Send an email now, or schedule it when scheduled_at is given.

        Returns:
            SuccessEnvelope with the backend's email record, or ErrorEnvelope
        """
        ctx = RequestContext()
        subject_preview = subject[:50] + "..." if isinstance(subject, str) else None
        self._log(
            "info",
            "Initiating email send request",
            request_id=ctx.request_id,
            to=mask_addresses(to),
            from_=mask_addresses(from_),
            subject=subject_preview,
        )

        try:
            payload = validate_send_request(
                to=to,
                from_=from_,
                subject=subject,
                text=text,
                html=html,
                cc=cc,
                bcc=bcc,
                scheduled_at=scheduled_at,
            )
        except EmailValidationError as e:
            return self._validation_failure(ctx, e)

        verb = "scheduled" if payload.is_scheduled else "sent"

        def on_success(result: Any) -> tuple[Any, str]:
            data = _normalize_send_result(result)
            self._log(
                "info",
                f"Email {verb} successfully",
                request_id=ctx.request_id,
                duration=f"{ctx.elapsed_ms()}ms",
                email_id=data.get("id"),
                success_count=data.get("success_count"),
                total_recipients=data.get("total_recipients"),
            )
            return data, f"Email {verb} successfully"

        return await self._execute(
            ctx,
            "POST",
            SEND_PATH,
            action="send email",
            label="Email",
            payload=payload.to_wire(),
            on_success=on_success,
        )

    async def cancel_email(self, email_id: str | int) -> ResultEnvelope:
        """Cancel a single scheduled email."""
        ctx = RequestContext()
        self._log(
            "info",
            "Initiating email cancellation request",
            request_id=ctx.request_id,
            email_id=email_id,
        )

        try:
            validate_email_id(email_id)
        except EmailValidationError as e:
            return self._validation_failure(ctx, e)

        def on_success(result: Any) -> tuple[Any, str]:
            body = result if isinstance(result, dict) else {}
            self._log(
                "info",
                "Email cancelled successfully",
                request_id=ctx.request_id,
                duration=f"{ctx.elapsed_ms()}ms",
                email_id=body.get("email_id"),
                previous_status=body.get("previous_status"),
                current_status=body.get("current_status"),
            )
            return result, "Email cancelled successfully"

        return await self._execute(
            ctx,
            "POST",
            f"{CANCEL_PATH}/{email_id}",
            action="cancel email",
            label="Cancellation",
            on_success=on_success,
        )

    async def cancel_emails(self, email_ids: list[str | int]) -> ResultEnvelope:
        """Cancel several scheduled emails in one request."""
        ctx = RequestContext()
        self._log(
            "info",
            "Initiating bulk email cancellation request",
            request_id=ctx.request_id,
            email_ids=email_ids,
            count=len(email_ids) if isinstance(email_ids, (list, tuple)) else None,
        )

        try:
            ids = validate_email_ids(email_ids)
        except EmailValidationError as e:
            return self._validation_failure(ctx, e)

        def on_success(result: Any) -> tuple[Any, str]:
            body = result if isinstance(result, dict) else {}
            self._log(
                "info",
                "Bulk email cancellation completed",
                request_id=ctx.request_id,
                duration=f"{ctx.elapsed_ms()}ms",
                success_count=body.get("success_count"),
                error_count=body.get("error_count"),
                total_requested=len(ids),
            )
            message = (
                body.get("message")
                or f"Cancelled {body.get('success_count')} of {len(ids)} emails"
            )
            return result, message

        return await self._execute(
            ctx,
            "POST",
            CANCEL_PATH,
            action="cancel emails",
            label="Bulk cancellation",
            payload={"email_ids": ids},
            on_success=on_success,
        )

    async def update_scheduled_email(
        self,
        email_id: str | int,
        updates: dict[str, Any],
    ) -> ResultEnvelope:
        """
        Patch a scheduled email's subject, bodies or delivery time.

        A scheduled_at of None unschedules the email. On failure the
        envelope carries the backend's current_status when reported, so
        callers can tell whether the email already went out.
        """
        ctx = RequestContext()
        self._log(
            "info",
            "Initiating scheduled email update request",
            request_id=ctx.request_id,
            email_id=email_id,
            updates=list(updates) if isinstance(updates, dict) else None,
        )

        try:
            payload = validate_update_request(email_id, updates)
        except EmailValidationError as e:
            return self._validation_failure(ctx, e)

        def on_success(result: Any) -> tuple[Any, str]:
            body = result if isinstance(result, dict) else {}
            email = body.get("email")
            if not isinstance(email, dict):
                email = {}
            self._log(
                "info",
                "Scheduled email updated successfully",
                request_id=ctx.request_id,
                duration=f"{ctx.elapsed_ms()}ms",
                email_id=email.get("id"),
                status=email.get("status"),
                tracking_updated=body.get("tracking_updated"),
                job_rescheduled=body.get("job_rescheduled"),
            )
            data = {
                "message": body.get("message"),
                "email": body.get("email"),
                "tracking_updated": body.get("tracking_updated"),
                "job_rescheduled": body.get("job_rescheduled"),
            }
            return data, "Email updated successfully"

        return await self._execute(
            ctx,
            "PUT",
            f"{UPDATE_PATH}/{email_id}",
            action="update scheduled email",
            label="Update",
            payload=payload.to_wire(),
            on_success=on_success,
        )

    # ------------------------------------------------------------------
    # Shared request handling
    # ------------------------------------------------------------------

    def _headers(self, request_id: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
            "X-Request-ID": request_id,
        }

    async def _execute(
        self,
        ctx: RequestContext,
        method: str,
        path: str,
        *,
        action: str,
        label: str,
        on_success: SuccessHandler,
        payload: dict[str, Any] | None = None,
    ) -> ResultEnvelope:
        """
        Perform one HTTP exchange and normalize its outcome.

        Args:
            ctx: Correlation and timing state for this call
            method: HTTP method
            path: Path below the base URL
            action: Verb phrase used in exception messages ("send email")
            label: Prefix for diagnostic log entries
            on_success: Maps the decoded 2xx body to (data, message)
            payload: JSON body, if any

        Returns:
            SuccessEnvelope or ErrorEnvelope; never raises
        """
        endpoint = f"{self.base_url}{path}"
        self._log(
            "debug",
            f"Sending {label.lower()} API request",
            request_id=ctx.request_id,
            endpoint=endpoint,
            payload=redact_payload(payload),
        )

        try:
            response = await self._http.request(
                method,
                endpoint,
                headers=self._headers(ctx.request_id),
                json=payload,
            )

            self._log(
                "debug",
                f"{label} API response received",
                request_id=ctx.request_id,
                status_code=response.status_code,
                duration=f"{ctx.elapsed_ms()}ms",
                success=response.is_success,
            )

            if not response.is_success:
                return self._http_failure(ctx, response, endpoint, label)

            data, message = on_success(response.json())

        except httpx.TransportError as e:
            return self._exception_failure(ctx, e, ErrorType.NETWORK_ERROR, action, endpoint, label)

        except Exception as e:
            return self._exception_failure(ctx, e, ErrorType.UNKNOWN_ERROR, action, endpoint, label)

        return SuccessEnvelope(
            data=data,
            message=message,
            request_id=ctx.request_id,
            timestamp=ctx.timestamp,
            duration=ctx.elapsed_ms(),
        )

    def _http_failure(
        self,
        ctx: RequestContext,
        response: httpx.Response,
        endpoint: str,
        label: str,
    ) -> ErrorEnvelope:
        """Classify a non-2xx response."""
        result = _decode_error_body(response)
        status_code = response.status_code
        error_type = categorize_error(status_code)
        error_message = result.get("error") or f"HTTP error! status: {status_code}"
        suggestion = get_error_suggestion(status_code)

        self._log(
            "error",
            f"{label} API request failed",
            request_id=ctx.request_id,
            error=error_message,
            status_code=status_code,
            error_type=error_type.value,
            suggestion=suggestion,
            current_status=result.get("current_status"),
        )

        extra: dict[str, Any] = {}
        if result.get("current_status") is not None:
            extra["current_status"] = result["current_status"]

        return ErrorEnvelope(
            error=str(error_message),
            error_type=error_type,
            suggestion=suggestion,
            status_code=status_code,
            endpoint=endpoint,
            request_id=ctx.request_id,
            timestamp=ctx.timestamp,
            duration=ctx.elapsed_ms(),
            **extra,
        )

    def _exception_failure(
        self,
        ctx: RequestContext,
        exc: Exception,
        error_type: ErrorType,
        action: str,
        endpoint: str,
        label: str,
    ) -> ErrorEnvelope:
        """Classify a failure where no usable HTTP response was obtained."""
        duration = ctx.elapsed_ms()
        self._log(
            "error",
            f"{label} request failed with exception",
            request_id=ctx.request_id,
            error=str(exc) or type(exc).__name__,
            error_type=error_type.value,
            duration=f"{duration}ms",
        )

        suggestion = (
            NETWORK_SUGGESTION if error_type is ErrorType.NETWORK_ERROR else DEFAULT_SUGGESTION
        )
        return ErrorEnvelope(
            error=f"Failed to {action}: {str(exc) or type(exc).__name__}",
            error_type=error_type,
            suggestion=suggestion,
            status_code=None,
            endpoint=endpoint,
            request_id=ctx.request_id,
            timestamp=ctx.timestamp,
            duration=duration,
        )

    def _validation_failure(
        self,
        ctx: RequestContext,
        exc: EmailValidationError,
    ) -> ErrorEnvelope:
        """Report a local validation failure; no request was sent."""
        self._log(
            "error",
            "Request validation failed",
            request_id=ctx.request_id,
            error=str(exc),
        )
        return ErrorEnvelope(
            error=str(exc),
            error_type=ErrorType.VALIDATION_ERROR,
            status_code=None,
            request_id=ctx.request_id,
            timestamp=ctx.timestamp,
            duration=ctx.elapsed_ms(),
        )

    def _log(self, level: str, message: str, **context: Any) -> None:
        """Write a diagnostic entry to the sink when debug is enabled."""
        if not self.debug:
            return

        details = " ".join(
            f"{key.rstrip('_')}={value}" for key, value in context.items() if value is not None
        )
        line = f"Mailblock {level.upper()}: {message}"
        if details:
            line = f"{line} {details}"

        try:
            getattr(self.logger, level)(line)
        except Exception:
            logger.debug("Diagnostic log sink raised", exc_info=True)


def _decode_error_body(response: httpx.Response) -> dict[str, Any]:
    """Decode an error body, treating anything but a JSON object as empty."""
    try:
        result = response.json()
    except ValueError:
        return {}
    return result if isinstance(result, dict) else {}


def _normalize_send_result(result: Any) -> dict[str, Any]:
    """
    Flatten either backend response shape into the send result data.

    Batched responses wrap the email record in results[0] and carry
    aggregate counters at the top level; older responses are flat.
    """
    if not isinstance(result, dict):
        result = {}
    results = result.get("results")
    if isinstance(results, list) and results and isinstance(results[0], dict):
        email = results[0]
    else:
        email = result

    data = {
        "id": email.get("id"),
        "status": email.get("status"),
        "to": email.get("to"),
        "cc": email.get("cc"),
        "bcc": email.get("bcc"),
        "success_count": result.get("success_count"),
        "error_count": result.get("error_count"),
        "total_recipients": result.get("total_recipients"),
        "usage": result.get("usage"),
    }
    return {key: value for key, value in data.items() if value is not None}
