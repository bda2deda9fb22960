"""
send_email handler: footer -> Resend -> analytics -> normalized result.

Stateless per call. Every dependency (provider client, analytics sink,
settings) is passed in or built for the call. Nothing raised below this
function reaches the caller: every outcome is a SendSuccess or SendFailure.
"""

import logging
from typing import Any, Mapping, Optional, Union

from opentelemetry.trace import Status, StatusCode
from pydantic import ValidationError

from app.config import Settings, settings
from app.schemas.email import (
    CallerContext,
    SendEmailInput,
    SendFailure,
    SendResult,
    SendSuccess,
)
from app.services.analytics import AnalyticsSink, SendEvent, record_send_event
from app.services.footer import compose_footer
from app.services.resend import ProviderFailure, ProviderResult, ResendClient
from app.services.telemetry import FAILURE_KIND_KEY, STATUS_KEY, TRACKING_ID_KEY, get_tracer
from app.services.tracking import new_tracking_id

logger = logging.getLogger(__name__)

MISSING_FIELDS_ERROR = "Missing required fields: to, subject_suffix, and text are required"


def build_subject(subject_suffix: str, prefix: Optional[str] = None) -> str:
    if prefix is None:
        prefix = settings.subject_prefix
    return f"{prefix}: {subject_suffix}"


def _missing_required(args: Mapping[str, Any]) -> bool:
    # text may be empty, but must be present
    return not args.get("to") or not args.get("subject_suffix") or args.get("text") is None


def describe_validation_error(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else err.get("msg", "invalid"))
    return "; ".join(parts)


async def _dispatch(
    request: SendEmailInput,
    context: CallerContext,
    tracking_id: str,
    client: ResendClient,
    config: Settings,
) -> ProviderResult:
    footer = compose_footer(
        context.user_id,
        context.display_name,
        tracking_id,
        config.report_abuse_base_url,
    )
    full_text = request.text + footer.text
    full_html = request.html + footer.html if request.html else None
    subject = build_subject(request.subject_suffix, config.subject_prefix)

    return await client.send(
        config.email_from,
        request.to,
        subject,
        full_text,
        full_html,
    )


async def send_email(
    arguments: Union[SendEmailInput, Mapping[str, Any], None],
    context: Optional[CallerContext] = None,
    *,
    client: Optional[ResendClient] = None,
    sink: Optional[AnalyticsSink] = None,
    config: Optional[Settings] = None,
) -> SendResult:
    """Send one email on behalf of the caller.

    Exactly one provider request is made for valid input, and exactly one
    analytics event is recorded after it settles. Invalid input returns a
    failure without contacting the provider or the sink.
    """
    config = config or settings
    context = context or CallerContext()

    if isinstance(arguments, SendEmailInput):
        args: dict[str, Any] = arguments.model_dump()
    elif isinstance(arguments, Mapping):
        args = dict(arguments)
    else:
        args = {}

    if _missing_required(args):
        logger.info("Rejected send_email for user %s: missing required fields", context.user_id)
        return SendFailure(error=MISSING_FIELDS_ERROR)

    try:
        request = SendEmailInput.model_validate(args)
    except ValidationError as e:
        logger.info("Rejected send_email for user %s: invalid input", context.user_id)
        return SendFailure(error=f"Invalid input: {describe_validation_error(e)}")

    client = client or ResendClient(
        config.resend_api_key,
        base_url=config.resend_api_url,
        timeout=config.resend_timeout_seconds,
    )
    text_length = len(request.text)

    with get_tracer().start_as_current_span("send_email") as span:
        tracking_id = new_tracking_id()
        span.set_attribute(TRACKING_ID_KEY, tracking_id)

        error: Optional[str] = None
        provider_id: Optional[str] = None
        try:
            outcome = await _dispatch(request, context, tracking_id, client, config)
            if isinstance(outcome, ProviderFailure):
                span.set_attribute(FAILURE_KIND_KEY, outcome.kind)
                error = outcome.message
            else:
                provider_id = outcome.id
        except Exception as e:
            logger.exception("Unexpected error sending email %s", tracking_id)
            span.set_attribute(FAILURE_KIND_KEY, "internal_error")
            error = str(e) or type(e).__name__

        if error is None:
            span.set_attribute(STATUS_KEY, "sent")
            logger.info("Email %s sent to %s (resend id %s)", tracking_id, request.to, provider_id)
            await record_send_event(sink, SendEvent(
                tracking_id=tracking_id,
                user_id=context.user_id,
                conversation_id=context.conversation_id,
                display_name=context.display_name,
                recipient=request.to,
                provider_id=provider_id,
                status="sent",
                text_length=text_length,
            ))
            return SendSuccess(id=provider_id, to=request.to)

        span.set_attribute(STATUS_KEY, "failed")
        span.set_status(Status(StatusCode.ERROR, error))
        logger.warning("Email %s to %s failed: %s", tracking_id, request.to, error)

        # No provider id exists to correlate with, so the failure event gets its own key
        await record_send_event(sink, SendEvent(
            tracking_id=new_tracking_id(),
            user_id=context.user_id,
            conversation_id=context.conversation_id,
            display_name=context.display_name,
            recipient=request.to,
            provider_id=None,
            status="failed",
            text_length=text_length,
        ))
        return SendFailure(error=f"Failed to send email: {error}")
