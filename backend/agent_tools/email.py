"""Email tool: send_email as a LangChain tool for in-process agents.

The tool is built per caller so the platform-supplied identity is bound at
construction time and never exposed as a model-controlled argument.
"""

import json
from typing import Optional

from langchain_core.tools import StructuredTool

from app.schemas.email import CallerContext, SendEmailInput, SendFailure
from app.services.analytics import AnalyticsSink, get_default_sink
from app.services.email_sender import MISSING_FIELDS_ERROR, describe_validation_error, send_email
from app.services.resend import ResendClient


def _validation_failure(e: Exception) -> str:
    """Render an argument validation error as the tool's failure result."""
    errors = e.errors() if hasattr(e, "errors") else []
    if any(err.get("type") == "missing" for err in errors):
        error = MISSING_FIELDS_ERROR
    elif errors:
        error = f"Invalid input: {describe_validation_error(e)}"
    else:
        error = f"Invalid input: {e}"
    return json.dumps(SendFailure(error=error).model_dump())


def build_send_email_tool(
    context: CallerContext,
    client: Optional[ResendClient] = None,
    sink: Optional[AnalyticsSink] = None,
) -> StructuredTool:
    """Build a send_email tool bound to one caller.

    When sink is not given, the process-wide analytics sink is looked up on
    each call (it may be absent). Invalid arguments come back as a failure
    result, the same as from the JSON-RPC endpoint.
    """

    async def _send_email(
        to: str,
        subject_suffix: str,
        text: str,
        html: Optional[str] = None,
    ) -> str:
        result = await send_email(
            {"to": to, "subject_suffix": subject_suffix, "text": text, "html": html},
            context,
            client=client,
            sink=sink if sink is not None else get_default_sink(),
        )
        return json.dumps(result.model_dump())

    return StructuredTool.from_function(
        coroutine=_send_email,
        name="send_email",
        description=(
            "Send an email to a recipient with optional HTML formatting. "
            'The subject is prefixed with "Odel has sent: " and an attribution '
            "footer is appended to the body. Returns a JSON result with "
            "success, id and to, or success false with an error."
        ),
        args_schema=SendEmailInput,
        handle_validation_error=_validation_failure,
    )
