"""Tool contract for send_email: input, caller context, and result shapes."""

from typing import Any, Literal, Mapping, Optional, Union

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator

ANONYMOUS_USER_ID = "anonymous"
ANONYMOUS_DISPLAY_NAME = "Anonymous User"


class SendEmailInput(BaseModel):
    to: str = Field(description="Recipient email address", json_schema_extra={"format": "email"})
    subject_suffix: str = Field(
        min_length=1,
        description='Email subject suffix (will be prefixed with "Odel has sent: ")',
    )
    text: str = Field(description="Plain text email body")
    html: Optional[str] = Field(
        default=None,
        description="Optional HTML email body for rich formatting",
    )

    @field_validator("to")
    @classmethod
    def _check_address(cls, value: str) -> str:
        # Bare addresses only; the value is passed to Resend exactly as given
        if "<" in value or ">" in value:
            raise ValueError("value is not a valid email address: display names are not allowed")
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(f"value is not a valid email address: {e}") from e
        return value


class CallerContext(BaseModel):
    """Identity of the invoking user, supplied by the platform (not the caller)."""

    user_id: str = ANONYMOUS_USER_ID
    display_name: str = ANONYMOUS_DISPLAY_NAME
    conversation_id: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Optional[Mapping[str, Any]]) -> "CallerContext":
        """Build from a platform context object, filling defaults for blank fields.

        Accepts both camelCase (wire) and snake_case keys.
        """
        if not isinstance(raw, Mapping):
            raw = {}
        user_id = raw.get("userId") or raw.get("user_id")
        display_name = raw.get("displayName") or raw.get("display_name")
        conversation_id = raw.get("conversationId") or raw.get("conversation_id")
        return cls(
            user_id=str(user_id) if user_id else ANONYMOUS_USER_ID,
            display_name=str(display_name) if display_name else ANONYMOUS_DISPLAY_NAME,
            conversation_id=str(conversation_id) if conversation_id else None,
        )


class SendSuccess(BaseModel):
    success: Literal[True] = True
    id: str = Field(description="Resend email ID for tracking")
    to: str = Field(description="Confirmed recipient email address")


class SendFailure(BaseModel):
    success: Literal[False] = False
    error: str


SendResult = Union[SendSuccess, SendFailure]
