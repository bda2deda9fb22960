"""Attribution footer appended to every outbound email.

Each footer names the user the email was sent for and carries a
report-abuse link keyed by the send's tracking id. The text and HTML
variants carry the same content.
"""

from dataclasses import dataclass

from app.config import settings

SEPARATOR = "─" * 31

_HTML_ESCAPES = (
    ("&", "&amp;"),  # must run first
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)


@dataclass(frozen=True)
class Footer:
    text: str
    html: str


def escape_html(unsafe: str) -> str:
    for char, entity in _HTML_ESCAPES:
        unsafe = unsafe.replace(char, entity)
    return unsafe


def report_abuse_url(tracking_id: str, base_url: str | None = None) -> str:
    base = base_url or settings.report_abuse_base_url
    return f"{base}?id={tracking_id}"


def compose_footer(
    user_id: str,
    display_name: str,
    tracking_id: str,
    base_url: str | None = None,
) -> Footer:
    """Build matching plain-text and HTML footers.

    display_name is caller-controlled: it is escaped in the HTML variant
    and left as-is in the text variant.
    """
    url = report_abuse_url(tracking_id, base_url)

    text = (
        "\n\n"
        f"{SEPARATOR}\n"
        f"Sent on behalf of: {display_name} (ID: {user_id})\n"
        "This is an automated email - please do not reply to this address.\n"
        f"Report abuse: {url}\n"
    )

    html = (
        "\n"
        '<hr style="border: none; border-top: 1px solid #e5e7eb; margin: 24px 0;">\n'
        '<p style="font-size: 12px; color: #6b7280; margin: 0;">\n'
        f"\t<strong>Sent on behalf of:</strong> {escape_html(display_name)} (ID: {user_id})<br>\n"
        "\t<em>This is an automated email - please do not reply to this address.</em><br>\n"
        f'\t<a href="{url}" style="color: #3b82f6; text-decoration: none;">Report abuse</a>\n'
        "</p>\n"
    )

    return Footer(text=text, html=html)
