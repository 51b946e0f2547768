"""
Pydantic model for the input document handed to the extraction core.
"""

import logging
from typing import Optional

import html2text
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class Document(BaseModel):
    """
    Plain-text receipt candidate plus optional email metadata.

    Created once per email/PDF by the fetching collaborator and consumed
    read-only. `date` and `message_id` only feed the dedup fingerprint;
    `filename` only feeds the filename fallback strategy.
    """
    text: str = ""
    subject: Optional[str] = None
    sender: Optional[str] = None
    filename: Optional[str] = None
    html_source: Optional[str] = None
    date: Optional[str] = None
    message_id: Optional[str] = None

    class Config:
        frozen = True

    @classmethod
    def from_html(cls, html_content: str, **metadata) -> "Document":
        """
        Build a Document from an HTML email body.

        The HTML is converted to markdown-ish plain text and the raw HTML is
        kept in `html_source`.
        """
        return cls(text=html_to_text(html_content), html_source=html_content, **metadata)


def html_to_text(html_content: str) -> str:
    """
    Convert HTML email to clean text.

    Args:
        html_content: HTML string

    Returns:
        Plain text version
    """
    h = html2text.HTML2Text()
    h.ignore_links = False
    h.ignore_images = True
    h.ignore_emphasis = False
    h.body_width = 0  # Don't wrap lines

    try:
        return h.handle(html_content)
    except (ValueError, AssertionError) as e:
        logger.warning("Error converting HTML to text", extra={
            "error": str(e)
        })
        return html_content
