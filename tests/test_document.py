import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from receiptsieve.models.document import Document, html_to_text
from pydantic import ValidationError
import pytest


RECEIPT_HTML = """\
<html><body>
<h1>Thanks for your order</h1>
<p>Order Total: <b>$52.30</b></p>
<img src="logo.png" alt="logo">
</body></html>
"""


class TestDocument:

    def test_from_html_keeps_source(self):
        document = Document.from_html(RECEIPT_HTML, subject="Your receipt", sender="shop@example.com")

        assert "Order Total" in document.text
        assert "$52.30" in document.text
        assert "<b>" not in document.text
        assert document.html_source == RECEIPT_HTML
        assert document.subject == "Your receipt"

    def test_images_dropped(self):
        assert "logo.png" not in html_to_text(RECEIPT_HTML)

    def test_immutable(self):
        document = Document(text="hello")
        with pytest.raises(ValidationError):
            document.text = "changed"

    def test_defaults(self):
        document = Document()
        assert document.text == ""
        assert document.sender is None
