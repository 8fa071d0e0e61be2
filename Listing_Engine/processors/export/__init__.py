from .formatters import (
    document_bytes,
    suggested_filename,
    to_html,
    to_html_document,
    to_markdown,
)

__all__ = ["to_markdown", "to_html", "to_html_document", "suggested_filename", "document_bytes"]
