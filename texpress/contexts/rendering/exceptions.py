"""Custom exceptions for the rendering context."""

from typing import Optional


class RenderConstructionError(Exception):
    """
    Exception raised when the layout renderer cannot build a PDF stream.

    Attributes:
        message: Error description
        document_name: Name on the document being rendered, if any
        original_error: The underlying reportlab error, if any
    """

    def __init__(
        self,
        message: str,
        document_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.document_name = document_name
        self.original_error = original_error

        # Build enhanced error message
        parts = [message]

        if document_name:
            parts.append(f"Document: {document_name}")

        if original_error:
            parts.append(f"\nOriginal error: {type(original_error).__name__}: {original_error}")

        super().__init__("\n".join(parts))
