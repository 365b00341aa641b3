"""Documentation comment extraction for srclens."""

from docs.extract import DocExtractor, comment_above
from docs.markup import process_comment_markup

__all__ = ["DocExtractor", "comment_above", "process_comment_markup"]
