"""Source scanning: file discovery and reading."""

from .models import SourceFile
from .scanner import scan, scan_text_corpus

__all__ = ["SourceFile", "scan", "scan_text_corpus"]
