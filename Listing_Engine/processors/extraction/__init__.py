"""
Extraction Pipeline — raw user input -> ProductRecord.

    detect_input_mode()  -> url | html | text  (priority HTML > URL > text)
    extract()            -> ProductRecord, or raises ExtractionFailure
"""
from .input_detector import detect_input_mode
from .extractor import extract, parse_html_content, parse_text_content, scrape_url

__all__ = [
    "detect_input_mode",
    "extract", "scrape_url", "parse_html_content", "parse_text_content",
]
