"""
Sales Page Extractor

Modules:
    models      - Data models (ExtractionResult, ErrorInfo)
    common      - Shared utilities (text normalization, config loader, logging)
    extraction  - Field extractor chain, fetchers, result cache, SalesPageExtractor
    chat        - Keyword and completion-backed answers about a sales page
"""
