#!/usr/bin/env python3
"""
Sales Page Extraction

Extracts product data from a single sales page and prints a report.
Optionally answers a shopper question about the page.

Usage:
    python3 extract_page.py --url https://example.com/oferta
    python3 extract_page.py --url https://example.com/oferta --render-js --verbose
    python3 extract_page.py --url https://example.com/oferta --ask "Qual o preço?"
    python3 extract_page.py --url https://example.com/oferta --no-cache-failures
"""

import argparse
import json
import os
import sys

from dotenv import load_dotenv

from salespage.chat import ChatService
from salespage.common import load_settings, setup_logging
from salespage.extraction import SalesPageExtractor
from salespage.models import ExtractionResult


def print_report(result: ExtractionResult):
    """Print extraction report."""

    print("\n" + "=" * 80)
    print("EXTRACTION REPORT")
    print("=" * 80)

    print(f"\nURL: {result.source_url}")
    if result.final_url != result.source_url:
        print(f"Final URL: {result.final_url}")
    print(f"Extracted at: {result.extracted_at.isoformat()}")

    if result.error:
        print(f"\nFAILED ({result.error.kind}): {result.error.message}")
        print("Fields below are fallback values.")

    print("\n" + "-" * 80)
    print("FIELDS")
    print("-" * 80)

    fields = [
        ("Title", result.title),
        ("Price", result.price),
        ("Call to action", result.call_to_action),
    ]
    for label, value in fields:
        print(f"  {label:16} {value}")

    description = result.description
    print(f"\n  Description ({len(description)} characters):")
    print(f"    {description[:200]}..." if len(description) > 200 else f"    {description}")

    print(f"\nBENEFITS ({len(result.benefits)} items):")
    for idx, benefit in enumerate(result.benefits, 1):
        print(f"  {idx}. {benefit}")

    print(f"\nTESTIMONIALS ({len(result.testimonials)} items):")
    for idx, testimonial in enumerate(result.testimonials, 1):
        print(f"  {idx}. {testimonial[:100]}..." if len(testimonial) > 100 else f"  {idx}. {testimonial}")

    print("\n" + "=" * 80)


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Extract product data from a sales page"
    )
    parser.add_argument(
        "--url",
        required=True,
        help="Sales page URL"
    )
    parser.add_argument(
        "--render-js",
        action="store_true",
        help="Render the page in headless Chromium before extracting"
    )
    parser.add_argument(
        "--ask",
        metavar="QUESTION",
        help="Answer a shopper question about the page"
    )
    parser.add_argument(
        "--output-json",
        help="Write the extraction result as JSON to this path"
    )
    parser.add_argument(
        "--no-cache-failures",
        action="store_true",
        help="Never cache failed extractions (overrides SALESPAGE_CACHE_FAILURES)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logging (strategy matches, cache activity)"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors"
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    settings = load_settings()
    if args.no_cache_failures:
        settings["cache_failures"] = False
    extractor = SalesPageExtractor(settings=settings)

    result = extractor.extract(args.url, render_js=args.render_js or None)
    print_report(result)

    if args.output_json:
        directory = os.path.dirname(args.output_json)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(args.output_json, 'w', encoding='utf-8') as f:
            json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
        print(f"\nResult saved to: {args.output_json}")

    if args.ask:
        chat = ChatService(extractor)
        print(f"\nQ: {args.ask}")
        print(f"A: {chat.answer(args.url, args.ask)}")

    sys.exit(0 if result.succeeded else 1)


if __name__ == "__main__":
    main()
