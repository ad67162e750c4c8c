#!/usr/bin/env python3
"""Tag the prices in an HTML file using a JSON rate table."""
import json
import sys
from pathlib import Path

# Load .env file
from dotenv import load_dotenv
load_dotenv()

from fx_tagger.config import Settings
from fx_tagger.dom.document import LiveDocument
from fx_tagger.dom.engine import RetaggingEngine
from fx_tagger.rates.provider import InMemoryRateProvider
from fx_tagger.utils.logging import setup_logging


def main(html_path: str, rates_path: str, output_path: str | None = None) -> None:
    """Tag one page and write the result next to it (or to ``output_path``)."""
    path = Path(html_path)
    rates_file = Path(rates_path)
    for p in (path, rates_file):
        if not p.exists():
            print(f"Error: File not found: {p}")
            sys.exit(1)

    settings = Settings()
    setup_logging(settings.log_level)

    with open(rates_file) as f:
        rates = InMemoryRateProvider(json.load(f))

    with open(path, encoding="utf-8") as f:
        document = LiveDocument.from_html(f.read())

    engine = RetaggingEngine(document, rates, settings)
    report = engine.scan_pass()

    print(f"Target currency: {settings.target_currency}")
    print(f"Text nodes visited: {report.nodes_visited}")
    print(f"Prices tagged: {report.tags_created}")
    if report.rates_stale:
        print(f"Warning: rates older than {settings.rate_cache_max_age:.0f}s")

    for element in engine.tagged_elements():
        tagged = engine.read_tag(element)
        if tagged is None:
            continue
        converted = tagged.converted
        shown = f"{converted:,.2f} {settings.target_currency}" if converted is not None else "no rate"
        print(f"  {tagged.text!r:>24} -> {shown}")

    out = Path(output_path) if output_path else path.with_suffix(".tagged.html")
    with open(out, "w", encoding="utf-8") as f:
        f.write(document.render())
    print(f"\nTagged page saved to: {out}")


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("Usage: python scripts/tag_html.py <page.html> <rates.json> [output.html]")
        sys.exit(1)

    main(*sys.argv[1:4])
