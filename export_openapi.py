#!/usr/bin/env python3
"""
Write the API's OpenAPI document to a file for the frontend client generator.

Usage:
    python export_openapi.py              # writes openapi.json
    python export_openapi.py -o api.json
"""
import argparse
import json
import sys
from pathlib import Path

from app.main import app


def main() -> int:
    parser = argparse.ArgumentParser(description="Export the OpenAPI schema")
    parser.add_argument("-o", "--output", default="openapi.json", help="Output file (default openapi.json)")
    args = parser.parse_args()

    output = Path(args.output)
    output.write_text(json.dumps(app.openapi(), indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"✅ OpenAPI schema written to {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
