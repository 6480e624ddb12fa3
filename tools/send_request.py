#!/usr/bin/env python3
"""Send a JSON request file to POST /api/chat or /api/generate-image."""

from __future__ import annotations

import argparse
import json
import os
import sys

import httpx

ROUTES = {"chat": "/api/chat", "image": "/api/generate-image"}


def main() -> int:
    parser = argparse.ArgumentParser(description="POST a JSON file to a running Promptsmith service")
    parser.add_argument("kind", choices=sorted(ROUTES), help="Which endpoint to call")
    parser.add_argument("json_file", help="Path to JSON request body")
    parser.add_argument(
        "--url",
        default=os.getenv("PROMPTSMITH_URL", "http://localhost:8000"),
        help="Base URL (default: PROMPTSMITH_URL or http://localhost:8000)",
    )
    parser.add_argument("--timeout", type=float, default=120, help="Request timeout in seconds (default: 120)")
    args = parser.parse_args()

    with open(args.json_file, "rb") as f:
        body = f.read()

    try:
        json.loads(body)
    except json.JSONDecodeError as e:
        print(f"Invalid JSON in {args.json_file}: {e}", file=sys.stderr)
        return 1

    url = f"{args.url.rstrip('/')}{ROUTES[args.kind]}"
    print(f"POST {url} (timeout: {args.timeout}s)", file=sys.stderr)
    try:
        resp = httpx.post(url, content=body, headers={"Content-Type": "application/json"}, timeout=args.timeout)
    except httpx.HTTPError as e:
        print(f"Request failed: {e}", file=sys.stderr)
        return 1

    print(f"HTTP {resp.status_code}", file=sys.stderr)
    print(resp.text)
    return 0 if resp.is_success else 1


if __name__ == "__main__":
    sys.exit(main())
