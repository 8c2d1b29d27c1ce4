#!/usr/bin/env python3
"""Render the fallback gallery: one PNG per catalog home × style.

Usage:
    # Against a local server with a real AI key:
    uv run python scripts/render_fallback_catalog.py --url http://localhost:3001 \
        --out ../client/public/gallery

    # Only some styles:
    uv run python scripts/render_fallback_catalog.py --url http://localhost:3001 \
        --out gallery --style lofi --style lego

Calls POST /generate-v2 with each home's real address and writes
`{home-id}-{style}.png`, the layout FallbackCatalog.default() points at.
Existing files are skipped unless --force is given.

The server's generation limit applies (5/min by default); the script
waits between requests instead of tripping it.
"""

from __future__ import annotations

import argparse
import base64
import sys
import time
from pathlib import Path

import httpx

from diorama.pipeline.fallback_catalog import FallbackCatalog, FallbackHome


def wait_for_server(
    client: httpx.Client, *, timeout_s: int = 60, poll_interval_s: int = 2
) -> bool:
    """Poll /health until it returns 200 or timeout expires."""
    print(f"⏳ Waiting for server (timeout: {timeout_s}s)...")
    start = time.perf_counter()
    while time.perf_counter() - start < timeout_s:
        try:
            resp = client.get("/health", timeout=5)
            if resp.status_code == 200:
                body = resp.json()
                if not body.get("hasGoogleAIKey"):
                    print("❌ Server has no AI key; it would only return mock results.")
                    return False
                print("✅ Server ready")
                return True
        except httpx.RequestError as e:
            print(f"   Connection failed ({e}), retrying...")
        time.sleep(poll_interval_s)

    print("❌ Server did not become ready within timeout.")
    return False


def render(client: httpx.Client, home: FallbackHome, style_id: str) -> bytes | None:
    """One /generate-v2 call. Returns PNG bytes, or None on any failure."""
    try:
        resp = client.post(
            "/generate-v2",
            json={"address": home.address, "styleId": style_id},
            timeout=180,
        )
    except httpx.RequestError as e:
        print(f"   ⚠️ Request failed: {e}")
        return None

    if resp.status_code != 200:
        print(f"   ⚠️ HTTP {resp.status_code}: {resp.text[:200]}")
        return None

    body = resp.json()
    # A famous home can itself be blurred or uncovered; a gallery image of a
    # gallery image is useless
    if body.get("model") == "fallback":
        print("   ⚠️ Server substituted a fallback home")
        return None
    image = body.get("generatedImage") or {}
    if not image.get("base64"):
        print("   ⚠️ No image in response (mock mode?)")
        return None
    return base64.b64decode(image["base64"])


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--url", required=True, help="Server base URL (e.g. http://localhost:3001)")
    parser.add_argument("--out", required=True, type=Path, help="Output directory for PNGs")
    parser.add_argument(
        "--style",
        action="append",
        default=[],
        help="Render only this style (repeatable). Default: every catalog style.",
    )
    parser.add_argument("--force", action="store_true", help="Overwrite existing PNGs")
    parser.add_argument(
        "--interval",
        type=float,
        default=13.0,
        help="Seconds between generation requests (default: 13, stays under 5/min)",
    )
    args = parser.parse_args()

    catalog = FallbackCatalog.default()
    styles = args.style or catalog.styles()
    jobs = [
        (home, style_id)
        for style_id in styles
        for home in catalog.homes_for_style(style_id)
    ]
    if not jobs:
        print(f"❌ No catalog homes for styles: {', '.join(styles)}")
        sys.exit(1)

    args.out.mkdir(parents=True, exist_ok=True)
    client = httpx.Client(base_url=args.url)

    if not wait_for_server(client):
        sys.exit(1)

    print(f"\n🚀 Rendering {len(jobs)} gallery images...\n")

    written = 0
    skipped = 0
    failures: list[str] = []
    total_start = time.perf_counter()

    for i, (home, style_id) in enumerate(jobs, 1):
        target = args.out / f"{home.id}-{style_id}.png"
        label = f"{home.id}-{style_id}"
        if target.exists() and not args.force:
            skipped += 1
            print(f"  [{i:2d}/{len(jobs)}] {label:32s} ⏭  exists")
            continue

        t0 = time.perf_counter()
        png = render(client, home, style_id)
        elapsed_ms = (time.perf_counter() - t0) * 1000

        if png is None:
            failures.append(label)
            print(f"  [{i:2d}/{len(jobs)}] {label:32s} ❌ FAILED")
        else:
            target.write_bytes(png)
            written += 1
            print(f"  [{i:2d}/{len(jobs)}] {label:32s} ✅ {len(png) // 1024} KB ({elapsed_ms:.0f}ms)")

        if i < len(jobs):
            time.sleep(args.interval)

    total_time = time.perf_counter() - total_start

    # ── Summary ──────────────────────────────────────────────────────────
    print(f"\n{'─' * 60}")
    print(f"  Total time:  {total_time:.1f}s")
    print(f"  Written:     {written}")
    print(f"  Skipped:     {skipped}")
    print(f"  Failures:    {len(failures)}")
    if failures:
        print(f"  Failed:      {', '.join(failures)}")
    print(f"{'─' * 60}\n")

    client.close()

    if failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
