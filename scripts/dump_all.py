#!/usr/bin/env python3
"""Dump everything the eesadmin library can read from a backend.

Checks health, verifies the admin token, then lists floors and, per
floor, the latest routes and the first page of detection records. Both
the parsed model fields and the raw API JSON are printed so unmapped
fields stand out.

Usage
-----
Set environment variables and run::

    export EES_API_URL="http://localhost:3000"
    export EES_DEFAULT_ADMIN_TOKEN="your-admin-token"
    python scripts/dump_all.py

Options::

    --floor ID          Only query this floor (default: all floors)
    --json              Output as machine-readable JSON
    --output FILE       Write output to FILE instead of stdout
    --skip-routes       Skip route endpoints
    --skip-records      Skip record endpoints
    --skip-settings     Skip settings endpoint
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from eesadmin import EesClient, EesConfig  # noqa: E402
from eesadmin.models import EesBaseModel  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _print_model(label: str, model: EesBaseModel | None, out: list[str]) -> dict[str, Any]:
    out.append(f"\n  --- {label} ---")
    if model is None:
        out.append("    (none)")
        return {}
    data = model.model_dump(mode="json", exclude={"raw"})
    for key, value in data.items():
        if isinstance(value, list):
            out.append(f"    {key}: [{len(value)} items]")
        else:
            out.append(f"    {key}: {value}")
    return data


def _print_raw(label: str, raw: Any, out: list[str]) -> None:
    out.append(f"\n  --- {label} (raw) ---")
    out.append(json.dumps(raw, indent=2, default=str, ensure_ascii=False))


async def dump_floor(client: EesClient, floor_id: str, *, skip: set[str], out: list[str]) -> dict[str, Any]:
    data: dict[str, Any] = {}
    out.append(_section(f"FLOOR {floor_id}"))

    if "routes" not in skip:
        result = await client.routes.fetch_latest(floor_id)
        if result.success:
            data["latest_routes"] = _print_model("Latest routes", client.routes.latest, out)
            _print_raw("Latest routes", result.data, out)
        else:
            out.append(f"  latest routes failed: {result.error}")
            data["latest_routes_error"] = result.error

    if "records" not in skip:
        result = await client.records.list(floor_id=floor_id)
        if result.success:
            pagination = client.records.pagination
            out.append(f"\n  records: {pagination.total} total, page {pagination.page}/{pagination.total_pages}")
            data["records"] = [_print_model(f"Record {r.id}", r, out) for r in client.records.items]
        else:
            out.append(f"  records failed: {result.error}")
            data["records_error"] = result.error

    return data


# ── main ─────────────────────────────────────────────────────


async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Dump all data eesadmin can fetch for debugging / development.",
    )
    parser.add_argument("--floor", help="Only query this floor (default: all floors)")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--skip-routes", action="store_true", help="Skip route endpoints")
    parser.add_argument("--skip-records", action="store_true", help="Skip record endpoints")
    parser.add_argument("--skip-settings", action="store_true", help="Skip settings endpoint")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    skip: set[str] = set()
    if args.skip_routes:
        skip.add("routes")
    if args.skip_records:
        skip.add("records")
    if args.skip_settings:
        skip.add("settings")

    config = EesConfig.from_env()
    result: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "base_url": config.base_url,
        "floors": [],
    }

    out: list[str] = []
    out.append(_section("eesadmin dump_all"))
    out.append(f"  time      : {result['timestamp']}")

    async with EesClient(config) as client:
        out.append(f"  base_url  : {client.credentials.get().base_url}")

        await client.auth.check_health()
        result["health"] = _print_model("Server health", client.auth.server_health, out)

        verified = await client.auth.verify()
        if not verified.success:
            out.append(f"\n  token verification failed: {verified.error}")
            result["auth_error"] = verified.error
            print("\n".join(out))
            return

        await client.floors.list()
        await client.floors.fetch_system_status()
        result["system_status"] = _print_model("System status", client.floors.system_status, out)

        if "settings" not in skip and (await client.settings.fetch()).success:
            result["settings"] = _print_model("Settings", client.settings.settings, out)

        out.append(_section("FLOORS"))
        for floor in client.floors.items:
            entry = {"info": _print_model(f"Floor {floor.id}", floor, out), "raw": floor.raw}
            _print_raw(f"Floor {floor.id}", floor.raw, out)
            for issue in floor.reference_issues():
                out.append(f"    ! {issue}")
            result["floors"].append(entry)

        target_floors = [args.floor] if args.floor else [floor.id for floor in client.floors.items]
        for floor_id in target_floors:
            floor_data = await dump_floor(client, floor_id, skip=skip, out=out)
            for entry in result["floors"]:
                if entry.get("info", {}).get("id") == floor_id:
                    entry["data"] = floor_data
                    break

    # ── Output ──
    if args.json_mode:
        payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
        if args.output:
            Path(args.output).write_text(payload, encoding="utf-8")
            print(f"JSON written to {args.output}", file=sys.stderr)
        else:
            print(payload)
    elif args.output:
        Path(args.output).write_text("\n".join(out), encoding="utf-8")
        print(f"Output written to {args.output}")
    else:
        print("\n".join(out))


if __name__ == "__main__":
    asyncio.run(main())
