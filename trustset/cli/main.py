from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from trustset import __version__
from trustset.config import Settings
from trustset.core.processing import process_manifest_store_sync
from trustset.core.readers.file_info import sniff_file_info
from trustset.utils.json_safe import dumps


def text_stats(text: str) -> Dict[str, Any]:
    """Line / word / character counts for a text file."""

    return {
        "rawContent": text,
        "lineCount": len(text.split("\n")),
        "characterCount": len(text),
        "wordCount": len(text.split()),
    }


def build_output(path: str, *, as_indicator_set: bool = False) -> Dict[str, Any]:
    """Build the per-file output record.

    Text files get statistics only; binary files go through C2PA processing.

    """

    info = sniff_file_info(path)

    c2pa = None
    if info.is_text:
        text = Path(info.path).read_text(encoding="utf-8", errors="replace")
        content: Dict[str, Any] = text_stats(text)
    else:
        data = Path(info.path).read_bytes()
        content = {
            "type": "binary",
            "size": info.size_bytes,
            "note": "Binary file content not displayed",
        }
        c2pa = process_manifest_store_sync(data, as_indicator_set)

    return {
        "metadata": {
            "inputFile": info.path,
            "fileName": os.path.basename(info.path),
            "fileSize": info.size_bytes,
            "processedAt": datetime.now(timezone.utc).isoformat(),
            "fileExtension": os.path.splitext(info.path)[1],
        },
        "content": content,
        "c2pa": c2pa,
        "processing": {"status": "completed", "version": __version__},
    }


def _print_c2pa_summary(c2pa: Dict[str, Any] | None) -> None:
    if not c2pa:
        return
    status = c2pa.get("validationStatus")
    if c2pa.get("hasManifestStore"):
        valid = status.get("isValid") if isinstance(status, dict) else status
        print(f"C2PA: Found {c2pa.get('manifestCount')} manifest(s), valid: {valid}")
    elif status in {"no_manifest", "not_applicable"} and not c2pa.get("error"):
        print("C2PA: No manifests found in file")
    elif c2pa.get("error"):
        print(f"C2PA: Error - {c2pa.get('error')}")


def cmd_process(args: argparse.Namespace) -> int:
    """Process one file and write <stem>.json (and <stem>-indicators.json with --set)."""

    path = os.path.abspath(args.input_file)
    if not os.path.isfile(path):
        print(f"Error: Input file does not exist: {args.input_file}", file=sys.stderr)
        return 1

    out_dir = Path(args.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    pretty = bool(args.pretty or Settings.from_env().pretty)
    output = build_output(path, as_indicator_set=bool(args.set))

    stem = Path(path).stem
    out_path = out_dir / f"{stem}.json"
    c2pa = output.get("c2pa") or {}
    indicator_set = c2pa.pop("indicatorSet", None) if args.set else None

    out_path.write_text(dumps(output, pretty=pretty), encoding="utf-8")

    print("File processed successfully!")
    print(f"Input: {path}")
    print(f"Output: {out_path.resolve()}")

    content = output["content"]
    if "lineCount" in content:
        print(
            f"Stats: {content['lineCount']} lines, {content['wordCount']} words, "
            f"{content['characterCount']} characters"
        )
    else:
        print(f"Stats: Binary file, {content['size']} bytes")

    _print_c2pa_summary(output.get("c2pa"))

    if indicator_set is not None:
        set_path = out_dir / f"{stem}-indicators.json"
        set_path.write_text(dumps(indicator_set, pretty=pretty), encoding="utf-8")
        print(f"Trust Indicator Set: {set_path.resolve()}")

    return 0


def cmd_indicators(args: argparse.Namespace) -> int:
    """Print the indicator set for a file to stdout."""

    path = os.path.abspath(args.input_file)
    if not os.path.isfile(path):
        print(f"Error: Input file does not exist: {args.input_file}", file=sys.stderr)
        return 1

    c2pa = process_manifest_store_sync(Path(path).read_bytes(), True)
    if c2pa.get("indicatorSet") is None:
        print(f"Error: {c2pa.get('error') or 'no indicator set produced'}", file=sys.stderr)
        return 1
    print(dumps(c2pa["indicatorSet"], pretty=bool(args.pretty)))
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the trustset API server."""

    try:
        import uvicorn
    except ImportError as e:
        print(f"error: uvicorn is required to serve the API: {e}", file=sys.stderr)
        return 2

    from trustset.api.server import create_app

    uvicorn.run(create_app(), host=args.host, port=int(args.port), log_level=args.log_level)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser."""
    p = argparse.ArgumentParser(
        prog="trustset", description="Extract JPEG Trust indicator sets from C2PA files"
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--log-level", default=None, help="Logging level (default: TRUSTSET_LOG_LEVEL or INFO)")
    sub = p.add_subparsers(dest="cmd", required=True)

    pp = sub.add_parser("process", help="Process a file and write JSON results")
    pp.add_argument("input_file", help="Input file to process")
    pp.add_argument("output_dir", help="Output directory for the JSON file(s)")
    pp.add_argument("-p", "--pretty", action="store_true", help="Pretty print JSON output")
    pp.add_argument(
        "-s",
        "--set",
        action="store_true",
        help="Also write the trust indicator set to <name>-indicators.json",
    )
    pp.set_defaults(func=cmd_process)

    ip = sub.add_parser("indicators", help="Print the trust indicator set for a file")
    ip.add_argument("input_file", help="Input file to process")
    ip.add_argument("-p", "--pretty", action="store_true", help="Pretty print JSON output")
    ip.set_defaults(func=cmd_indicators)

    sv = sub.add_parser("serve", help="Run the trustset FastAPI server")
    sv.add_argument("--host", default="127.0.0.1", help="Bind host (default: 127.0.0.1)")
    sv.add_argument("--port", type=int, default=8080, help="Bind port (default: 8080)")
    sv.add_argument("--log-level", dest="log_level", default="info", help="Uvicorn log level")
    sv.set_defaults(func=cmd_serve)

    return p


def main(argv: List[str] | None = None) -> int:
    """CLI entry."""
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(args, "log_level", None) if args.cmd != "serve" else None
    logging.basicConfig(level=(level or Settings.from_env().log_level).upper())
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
