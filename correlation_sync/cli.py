"""
Push correlation rule definitions (JSON files) to the SIEM manager API.

For every rule file the tool asks the service whether a correlation with the
same name exists; if not, it saves the rule and writes the service's answer
to <response-file-dir>/<Name>.json.

Usage:
  add-correlation-rules -x-api-key KEY -json-file-path rules/ \
    -url-hostname siem.example.local -response-file-dir responses/

  # same, with the required values kept in an env file
  add-correlation-rules --env .env-siem -json-file-path rules/

  # show the request bodies without calling the service
  add-correlation-rules --env .env-siem -json-file-path rules/ --dry-run
"""

import argparse
import sys
from typing import Dict, List, Optional

from .client import DEFAULT_TIMEOUT
from .config import SyncConfig, load_env_file, missing_required
from .sync import run

USAGE = (
    "Usage: add-correlation-rules -x-api-key <xAPIKey> -json-file-path <jsonFilePath> "
    "-url-hostname <urlHostname> -response-file-dir <responseDirectory>"
)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="add-correlation-rules",
        description="Create correlation rules on the SIEM manager from JSON rule files.",
    )

    p.add_argument("--x-api-key", "-x-api-key", dest="api_key", help="API key for authentication")
    p.add_argument(
        "--json-file-path",
        "-json-file-path",
        dest="json_path",
        help="Path to the JSON file or directory containing JSON files",
    )
    p.add_argument("--url-hostname", "-url-hostname", dest="hostname", help="Hostname of the URL")
    p.add_argument(
        "--response-file-dir",
        "-response-file-dir",
        dest="response_dir",
        help="Directory to save response files",
    )

    p.add_argument(
        "--env",
        default=None,
        help=(
            "Optional .env file providing X_API_KEY, JSON_FILE_PATH, URL_HOSTNAME "
            "and RESPONSE_FILE_DIR. Flags given on the command line win."
        ),
    )
    p.add_argument(
        "--insecure",
        action="store_true",
        help="Skip TLS certificate validation (self-signed internal endpoints).",
    )
    p.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help="Per-request timeout in seconds (default: no timeout).",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        help="Skip files without a 'query' object instead of sending defaults.",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Don't call the API; print the lookup and save payloads instead.",
    )
    p.add_argument(
        "--yaml",
        dest="include_yaml",
        action="store_true",
        help="Also pick up .yml/.yaml rule files when walking a directory.",
    )

    return p


def build_config(args: argparse.Namespace) -> Optional[SyncConfig]:
    """
    Merge flags with the optional env file. Returns None when one of the
    four required values is still missing.
    """
    values: Dict[str, Optional[str]] = {}
    if args.env:
        values.update(load_env_file(args.env))

    for name in ("api_key", "json_path", "hostname", "response_dir"):
        flag_value = getattr(args, name)
        if flag_value:
            values[name] = flag_value

    if missing_required(values):
        return None

    timeout = args.timeout if args.timeout and args.timeout > 0 else None

    return SyncConfig(
        api_key=values["api_key"],
        json_path=values["json_path"],
        hostname=values["hostname"],
        response_dir=values["response_dir"],
        verify_tls=not args.insecure,
        timeout=timeout,
        strict=args.strict,
        dry_run=args.dry_run,
        include_yaml=args.include_yaml,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except FileNotFoundError as e:
        print(f"[!] {e}", file=sys.stderr)
        return 1

    if config is None:
        print(USAGE)
        parser.print_help()
        return 0

    if not config.verify_tls:
        print("[!] TLS certificate validation is disabled")

    summary = run(config)

    if config.dry_run:
        print(f"Done. previewed={summary.previewed} failed={summary.failed}")
    else:
        print(f"Done. saved={summary.saved} skipped={summary.skipped} failed={summary.failed}")

    return 0 if summary.ok else 1


if __name__ == "__main__":
    sys.exit(main())
