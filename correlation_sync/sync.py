"""
Per-record control flow:

    load -> transform -> lookup -> (not found) save -> write response

Records are processed one at a time in walk order. A failure on one file is
reported and the walk moves on to the next file.
"""

import json
import sys
from dataclasses import dataclass, field
from typing import List, Optional

from .client import CorrelationClient
from .config import SyncConfig
from .errors import RuleExistsError, RuleSyncError
from .loader import JSON_SUFFIXES, YAML_SUFFIXES, iter_rule_files, load_document
from .payloads import build_payloads
from .writer import write_response


@dataclass
class SyncSummary:
    saved: int = 0
    skipped: int = 0
    failed: int = 0
    previewed: int = 0
    written: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failed == 0


def sync_file(path: str, client: Optional[CorrelationClient], config: SyncConfig) -> Optional[str]:
    """
    Push the rule in `path` to the service.

    Returns the response file written, or None on a dry run. Raises
    RuleExistsError when the lookup finds the rule, any other RuleSyncError
    or OSError when a step fails.
    """
    document = load_document(path)
    save_payload, lookup_payload = build_payloads(document, source=path, strict=config.strict)

    if config.dry_run or client is None:
        print(f"[DRY RUN] Lookup payload for {path}:")
        print(json.dumps(lookup_payload.to_dict(), indent=2, ensure_ascii=False))
        print(f"[DRY RUN] Save payload for {path}:")
        print(json.dumps(save_payload.to_dict(), indent=2, ensure_ascii=False))
        return None

    if client.lookup(lookup_payload):
        raise RuleExistsError(save_payload.name)

    response = client.save(save_payload)
    out_path = write_response(config.response_dir, save_payload.name, response)
    print(f"[+] Response received and saved to {out_path}")
    return out_path


def _suffixes(config: SyncConfig):
    if config.include_yaml:
        return JSON_SUFFIXES + YAML_SUFFIXES
    return JSON_SUFFIXES


def run(config: SyncConfig, client: Optional[CorrelationClient] = None) -> SyncSummary:
    summary = SyncSummary()

    try:
        files = iter_rule_files(config.json_path, _suffixes(config))
    except OSError as e:
        print(f"[!] Error opening JSON file or directory: {e}", file=sys.stderr)
        summary.failed += 1
        return summary

    own_client = client is None and not config.dry_run
    if own_client:
        client = CorrelationClient(
            config.hostname,
            config.api_key,
            verify_tls=config.verify_tls,
            timeout=config.timeout,
        )

    try:
        for path in files:
            print(f"[*] Processing {path}")
            try:
                out_path = sync_file(path, None if config.dry_run else client, config)
            except RuleExistsError as e:
                print(f"[-] {e}, skipping")
                summary.skipped += 1
            except (RuleSyncError, OSError) as e:
                print(f"[!] {path}: {e}", file=sys.stderr)
                summary.failed += 1
            else:
                if out_path is None:
                    summary.previewed += 1
                else:
                    summary.saved += 1
                    summary.written.append(out_path)
    except OSError as e:
        print(f"[!] Error reading JSON files: {e}", file=sys.stderr)
        summary.failed += 1
    finally:
        if own_client and client is not None:
            client.close()

    return summary
