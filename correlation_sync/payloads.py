"""
Map a loosely-typed rule document onto the two request bodies the SIEM
manager expects.

Input shape (every field optional):

    {"query": {"Name": ..., "Description": ..., "Tags": [...],
               "RiskLevel": 3, "ID": ..., "Query": ...}}

Output:

    save   -> {"correlation": {...}, "smartRestRequestContext": "..."}
    lookup -> {"filter": "\"<Name>\"", "smartRestRequestContext": "..."}

The literals below are part of the wire contract with the service.
"""

import math
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .errors import TransformError

SMART_REST_REQUEST_CONTEXT = "-<SmartRestRequestContext>-"

MAX_ALERT_COUNT = 5
CORRELATION_TYPE = "Interface IQueryCorrelation"
TIME_FRAME_VALUE = 5
TIME_FRAME_TYPE = "minutes"
RULE_TYPE = "any"
QUERY_CORRELATION_ALERT_TYPE = "WhenOneOrMoreRow"


# ---------- Field extraction ----------

def get_string(m: Dict[str, Any], key: str) -> str:
    value = m.get(key)
    return value if isinstance(value, str) else ""


def get_int(m: Dict[str, Any], key: str) -> int:
    """JSON numbers only; floats truncate toward zero, anything else is 0."""
    value = m.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return int(value)


def to_string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [v if isinstance(v, str) else "" for v in value]


def lookup_filter(name: str) -> str:
    # Not escaped: a name containing '"' yields a malformed filter fragment.
    return '"' + name + '"'


# ---------- Payload records ----------

@dataclass(frozen=True)
class CorrelationData:
    query_id: str = ""
    query: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "TimeFrameValue": TIME_FRAME_VALUE,
            "TimeFrameType": TIME_FRAME_TYPE,
            "RuleType": RULE_TYPE,
            "QueryCorrelationAlertType": QUERY_CORRELATION_ALERT_TYPE,
            "QueryID": self.query_id,
            "Query": self.query,
        }


@dataclass(frozen=True)
class Correlation:
    name: str = ""
    description: str = ""
    tags: Tuple[str, ...] = ()
    risk_level: int = 0
    data: CorrelationData = field(default_factory=CorrelationData)

    @property
    def message(self) -> str:
        return self.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Name": self.name,
            "Description": self.description,
            "Tags": list(self.tags),
            "MaxAlertCount": MAX_ALERT_COUNT,
            "RiskLevel": self.risk_level,
            "CorrelationType": CORRELATION_TYPE,
            "Data": self.data.to_dict(),
            "Enabled": False,
            "Message": self.message,
        }


@dataclass(frozen=True)
class SavePayload:
    correlation: Correlation

    @property
    def name(self) -> str:
        return self.correlation.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "correlation": self.correlation.to_dict(),
            "smartRestRequestContext": SMART_REST_REQUEST_CONTEXT,
        }


@dataclass(frozen=True)
class LookupPayload:
    filter: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filter": self.filter,
            "smartRestRequestContext": SMART_REST_REQUEST_CONTEXT,
        }


# ---------- Transformer ----------

def build_payloads(
        document: Dict[str, Any],
        source: Optional[str] = None,
        strict: bool = False,
) -> Tuple[SavePayload, LookupPayload]:
    """
    Build the (save, lookup) pair for one rule document.

    A missing or non-object `query` is reported and the pair is built from
    defaults (empty name, zero risk), unless `strict` is set, in which case
    TransformError is raised and nothing is built.
    """
    query = document.get("query")
    if isinstance(query, dict):
        correlation = Correlation(
            name=get_string(query, "Name"),
            description=get_string(query, "Description"),
            tags=tuple(to_string_list(query.get("Tags"))),
            risk_level=get_int(query, "RiskLevel"),
            data=CorrelationData(
                query_id=get_string(query, "ID"),
                query=get_string(query, "Query"),
            ),
        )
    else:
        where = source or "payload"
        if strict:
            raise TransformError(f"Unable to parse 'query' from {where}")
        print(f"[!] Unable to parse 'query' from {where}; continuing with defaults", file=sys.stderr)
        correlation = Correlation()

    save = SavePayload(correlation=correlation)
    lookup = LookupPayload(filter=lookup_filter(correlation.name))
    return save, lookup
