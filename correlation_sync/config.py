import os
from dataclasses import dataclass
from typing import Dict, List, Optional

from dotenv import dotenv_values

from .client import DEFAULT_TIMEOUT

# config field -> key in an optional .env file
ENV_FILE_KEYS: Dict[str, str] = {
    "api_key": "X_API_KEY",
    "json_path": "JSON_FILE_PATH",
    "hostname": "URL_HOSTNAME",
    "response_dir": "RESPONSE_FILE_DIR",
}

# config field -> flag name shown in the usage line
REQUIRED_FLAGS: Dict[str, str] = {
    "api_key": "-x-api-key",
    "json_path": "-json-file-path",
    "hostname": "-url-hostname",
    "response_dir": "-response-file-dir",
}


@dataclass(frozen=True)
class SyncConfig:
    api_key: str
    json_path: str
    hostname: str
    response_dir: str
    verify_tls: bool = True
    timeout: Optional[float] = DEFAULT_TIMEOUT
    strict: bool = False
    dry_run: bool = False
    include_yaml: bool = False


def load_env_file(env_path: str) -> Dict[str, str]:
    """
    Read KEY=VALUE pairs from a dotenv file without touching os.environ.
    Only the keys in ENV_FILE_KEYS are returned; empty values are dropped.
    """
    if not os.path.isfile(env_path):
        raise FileNotFoundError(f".env file not found at: {env_path}")
    values = dotenv_values(env_path)
    out: Dict[str, str] = {}
    for field_name, key in ENV_FILE_KEYS.items():
        value = values.get(key)
        if value:
            out[field_name] = value
    return out


def missing_required(values: Dict[str, Optional[str]]) -> List[str]:
    return [flag for field_name, flag in REQUIRED_FLAGS.items() if not values.get(field_name)]
