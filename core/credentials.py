import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import unquote, urlparse

from loguru import logger

from core.address_translator import split_host_port
from core.config import Settings
from core.errors import ConfigError


@dataclass(frozen=True)
class ScyllaCredentials:
    username: str
    password: str
    use_tls: bool
    address_map: List[Dict[str, str]] = field(default_factory=list)


# Reads the optional local override file (same shape cf's vcap-local.json uses:
# {"services": {...}}). The override is best effort: a missing or broken file
# just means we run against whatever the platform bound for us.
def load_local_vcap(path: str) -> Optional[Dict[str, Any]]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            vcap = json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring local VCAP file {path}: {e}")
        return None

    logger.info("Loaded local VCAP")
    return vcap


def bound_services(settings: Settings) -> Dict[str, Any]:
    if settings.vcap_services is not None:
        return settings.vcap_services

    local = load_local_vcap(settings.vcap_local_file)
    if isinstance(local, dict):
        return local.get("services", {})
    return {}


def parse_credentials(credentials: Dict[str, Any]) -> ScyllaCredentials:
    uri = credentials.get("uri")
    if not uri:
        raise ConfigError("Service credentials have no uri")

    parsed = urlparse(uri)
    if parsed.username is None or parsed.password is None:
        raise ConfigError("Service uri carries no username:password")

    maps = credentials.get("maps")
    if not maps:
        raise ConfigError("Service credentials have no address maps")

    for entry in maps:
        try:
            split_host_port(entry["internal"])
            split_host_port(entry["external"])
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Bad address map entry {entry!r}: {e}") from e

    return ScyllaCredentials(
        username=unquote(parsed.username),
        password=unquote(parsed.password),
        use_tls=parsed.scheme == "https",
        address_map=list(maps),
    )


def resolve_credentials(settings: Settings) -> ScyllaCredentials:
    """Pick the first bound ScyllaDB service and turn its credentials into
    what the driver needs.

    Raises:
        ConfigError: no service is bound under ``settings.service_label`` or
            its credentials are unusable.
    """
    services = bound_services(settings).get(settings.service_label)
    if not services:
        raise ConfigError(f"Must be bound to {settings.service_label} services")

    return parse_credentials(services[0].get("credentials", {}))
