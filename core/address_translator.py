from typing import Dict, List, Optional, Tuple

from cassandra.connection import DefaultEndPoint, DefaultEndPointFactory
from cassandra.policies import AddressTranslator
from loguru import logger


def split_host_port(address: str) -> Tuple[str, int]:
    host, _, port = address.rpartition(":")
    if not host or not port.isdigit():
        raise ValueError(f"expected host:port, got {address!r}")
    return host, int(port)


class ComposeAddressTranslator(AddressTranslator):
    """Maps the private addresses a Compose cluster advertises to the
    public host:port pairs clients can actually reach.

    The mapping comes from the ``maps`` entry of the service credentials:
    a list of ``{"internal": "10.0.0.1:9042", "external": "host:28000"}``.
    """

    def __init__(self):
        self._internal_to_external: Dict[str, Tuple[str, int]] = {}
        self._external: List[Tuple[str, int]] = []

    def set_map(self, maps: List[Dict[str, str]]) -> None:
        self._internal_to_external = {}
        self._external = []
        for entry in maps:
            internal_host, _ = split_host_port(entry["internal"])
            external = split_host_port(entry["external"])
            self._internal_to_external[internal_host] = external
            self._external.append(external)

    def contact_points(self) -> List[Tuple[str, int]]:
        return list(self._external)

    def lookup(self, addr) -> Optional[Tuple[str, int]]:
        return self._internal_to_external.get(addr)

    def translate(self, addr):
        external = self.lookup(addr)
        if external is None:
            logger.debug(f"No address mapping for {addr}, using it as is")
            return addr
        return external[0]


# Each Compose node has its own external port; translate() only covers the host
class ComposeEndPointFactory(DefaultEndPointFactory):

    def __init__(self, translator: ComposeAddressTranslator, port=None):
        super().__init__(port=port)
        self._translator = translator

    def create(self, row):
        addr = row.get("native_address") or row.get("rpc_address")
        if not addr or addr in ("0.0.0.0", "::"):
            addr = row.get("peer")

        external = self._translator.lookup(addr)
        if external is None:
            return super().create(row)
        return DefaultEndPoint(*external)
