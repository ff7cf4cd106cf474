import ssl
from typing import Optional, Tuple

from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import Cluster, Session
from cassandra.connection import DefaultEndPoint
from cassandra.policies import RoundRobinPolicy
from cassandra.query import dict_factory
from loguru import logger

from core.address_translator import ComposeAddressTranslator, ComposeEndPointFactory
from core.credentials import ScyllaCredentials
from core.errors import SchemaBootstrapError


def build_cluster(credentials: ScyllaCredentials) -> Cluster:
    translator = ComposeAddressTranslator()
    translator.set_map(credentials.address_map)

    ssl_context: Optional[ssl.SSLContext] = None
    if credentials.use_tls:
        ssl_context = ssl.create_default_context()

    return Cluster(
        contact_points=[DefaultEndPoint(host, port) for host, port in translator.contact_points()],
        endpoint_factory=ComposeEndPointFactory(translator),
        auth_provider=PlainTextAuthProvider(credentials.username, credentials.password),
        address_translator=translator,
        load_balancing_policy=RoundRobinPolicy(),
        ssl_context=ssl_context,
    )


def connect(credentials: ScyllaCredentials) -> Tuple[Cluster, Session]:
    logger.info("Connecting")
    cluster = build_cluster(credentials)
    try:
        session = cluster.connect()
    except Exception as e:
        cluster.shutdown()
        raise SchemaBootstrapError(f"Could not connect to the cluster: {e}") from e

    session.row_factory = dict_factory
    return cluster, session


def shutdown(cluster: Cluster) -> None:
    logger.info("Closing cluster connection")
    cluster.shutdown()
