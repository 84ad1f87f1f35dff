"""
Database engine options.

SSL for server databases is driven by the sslmode query parameter of DB_URI
or the DATABASE_SSL* settings. sslmode is removed from the URI and turned into
an ssl connect argument, which is what asyncpg expects.
"""

import os
import ssl
from typing import Optional, Tuple

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from config import parse_bool

DEFAULT_CA_FILE = "archivoCA.crt"
VERIFYING_SSL_MODES = ("verify-ca", "verify-full")


def build_engine_options(config, cwd: Optional[str] = None) -> Tuple[str, dict]:
    """
    Return (db_uri, connect_args) for create_async_engine.

    - SSL is requested when sslmode is present and not "disable", or, without
      sslmode, when DATABASE_SSL is true
    - Certificate verification follows DATABASE_SSL_REJECT_UNAUTHORIZED, else
      it is enabled only for verify-ca / verify-full
    - CA bundle from DATABASE_SSL_CA, else ./archivoCA.crt when it exists
    """
    url = make_url(config.DB_URI)
    sslmode = url.query.get("sslmode")
    if isinstance(sslmode, tuple):
        sslmode = sslmode[-1]

    if sslmode:
        ssl_requested = sslmode != "disable"
        url = url.difference_update_query(["sslmode"])
    else:
        ssl_requested = parse_bool(config.DATABASE_SSL) is True

    db_uri = url.render_as_string(hide_password=False)
    if not ssl_requested:
        return db_uri, {}

    reject_unauthorized = parse_bool(config.DATABASE_SSL_REJECT_UNAUTHORIZED)
    if reject_unauthorized is None:
        reject_unauthorized = sslmode in VERIFYING_SSL_MODES

    ca_file = config.DATABASE_SSL_CA
    if not ca_file:
        default_ca = os.path.join(cwd or os.getcwd(), DEFAULT_CA_FILE)
        if os.path.exists(default_ca):
            ca_file = default_ca

    context = ssl.create_default_context(cafile=ca_file)
    if not reject_unauthorized:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    return db_uri, {"ssl": context}


def create_engine_from_config(config) -> AsyncEngine:
    db_uri, connect_args = build_engine_options(config)
    return create_async_engine(db_uri, echo=False, future=True, connect_args=connect_args)
