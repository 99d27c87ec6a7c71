# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Alembic environment.

Migrations run on the application's own engine (``database.engine``), so the
connection string comes from etc/app.conf through ``Settings`` and nowhere
else.  SQLite gets batch mode because it cannot ALTER most constraints in
place.
"""

import sys
import os

# backend/migrations/env.py  →  ../  →  backend/
_BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from alembic import context  # noqa: E402

from core.config import settings  # noqa: E402
from core.logger import get_logger  # noqa: E402
from database import Base, engine  # noqa: E402

# Every model must be imported for autogenerate to see its table
import models.user              # noqa: F401, E402
import models.vault             # noqa: F401, E402
import models.category          # noqa: F401, E402
import models.credential_item   # noqa: F401, E402
import models.vault_permission  # noqa: F401, E402
import models.revoked_token     # noqa: F401, E402

log = get_logger("migrations")

_IS_SQLITE = settings.database_url.startswith("sqlite")


def run_migrations_online():
    """Apply migrations over a live connection."""
    with engine.connect() as conn:
        context.configure(
            connection=conn,
            target_metadata=Base.metadata,
            compare_type=True,
            render_as_batch=_IS_SQLITE,
        )
        with context.begin_transaction():
            context.run_migrations()


def run_migrations_offline():
    """Emit the SQL to stdout instead of executing it (``alembic upgrade --sql``)."""
    context.configure(
        url=settings.database_url,
        target_metadata=Base.metadata,
        literal_binds=True,
        render_as_batch=_IS_SQLITE,
    )
    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    log.info("Generating migration SQL (offline)")
    run_migrations_offline()
else:
    log.info("Running migrations against the configured database")
    run_migrations_online()
