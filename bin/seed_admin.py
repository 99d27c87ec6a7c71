# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Bootstrap script – creates the first system admin.

Run once after ``alembic upgrade head``:
    python bin/seed_admin.py

FIRST_ADMIN_EMAIL, FIRST_ADMIN_PASSWORD and FIRST_ADMIN_FULL_NAME are read
from etc/app.conf (or the environment).  They are inert once the row exists.

The account starts with ``force_password_change = True``.  A system admin
manages user accounts only; it sees no vault it does not own or was not
granted.

Exit status: 0 created or already present, 1 configuration missing.
"""

import sys
import os

# bin/seed_admin.py  →  ../backend
_BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "backend"))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from core.config import settings              # noqa: E402
from core.logger import get_logger            # noqa: E402
from auth.service import set_password         # noqa: E402
from database import SessionLocal             # noqa: E402
from models.user import User                  # noqa: E402

log = get_logger("seed")


def seed() -> int:
    email = settings.first_admin_email
    if not email or not settings.first_admin_password:
        log.error("FIRST_ADMIN_EMAIL / FIRST_ADMIN_PASSWORD not configured – nothing seeded")
        return 1

    db = SessionLocal()
    try:
        if db.query(User.id).filter(User.email == email).first():
            log.info("Admin %s already exists – skipping", email)
            return 0

        admin = User(
            email=email,
            full_name=settings.first_admin_full_name,
            role="admin",
            is_active=True,
            force_password_change=True,
        )
        set_password(admin, settings.first_admin_password)
        db.add(admin)
        db.commit()
        log.info("Admin %s created (id=%d)", email, admin.id)
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(seed())
