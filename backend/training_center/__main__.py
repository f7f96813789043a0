"""Program entry point: `python -m training_center` or `training-center`.

Prints the startup message. With `--init-db` the tables are created in
the configured database first; `--create-admin NAME --password PW` also
seeds an administrator account, the only way to obtain the first admin.
"""

import argparse
import logging
from typing import List, Optional

from .config import settings

STARTUP_MESSAGE = "Application started successfully"

logger = logging.getLogger("training_center")


def create_admin(username: str, password: str) -> bool:
    """Create an admin account unless `username` exists. Returns True if created."""
    from sqlmodel import Session
    from .database import create_db_and_tables, engine
    from . import repositories, services
    create_db_and_tables()
    with Session(engine) as session:
        if repositories.UserRepository(session).get_by_username(username):
            return False
        services.AuthService(session).register(username, password, "admin")
    return True


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="training-center", description=__doc__.splitlines()[0])
    parser.add_argument("--init-db", action="store_true", help="create database tables before starting")
    parser.add_argument("--create-admin", metavar="USERNAME", help="seed an administrator account")
    parser.add_argument("--password", help="password for --create-admin")
    args = parser.parse_args(argv)
    if args.create_admin and not args.password:
        parser.error("--create-admin requires --password")
    if not logger.handlers:
        logging.basicConfig(level=settings.LOG_LEVEL)
    if args.init_db:
        from .database import create_db_and_tables, engine
        create_db_and_tables()
        logger.info("database tables ready at %s", engine.url.render_as_string(hide_password=True))
    if args.create_admin:
        if create_admin(args.create_admin, args.password):
            print(f"created admin: {args.create_admin}")
        else:
            print(f"exists:        {args.create_admin}")
    print(STARTUP_MESSAGE)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
