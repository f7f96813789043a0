"""CLI script to create login accounts for every student and teacher.
Usage: python scripts/create_users.py [--password PASSWORD]

The username of each account is the entity's business code and the
role is `student` or `teacher`. Existing accounts are left untouched.
"""
import sys
import argparse
import pathlib
# Ensure `backend/` is on sys.path so `training_center` imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from training_center.database import engine, create_db_and_tables
from training_center import repositories, services

DEFAULT_PASSWORD = '123456'


def create_accounts(session: Session, password: str = DEFAULT_PASSWORD):
    """Create missing accounts and return `(created, existing)` username lists."""
    auth = services.AuthService(session)
    users = repositories.UserRepository(session)
    created, existing = [], []
    sources = (
        ('student', repositories.StudentRepository(session).list()),
        ('teacher', repositories.TeacherRepository(session).list()),
    )
    for role, records in sources:
        for record in records:
            if users.get_by_username(record.code):
                existing.append(record.code)
                continue
            auth.register(record.code, password, role, record.id)
            created.append(record.code)
    return created, existing


def main(password: str = DEFAULT_PASSWORD):
    """Create accounts and print one line per student/teacher."""
    create_db_and_tables()
    with Session(engine) as session:
        created, existing = create_accounts(session, password)
    for username in created:
        print(f'created: {username}')
    for username in existing:
        print(f'exists:  {username}')
    print(f'Done. created={len(created)} existing={len(existing)}')


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--password', default=DEFAULT_PASSWORD, help='initial password for new accounts')
    args = parser.parse_args()
    main(args.password)
