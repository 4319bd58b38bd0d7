import sys
import os
import argparse

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from core.config import get_settings
from database.database import Database
from database.repository import Repository, transaction
from models.user import User


def create_user(db, first_name: str, last_name: str, age: int) -> User:
    if age < 0:
        raise ValueError("age must be >= 0")
    with transaction(db):
        user = Repository(db, User).create(first_name=first_name, last_name=last_name, age=age)
    db.refresh(user)
    return user


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("first_name")
    parser.add_argument("last_name")
    parser.add_argument("age", type=int)
    args = parser.parse_args()

    database = Database(get_settings().database_url)
    session = database.session()
    try:
        user = create_user(session, args.first_name, args.last_name, args.age)
        print(f"✅ User {user.first_name} {user.last_name} created with ID {user.id}")
    finally:
        session.close()
        database.dispose()
