from __future__ import annotations

import sys

from app.db.session import SessionLocal
from app.db import crud
from app.models.enums import UserRole


def main() -> int:
    roles = [r.value for r in UserRole]
    if len(sys.argv) != 3:
        print(f"Usage: python scripts/set_role.py <email> <role: {'|'.join(roles)}>")
        return 2

    email, role = sys.argv[1], sys.argv[2].upper()
    if role not in roles:
        print(f"Unknown role: {role}")
        return 2

    db = SessionLocal()
    try:
        user = crud.get_user_by_email(db, email)
        if not user:
            print("User not found")
            return 1
        crud.update_user(db, user, {"role": role})
        print(f"Role updated: {user.email} -> {role}")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
