"""
Grant the admin role to an existing user.

Usage: python create_admin.py user@example.com
"""
import sys
import os

# Add the backend directory to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from fintrack.core.exceptions import NotFound
from fintrack.db.session import SessionLocal
from fintrack.models.user import UserRole
from fintrack.services.auth_service import set_role


def create_admin(email: str) -> int:
    """Promote the user with `email` to admin. Returns a process exit code."""
    db = SessionLocal()
    try:
        user = set_role(db, email, UserRole.ADMIN)
        print(f"User {user.email} (id {user.id}) is now an admin")
        return 0
    except NotFound:
        print(f"No user registered with email {email}")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__.strip())
        sys.exit(2)
    sys.exit(create_admin(sys.argv[1]))
