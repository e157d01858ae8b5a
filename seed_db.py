# seed_db.py
import os
import sys

from lahap.models import database  # Make sure this imports your Base
from lahap.models.database import engine, SessionLocal
from lahap.models import *  # registers all models
from lahap.models.user import Role
from lahap.utils.auth_utils import session_claims
from lahap.utils.jwt_utils import create_access_token
from lahap.utils.password_utils import hash_password

SEED_USERS = [
    ("admin@lahap.local", "Lahap Admin", Role.ADMIN),
    ("parent@lahap.local", "Lahap Parent", Role.USER),
]
SEED_PASSWORD = os.getenv("SEED_PASSWORD", "password123")


if __name__ == "__main__":
    if "--reset" in sys.argv:
        print("⚠️ Dropping all existing tables...")
        database.Base.metadata.drop_all(bind=engine)

    print("✅ Creating tables from models...")
    database.Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        for email, name, role in SEED_USERS:
            user = db.query(User).filter(User.email == email).first()
            if not user:
                user = User(email=email, name=name, role=role, hashed_password=hash_password(SEED_PASSWORD))
                db.add(user)
                db.commit()
                db.refresh(user)
                print(f"👤 Created {role.value} {email}")
            else:
                print(f"👤 {email} already exists")

            print(f"🔑 Session token for {email}:\n{create_access_token(session_claims(user))}\n")
    finally:
        db.close()

    print("✅ Database seed complete.")
