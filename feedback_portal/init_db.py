#!/usr/bin/env python3
"""
Database initialization script.
Run this to create all database tables and the principal account:

    python -m feedback_portal.init_db
"""

import os
import sys
import traceback

from sqlmodel import Session, text


def main():
    """Initialize the database schema and seed the principal."""
    try:
        from feedback_portal.configs import settings
        from feedback_portal.configs.database import engine, init_db
        from feedback_portal.services import user_service

        print("🗃️  Initializing database schema...")
        print(f"📄 Environment file: {os.getenv('ENV_FILE', 'local.env')}")

        # Test database connection first
        print("🔌 Testing database connection...")
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
            print("✅ Database connection successful!")

        init_db()
        print("✅ Database schema created successfully!")

        if settings.PRINCIPAL_EMAIL and settings.PRINCIPAL_PASSWORD:
            with Session(engine) as session:
                if user_service.get_user_by_email(session, settings.PRINCIPAL_EMAIL):
                    print(f"👤 Principal {settings.PRINCIPAL_EMAIL} already exists")
                else:
                    user_service.create_principal(session, settings.PRINCIPAL_EMAIL, settings.PRINCIPAL_PASSWORD)
                    print(f"👤 Principal {settings.PRINCIPAL_EMAIL} created")
        else:
            print("⚠️  PRINCIPAL_EMAIL / PRINCIPAL_PASSWORD not set, no principal account created")

        print("🎉 Database initialization complete!")

    except Exception as e:
        print(f"❌ Error initializing database: {e}")
        print(f"📊 Error type: {type(e).__name__}")
        print("\n📋 Full error traceback:")
        traceback.print_exc()
        sys.exit(1)

if __name__ == "__main__":
    main()
