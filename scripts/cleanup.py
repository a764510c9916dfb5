import sys
import os
from sqlalchemy import delete
from sqlmodel import Session

# Add current directory to path
sys.path.append(os.getcwd())

from advisory_crm.db.session import engine, transaction
from advisory_crm.models.client import Client
from advisory_crm.models.document import Document
from advisory_crm.models.project import Project


def cleanup_database():
    """Delete all user data. Team members are configuration and are kept."""
    print("--- Cleaning up database ---")

    with Session(engine) as session:
        with transaction(session):
            print("Deleting all documents...")
            session.execute(delete(Document))

            print("Deleting all projects...")
            session.execute(delete(Project))

            print("Deleting all clients...")
            session.execute(delete(Client))

    print("Database cleanup completed successfully!")


if __name__ == "__main__":
    cleanup_database()
