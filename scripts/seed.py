import sys
import os
from datetime import timedelta
from sqlmodel import Session, select

# Add current directory to path
sys.path.append(os.getcwd())

from advisory_crm.core.clock import utcnow
from advisory_crm.db.session import engine, init_db
from advisory_crm.models.team_member import TeamMember
from advisory_crm.services.clients import create_client
from advisory_crm.services.projects import create_project
from advisory_crm.services.team_members import create_team_member

AVATAR = "https://images.unsplash.com/photo-{}?auto=format&fit=facearea&facepad=2&w=256&h=256&q=80"

TEAM_MEMBERS = [
    ("Alex Morgan", "alex.morgan@example.com", "Investment Analyst", "1472099645785-5658abf4ff4e"),
    ("Sarah Johnson", "sarah.johnson@example.com", "Senior Advisor", "1494790108377-be9c29b29330"),
    ("Michael Chen", "michael.chen@example.com", "Investment Manager", "1500648767791-00dcc994a43e"),
    ("Priya Patel", "priya.patel@example.com", "Client Relations", "1573497019940-1c28c88b4f3e"),
]

# (name, status, days since last contact)
CLIENTS = [
    ("Meridian Holdings", "active", 2),
    ("Global Ventures Inc.", "pending", 7),
    ("Summit Capital Partners", "on-hold", 11),
    ("Astro Investments Ltd.", "completed", 3),
    ("Blue Sky Ventures", "active", 1),
    ("Legacy Financial Group", "completed", 30),
]

# Direct projects take their client's last-contacted date
DIRECT_PROJECTS = [
    ("Meridian Holdings Investment Round", "+91 98765 43210", "Rajiv Mehta", "active", "Alex Morgan", "Meridian Holdings"),
    ("Global Ventures Expansion", "+1 212-555-0123", "Sarah Johnson", "pending", "Sarah Johnson", "Global Ventures Inc."),
    ("Summit Capital Restructuring", "+44 20 7946 0958", "David Chen", "on-hold", "Michael Chen", "Summit Capital Partners"),
    ("Astro Investments Divestiture", "+91 98123 45678", "Priya Patel", "completed", "Priya Patel", "Astro Investments Ltd."),
]

AFFILIATE_PROJECTS = [
    ("Tech Startup Funding", "+91 99876 54321", "Vikram Shah", "kotak", 5, "active", "Alex Morgan"),
    ("Healthcare Portfolio Review", "+91 88765 43210", "Ananya Desai", "kotak", 8, "pending", "Sarah Johnson"),
    ("Sustainable Energy Fund", "+65 9876 5432", "Lim Wei", "360-wealth", 3, "active", "Michael Chen"),
    ("Real Estate Trust", "+41 78 123 4567", "Hans Müller", "lgt", 15, "on-hold", "Priya Patel"),
    ("Emerging Markets Fund", "+1 415-555-0123", "Jennifer Lee", "pandion", 6, "active", "Alex Morgan"),
]

OTHER_PROJECTS = [
    ("SME Finance Symposium", "+91 99887 76655", "Rahul Sharma", "phdcci", 4, "active", "Sarah Johnson"),
    ("Financial Inclusion Initiative", "+91 98765 12345", "Neha Gupta", "idc", 9, "pending", "Michael Chen"),
    ("Investment Banking Campaign", "+1 650-555-0123", "Mark Williams", "marketing", 2, "active", "Priya Patel"),
    ("Financial Leadership Series", "+44 20 7123 4567", "Emma Clarke", "pr", 7, "active", "Alex Morgan"),
]


def seed():
    print("--- Seeding database ---")
    init_db()

    now = utcnow()

    def days_ago(days):
        return (now - timedelta(days=days)).date().isoformat()

    with Session(engine) as session:
        if session.exec(select(TeamMember)).first():
            print("Database already contains team members, skipping seed.")
            return

        members = {}
        for name, email, role, photo in TEAM_MEMBERS:
            member = create_team_member(
                session,
                {"name": name, "email": email, "role": role, "avatarUrl": AVATAR.format(photo)},
                now,
            )
            members[name] = member.id
        print(f"Added {len(members)} team members")

        clients = {}
        for name, status, days in CLIENTS:
            client = create_client(
                session, {"name": name, "status": status, "lastContacted": days_ago(days)}, now
            )
            clients[name] = (client.id, days)
        print(f"Added {len(clients)} clients")

        count = 0
        for name, phone, poc, status, member, client_name in DIRECT_PROJECTS:
            client_id, days = clients[client_name]
            create_project(session, {
                "name": name, "phoneNumber": phone, "poc": poc, "type": "direct",
                "lastContacted": days_ago(days), "status": status,
                "assignedToId": members[member], "clientId": client_id,
            }, now)
            count += 1

        for name, phone, poc, partner, days, status, member in AFFILIATE_PROJECTS:
            create_project(session, {
                "name": name, "phoneNumber": phone, "poc": poc, "type": "affiliate",
                "affiliatePartner": partner, "lastContacted": days_ago(days),
                "status": status, "assignedToId": members[member],
            }, now)
            count += 1

        for name, phone, poc, category, days, status, member in OTHER_PROJECTS:
            create_project(session, {
                "name": name, "phoneNumber": phone, "poc": poc, "type": "other",
                "category": category, "lastContacted": days_ago(days),
                "status": status, "assignedToId": members[member],
            }, now)
            count += 1
        print(f"Added {count} projects")

    print("Seed completed successfully!")


if __name__ == "__main__":
    seed()
