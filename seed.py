#!/usr/bin/env python3
# seed.py
"""
Example data for local development.

Drops and recreates every table, then inserts citizens, officers, reports
(with notes and witnesses), lost items and alerts. Can be run multiple times.

Usage:
  flask --app wsgi seed-example-data
  python seed.py

Env:
  SEED_PASSWORD (default: Guardian!234)
  SEED_EMAIL    (optional; when set every example account gets it and
                 therefore goes through MFA on login)
"""
from __future__ import annotations

import os
from collections import Counter

from flask import current_app

from db import db
from models.alert import Alert
from models.lost_item import LostItem
from models.note import Note
from models.personal_details import PersonalDetails
from models.report import Report
from models.user import User
from utils.priority import get_text_priority

SEED_PASSWORD = os.environ.get("SEED_PASSWORD", "Guardian!234")
SEED_EMAIL = os.environ.get("SEED_EMAIL") or None

CITIZENS = [
    {"username": "maria.lopez",   "first_name": "Maria",   "last_name": "Lopez"},
    {"username": "james.edwards", "first_name": "James",   "last_name": "Edwards"},
    {"username": "aaliyah.chen",  "first_name": "Aaliyah", "last_name": "Chen"},
    {"username": "noah.patel",    "first_name": "Noah",    "last_name": "Patel"},
    {"username": "sofia.martin",  "first_name": "Sofia",   "last_name": "Martin"},
    {"username": "oliver.kim",    "first_name": "Oliver",  "last_name": "Kim"},
]

OFFICERS = [
    {"username": "OF-201", "first_name": "Elena", "last_name": "Hughes"},
    {"username": "OF-305", "first_name": "Rohan", "last_name": "Singh"},
    {"username": "OF-442", "first_name": "Priya", "last_name": "Nair"},
]

REPORTS = [
    {
        "citizen": "maria.lopez",
        "description": "Traffic hazard at Main & 3rd. Two vehicles collided at the intersection "
                       "leaving oil across the eastbound lane. Queues stretch back three blocks.",
        "longitude": 151.2076, "latitude": -33.8679, "status": "PENDING",
        "notes": [
            ("Call intake", "Report logged at 14:05 after multiple calls from nearby businesses."),
            ("Dispatch", "Unit Bravo-12 en route to manage the intersection until tow services arrive."),
        ],
        "witnesses": [("Evelyn Grant", "0400 111 222"), ("Marcus Reid", "0400 333 444")],
    },
    {
        "citizen": "james.edwards",
        "description": "Suspicious activity near the community centre car park. Someone is trying "
                       "car door handles after dark.",
        "longitude": 151.2153, "latitude": -33.8568, "status": "IN-PROGRESS",
        "notes": [("Patrol", "Extra patrol scheduled for the next three evenings.")],
        "witnesses": [("Hannah Ortiz", "0400 555 666")],
    },
    {
        "citizen": "aaliyah.chen",
        "description": "Graffiti on the railway underpass walls, reported by several commuters.",
        "longitude": 151.2010, "latitude": -33.8731, "status": "COMPLETED",
        "notes": [("Council", "Cleaning crew booked for Thursday morning.")],
        "witnesses": [],
    },
    {
        "citizen": "noah.patel",
        "description": "Urgent: house fire reported on Elm Street, residents evacuated, one person injured.",
        "longitude": 151.1987, "latitude": -33.8802, "status": "PENDING",
        "notes": [],
        "witnesses": [("Grace Liu", "0400 777 888")],
    },
]

LOST_ITEMS = [
    {
        "citizen": "sofia.martin", "name": "Black backpack",
        "description": "Black hiking backpack with a laptop inside, left on the 7:40 bus.",
        "color": "Black", "model": "Osprey Daylite", "serial_number": None,
        "longitude": 151.2093, "latitude": -33.8688, "status": "PENDING", "branch": "Central",
        "owner": {"first_name": "Sofia", "last_name": "Martin",
                  "date_of_birth": "1992-04-17", "contact_number": "0400 123 456"},
    },
    {
        "citizen": "oliver.kim", "name": "Mountain bike",
        "description": "Blue mountain bike taken from the rack outside the library.",
        "color": "Blue", "model": "Trek Marlin 5", "serial_number": "WTU123456789",
        "longitude": 151.2120, "latitude": -33.8650, "status": "FOUND", "branch": "North",
        "owner": {"first_name": "Oliver", "last_name": "Kim",
                  "date_of_birth": "1988-11-02", "contact_number": "0400 987 654"},
    },
    {
        "citizen": "maria.lopez", "name": "Wallet",
        "description": "Brown leather wallet lost somewhere around the market.",
        "color": "Brown", "model": None, "serial_number": None,
        "longitude": 151.2040, "latitude": -33.8700, "status": "INVESTIGATING", "branch": "Central",
        "owner": None,
    },
]

ALERTS = [
    {"officer": "OF-201", "title": "Road closure on Main St",
     "description": "Main St between 2nd and 4th Ave is closed for clean-up until 18:00.", "type": "Traffic"},
    {"officer": "OF-305", "title": "Severe weather warning",
     "description": "Strong winds expected overnight. Secure loose items outdoors.", "type": "Weather"},
    {"officer": "OF-442", "title": "Community safety meeting",
     "description": "Join local officers at the community centre on Friday at 19:00.", "type": "Community"},
]


def _try_save(obj, failures: Counter):
    try:
        obj.save()
        return obj
    except Exception:
        db.session.rollback()
        failures[obj.__tablename__] += 1
        current_app.logger.exception("[seed] failed to save %s", obj.__tablename__)
        return None


def _make_user(row: dict, is_officer: bool, failures: Counter):
    user = User(
        username=row["username"],
        email=SEED_EMAIL,
        first_name=row["first_name"],
        last_name=row["last_name"],
        is_officer=is_officer,
    )
    user.set_password(SEED_PASSWORD)
    return _try_save(user, failures)


def seed_example_data() -> Counter:
    """Recreate the schema and load example rows. Returns failures per table."""
    failures: Counter = Counter()

    db.session.close()
    db.drop_all()
    db.create_all()

    users = {}
    for row in CITIZENS:
        users[row["username"]] = _make_user(row, False, failures)
    for row in OFFICERS:
        users[row["username"]] = _make_user(row, True, failures)

    officer_ids = [u.id for name, u in users.items() if u is not None and u.is_officer]

    for i, row in enumerate(REPORTS):
        author = users.get(row["citizen"])
        if author is None:
            continue
        report = _try_save(Report(
            description=row["description"],
            longitude=row["longitude"],
            latitude=row["latitude"],
            status=row["status"],
            priority=get_text_priority(row["description"]),
            user_id=author.id,
        ), failures)
        if report is None:
            continue

        officer_id = officer_ids[i % len(officer_ids)] if officer_ids else None
        for subject, content in row["notes"]:
            _try_save(Note(resource_type="report", resource_id=report.id,
                           subject=subject, content=content, user_id=officer_id), failures)
        for full_name, contact in row["witnesses"]:
            _try_save(PersonalDetails(first_name=full_name, contact_number=contact,
                                      report_id=report.id), failures)

    for row in LOST_ITEMS:
        owner = users.get(row["citizen"])
        if owner is None:
            continue
        item = _try_save(LostItem(
            name=row["name"],
            description=row["description"],
            serial_number=row["serial_number"],
            color=row["color"],
            model=row["model"],
            longitude=row["longitude"],
            latitude=row["latitude"],
            status=row["status"],
            branch=row["branch"],
            user_id=owner.id,
        ), failures)
        if item is not None and row["owner"]:
            _try_save(PersonalDetails(lost_article_id=item.id, **row["owner"]), failures)

    for row in ALERTS:
        author = users.get(row["officer"])
        _try_save(Alert(
            title=row["title"],
            description=row["description"],
            type=row["type"],
            created_by=author.id if author else None,
        ), failures)

    return failures


if __name__ == "__main__":
    from dotenv import load_dotenv
    from app import create_app

    load_dotenv()
    app = create_app()
    with app.app_context():
        result = seed_example_data()
        if result:
            print("⚠️  Seeded with failures: " + ", ".join(f"{t}={n}" for t, n in sorted(result.items())))
        else:
            print("✅ Example data created.")
