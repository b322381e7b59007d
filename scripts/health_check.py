#!/usr/bin/env python
"""
RoomBoard database health check.

Read-only integrity report:
- Rooms pointing at missing locations
- Bookings pointing at missing rooms
- Bookings that end before they start
- Overlapping bookings on the same room (allowed, but worth reviewing)

Usage:
    python scripts/health_check.py --db-path instance/roomboard.db
"""

import sqlite3
import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.booking_conflicts import find_overlapping_pairs  # noqa: E402
from services.data_access import booking_from_row  # noqa: E402

SEVERITY_ICONS = {'ok': '[OK]', 'warn': '[WARN]', 'fail': '[FAIL]'}


def get_connection(db_path: str) -> sqlite3.Connection:
    """Open a read-only connection to the SQLite database."""
    conn = sqlite3.connect(f"file:{db_path}?mode=ro", uri=True)
    conn.row_factory = sqlite3.Row
    return conn


def issue(category: str, check: str, severity: str, count: int, details: list) -> dict:
    """Create a standardized issue dict."""
    return {
        'category': category,
        'check': check,
        'severity': severity,
        'count': count,
        'details': details[:20]  # Cap at 20 examples
    }


def check_data_integrity(conn: sqlite3.Connection) -> list:
    """
    Check for broken references and impossible date ranges.

    Returns list of issue dicts.
    """
    results = []
    cur = conn.cursor()

    # --- 1. Orphaned rooms ---
    cur.execute('''
        SELECT r.id, r.name, r.location_id
        FROM rooms r
        LEFT JOIN locations l ON r.location_id = l.id
        WHERE l.id IS NULL
    ''')
    rows = cur.fetchall()
    results.append(issue(
        category='Data Integrity',
        check='Rooms with missing location',
        severity='fail' if rows else 'ok',
        count=len(rows),
        details=[f"room={r['name']} location_id={r['location_id']}" for r in rows]
    ))

    # --- 2. Orphaned bookings ---
    cur.execute('''
        SELECT b.id, b.guest_name, b.room_id
        FROM bookings b
        LEFT JOIN rooms r ON b.room_id = r.id
        WHERE r.id IS NULL
    ''')
    rows = cur.fetchall()
    results.append(issue(
        category='Data Integrity',
        check='Bookings with missing room',
        severity='fail' if rows else 'ok',
        count=len(rows),
        details=[f"guest={r['guest_name']} room_id={r['room_id']}" for r in rows]
    ))

    # --- 3. Inverted date ranges ---
    cur.execute('''
        SELECT id, guest_name, start_date, end_date
        FROM bookings
        WHERE end_date < start_date
    ''')
    rows = cur.fetchall()
    results.append(issue(
        category='Data Integrity',
        check='Bookings ending before they start',
        severity='fail' if rows else 'ok',
        count=len(rows),
        details=[f"guest={r['guest_name']} {r['start_date']} -> {r['end_date']}" for r in rows]
    ))

    return results


def check_overlaps(conn: sqlite3.Connection) -> list:
    """Report overlapping bookings on the same room."""
    cur = conn.cursor()
    cur.execute('SELECT * FROM bookings ORDER BY start_date, rowid')
    bookings = [booking_from_row(dict(row)) for row in cur.fetchall()]

    pairs = find_overlapping_pairs(bookings)
    return [issue(
        category='Bookings',
        check='Overlapping bookings on the same room',
        severity='warn' if pairs else 'ok',
        count=len(pairs),
        details=[
            f"{a.guest_name} ({a.start_date} to {a.end_date}) overlaps "
            f"{b.guest_name} ({b.start_date} to {b.end_date})"
            for a, b in pairs
        ]
    )]


def run_checks(db_path: str) -> list:
    """Run every check against a database file."""
    conn = get_connection(db_path)
    try:
        return check_data_integrity(conn) + check_overlaps(conn)
    finally:
        conn.close()


def main():
    parser = argparse.ArgumentParser(
        description='Run integrity checks on a RoomBoard database'
    )
    parser.add_argument('--db-path', type=str, default=os.environ.get('DATABASE_PATH'),
                        help='Path to SQLite database file (default: $DATABASE_PATH)')
    args = parser.parse_args()

    if not args.db_path:
        print("Error: Specify --db-path <path> or set DATABASE_PATH")
        sys.exit(1)

    if not os.path.exists(args.db_path):
        print(f"Error: Database not found: {args.db_path}")
        sys.exit(1)

    results = run_checks(args.db_path)

    for r in results:
        icon = SEVERITY_ICONS.get(r['severity'], '[?]')
        print(f"{icon} {r['check']} ({r['count']} issues)")
        for d in r['details'][:3]:
            print(f"    -> {d}")

    if any(r['severity'] == 'fail' for r in results):
        sys.exit(2)


if __name__ == '__main__':
    main()
