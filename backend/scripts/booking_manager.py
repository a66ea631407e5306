#!/usr/bin/env python3
r"""
Booking Management Tool for branch operators

Usage:
    cd backend
    source .venv/bin/activate

    python scripts/booking_manager.py --init-db
    python scripts/booking_manager.py --list --status confirmed
    python scripts/booking_manager.py --pickups 2025-01-10
    python scripts/booking_manager.py --returns 2025-01-12
    python scripts/booking_manager.py --cancel 42
    python scripts/booking_manager.py --stats
"""

import sys
import argparse
from pathlib import Path
from datetime import date
from typing import Any, Dict, List, Optional

# Add parent directory to path to import rentacar modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from rentacar.database import get_db_session, get_runtime_db_pool_settings, init_db
from rentacar.models.audit_log import AuditLog
from rentacar.models.booking import Booking, BookingStatus
from rentacar.models.vehicle import Vehicle
from rentacar.repositories.booking_repository import BookingRepository
from rentacar.services.booking_service import BookingService
from rentacar.utils.exceptions import RentACarError

CLI_ACTOR = "booking_manager"


def format_booking(booking: Booking) -> str:
    """Format a booking for display."""
    return (
        f"ID: {booking.id}\n"
        f"  Status: {booking.status}\n"
        f"  Customer: {booking.customer_id}  Vehicle: {booking.vehicle_id}\n"
        f"  Period: {booking.pickup_date} -> {booking.return_date} ({booking.rental_days} days)\n"
        f"  Route: {booking.pickup_location} -> {booking.return_location}\n"
        f"  Price: {booking.total_price} (extras {booking.extras_cost}), final {booking.final_price}"
    )


def print_bookings(bookings: List[Booking], title: str) -> None:
    print("\n" + "=" * 70)
    print(f"{title}: {len(bookings)}")
    print("=" * 70)
    for booking in bookings:
        print(format_booking(booking))
        print("-" * 70)


def list_bookings(status: Optional[str] = None, limit: int = 50) -> List[Booking]:
    """List bookings, newest first, optionally filtered by status."""
    db = get_db_session()
    try:
        query = db.query(Booking)
        if status:
            try:
                query = query.filter(Booking.status == BookingStatus(status.lower()).value)
            except ValueError:
                print(f"Warning: Invalid status '{status}'. Valid statuses: {[s.value for s in BookingStatus]}")
        return query.order_by(Booking.created_at.desc()).limit(limit).all()
    finally:
        db.close()


def bookings_for_date(kind: str, day: date) -> List[Booking]:
    db = get_db_session()
    try:
        service = BookingService(db)
        if kind == "pickups":
            return service.get_pickups_for_date(day)
        if kind == "returns":
            return service.get_returns_for_date(day)
        return service.get_requests_for_date(day)
    finally:
        db.close()


def cancel_booking(booking_id: int, confirm: bool = True) -> bool:
    db = get_db_session()
    try:
        service = BookingService(db)
        booking = service.get_booking(booking_id)
        if confirm:
            print(format_booking(booking))
            response = input("\nCancel this booking? (yes/no): ").strip().lower()
            if response != "yes":
                print("Cancellation aborted.")
                return False
        service.cancel_booking(booking_id, actor=CLI_ACTOR, origin="cli")
        print(f"\n✓ Booking {booking_id} cancelled.")
        return True
    except RentACarError as e:
        print(f"\n✗ Could not cancel booking {booking_id}: {e.message}")
        return False
    finally:
        db.close()


def get_database_stats() -> Dict[str, Any]:
    db = get_db_session()
    try:
        status_counts = BookingRepository(db).count_by_status()
        return {
            "bookings_by_status": status_counts,
            "total_bookings": sum(status_counts.values()),
            "vehicles": db.query(Vehicle).count(),
            "audit_logs": db.query(AuditLog).count(),
            "pool": get_runtime_db_pool_settings(),
        }
    finally:
        db.close()


def print_stats(stats: Dict[str, Any]) -> None:
    print("\n" + "=" * 50)
    print("DATABASE STATISTICS")
    print("=" * 50)
    print(f"Total bookings: {stats['total_bookings']}")
    for status, count in sorted(stats["bookings_by_status"].items()):
        print(f"  {status}: {count}")
    print(f"Vehicles: {stats['vehicles']}")
    print(f"Audit logs: {stats['audit_logs']}")
    print(f"Database: {stats['pool']}")


def parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not a date (YYYY-MM-DD)")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Booking Management Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/booking_manager.py --init-db
  python scripts/booking_manager.py --list --status requested
  python scripts/booking_manager.py --pickups 2025-01-10
  python scripts/booking_manager.py --cancel 42 --no-confirm
  python scripts/booking_manager.py --stats
        """
    )

    parser.add_argument("--init-db", action="store_true", help="Create all tables")
    parser.add_argument("--list", action="store_true", help="List bookings")
    parser.add_argument("--status", type=str, help="Filter by status")
    parser.add_argument("--pickups", type=parse_day, metavar="DATE", help="Confirmed pickups on a date")
    parser.add_argument("--returns", type=parse_day, metavar="DATE", help="Confirmed returns on a date")
    parser.add_argument("--requests", type=parse_day, metavar="DATE", help="Unconfirmed requests starting on a date")
    parser.add_argument("--cancel", type=int, metavar="ID", help="Cancel a booking")
    parser.add_argument("--stats", action="store_true", help="Show database statistics")

    parser.add_argument("--limit", type=int, default=50, help="Limit for listing (default: 50)")
    parser.add_argument("--no-confirm", action="store_true", help="Skip confirmation prompts")

    args = parser.parse_args()

    if len(sys.argv) == 1:
        parser.print_help()
        return

    if args.init_db:
        init_db()
        print("✓ Tables created")

    if args.list or args.status:
        print_bookings(list_bookings(status=args.status, limit=args.limit), "Bookings")

    for kind in ("pickups", "returns", "requests"):
        day = getattr(args, kind)
        if day:
            print_bookings(bookings_for_date(kind, day), f"{kind.capitalize()} on {day.isoformat()}")

    if args.cancel is not None:
        if not cancel_booking(args.cancel, confirm=not args.no_confirm):
            sys.exit(1)

    if args.stats:
        print_stats(get_database_stats())


if __name__ == "__main__":
    main()
