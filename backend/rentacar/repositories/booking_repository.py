from datetime import date
from typing import Dict, Iterable, List, Optional

from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from rentacar.models.booking import Booking, BookingStatus


def _status_values(statuses: Iterable) -> List[str]:
    return [BookingStatus(s).value for s in statuses]


class BookingRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, booking_id: int, for_update: bool = False) -> Optional[Booking]:
        query = self.db.query(Booking).filter(Booking.id == booking_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def save(self, booking: Booking) -> Booking:
        self.db.add(booking)
        self.db.flush()  # assigns booking.id inside the open transaction
        return booking

    def find_all(self) -> List[Booking]:
        return self.db.query(Booking).order_by(Booking.pickup_date.desc(), Booking.id.desc()).all()

    def find_by_customer_id(self, customer_id: int) -> List[Booking]:
        return self.db.query(Booking).filter(
            Booking.customer_id == customer_id
        ).order_by(Booking.pickup_date.desc(), Booking.id.desc()).all()

    def find_overlapping(
        self,
        vehicle_id: int,
        start_date: date,
        end_date: date,
        statuses: Iterable = (BookingStatus.CONFIRMED,),
    ) -> List[Booking]:
        """Bookings of the vehicle whose inclusive date range intersects [start_date, end_date]."""
        return self.db.query(Booking).filter(
            and_(
                Booking.vehicle_id == vehicle_id,
                Booking.status.in_(_status_values(statuses)),
                Booking.pickup_date <= end_date,
                Booking.return_date >= start_date,
            )
        ).all()

    def find_by_pickup_date(self, day: date, statuses: Iterable) -> List[Booking]:
        return self.db.query(Booking).filter(
            and_(Booking.pickup_date == day, Booking.status.in_(_status_values(statuses)))
        ).order_by(Booking.id).all()

    def find_by_return_date(self, day: date, statuses: Iterable) -> List[Booking]:
        return self.db.query(Booking).filter(
            and_(Booking.return_date == day, Booking.status.in_(_status_values(statuses)))
        ).order_by(Booking.id).all()

    def count_by_status(self) -> Dict[str, int]:
        rows = self.db.query(Booking.status, func.count(Booking.id)).group_by(Booking.status).all()
        counts = {status.value: 0 for status in BookingStatus}
        counts.update({status: count for status, count in rows})
        return counts
