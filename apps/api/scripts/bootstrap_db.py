"""Create database schema and seed sample properties and bookings for development."""
from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import Engine, delete
from sqlalchemy.orm import Session

from rentdar.core.context import AppContext
from rentdar.db.session import SessionLocal, engine
from rentdar.models.base import Base
from rentdar.models.blocked_date import BlockedDate, BlockReason
from rentdar.models.property import BookingSource, Property, PropertyType
from rentdar.models.transaction import ExpenseCategory, Platform, Transaction

PROPERTIES = [
	{
		"id": "prop-beach-studio",
		"name": "Beach Studio",
		"address": "14 Ocean Drive",
		"city": "Miami",
		"state": "FL",
		"type": PropertyType.SHORT_TERM,
		"source": BookingSource.AIRBNB,
		"rate": Decimal("145"),
		"bedrooms": 1,
		"bathrooms": 1,
		"max_guests": 2,
		"illustration": 0,
		# (guest, platform label, start offset, nights, amount)
		"bookings": [
			("Sarah M.", "Airbnb", -1, 3, Decimal("435")),
			("James W.", "Booking.com", 4, 4, Decimal("580")),
			("Priya K.", "", 12, 2, Decimal("290")),
		],
		"expenses": [
			("Cleaning Service", "Cleaning", -1, Decimal("45")),
		],
		"blocked": [
			(20, 22, BlockReason.MAINTENANCE, "Deep clean and AC service"),
		],
	},
	{
		"id": "prop-mountain-cabin",
		"name": "Mountain Cabin",
		"address": "3 Pine Ridge Rd",
		"city": "Asheville",
		"state": "NC",
		"type": PropertyType.SHORT_TERM,
		"source": BookingSource.VRBO,
		"rate": Decimal("210"),
		"bedrooms": 3,
		"bathrooms": 2,
		"max_guests": 6,
		"illustration": 3,
		"bookings": [
			("Lena H.", "vrbo", 6, 5, Decimal("1050")),
		],
		"expenses": [],
		"blocked": [
			(-3, -1, BlockReason.PERSONAL, None),
		],
	},
	{
		"id": "prop-downtown-loft",
		"name": "Downtown Loft",
		"address": "220 Main St, Apt 5B",
		"city": "Austin",
		"state": "TX",
		"type": PropertyType.LONG_TERM,
		"source": BookingSource.DIRECT,
		"rate": Decimal("2100"),
		"bedrooms": 2,
		"bathrooms": 1,
		"max_guests": 3,
		"illustration": 2,
		# Monthly rent without an end date runs one month from its start.
		"bookings": [
			("Marcus T.", "Direct", -10, None, Decimal("2100")),
		],
		"expenses": [
			("Plumbing repair", "Repairs", -20, Decimal("180")),
		],
		"blocked": [],
	},
]


def create_schema(bind: Engine = engine) -> None:
	"""Create the database schema if it does not already exist."""

	Base.metadata.create_all(bind)


def seed_properties(session: Session, today: date) -> None:
	"""Insert or replace demo properties with bookings around ``today``."""

	with session.begin():
		for prop in PROPERTIES:
			property_obj = session.get(Property, prop["id"])
			if property_obj is None:
				property_obj = Property(id=prop["id"])
				session.add(property_obj)

			property_obj.name = prop["name"]
			property_obj.address = prop["address"]
			property_obj.city = prop["city"]
			property_obj.state = prop["state"]
			property_obj.property_type = prop["type"]
			property_obj.booking_source = prop["source"]
			property_obj.nightly_rate = prop["rate"]
			property_obj.bedrooms = prop["bedrooms"]
			property_obj.bathrooms = prop["bathrooms"]
			property_obj.max_guests = prop["max_guests"]
			property_obj.illustration_index = prop["illustration"]

			session.execute(delete(Transaction).where(Transaction.property_id == prop["id"]))
			session.execute(delete(BlockedDate).where(BlockedDate.property_id == prop["id"]))

			for guest, platform, offset, nights, amount in prop["bookings"]:
				start = today + timedelta(days=offset)
				session.add(
					Transaction(
						property_id=prop["id"],
						is_income=True,
						name=guest,
						amount=amount,
						start_date=start,
						end_date=start + timedelta(days=nights) if nights is not None else None,
						platform=Platform.from_label(platform),
					)
				)

			for name, category, offset, amount in prop["expenses"]:
				session.add(
					Transaction(
						property_id=prop["id"],
						is_income=False,
						name=name,
						amount=amount,
						start_date=today + timedelta(days=offset),
						category=ExpenseCategory.from_label(category),
					)
				)

			for start_offset, end_offset, reason, notes in prop["blocked"]:
				session.add(
					BlockedDate(
						property_id=prop["id"],
						start_date=today + timedelta(days=start_offset),
						end_date=today + timedelta(days=end_offset),
						reason=reason,
						notes=notes,
					)
				)


def main() -> None:
	create_schema()
	today = AppContext().today()
	with SessionLocal() as session:
		seed_properties(session, today)
	print("Database schema ensured and demo data seeded.")


if __name__ == "__main__":
	main()
