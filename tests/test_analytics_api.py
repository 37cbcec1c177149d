from datetime import datetime

from models import db, Booking


def test_analytics_requires_provider(customer):
    assert customer.get("/analytics").status_code == 403


def test_analytics_days_bounds(provider):
    assert provider.get("/analytics?days=0").status_code == 200  # falls back to default
    assert provider.get("/analytics?days=-3").status_code == 400
    assert provider.get("/analytics?days=1000").status_code == 400


def test_analytics_counts_recent_bookings(app, provider, customer, haircut):
    # bookings made through the API lie in the future; put two in the past window directly
    with app.app_context():
        customer_id = db.session.execute(
            db.text("SELECT id FROM users WHERE email = 'customer@example.com'")
        ).scalar_one()
        for day, status in ((29, "COMPLETED"), (30, "CANCELLED")):
            db.session.add(Booking(
                customer_id=customer_id,
                provider_id=haircut["provider_id"],
                service_id=haircut["id"],
                start_time=datetime(2030, 11, day, 10),
                end_time=datetime(2030, 11, day, 11),
                status=status,
            ))
        db.session.commit()

    resp = provider.get("/analytics?days=7")
    assert resp.status_code == 200
    body = resp.get_json()

    assert body["total_bookings"] == 2
    assert body["total_revenue"] == 45.0
    assert body["bookings_by_status"] == {"PENDING": 0, "CONFIRMED": 0, "CANCELLED": 1, "COMPLETED": 1}
    assert len(body["bookings_by_day"]) == 7
    assert body["bookings_by_day"][-1]["date"] == "2030-12-01"
    assert body["average_rating"] == 0
