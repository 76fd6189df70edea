from ride_booking.database import models


def test_listing_paginates_newest_first(client, make_user, make_trip, book, auth_headers):
    passenger = make_user()
    trip = make_trip(make_user("Dana", "Driver"), total_seats=20)
    ids = [book(passenger, trip)["booking"]["id"] for _ in range(12)]
    book(make_user("Olive", "Other"), trip)

    first = client.get("/api/bookings/user/bookings", params={"limit": 10, "page": 1}, headers=auth_headers(passenger))
    second = client.get("/api/bookings/user/bookings", params={"limit": 10, "page": 2}, headers=auth_headers(passenger))

    assert first.status_code == 200 and second.status_code == 200
    assert [b["id"] for b in first.json()["bookings"]] == list(reversed(ids))[:10]
    page_two = second.json()
    assert [b["id"] for b in page_two["bookings"]] == [ids[1], ids[0]]
    assert page_two["total"] == 12
    assert page_two["totalPages"] == 2
    assert page_two["currentPage"] == 2


def test_listing_defaults_and_status_filter(client, make_user, make_trip, book, auth_headers):
    passenger = make_user()
    trip = make_trip(make_user("Dana", "Driver"), total_seats=10)
    kept = book(passenger, trip)["booking"]["id"]
    dropped = book(passenger, trip)["booking"]["id"]
    client.patch(f"/api/bookings/{dropped}/cancel", headers=auth_headers(passenger))

    everything = client.get("/api/bookings/user/bookings", headers=auth_headers(passenger)).json()
    cancelled = client.get(
        "/api/bookings/user/bookings", params={"status": "cancelled"}, headers=auth_headers(passenger)
    ).json()
    pending = client.get(
        "/api/bookings/user/bookings", params={"status": "pending"}, headers=auth_headers(passenger)
    ).json()

    assert everything["total"] == 2 and everything["currentPage"] == 1 and everything["totalPages"] == 1
    assert [b["id"] for b in cancelled["bookings"]] == [dropped]
    assert [b["id"] for b in pending["bookings"]] == [kept]


def test_listing_with_no_bookings(client, make_user, auth_headers):
    body = client.get("/api/bookings/user/bookings", headers=auth_headers(make_user())).json()

    assert body == {"bookings": [], "totalPages": 0, "currentPage": 1, "total": 0}


def test_listing_with_unknown_status_is_empty(client, make_user, make_trip, book, auth_headers):
    passenger = make_user()
    book(passenger, make_trip(make_user("Dana", "Driver")))

    response = client.get("/api/bookings/user/bookings", params={"status": "lost"}, headers=auth_headers(passenger))

    assert response.status_code == 200
    assert response.json() == {"bookings": [], "totalPages": 0, "currentPage": 1, "total": 0}


def test_get_booking_visible_to_passenger_and_driver_only(client, make_user, make_trip, book, auth_headers):
    driver = make_user("Dana", "Driver")
    passenger = make_user()
    booking_id = book(passenger, make_trip(driver))["booking"]["id"]

    assert client.get(f"/api/bookings/{booking_id}", headers=auth_headers(passenger)).status_code == 200
    as_driver = client.get(f"/api/bookings/{booking_id}", headers=auth_headers(driver))
    assert as_driver.status_code == 200
    assert as_driver.json()["passenger"]["firstName"] == "Pat"

    stranger = client.get(f"/api/bookings/{booking_id}", headers=auth_headers(make_user("Sam", "Stranger")))
    assert stranger.status_code == 403
    assert stranger.json() == {"message": "Not authorized to view this booking"}

    assert client.get("/api/bookings/9999", headers=auth_headers(passenger)).status_code == 404


def test_passenger_receives_driver_contact(client, make_user, make_trip, book, auth_headers, reload):
    driver = make_user("Dana", "Driver", phone="9811111111")
    passenger = make_user()
    booking_id = book(passenger, make_trip(driver))["booking"]["id"]

    response = client.post(f"/api/bookings/{booking_id}/share-contact", headers=auth_headers(passenger))

    assert response.status_code == 200
    assert response.json() == {
        "message": "Contact details shared successfully",
        "contact": {"name": "Dana Driver", "phone": "9811111111"},
    }
    stored = reload(models.Booking, booking_id)
    assert stored.driver_contact["name"] == "Dana Driver"
    assert stored.driver_contact["shared_at"]
    assert stored.passenger_contact is None

    fetched = client.get(f"/api/bookings/{booking_id}", headers=auth_headers(passenger)).json()
    assert fetched["driverContact"]["phone"] == "9811111111"
    assert fetched["driverContact"]["sharedAt"] is not None


def test_driver_receives_passenger_contact(client, make_user, make_trip, book, auth_headers, reload):
    driver = make_user("Dana", "Driver")
    passenger = make_user("Pat", "Passenger", phone="9822222222")
    booking_id = book(passenger, make_trip(driver))["booking"]["id"]

    response = client.post(f"/api/bookings/{booking_id}/share-contact", headers=auth_headers(driver))

    assert response.status_code == 200
    assert response.json()["contact"] == {"name": "Pat Passenger", "phone": "9822222222"}
    stored = reload(models.Booking, booking_id)
    assert stored.passenger_contact["phone"] == "9822222222"
    assert stored.driver_contact is None


def test_contact_is_not_shared_with_third_parties(client, make_user, make_trip, book, auth_headers):
    booking_id = book(make_user(), make_trip(make_user("Dana", "Driver")))["booking"]["id"]

    response = client.post(
        f"/api/bookings/{booking_id}/share-contact", headers=auth_headers(make_user("Sam", "Stranger"))
    )

    assert response.status_code == 403
    assert response.json()["message"] == "Not authorized to access contact details"
