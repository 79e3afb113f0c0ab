from datetime import datetime

import pytest

from app.core.errors import ValidationError
from app.db import crud
from app.models.reviews import Review
from app.services.reviews import activity_calendar, validate_rating
from conftest import count_rows, headers_for


@pytest.mark.parametrize("value, expected", [(1, 1), (5, 5), (3.0, 3)])
def test_validate_rating_accepts_whole_numbers(value, expected):
    assert validate_rating(value) == expected


@pytest.mark.parametrize("value", [0, 6, -1, 2.5, None, "3", "abc", True, float("nan")])
def test_validate_rating_rejects(value):
    with pytest.raises(ValidationError):
        validate_rating(value)


def test_create_review(client, make_route, user):
    route = make_route("Ruta del Cares")

    r = client.post(
        f"/api/routes/{route.id}/reviews",
        json={"rating": 4, "comment": "  Preciosa  "},
        headers=headers_for(user),
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["rating"] == 4
    assert body["comment"] == "Preciosa"
    assert body["routeId"] == route.id
    assert body["userId"] == user.id


@pytest.mark.parametrize(
    "payload",
    [{"rating": 0}, {"rating": 6}, {"rating": 2.5}, {"rating": "abc"}, {"rating": "3"}, {"rating": True}, {"rating": False}, {"rating": None}, {}],
)
def test_create_review_invalid_rating_400(client, db, make_route, user, payload):
    route = make_route("Ruta del Cares")

    r = client.post(f"/api/routes/{route.id}/reviews", json=payload, headers=headers_for(user))
    assert r.status_code == 400
    assert r.json()["code"] == "VALIDATION_ERROR"
    assert count_rows(db, Review) == 0


def test_create_review_whole_float_rating_accepted(client, make_route, user):
    route = make_route("Ruta del Cares")

    r = client.post(f"/api/routes/{route.id}/reviews", json={"rating": 5.0}, headers=headers_for(user))
    assert r.status_code == 201, r.text
    assert r.json()["rating"] == 5


def test_create_review_unknown_route_404(client, user):
    r = client.post("/api/routes/999/reviews", json={"rating": 3}, headers=headers_for(user))
    assert r.status_code == 404


def test_create_review_requires_login(client, make_route):
    route = make_route("Ruta del Cares")
    assert client.post(f"/api/routes/{route.id}/reviews", json={"rating": 3}).status_code == 401


def test_same_user_may_review_twice(client, db, make_route, user):
    route = make_route("Ruta del Cares")
    for rating in (2, 5):
        assert client.post(
            f"/api/routes/{route.id}/reviews", json={"rating": rating}, headers=headers_for(user)
        ).status_code == 201
    assert count_rows(db, Review, Review.route_id == route.id) == 2


def test_route_reviews_paginated_newest_first(client, db, make_route, user):
    route = make_route("Ruta del Cares")
    for i in range(12):
        crud.create_review(db, route_id=route.id, user_id=user.id, rating=(i % 5) + 1, comment=f"visita {i}")

    first = client.get(f"/api/routes/{route.id}/reviews").json()
    assert len(first["data"]) == 10
    assert first["data"][0]["comment"] == "visita 11"
    assert first["data"][0]["user"] == {"id": user.id, "name": "Lucia"}
    assert first["pagination"] == {"page": 1, "pageSize": 10, "total": 12, "totalPages": 2}

    second = client.get(f"/api/routes/{route.id}/reviews", params={"page": "2"}).json()
    assert [item["comment"] for item in second["data"]] == ["visita 1", "visita 0"]


def test_route_reviews_huge_page_is_empty(client, db, make_route, user):
    route = make_route("Ruta del Cares")
    crud.create_review(db, route_id=route.id, user_id=user.id, rating=4, comment=None)

    r = client.get(f"/api/routes/{route.id}/reviews", params={"page": "10000000000000000000"})
    assert r.status_code == 200, r.text
    assert r.json()["data"] == []
    assert r.json()["pagination"]["total"] == 1


def test_route_reviews_unknown_route_404(client):
    assert client.get("/api/routes/42/reviews").status_code == 404


def test_update_review_owner_admin_and_stranger(client, db, make_route, make_user, admin):
    route = make_route("Ruta del Cares")
    owner = make_user("Owner")
    stranger = make_user("Stranger")
    review = crud.create_review(db, route_id=route.id, user_id=owner.id, rating=3, comment="ok")

    r = client.patch(f"/api/reviews/{review.id}", json={"rating": 5}, headers=headers_for(owner))
    assert r.status_code == 200, r.text
    assert r.json()["rating"] == 5
    assert r.json()["comment"] == "ok"

    r = client.patch(f"/api/reviews/{review.id}", json={"rating": 1}, headers=headers_for(stranger))
    assert r.status_code == 403
    assert r.json()["code"] == "FORBIDDEN"

    r = client.patch(f"/api/reviews/{review.id}", json={"comment": "moderado"}, headers=headers_for(admin))
    assert r.status_code == 200
    assert r.json()["comment"] == "moderado"
    assert r.json()["rating"] == 5


@pytest.mark.parametrize("payload", [{"rating": 9}, {"rating": None}, {"rating": True}, {"rating": "4"}, {"rating": 2.5}])
def test_update_review_invalid_rating_400(client, db, make_route, user, payload):
    route = make_route("Ruta del Cares")
    review = crud.create_review(db, route_id=route.id, user_id=user.id, rating=3, comment=None)

    r = client.patch(f"/api/reviews/{review.id}", json=payload, headers=headers_for(user))
    assert r.status_code == 400


def test_update_unknown_review_404(client, user):
    assert client.patch("/api/reviews/77", json={"rating": 2}, headers=headers_for(user)).status_code == 404


def test_delete_review(client, db, make_route, make_user):
    route = make_route("Ruta del Cares")
    owner = make_user("Owner")
    stranger = make_user("Stranger")
    review = crud.create_review(db, route_id=route.id, user_id=owner.id, rating=3, comment=None)

    assert client.delete(f"/api/reviews/{review.id}", headers=headers_for(stranger)).status_code == 403

    r = client.delete(f"/api/reviews/{review.id}", headers=headers_for(owner))
    assert r.status_code == 200
    assert r.json() == {"message": "Review deleted"}

    assert client.delete(f"/api/reviews/{review.id}", headers=headers_for(owner)).status_code == 404


def test_my_reviews(client, db, make_route, user, make_user):
    cares = make_route("Ruta del Cares")
    lagos = make_route("Lagos de Covadonga")
    crud.create_review(db, route_id=cares.id, user_id=user.id, rating=4, comment=None)
    crud.create_review(db, route_id=lagos.id, user_id=user.id, rating=5, comment=None)
    crud.create_review(db, route_id=lagos.id, user_id=make_user().id, rating=1, comment=None)

    body = client.get("/api/me/reviews", headers=headers_for(user)).json()
    assert [item["route"]["slug"] for item in body["data"]] == ["lagos-de-covadonga", "ruta-del-cares"]


def _backdate(db, review, when):
    review.created_at = when
    db.commit()


def test_activity_calendar(client, db, make_route, user):
    route = make_route("Ruta del Cares")
    for when in (datetime(2024, 5, 3, 9), datetime(2024, 5, 3, 18), datetime(2024, 5, 20, 7), datetime(2024, 6, 1, 0)):
        _backdate(db, crud.create_review(db, route_id=route.id, user_id=user.id, rating=4, comment=None), when)

    r = client.get("/api/me/activity", params={"year": 2024, "month": 5}, headers=headers_for(user))
    assert r.status_code == 200, r.text
    assert r.json() == {
        "year": 2024,
        "month": 5,
        "days": [{"day": "2024-05-03", "count": 2}, {"day": "2024-05-20", "count": 1}],
    }

    december = activity_calendar(db, user.id, year=2024, month=12)
    assert december.days == []


def test_activity_defaults_to_current_month(client, user):
    body = client.get("/api/me/activity", headers=headers_for(user)).json()
    now = datetime.utcnow()
    assert (body["year"], body["month"]) == (now.year, now.month)
    assert body["days"] == []


def test_activity_rejects_bad_month(client, db, user):
    assert client.get("/api/me/activity", params={"month": 13}, headers=headers_for(user)).status_code == 400
    with pytest.raises(ValidationError):
        activity_calendar(db, user.id, year=2024, month=0)
