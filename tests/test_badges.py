from pulsa.crud import badge_crud
from pulsa.models.badge_model import Badge


def test_catalog_is_seeded_on_startup(client):
    response = client.get("/api/v1/badges")

    assert response.status_code == 200
    conditions = {badge["condition"] for badge in response.json()}
    assert conditions == {data["condition"] for data in badge_crud.DEFAULT_BADGES}


def test_seeding_again_adds_nothing(db, client):
    assert badge_crud.ensure_badge_catalog(db) == 0
    assert db.query(Badge).count() == len(badge_crud.DEFAULT_BADGES)


def test_admin_awards_a_badge_once(client, db, admin, learner, login_as):
    badge = badge_crud.get_badges(db)[0]
    learner_id = learner.id
    login_as(admin)

    first = client.post(f"/api/v1/admin/users/{learner_id}/badges/{badge.id}")
    second = client.post(f"/api/v1/admin/users/{learner_id}/badges/{badge.id}")

    assert first.status_code == 201
    assert second.json()["id"] == first.json()["id"]

    login_as(learner)
    mine = client.get("/api/v1/badges/me").json()
    assert [item["badge"]["name"] for item in mine] == [badge.name]


def test_award_to_unknown_user_or_badge(client, db, admin, learner, login_as):
    badge = badge_crud.get_badges(db)[0]
    learner_id = learner.id
    login_as(admin)

    assert client.post(f"/api/v1/admin/users/9999/badges/{badge.id}").status_code == 404
    assert client.post(f"/api/v1/admin/users/{learner_id}/badges/9999").status_code == 404


def test_learner_cannot_award_badges(client, db, learner, login_as):
    badge = badge_crud.get_badges(db)[0]
    login_as(learner)
    assert client.post(f"/api/v1/admin/users/{learner.id}/badges/{badge.id}").status_code == 403


def test_my_badges_starts_empty(client, learner, login_as):
    login_as(learner)
    assert client.get("/api/v1/badges/me").json() == []
