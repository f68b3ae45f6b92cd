import copy

from pulsa.crud import course_crud
from pulsa.schemas.course_schema import CourseCreate

from .conftest import SAMPLE_COURSE


def _course_payload(slug, **changes):
    payload = copy.deepcopy(SAMPLE_COURSE)
    payload["slug"] = slug
    payload.update(changes)
    return payload


def test_catalog_lists_published_courses_only(client, db, course):
    course_crud.create_course(db, CourseCreate(**_course_payload("draft-course", published=False)))

    response = client.get("/api/v1/courses")

    assert response.status_code == 200
    courses = response.json()
    assert [c["slug"] for c in courses] == ["intro-to-ai"]
    assert courses[0]["lesson_count"] == 3
    assert [m["lesson_count"] for m in courses[0]["modules"]] == [2, 1]


def test_catalog_filters_by_difficulty_and_category(client, course):
    assert len(client.get("/api/v1/courses", params={"difficulty": "beginner"}).json()) == 1
    assert client.get("/api/v1/courses", params={"difficulty": "advanced"}).json() == []
    assert client.get("/api/v1/courses", params={"category": "robotics"}).json() == []


def test_course_detail_hides_the_answer_key(client, course):
    response = client.get("/api/v1/courses/intro-to-ai")

    assert response.status_code == 200
    detail = response.json()
    assert [m["title"] for m in detail["modules"]] == ["Foundations", "Practice"]
    quiz = detail["modules"][0]["lessons"][0]["quiz"]
    assert len(quiz["questions"]) == 2
    assert len(quiz["questions"][1]["options"]) == 3
    assert "is_correct" not in response.text
    assert "explanation" not in response.text


def test_unknown_or_unpublished_course_is_not_found(client, db):
    course_crud.create_course(db, CourseCreate(**_course_payload("draft-course", published=False)))
    assert client.get("/api/v1/courses/draft-course").status_code == 404
    assert client.get("/api/v1/courses/nope").status_code == 404


def test_admin_creates_course(client, admin, login_as):
    login_as(admin)

    response = client.post("/api/v1/courses", json=_course_payload("new-course"))

    assert response.status_code == 201
    created = response.json()
    assert created["slug"] == "new-course"
    assert [lesson["order"] for lesson in created["modules"][0]["lessons"]] == [1, 2]


def test_duplicate_slug_conflicts(client, admin, login_as, course):
    login_as(admin)
    response = client.post("/api/v1/courses", json=_course_payload("intro-to-ai"))
    assert response.status_code == 409


def test_question_without_correct_option_is_rejected(client, admin, login_as):
    login_as(admin)
    payload = _course_payload("bad-quiz")
    for option in payload["modules"][0]["lessons"][0]["quiz"]["questions"][0]["options"]:
        option["is_correct"] = False

    assert client.post("/api/v1/courses", json=payload).status_code == 422


def test_single_choice_with_two_correct_options_is_rejected(client, admin, login_as):
    login_as(admin)
    payload = _course_payload("bad-single")
    for option in payload["modules"][0]["lessons"][0]["quiz"]["questions"][0]["options"]:
        option["is_correct"] = True

    assert client.post("/api/v1/courses", json=payload).status_code == 422


def test_duplicate_lesson_order_is_rejected(client, admin, login_as):
    login_as(admin)
    payload = _course_payload("bad-order")
    for lesson in payload["modules"][0]["lessons"]:
        lesson["order"] = 1

    assert client.post("/api/v1/courses", json=payload).status_code == 422


def test_learner_cannot_author_courses(client, learner, login_as, course):
    login_as(learner)
    assert client.post("/api/v1/courses", json=_course_payload("sneaky")).status_code == 403
    assert client.patch(f"/api/v1/courses/{course.id}", json={"published": False}).status_code == 403
    assert client.delete(f"/api/v1/courses/{course.id}").status_code == 403


def test_anonymous_authoring_requires_a_token(client):
    response = client.post("/api/v1/courses", json=_course_payload("anon"))
    assert response.status_code == 401


def test_admin_publishes_a_draft(client, db, admin, login_as):
    draft = course_crud.create_course(db, CourseCreate(**_course_payload("draft-course", published=False)))
    login_as(admin)

    response = client.patch(f"/api/v1/courses/{draft.id}", json={"published": True, "title": "Now live"})

    assert response.status_code == 200
    assert response.json()["title"] == "Now live"
    assert client.get("/api/v1/courses/draft-course").status_code == 200


def test_update_to_taken_slug_conflicts(client, db, admin, login_as, course):
    other = course_crud.create_course(db, CourseCreate(**_course_payload("other-course")))
    login_as(admin)
    response = client.patch(f"/api/v1/courses/{other.id}", json={"slug": "intro-to-ai"})
    assert response.status_code == 409


def test_update_unknown_course_is_not_found(client, admin, login_as):
    login_as(admin)
    assert client.patch("/api/v1/courses/9999", json={"title": "x"}).status_code == 404


def test_admin_deletes_course(client, admin, learner, login_as, course, lesson_ids):
    course_id = course.id
    login_as(learner)
    client.post(f"/api/v1/learn/progress/lessons/{lesson_ids[0]}/complete")

    login_as(admin)
    assert client.delete(f"/api/v1/courses/{course_id}").status_code == 204
    assert client.get("/api/v1/courses/intro-to-ai").status_code == 404
    assert client.delete(f"/api/v1/courses/{course_id}").status_code == 404
