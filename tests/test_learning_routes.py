def _correct_ids(question):
    return [option.id for option in question.options if option.is_correct]


def _answers(quiz, correct=True):
    return {"answers": [
        {"question_id": q.id, "selected_option_ids": _correct_ids(q) if correct else []}
        for q in quiz.questions
    ]}


def test_submit_quiz(client, learner, login_as, quiz):
    login_as(learner)

    response = client.post(f"/api/v1/learn/quizzes/{quiz.id}/submit", json=_answers(quiz))

    assert response.status_code == 200
    body = response.json()
    assert (body["score"], body["total"], body["percentage"], body["passed"]) == (2, 2, 100, True)
    assert body["details"][0]["explanation"] == "Labels make it supervised."


def test_submit_unknown_quiz(client, learner, login_as):
    login_as(learner)
    response = client.post("/api/v1/learn/quizzes/9999/submit", json={"answers": []})
    assert response.status_code == 404


def test_submit_malformed_answers(client, learner, login_as, quiz):
    login_as(learner)
    url = f"/api/v1/learn/quizzes/{quiz.id}/submit"
    assert client.post(url, json={}).status_code == 422
    assert client.post(url, json={"answers": "all of them"}).status_code == 422


def test_submit_answer_for_foreign_question(client, learner, login_as, quiz):
    login_as(learner)
    response = client.post(
        f"/api/v1/learn/quizzes/{quiz.id}/submit",
        json={"answers": [{"question_id": 9999, "selected_option_ids": []}]},
    )
    assert response.status_code == 400


def test_submit_requires_authentication(client, quiz):
    response = client.post(f"/api/v1/learn/quizzes/{quiz.id}/submit", json=_answers(quiz))
    assert response.status_code == 401


def test_quiz_results_history(client, learner, other_learner, login_as, quiz):
    login_as(other_learner)
    client.post(f"/api/v1/learn/quizzes/{quiz.id}/submit", json=_answers(quiz))

    login_as(learner)
    client.post(f"/api/v1/learn/quizzes/{quiz.id}/submit", json=_answers(quiz, correct=False))
    client.post(f"/api/v1/learn/quizzes/{quiz.id}/submit", json=_answers(quiz))

    response = client.get("/api/v1/learn/quiz-results", params={"quiz_id": quiz.id})

    assert response.status_code == 200
    history = response.json()
    assert [(r["score"], r["passed"]) for r in history] == [(2, True), (0, False)]
    assert history[0]["percentage"] == 100
    assert len(history[0]["answers"]) == 2


def test_complete_lesson_and_read_course_progress(client, learner, login_as, course, lesson_ids):
    login_as(learner)

    response = client.post(f"/api/v1/learn/progress/lessons/{lesson_ids[0]}/complete")
    assert response.status_code == 200
    assert response.json()["course_completed"] is False

    progress = client.get(f"/api/v1/learn/progress/courses/{course.id}").json()
    assert (progress["total_lessons"], progress["completed_lessons"], progress["percentage"]) == (3, 1, 33)
    assert [p["lesson_id"] for p in progress["progress"]] == [lesson_ids[0]]
    assert progress["progress"][0]["lesson"]["title"] == "What is AI?"
    assert progress["progress"][0]["lesson"]["module_id"] == course.modules[0].id


def test_complete_unknown_lesson(client, learner, login_as):
    login_as(learner)
    assert client.post("/api/v1/learn/progress/lessons/9999/complete").status_code == 404


def test_progress_of_unknown_course(client, learner, login_as):
    login_as(learner)
    assert client.get("/api/v1/learn/progress/courses/9999").status_code == 404


def test_finishing_a_course_issues_a_verifiable_certificate(client, learner, login_as, course, lesson_ids):
    login_as(learner)
    for lesson_id in lesson_ids:
        last = client.post(f"/api/v1/learn/progress/lessons/{lesson_id}/complete").json()

    assert last["course_completed"] is True
    code = last["certificate"]["code"]
    assert last["certificate"]["course"]["slug"] == "intro-to-ai"
    assert last["certificate"]["course"]["title"] == "Introduction to AI"

    mine = client.get("/api/v1/learn/certificates/my-certificates").json()
    assert [c["code"] for c in mine] == [code]
    assert mine[0]["course"]["slug"] == "intro-to-ai"

    # Verification is public
    client.app.dependency_overrides.clear()
    verified = client.get(f"/api/v1/learn/certificates/verify/{code}")
    assert verified.status_code == 200
    assert verified.json()["user_id"] == learner.id
    assert client.get("/api/v1/learn/certificates/verify/CERT-FFFFFFFF").status_code == 404


def test_my_courses(client, learner, login_as, course, lesson_ids):
    login_as(learner)
    assert client.get("/api/v1/learn/my-courses").json() == []

    client.post(f"/api/v1/learn/progress/lessons/{lesson_ids[1]}/complete")
    my_courses = client.get("/api/v1/learn/my-courses").json()

    assert len(my_courses) == 1
    assert my_courses[0]["course"]["id"] == course.id
    assert my_courses[0]["completed_lessons"] == 1
