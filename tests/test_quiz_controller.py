import pytest

from src.classwork.exceptions import NotFound
from src.classwork.models import QuizQuestion, QuizStudent
from src.classwork.schemas import QuestionData, QuizData, QuizSubmissionData, UserCreate


def questions(*titles):
    return [QuestionData(title=title, type="short_answer", points=1) for title in titles]


def test_save_and_read_round_trip(ctx, seed):
    item = seed.stream_item(title="Cells")
    ctx.quizzes.save_quiz(QuizData(
        stream_item_id=item.id,
        points=10,
        due_date="2024-05-01",
        due_time="23:59",
        description="Cell biology",
        assign_to_all=False,
        selected_students=[seed.dave.id],
        questions=[
            QuestionData(title="Q1", type="multiple_choice", options=["a", "b"], correct_answer="a", points=4),
            QuestionData(title="Q2", type="short_answer", required=True, points=6),
        ],
    ))

    quiz = ctx.quizzes.get_quiz_by_stream_item_id(item.id)
    assert quiz.points == 10
    assert str(quiz.due_date) == "2024-05-01"
    assert quiz.due_time == "23:59"
    assert quiz.assign_to_all is False
    assert quiz.selected_students == [seed.dave.id]
    assert [(q.title, q.order) for q in quiz.questions] == [("Q1", 0), ("Q2", 1)]
    assert quiz.questions[0].options == ["a", "b"]
    assert quiz.questions[0].correct_answer == "a"
    assert quiz.questions[1].required is True
    assert quiz.is_archived is False


def test_resave_replaces_questions_and_students(ctx, seed):
    item = seed.stream_item()
    first = ctx.quizzes.save_quiz(QuizData(
        stream_item_id=item.id,
        assign_to_all=False,
        selected_students=[seed.alice.id, seed.bob.id],
        questions=questions("A", "B", "C"),
    ))
    second = ctx.quizzes.save_quiz(QuizData(
        stream_item_id=item.id,
        assign_to_all=False,
        selected_students=[seed.carol.id],
        questions=questions("X", "Y"),
    ))

    assert first.id == second.id
    quiz = ctx.quizzes.get_quiz_by_stream_item_id(item.id)
    assert [(q.title, q.order) for q in quiz.questions] == [("X", 0), ("Y", 1)]
    assert quiz.selected_students == [seed.carol.id]
    assert len(ctx.backend.list(QuizQuestion, quiz_id=quiz.id)) == 2
    assert len(ctx.backend.list(QuizStudent, quiz_id=quiz.id)) == 1


def test_question_ids_are_fresh_on_every_save(ctx, seed):
    item = seed.stream_item()
    ctx.quizzes.save_quiz(QuizData(stream_item_id=item.id, questions=questions("A")))
    old_id = ctx.quizzes.get_quiz_by_stream_item_id(item.id).questions[0].id

    ctx.quizzes.save_quiz(QuizData(
        stream_item_id=item.id,
        questions=[QuestionData(id=old_id, title="A", type="short_answer")],
    ))
    assert ctx.quizzes.get_quiz_by_stream_item_id(item.id).questions[0].id != old_id


def test_group_targets_are_expanded_and_deduplicated(ctx, seed):
    item = seed.stream_item()
    quiz = ctx.quizzes.save_quiz(QuizData(
        stream_item_id=item.id,
        assign_to_all=False,
        assigned_groups=["G1"],
        selected_students=[seed.alice.id, seed.dave.id],
    ))

    rows = {row.student_id: row.source_group for row in ctx.backend.list(QuizStudent, quiz_id=quiz.id)}
    assert rows == {seed.alice.id: None, seed.bob.id: "G1", seed.dave.id: None}
    read = ctx.quizzes.get_quiz_by_stream_item_id(item.id)
    assert sorted(read.selected_students) == sorted([seed.alice.id, seed.dave.id])


def test_assign_to_all_stores_no_student_rows(ctx, seed):
    item = seed.stream_item()
    quiz = ctx.quizzes.save_quiz(QuizData(
        stream_item_id=item.id, assign_to_all=True, selected_students=[seed.alice.id],
    ))
    assert ctx.backend.list(QuizStudent, quiz_id=quiz.id) == []


def test_save_quiz_for_missing_stream_item(ctx, seed):
    with pytest.raises(NotFound):
        ctx.quizzes.save_quiz(QuizData(stream_item_id="missing"))


def test_summaries_and_pending_review_count(ctx, seed):
    item = seed.stream_item(title="Genetics")
    quiz = ctx.quizzes.save_quiz(QuizData(
        stream_item_id=item.id, points=20, questions=questions("A", "B"),
        assign_to_all=False, assigned_groups=["G1"],
    ))
    ctx.quiz_submissions.save_quiz_submission(QuizSubmissionData(quiz_id=quiz.id, student_id=seed.alice.id, status="submitted"))
    ctx.quiz_submissions.save_quiz_submission(QuizSubmissionData(quiz_id=quiz.id, student_id=seed.bob.id, status="draft"))

    [summary] = ctx.quizzes.get_all_quizzes()
    assert summary.title == "Genetics"
    assert summary.class_name == "Biology"
    assert summary.author.name == "Ana Ruiz"
    assert summary.question_count == 2
    assert summary.student_count == 2
    assert summary.pending_review_count == 1


def test_listing_is_newest_first_and_skips_archived(ctx, seed):
    older = seed.stream_item(title="Older")
    newer = seed.stream_item(title="Newer")
    archived = seed.stream_item(title="Archived")
    for item in (older, newer, archived):
        ctx.quizzes.save_quiz(QuizData(stream_item_id=item.id))
    ctx.stream.archive_stream_item(archived.id)

    assert [q.title for q in ctx.quizzes.get_all_quizzes()] == ["Newer", "Older"]
    assert [q.title for q in ctx.quizzes.get_all_quizzes(include_archived=True)] == ["Archived", "Newer", "Older"]
    assert [q.title for q in ctx.quizzes.get_quizzes_by_class(seed.classroom.id)] == ["Newer", "Older"]
    assert ctx.quizzes.get_quiz_by_stream_item_id(archived.id).is_archived is True


def test_quizzes_by_class_only_lists_that_class(ctx, seed):
    from src.classwork.schemas import ClassCreate

    other = ctx.classes.save_class(ClassCreate(title="Chemistry"))
    ctx.quizzes.save_quiz(QuizData(stream_item_id=seed.stream_item(title="Bio quiz").id))
    ctx.quizzes.save_quiz(QuizData(stream_item_id=seed.stream_item(title="Chem quiz", class_id=other.id).id))

    assert [q.title for q in ctx.quizzes.get_quizzes_by_class(other.id)] == ["Chem quiz"]
    assert ctx.quizzes.get_quizzes_by_class("no-such-class") == []


def test_class_name_survives_missing_class(ctx, seed):
    item = seed.stream_item(title="Orphan", class_id="gone")
    ctx.quizzes.save_quiz(QuizData(stream_item_id=item.id))
    [summary] = ctx.quizzes.get_all_quizzes()
    assert summary.class_name == "Sin clase"


def test_student_visibility(ctx, seed):
    everyone = seed.stream_item(title="Everyone")
    group = seed.stream_item(title="Group G1")
    single = seed.stream_item(title="Only Dave")
    ctx.quizzes.save_quiz(QuizData(stream_item_id=everyone.id, assign_to_all=True))
    ctx.quizzes.save_quiz(QuizData(stream_item_id=group.id, assign_to_all=False, assigned_groups=["G1"]))
    ctx.quizzes.save_quiz(QuizData(stream_item_id=single.id, assign_to_all=False, selected_students=[seed.dave.id]))

    def titles(student, group=None):
        return sorted(q.title for q in ctx.quizzes.get_quizzes_for_student(student.id, group))

    assert titles(seed.alice) == ["Everyone", "Group G1"]
    assert titles(seed.carol) == ["Everyone"]
    assert titles(seed.dave) == ["Everyone", "Only Dave"]
    # An explicit group wins over the directory.
    assert titles(seed.carol, "G1") == ["Everyone", "Group G1"]


def test_group_targets_follow_joiners_and_keep_leavers(ctx, seed):
    item = seed.stream_item(title="Group G1")
    ctx.quizzes.save_quiz(QuizData(stream_item_id=item.id, assign_to_all=False, assigned_groups=["G1"]))

    ctx.users.save_user(UserCreate(
        id=seed.carol.id, email=seed.carol.email, first_name="Carol", last_name="C", assigned_group="G1",
    ))
    assert [q.title for q in ctx.quizzes.get_quizzes_for_student(seed.carol.id)] == ["Group G1"]

    ctx.users.save_user(UserCreate(
        id=seed.bob.id, email=seed.bob.email, first_name="Bob", last_name="B", assigned_group="G2",
    ))
    # Bob's row was expanded from G1 when the quiz was saved.
    assert [q.title for q in ctx.quizzes.get_quizzes_for_student(seed.bob.id)] == ["Group G1"]
    assert ctx.quizzes.get_quizzes_for_student(seed.dave.id) == []


def test_archived_quizzes_are_hidden_from_students(ctx, seed):
    item = seed.stream_item()
    ctx.quizzes.save_quiz(QuizData(stream_item_id=item.id, assign_to_all=True))
    ctx.stream.archive_stream_item(item.id)
    assert ctx.quizzes.get_quizzes_for_student(seed.alice.id) == []
