from src.classwork.schemas import (
    AssignmentData,
    AssignmentSubmissionData,
    ClassCreate,
    QuizData,
    QuizSubmissionData,
)


def test_student_gradebook(ctx, seed):
    essay = ctx.assignments.save_assignment(AssignmentData(
        stream_item_id=seed.stream_item(type="assignment", title="Essay").id, points=50, due_date="2024-02-01",
    ))
    hidden = ctx.assignments.save_assignment(AssignmentData(
        stream_item_id=seed.stream_item(type="assignment", title="G2 work").id, assign_to_all=False, assigned_groups=["G2"],
    ))
    dropped = ctx.assignments.save_assignment(AssignmentData(
        stream_item_id=seed.stream_item(type="assignment", title="Dropped").id,
    ))
    ctx.assignments.delete_assignment(dropped.id)
    quiz = ctx.quizzes.save_quiz(QuizData(
        stream_item_id=seed.stream_item(title="Quiz 1").id, due_date="2024-01-15",
    ))

    sub = ctx.assignment_submissions.save_submission(AssignmentSubmissionData(
        assignment_id=essay.id, student_id=seed.alice.id, status="submitted",
    ))
    ctx.assignment_submissions.mark_as_reviewed(sub.id, teacher_comments="Good", grade=45)

    items = ctx.grades.get_student_grades(seed.classroom.id, seed.alice.id)
    assert [(i.title, i.type) for i in items] == [("Quiz 1", "quiz"), ("Essay", "assignment")]
    quiz_item, essay_item = items
    assert quiz_item.id == quiz.id
    assert quiz_item.status == "pending"
    assert quiz_item.max_points == 100
    assert quiz_item.points_earned is None
    assert essay_item.points_earned == 45
    assert essay_item.max_points == 50
    assert essay_item.status == "reviewed"
    assert essay_item.feedback == "Good"
    assert essay_item.submitted_at is not None

    # Work the student cannot see still shows up once they submitted to it.
    ctx.assignment_submissions.save_submission(AssignmentSubmissionData(
        assignment_id=hidden.id, student_id=seed.alice.id, status="submitted",
    ))
    titles = [i.title for i in ctx.grades.get_student_grades(seed.classroom.id, seed.alice.id)]
    assert "G2 work" in titles
    assert "Dropped" not in titles


def test_recorded_grades_listing(ctx, seed):
    quiz = ctx.quizzes.save_quiz(QuizData(stream_item_id=seed.stream_item().id, points=10))
    for student, grade in [(seed.alice, 7), (seed.bob, 9)]:
        sub = ctx.quiz_submissions.save_quiz_submission(QuizSubmissionData(
            quiz_id=quiz.id, student_id=student.id, status="submitted",
        ))
        ctx.quiz_submissions.mark_as_reviewed(sub.id, grade=grade)

    assert len(ctx.grades.get_grades(seed.classroom.id)) == 2
    [bob] = ctx.grades.get_grades(seed.classroom.id, seed.bob.id)
    assert bob.percentage == 90
    assert ctx.grades.get_student_grades("empty-class", seed.bob.id) == []


def test_user_directory(ctx, seed):
    assert [s.id for s in ctx.users.get_all_students()] == [seed.alice.id, seed.bob.id, seed.carol.id, seed.dave.id]
    assert [s.id for s in ctx.users.get_students_by_group("G1")] == [seed.alice.id, seed.bob.id]
    assert ctx.users.get_students_by_group("") == []
    assert ctx.users.get_available_groups() == ["G1", "G2"]
    assert [t.id for t in ctx.users.get_teachers()] == [seed.teacher.id]
    assert ctx.users.author("ghost").name == "Usuario"
    assert ctx.users.get_user(None) is None


def test_class_membership_and_archive(ctx, seed):
    ctx.classes.add_member(seed.classroom.id, seed.alice.id)
    ctx.classes.add_member(seed.classroom.id, seed.alice.id)
    ctx.classes.add_member(seed.classroom.id, seed.teacher.id, role="teacher")
    assert [u.id for u in ctx.classes.get_class_students(seed.classroom.id)] == [seed.alice.id]

    other = ctx.classes.save_class(ClassCreate(title="Art"))
    ctx.classes.archive_class(other.id)
    assert [c.title for c in ctx.classes.list_classes()] == ["Biology"]
    assert {c.title for c in ctx.classes.list_classes(include_archived=True)} == {"Biology", "Art"}

    renamed = ctx.classes.save_class(ClassCreate(title="Fine Art"), class_id=other.id)
    assert renamed.id == other.id
    assert ctx.classes.get_class(other.id).title == "Fine Art"


def test_partial_class_update(ctx, seed):
    from src.classwork.schemas import ClassUpdate

    classroom = ctx.classes.save_class(ClassCreate(title="Music", description="Choir", room="B2"))
    ctx.classes.save_class(ClassUpdate(room="C1"), class_id=classroom.id)
    stored = ctx.classes.get_class(classroom.id)
    assert (stored.title, stored.description, stored.room) == ("Music", "Choir", "C1")
