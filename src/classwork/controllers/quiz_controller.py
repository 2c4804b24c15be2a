# File: src/classwork/controllers/quiz_controller.py
import logging
from typing import List, Optional

from src.classwork.controllers.assigned_work import AssignedWorkController, newest_first
from src.classwork.controllers.submission_lifecycle import PENDING_REVIEW_STATES
from src.classwork.db.base import ChildReplacement
from src.classwork.models.enums import StreamItemType
from src.classwork.models.quiz import Quiz, QuizQuestion, QuizStudent, QuizSubmission
from src.classwork.schemas.quiz import QuestionData, QuizData, QuizRead, QuizSummary


class QuizController(AssignedWorkController):
    model = Quiz
    link_model = QuizStudent
    link_field = "quiz_id"
    item_type = StreamItemType.QUIZ.value

    def save_quiz(self, data: QuizData) -> Quiz:
        """
        Create or update the quiz of a stream item. Questions and student
        rows are replaced wholesale in the same unit as the quiz itself.
        """
        quiz = self._upsert(
            data.stream_item_id,
            data.model_dump(include={
                "points", "due_date", "due_time", "description", "assign_to_all", "assigned_groups",
            }),
        )
        questions = [
            QuizQuestion(quiz_id=quiz.id, order=position, **question.model_dump(exclude={"id", "order"}))
            for position, question in enumerate(data.questions)
        ]
        saved = self.backend.replace_children(
            quiz,
            ChildReplacement(QuizQuestion, {"quiz_id": quiz.id}, questions),
            self._student_replacement(quiz, data.assigned_groups, data.selected_students),
        )
        logging.info(f"Quiz {saved.id} saved with {len(questions)} questions")
        return saved

    def get_questions(self, quiz_id: str) -> List[QuizQuestion]:
        return sorted(self.backend.list(QuizQuestion, quiz_id=quiz_id), key=lambda q: (q.order, q.id))

    def get_quiz(self, quiz_id: str) -> Optional[Quiz]:
        return self.backend.get(Quiz, quiz_id)

    def get_quiz_by_stream_item_id(self, stream_item_id: str) -> Optional[QuizRead]:
        quiz = self._by_stream_item(stream_item_id)
        if quiz is None:
            logging.warning(f"No quiz for stream item {stream_item_id}")
            return None
        item = self.stream.get_stream_item(stream_item_id)
        return QuizRead(
            id=quiz.id,
            stream_item_id=quiz.stream_item_id,
            points=quiz.points,
            due_date=quiz.due_date,
            due_time=quiz.due_time,
            description=quiz.description,
            assign_to_all=quiz.assign_to_all,
            assigned_groups=quiz.assigned_groups or [],
            selected_students=self._selected_students(quiz),
            questions=[
                QuestionData.model_validate(question, from_attributes=True)
                for question in self.get_questions(quiz.id)
            ],
            is_archived=bool(item and item.is_archived),
        )

    def _summary(self, quiz: Quiz, item) -> QuizSummary:
        return QuizSummary(
            id=quiz.id,
            stream_item_id=quiz.stream_item_id,
            class_id=item.class_id,
            class_name=self.stream.class_name_of(item),
            title=item.title,
            description=quiz.description,
            points=quiz.points,
            due_date=quiz.due_date,
            due_time=quiz.due_time,
            assign_to_all=quiz.assign_to_all,
            assigned_groups=quiz.assigned_groups or [],
            is_archived=item.is_archived,
            created_at=item.created_at,
            author=self.users.author(item.author_id),
            student_count=self._student_count(quiz),
            question_count=self.backend.count(QuizQuestion, quiz_id=quiz.id),
            pending_review_count=self.backend.count(
                QuizSubmission, quiz_id=quiz.id, status=list(PENDING_REVIEW_STATES)
            ),
        )

    def get_all_quizzes(self, include_archived: bool = False) -> List[QuizSummary]:
        pairs = self._pairs(self.backend.list(Quiz), include_archived)
        return newest_first(self._summary(quiz, item) for quiz, item in pairs)

    def get_quizzes_by_class(self, class_id: str, include_archived: bool = False) -> List[QuizSummary]:
        quizzes, items = self._records_for_class(class_id)
        pairs = self._pairs(quizzes, include_archived, items)
        return newest_first(self._summary(quiz, item) for quiz, item in pairs)

    def get_quizzes_for_student(self, student_id: str, group: Optional[str] = None) -> List[QuizSummary]:
        """Active quizzes the student should see; `group` defaults to the student's current group."""
        return self._visible_to(student_id, group, self.get_all_quizzes())
