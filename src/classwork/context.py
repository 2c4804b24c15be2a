# File: src/classwork/context.py
import logging
from typing import Optional

from src.classwork.config.settings import Settings
from src.classwork.controllers.assignment_controller import AssignmentController
from src.classwork.controllers.assignment_submission_controller import AssignmentSubmissionController
from src.classwork.controllers.class_controller import ClassController
from src.classwork.controllers.grade_controller import GradeController
from src.classwork.controllers.material_controller import MaterialController
from src.classwork.controllers.quiz_controller import QuizController
from src.classwork.controllers.quiz_submission_controller import QuizSubmissionController
from src.classwork.controllers.stream_controller import StreamController
from src.classwork.controllers.user_controller import UserController
from src.classwork.db import create_backend
from src.classwork.db.base import Backend
from src.classwork.exceptions import SnapshotLoadError


class ClassworkContext:
    """Every controller wired around the one backend chosen at startup."""

    def __init__(self, backend: Backend):
        self.backend = backend
        self.users = UserController(backend)
        self.classes = ClassController(backend)
        self.stream = StreamController(backend, self.users, self.classes)
        self.grades = GradeController(backend, self.users)
        self.quizzes = QuizController(backend, self.users, self.stream)
        self.quiz_submissions = QuizSubmissionController(backend, self.users, self.grades)
        self.assignments = AssignmentController(backend, self.users, self.stream)
        self.assignment_submissions = AssignmentSubmissionController(backend, self.users, self.grades)
        self.materials = MaterialController(backend, self.users, self.stream)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ClassworkContext":
        return cls(create_backend(settings or Settings.from_env()))

    def startup(self) -> None:
        logging.info(f"Starting classwork context on the {self.backend.name} backend...")
        try:
            self.backend.initialize()
        except SnapshotLoadError as e:
            # Reads stay empty and writes fail until a later initialize() succeeds.
            logging.error(f"Snapshot could not be loaded: {e.detail}", exc_info=True)
            return
        logging.info("Classwork context ready.")

    def shutdown(self) -> None:
        logging.info("Shutting down classwork context...")
        self.backend.close()
