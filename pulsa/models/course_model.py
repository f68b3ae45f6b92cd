from sqlalchemy import (
    Column, Integer, String, Text, Boolean, ForeignKey, TIMESTAMP,
    Enum as SAEnum, UniqueConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from pulsa.core.database import Base
from pulsa.models.enums import CourseDifficulty, LessonType, QuestionType

class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=False, index=True)
    difficulty = Column(SAEnum(CourseDifficulty, name="course_difficulty_enum", values_callable=lambda obj: [e.value for e in obj]), nullable=False)
    duration = Column(String(50), nullable=True) # Free text, e.g. "8 hours"
    image_url = Column(String(255), nullable=True)
    published = Column(Boolean, nullable=False, default=False)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    modules = relationship("CourseModule", back_populates="course", cascade="all, delete-orphan", passive_deletes=True, order_by="CourseModule.order")
    issued_certificates = relationship("Certificate", back_populates="course", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def lesson_count(self) -> int:
        return sum(len(module.lessons) for module in self.modules)

    def __repr__(self):
        return f"<Course(id={self.id}, slug='{self.slug}')>"

class CourseModule(Base):
    __tablename__ = "course_modules"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    order = Column(Integer, nullable=False, default=0)

    # Relationships
    course = relationship("Course", back_populates="modules")
    lessons = relationship("Lesson", back_populates="module", cascade="all, delete-orphan", passive_deletes=True, order_by="Lesson.order")

    __table_args__ = (UniqueConstraint('course_id', 'order', name='uq_course_module_order'),)

    @property
    def lesson_count(self) -> int:
        return len(self.lessons)

    def __repr__(self):
        return f"<CourseModule(id={self.id}, course_id={self.course_id}, order={self.order})>"

class Lesson(Base):
    __tablename__ = "lessons"

    id = Column(Integer, primary_key=True, index=True)
    module_id = Column(Integer, ForeignKey("course_modules.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    order = Column(Integer, nullable=False, default=0)
    lesson_type = Column(SAEnum(LessonType, name="lesson_type_enum", values_callable=lambda obj: [e.value for e in obj]), nullable=False, default=LessonType.TEXT)
    content = Column(Text, nullable=True)
    video_url = Column(String(255), nullable=True)

    # Relationships
    module = relationship("CourseModule", back_populates="lessons")
    quiz = relationship("Quiz", back_populates="lesson", uselist=False, cascade="all, delete-orphan", passive_deletes=True)
    progress_entries = relationship("Progress", back_populates="lesson", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (UniqueConstraint('module_id', 'order', name='uq_module_lesson_order'),)

    def __repr__(self):
        return f"<Lesson(id={self.id}, module_id={self.module_id}, order={self.order})>"

class Quiz(Base):
    __tablename__ = "quizzes"

    id = Column(Integer, primary_key=True, index=True)
    # A lesson owns at most one quiz
    lesson_id = Column(Integer, ForeignKey("lessons.id", ondelete="CASCADE"), unique=True, nullable=False)
    title = Column(String(255), nullable=False)

    # Relationships
    lesson = relationship("Lesson", back_populates="quiz")
    questions = relationship("Question", back_populates="quiz", cascade="all, delete-orphan", passive_deletes=True, order_by="Question.order")
    results = relationship("QuizResult", back_populates="quiz", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Quiz(id={self.id}, lesson_id={self.lesson_id})>"

class Question(Base):
    __tablename__ = "quiz_questions"

    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    question_type = Column(SAEnum(QuestionType, name="question_type_enum", values_callable=lambda obj: [e.value for e in obj]), nullable=False, default=QuestionType.SINGLE)
    order = Column(Integer, nullable=False, default=0)
    explanation = Column(Text, nullable=True) # Shown when results are reviewed

    # Relationships
    quiz = relationship("Quiz", back_populates="questions")
    options = relationship("QuestionOption", back_populates="question", cascade="all, delete-orphan", passive_deletes=True, order_by="QuestionOption.id")

    __table_args__ = (UniqueConstraint('quiz_id', 'order', name='uq_quiz_question_order'),)

    @property
    def correct_option_ids(self) -> set:
        return {option.id for option in self.options if option.is_correct}

    def __repr__(self):
        return f"<Question(id={self.id}, quiz_id={self.quiz_id}, type='{self.question_type}')>"

class QuestionOption(Base):
    __tablename__ = "question_options"

    id = Column(Integer, primary_key=True, index=True)
    question_id = Column(Integer, ForeignKey("quiz_questions.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    is_correct = Column(Boolean, default=False, nullable=False)

    # Relationships
    question = relationship("Question", back_populates="options")

    def __repr__(self):
        return f"<QuestionOption(id={self.id}, question_id={self.question_id}, correct={self.is_correct})>"
