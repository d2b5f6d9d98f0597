from extensions import db
from datetime import datetime


def _iso(value):
    return value.isoformat() if value else None


class Exam(db.Model):
    """An exam the student is preparing for"""
    __tablename__ = 'exams'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    subject = db.Column(db.String(100), nullable=False)
    board = db.Column(db.String(50))  # e.g. 'CBSE', 'ICSE'
    class_level = db.Column('class', db.String(20))  # e.g. '11', '12'
    date = db.Column(db.Date, nullable=False)
    duration = db.Column(db.Integer)  # minutes
    description = db.Column(db.Text, default='')
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    # Relationships
    study_plan = db.relationship('StudyPlan', backref='exam', uselist=False, lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'subject': self.subject,
            'board': self.board,
            'class': self.class_level,
            'date': _iso(self.date),
            'duration': self.duration,
            'description': self.description or '',
            'userId': self.user_id,
            'createdAt': _iso(self.created_at),
        }

    def __repr__(self):
        return f'<Exam {self.title}>'


class StudyPlan(db.Model):
    """Generated study graph for an exam - always replaced wholesale"""
    __tablename__ = 'study_plans'

    id = db.Column(db.Integer, primary_key=True)
    exam_id = db.Column(db.Integer, db.ForeignKey('exams.id'), nullable=False, unique=True)
    nodes = db.Column(db.JSON, default=list)
    edges = db.Column(db.JSON, default=list)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<StudyPlan exam={self.exam_id}>'


class Note(db.Model):
    __tablename__ = 'notes'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, default='')
    tags = db.Column(db.JSON, default=list)
    color = db.Column(db.String(20), default='#FFFFFF')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'content': self.content or '',
            'tags': self.tags or [],
            'color': self.color,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }

    def __repr__(self):
        return f'<Note {self.title}>'


class Task(db.Model):
    __tablename__ = 'tasks'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, default='')
    due_date = db.Column(db.Date, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description or '',
            'due_date': _iso(self.due_date),
            'created_at': _iso(self.created_at),
        }

    def __repr__(self):
        return f'<Task {self.title}>'


class Quiz(db.Model):
    __tablename__ = 'quizzes'

    id = db.Column(db.Integer, primary_key=True)
    exam_id = db.Column(db.Integer, db.ForeignKey('exams.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    subject = db.Column(db.String(100), nullable=False)
    chapter = db.Column(db.String(255), nullable=False)
    difficulty = db.Column(db.String(20), default='medium')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    questions = db.relationship('QuizQuestion', backref='quiz', lazy=True, order_by='QuizQuestion.id')
    attempts = db.relationship('QuizAttempt', backref='quiz', lazy=True)

    def to_dict(self):
        scores = [a.score for a in self.attempts]
        return {
            'id': self.id,
            'examId': self.exam_id,
            'subject': self.subject,
            'chapter': self.chapter,
            'difficulty': self.difficulty,
            'questionCount': len(self.questions),
            'attemptCount': len(scores),
            'bestScore': max(scores) if scores else None,
            'createdAt': _iso(self.created_at),
        }

    def __repr__(self):
        return f'<Quiz {self.subject}: {self.chapter}>'


class QuizQuestion(db.Model):
    __tablename__ = 'quiz_questions'

    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey('quizzes.id'), nullable=False, index=True)
    client_id = db.Column(db.String(50))  # id the model gave the question, echoed back on submit
    question_text = db.Column(db.Text, nullable=False)
    options = db.Column(db.JSON, default=list)
    correct_answer = db.Column(db.Text, nullable=False)
    explanation = db.Column(db.Text)
    difficulty = db.Column(db.String(20))
    concept_tested = db.Column(db.String(255))
    recommended_study = db.Column(db.String(255))

    def __repr__(self):
        return f'<QuizQuestion {self.id}>'


class QuizAttempt(db.Model):
    __tablename__ = 'quiz_attempts'

    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey('quizzes.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    score = db.Column(db.Integer, default=0)
    completed_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    answers = db.relationship('QuizAnswer', backref='attempt', lazy=True)

    def __repr__(self):
        return f'<QuizAttempt {self.id}: {self.score}>'


class QuizAnswer(db.Model):
    __tablename__ = 'quiz_answers'

    id = db.Column(db.Integer, primary_key=True)
    attempt_id = db.Column(db.Integer, db.ForeignKey('quiz_attempts.id'), nullable=False, index=True)
    question_id = db.Column(db.String(50))
    user_answer = db.Column(db.Text)
    is_correct = db.Column(db.Boolean, default=False)

    def __repr__(self):
        return f'<QuizAnswer {self.question_id}>'


class StudyRecommendation(db.Model):
    __tablename__ = 'study_recommendations'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    exam_id = db.Column(db.Integer, db.ForeignKey('exams.id'), index=True)
    subject = db.Column(db.String(100))
    chapter = db.Column(db.String(255))
    weak_areas = db.Column(db.JSON, default=list)
    study_plan = db.Column(db.JSON, default=dict)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        plan = self.study_plan or {}
        return {
            'id': self.id,
            'examId': self.exam_id,
            'subject': self.subject,
            'chapter': self.chapter,
            'weakAreas': self.weak_areas or [],
            'studyPlan': plan.get('studyPlan', ''),
            'studyTechniques': plan.get('studyTechniques', []),
            'overallAssessment': plan.get('overallAssessment', ''),
            'practiceExercises': plan.get('practiceExercises', []),
            'createdAt': _iso(self.created_at),
        }

    def __repr__(self):
        return f'<StudyRecommendation {self.chapter}>'
