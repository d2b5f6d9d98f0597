"""Seed data script for the Study Planner

Creates a demo student with a sample task and note so the UI has
something to show. Safe to run repeatedly.
"""
from datetime import date, timedelta

from app import create_app
from extensions import db
from models.user import User
from models.study import Note, Task

DEMO_EMAIL = 'student@test.com'
DEMO_PASSWORD = 'password123'


def seed_database(app=None):
    app = app or create_app()
    with app.app_context():
        student = User.query.filter_by(email=DEMO_EMAIL).first()
        if not student:
            student = User(name='John Doe', email=DEMO_EMAIL)
            student.set_password(DEMO_PASSWORD)
            db.session.add(student)
            db.session.flush()

            db.session.add(Task(
                user_id=student.id,
                title='Revise Electrostatics',
                description='Coulomb\'s law, electric field and Gauss\'s law',
                due_date=date.today() + timedelta(days=7),
            ))
            db.session.add(Note(
                user_id=student.id,
                title='Formula sheet',
                content='F = kq1q2/r^2',
                tags=['physics', 'formulas'],
            ))

        db.session.commit()
        return student.id


if __name__ == '__main__':
    seed_database()
    print('Seed data created successfully!')
    print('Test credentials:')
    print(f'  Student: {DEMO_EMAIL} / {DEMO_PASSWORD}')
