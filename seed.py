from datetime import datetime, timedelta

from fitcoach import create_app
from fitcoach.extensions import db
from fitcoach.models import (
    User, Client, Exercise, Workout, WorkoutExercise,
    WorkoutProgram, WorkoutDay, WorkoutDayExercise, Conversation, Message,
)

DEMO_PASSWORD = "password123"

USERS = [
    # email, name, role
    ("admin@fitcoach.dev", "Admin User", "admin"),
    ("trainer@fitcoach.dev", "John Trainer", "trainer"),
    ("mike.trainer@fitcoach.dev", "Mike Johnson", "trainer"),
    ("lisa.trainer@fitcoach.dev", "Lisa Chen", "trainer"),
    ("client@fitcoach.dev", "Sarah Client", "client"),
    ("james.client@fitcoach.dev", "James Wilson", "client"),
    ("emma.client@fitcoach.dev", "Emma Rodriguez", "client"),
    ("david.client@fitcoach.dev", "David Kim", "client"),
    ("sophia.client@fitcoach.dev", "Sophia Thompson", "client"),
]

CLIENTS = [
    # client email, trainer email, goals, notes, status, plan, months
    ("client@fitcoach.dev", "trainer@fitcoach.dev",
     "Improve overall fitness and prepare for Hyrox competition",
     "Prefers morning workouts, has experience with CrossFit", "ACTIVE", "PRO", 12),
    ("james.client@fitcoach.dev", "mike.trainer@fitcoach.dev",
     "Build strength and muscle mass", "New to fitness, prefers evening workouts", "ACTIVE", "BASIC", 6),
    ("emma.client@fitcoach.dev", "trainer@fitcoach.dev",
     "Improve endurance and lose weight", "Intermediate level, likes group workouts", "ACTIVE", "ELITE", 12),
    ("david.client@fitcoach.dev", None,
     "General fitness and flexibility", "Beginner level, interested in yoga and pilates", "INACTIVE", None, 0),
    ("sophia.client@fitcoach.dev", "lisa.trainer@fitcoach.dev",
     "Sports performance and agility", "Athlete, needs sport-specific training", "ACTIVE", "PRO", 3),
]

EXERCISES = [
    # name, category, difficulty, muscle groups, equipment, description
    ("Burpee Box Jump Over", "MetCon", "ADVANCED", ["Full Body"], ["Box"],
     "Explosive full-body movement combining burpee and box jump"),
    ("Wall Ball", "MetCon", "INTERMEDIATE", ["Quadriceps", "Glutes", "Shoulders", "Core"], ["Medicine Ball", "Wall"],
     "Squat to wall ball throw combination exercise"),
    ("Sled Push", "Strength", "INTERMEDIATE", ["Quadriceps", "Glutes", "Calves"], ["Sled", "Weight Plates"],
     "Push a weighted sled over a set distance"),
    ("Sled Pull", "Strength", "INTERMEDIATE", ["Back", "Biceps", "Hamstrings"], ["Sled", "Rope"],
     "Pull a weighted sled towards you hand over hand"),
    ("Sandbag Carry", "Strength", "INTERMEDIATE", ["Core", "Shoulders", "Legs"], ["Sandbag"],
     "Carry a sandbag over a set distance"),
    ("Farmers Walk", "Strength", "BEGINNER", ["Forearms", "Traps", "Core"], ["Dumbbells"],
     "Walk while holding heavy weights at your sides"),
    ("Thrusters", "MetCon", "INTERMEDIATE", ["Quadriceps", "Glutes", "Shoulders"], ["Barbell"],
     "Front squat into an overhead press in one movement"),
    ("Box Jumps", "Plyometrics", "INTERMEDIATE", ["Quadriceps", "Glutes", "Calves"], ["Box"],
     "Jump onto a box and stand tall"),
    ("Kettlebell Swings", "MetCon", "INTERMEDIATE", ["Glutes", "Hamstrings", "Core"], ["Kettlebell"],
     "Hip hinge swing of a kettlebell to chest height"),
    ("Row (Machine)", "Cardio", "BEGINNER", ["Back", "Legs", "Arms"], ["Rowing Machine"],
     "Steady or interval rowing on an ergometer"),
    ("Assault Bike", "Cardio", "BEGINNER", ["Full Body"], ["Air Bike"],
     "Air bike intervals"),
    ("Double Unders", "Cardio", "ADVANCED", ["Calves", "Shoulders"], ["Jump Rope"],
     "Jump rope passing twice under the feet per jump"),
    ("Deadlift", "Strength", "INTERMEDIATE", ["Hamstrings", "Glutes", "Back"], ["Barbell", "Weight Plates"],
     "Lift a loaded barbell from the floor to hip height"),
    ("Romanian Deadlift", "Strength", "INTERMEDIATE", ["Hamstrings", "Glutes"], ["Barbell"],
     "Hip hinge with soft knees, bar close to the legs"),
    ("Lunges", "Strength", "BEGINNER", ["Quadriceps", "Glutes"], ["Bodyweight"],
     "Alternating forward lunges"),
    ("Running", "Cardio", "BEGINNER", ["Legs", "Cardiovascular System"], [],
     "Steady state or interval running"),
    ("Burpees", "MetCon", "INTERMEDIATE", ["Full Body"], ["Bodyweight"],
     "Squat thrust with push-up and jump"),
    ("Bench Press", "Strength", "INTERMEDIATE", ["Chest", "Triceps", "Shoulders"], ["Barbell", "Bench"],
     "Press a barbell from the chest while lying on a bench"),
    ("Squats", "Strength", "INTERMEDIATE", ["Quadriceps", "Glutes"], ["Barbell", "Squat Rack"],
     "Back squat to parallel or below"),
    ("Pull-ups", "Strength", "INTERMEDIATE", ["Back", "Biceps"], ["Pull-up Bar"],
     "Pull the chin over the bar from a dead hang"),
    ("Push-ups", "Strength", "BEGINNER", ["Chest", "Triceps"], ["Bodyweight"],
     "Lower the chest to the floor and press back up"),
    ("Overhead Press", "Strength", "INTERMEDIATE", ["Shoulders", "Triceps"], ["Barbell"],
     "Press a barbell from the shoulders to overhead"),
    ("Bent Over Rows", "Strength", "INTERMEDIATE", ["Back", "Biceps"], ["Barbell"],
     "Row a barbell to the lower chest from a hinged position"),
    ("Lat Pulldowns", "Strength", "BEGINNER", ["Back", "Biceps"], ["Cable Machine"],
     "Pull a cable bar down to the upper chest"),
    ("Mountain Climbers", "Cardio", "BEGINNER", ["Core", "Shoulders"], ["Bodyweight"],
     "Alternate driving the knees to the chest from a plank"),
    ("Hollow Hold", "Gymnastics", "BEGINNER", ["Core"], ["Bodyweight"],
     "Hold a hollow body position on the floor"),
]

STRENGTH_BUILDER = [
    # day number, name, exercises (name, sets, reps, rest)
    (1, "Push Day", [("Bench Press", 4, "8", "120s"), ("Overhead Press", 3, "10", "90s")]),
    (2, "Pull Day", [("Pull-ups", 4, "8", "120s"), ("Romanian Deadlift", 3, "10", "90s")]),
    (3, "Leg Day", [("Squats", 4, "8", "150s"), ("Lunges", 3, "12", "90s")]),
    (4, "Full Body", [("Deadlift", 3, "5", "180s"), ("Bent Over Rows", 3, "10", "90s"), ("Push-ups", 3, "15", "60s")]),
]

HYROX_PREP = [
    (1, "Strength & Power", [("Deadlift", 5, "5", "180s"), ("Thrusters", 4, "8", "120s")]),
    (2, "MetCon & Endurance", [("Burpee Box Jump Over", 3, "10", "90s"), ("Wall Ball", 3, "15", "90s")]),
]


def wipe():
    """Delete every row, children first."""
    for table in reversed(db.metadata.sorted_tables):
        db.session.execute(table.delete())
    db.session.commit()


def seed_users():
    users = {}
    for email, name, role in USERS:
        user = User(email=email, name=name, role=role)
        user.set_password(DEMO_PASSWORD)
        db.session.add(user)
        users[email] = user
    db.session.flush()

    now = datetime.utcnow()
    for email, trainer_email, goals, notes, status, plan, months in CLIENTS:
        db.session.add(Client(
            user_id=users[email].id,
            trainer_id=users[trainer_email].id if trainer_email else None,
            goals=goals,
            notes=notes,
            subscription_status=status,
            subscription_plan=plan,
            subscription_start=now if months else None,
            subscription_end=now + timedelta(days=30 * months) if months else None,
        ))
    db.session.commit()
    print(f"Created {len(USERS)} users and {len(CLIENTS)} client profiles")
    return users


def seed_exercises():
    exercises = {}
    for name, category, difficulty, muscles, equipment, description in EXERCISES:
        exercise = Exercise(
            name=name,
            category=category,
            difficulty=difficulty,
            muscle_groups=muscles,
            equipment=equipment,
            description=description,
        )
        db.session.add(exercise)
        exercises[name] = exercise
    db.session.commit()
    print(f"Created {len(exercises)} exercises")
    return exercises


def _entries(entry_cls, exercises, lines):
    return [
        entry_cls(exercise_id=exercises[name].id, order=order, sets=sets, reps=reps, rest=rest)
        for order, (name, sets, reps, rest) in enumerate(lines, start=1)
    ]


def seed_program(name, description, category, difficulty, days, creator, exercises):
    program = WorkoutProgram(
        name=name,
        description=description,
        category=category,
        difficulty=difficulty,
        total_days=len(days),
        status="ACTIVE",
        creator_id=creator.id,
    )
    for day_number, day_name, lines in days:
        day = WorkoutDay(day_number=day_number, name=day_name, estimated_duration=60)
        day.exercises = _entries(WorkoutDayExercise, exercises, lines)
        program.days.append(day)
    db.session.add(program)
    return program


def seed_catalog(users, exercises):
    trainer = users["trainer@fitcoach.dev"]

    workout = Workout(
        name="Quick Hyrox Circuit",
        description="Fast-paced circuit workout for Hyrox preparation",
        category="MetCon",
        difficulty="INTERMEDIATE",
        estimated_duration=30,
        status="ACTIVE",
        creator_id=trainer.id,
    )
    workout.exercises = _entries(WorkoutExercise, exercises, [
        ("Burpee Box Jump Over", 3, "8", "60s"),
        ("Wall Ball", 3, "12", "60s"),
        ("Sled Push", 3, "20m", "90s"),
    ])
    db.session.add(workout)

    seed_program("4-Week Strength Builder", "Progressive strength training program",
                 "Strength", "INTERMEDIATE", STRENGTH_BUILDER, trainer, exercises)
    seed_program("Hyrox Competition Prep", "Comprehensive training program for Hyrox competition preparation",
                 "Hyrox", "ADVANCED", HYROX_PREP, trainer, exercises)
    db.session.commit()
    print("Created 1 workout and 2 programs")


def seed_messages(users):
    trainer = users["trainer@fitcoach.dev"]
    client = users["client@fitcoach.dev"]
    conversation = Conversation(client_id=client.id, trainer_id=trainer.id)
    db.session.add(conversation)
    db.session.flush()
    for sender, content in [
        (trainer, "Welcome aboard! Your first Hyrox block starts Monday."),
        (client, "Thanks, looking forward to it."),
    ]:
        db.session.add(Message(conversation_id=conversation.id, sender_id=sender.id, content=content))
    db.session.commit()
    print("Created 1 conversation")


def seed():
    wipe()
    users = seed_users()
    exercises = seed_exercises()
    seed_catalog(users, exercises)
    seed_messages(users)
    print(f"Seeding completed. Every demo account uses the password '{DEMO_PASSWORD}'.")


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        db.create_all()
        seed()
