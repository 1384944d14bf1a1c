from .user import User
from .client import Client
from .exercise import Exercise
from .workout import Workout, WorkoutExercise
from .workout_program import WorkoutProgram, WorkoutDay, WorkoutDayExercise
from .assignment import ClientWorkout, ClientWorkoutProgram
from .workout_progress import WorkoutProgress
from .conversation import Conversation, Message

__all__ = [
    "User", "Client", "Exercise",
    "Workout", "WorkoutExercise",
    "WorkoutProgram", "WorkoutDay", "WorkoutDayExercise",
    "ClientWorkout", "ClientWorkoutProgram",
    "WorkoutProgress",
    "Conversation", "Message",
]
