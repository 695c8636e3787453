"""
Default exercise catalog.

Loaded once into an empty ``exercises`` table at startup so a fresh install
has reference data to plan workouts with.
"""

import logging
from typing import List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.exercise import DifficultyLevel, Exercise, ExerciseType, TargetMuscleGroup
from app.services.persistence import include_deleted

logger = logging.getLogger(__name__)

S = ExerciseType.STRENGTH
C = ExerciseType.CARDIO
F = ExerciseType.FLEXIBILITY
M = TargetMuscleGroup
BEG = DifficultyLevel.BEGINNER
INT = DifficultyLevel.INTERMEDIATE
ADV = DifficultyLevel.ADVANCED


class ExerciseCatalogSeeder:
    """Seed the exercise catalog when it has never been populated."""

    # (name, description, type, target muscle group, difficulty)
    DEFAULT_EXERCISES: List[Tuple[str, str, ExerciseType, TargetMuscleGroup, DifficultyLevel]] = [
        # Chest
        ("Barbell Bench Press", "Classic flat bench press with barbell for overall chest development", S, M.CHEST, INT),
        ("Incline Dumbbell Press", "Upper chest focused press on incline bench with dumbbells", S, M.CHEST, INT),
        ("Push-ups", "Bodyweight exercise targeting chest, shoulders and triceps", S, M.CHEST, BEG),
        ("Cable Flyes", "Isolation exercise for chest using cable machine", S, M.CHEST, BEG),
        ("Chest Dips", "Dip variation with forward lean for chest emphasis", S, M.CHEST, INT),
        # Back
        ("Conventional Deadlift", "Classic deadlift for overall posterior chain", S, M.BACK, ADV),
        ("Pull-ups", "Overhand grip bodyweight pull for lats", S, M.BACK, INT),
        ("Barbell Row", "Bent over row with barbell for back thickness", S, M.BACK, INT),
        ("Dumbbell Row", "Single arm rowing for lat development", S, M.BACK, BEG),
        ("Lat Pulldown", "Cable pulldown for lat width", S, M.BACK, BEG),
        ("Seated Cable Row", "Cable rowing for mid-back thickness", S, M.BACK, BEG),
        # Shoulders
        ("Barbell Overhead Press", "Standing barbell press for shoulder strength", S, M.SHOULDERS, INT),
        ("Arnold Press", "Rotating dumbbell press", S, M.SHOULDERS, INT),
        ("Lateral Raises", "Dumbbell raises for lateral deltoids", S, M.SHOULDERS, BEG),
        ("Face Pulls", "Cable exercise for rear delts and rotator cuff", S, M.SHOULDERS, BEG),
        # Arms
        ("Barbell Curl", "Classic bicep curl with barbell", S, M.BICEPS, BEG),
        ("Hammer Curls", "Neutral grip curls for biceps and brachialis", S, M.BICEPS, BEG),
        ("Preacher Curl", "Curls on preacher bench for isolation", S, M.BICEPS, BEG),
        ("Tricep Pushdown", "Cable pushdown with straight or rope attachment", S, M.TRICEPS, BEG),
        ("Skull Crushers", "Lying tricep extension with barbell or EZ bar", S, M.TRICEPS, INT),
        ("Close Grip Bench Press", "Narrow grip bench for tricep emphasis", S, M.TRICEPS, INT),
        ("Wrist Curls", "Forearm flexor curls with barbell or dumbbells", S, M.FOREARMS, BEG),
        # Legs
        ("Barbell Back Squat", "Compound lower body lift with barbell on the back", S, M.QUADRICEPS, INT),
        ("Front Squat", "Barbell squat with front rack position", S, M.QUADRICEPS, ADV),
        ("Leg Press", "Machine pressing for legs", S, M.QUADRICEPS, BEG),
        ("Walking Lunges", "Alternating forward lunges across the floor", S, M.QUADRICEPS, BEG),
        ("Romanian Deadlift", "Hip hinge for hamstrings and glutes", S, M.HAMSTRINGS, INT),
        ("Lying Leg Curl", "Machine hamstring curl", S, M.HAMSTRINGS, BEG),
        ("Nordic Curl", "Bodyweight eccentric hamstring exercise", S, M.HAMSTRINGS, ADV),
        ("Barbell Hip Thrust", "Primary glute builder with barbell", S, M.GLUTES, INT),
        ("Glute Bridge", "Bodyweight hip extension from the floor", S, M.GLUTES, BEG),
        ("Standing Calf Raise", "Calf raise on machine or step", S, M.CALVES, BEG),
        # Core
        ("Plank", "Isometric core stability hold", S, M.CORE, BEG),
        ("Hanging Leg Raises", "Leg raises hanging from a bar", S, M.CORE, ADV),
        ("Russian Twist", "Seated rotational core exercise", S, M.CORE, BEG),
        ("Ab Wheel Rollout", "Anti-extension rollout with ab wheel", S, M.CORE, INT),
        # Cardio
        ("Outdoor Running", "Road or trail running outdoors", C, M.FULL_BODY, BEG),
        ("Treadmill Running", "Running on a treadmill at a set pace", C, M.FULL_BODY, BEG),
        ("Indoor Cycling", "Stationary bike cardio", C, M.LEGS, BEG),
        ("Rowing Machine", "Full body cardio on the rower", C, M.FULL_BODY, INT),
        ("Jump Rope", "Skipping rope for cardio", C, M.FULL_BODY, INT),
        ("Stair Climber", "Continuous stair climbing machine", C, M.LEGS, INT),
        ("Burpees", "Full body high intensity exercise", C, M.FULL_BODY, ADV),
        ("Hill Sprints", "Sprint intervals on incline", C, M.LEGS, ADV),
        ("Swimming", "Lap swimming in a pool", C, M.FULL_BODY, INT),
        ("Kettlebell Swings", "Hip hinge swing for power endurance", C, M.FULL_BODY, INT),
        # Flexibility
        ("Seated Hamstring Stretch", "Seated forward reach for the hamstrings", F, M.HAMSTRINGS, BEG),
        ("Standing Quad Stretch", "Standing single leg quad stretch", F, M.QUADRICEPS, BEG),
        ("Pigeon Pose", "Deep hip opener for glutes and hip rotators", F, M.GLUTES, INT),
        ("Cat-Cow Stretch", "Spinal flexion and extension on all fours", F, M.BACK, BEG),
        ("Cobra Pose", "Gentle back extension", F, M.BACK, BEG),
        ("Doorway Chest Stretch", "Chest and front shoulder stretch in a doorway", F, M.CHEST, BEG),
        ("Cross Body Shoulder Stretch", "Rear delt and shoulder stretch", F, M.SHOULDERS, BEG),
        ("Wall Calf Stretch", "Calf stretch against a wall", F, M.CALVES, BEG),
        ("Downward Dog", "Full body stretch for hamstrings, calves and shoulders", F, M.FULL_BODY, BEG),
        ("Full Splits", "Complete leg split position", F, M.LEGS, ADV),
        ("Foam Roll Upper Back", "Thoracic spine foam rolling", F, M.BACK, BEG),
    ]

    def seed(self, db: Session) -> int:
        """
        Insert the default catalog into an empty exercises table.

        Soft-deleted rows count as existing data, so a catalog an admin has
        pruned is never refilled.

        Returns:
            int: Number of exercises inserted (0 when the table already had rows)
        """
        existing = include_deleted(db.query(func.count(Exercise.id))).scalar()
        if existing:
            logger.info(f"Exercise catalog has {existing} rows, skipping seeding")
            return 0

        logger.info("Seeding default exercise catalog")
        db.add_all([
            Exercise(
                name=name,
                description=description,
                type=exercise_type,
                target_muscle_group=muscle_group,
                difficulty_level=difficulty,
            )
            for name, description, exercise_type, muscle_group, difficulty in self.DEFAULT_EXERCISES
        ])
        db.commit()

        logger.info(f"Loaded {len(self.DEFAULT_EXERCISES)} default exercises")
        return len(self.DEFAULT_EXERCISES)


exercise_catalog_seeder = ExerciseCatalogSeeder()
