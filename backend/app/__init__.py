"""Workout Planner API backend."""
