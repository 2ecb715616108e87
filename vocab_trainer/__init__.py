"""Vocabulary trainer backed by a spaced-repetition scheduler."""
