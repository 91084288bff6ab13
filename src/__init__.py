"""Pathwise: tolerant LLM output normalization for career roadmaps, quizzes and exams."""
