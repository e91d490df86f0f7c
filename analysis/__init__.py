"""
Analysis app

Purpose: ATS compatibility critique of a resume, optionally against a job
description. Reduces the resume, compiles the prompt, calls the generation
backend, keeps a short per-resume history and recovers from rejected API keys.
"""
