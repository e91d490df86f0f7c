import json

from django.test import SimpleTestCase

from analysis.exceptions import InputError
from analysis.prompts import (
    FIXES_HEADING,
    JOB_DESCRIPTION_LABEL,
    KEYWORD_GAPS_HEADING,
    MISSING_KEYWORDS_HEADING,
    RESUME_LABEL,
    SCORE_HEADING,
    compile_prompt,
)
from analysis.reducer import ExperienceProjection, PersonalProjection, ResumeProjection

JOB_DESCRIPTION = "Senior Python Engineer\nWe need Kubernetes, Terraform and PostgreSQL experience."


def sample_projection() -> ResumeProjection:
    return ResumeProjection(
        personal=PersonalProjection(summary="Backend engineer", location="Berlin"),
        experience=[
            ExperienceProjection(
                role="Engineer",
                company="Acme",
                description="Maintained Django services.",
                is_current=True,
            )
        ],
        skills=["Python", "Django"],
    )


class CompilePromptTests(SimpleTestCase):
    """Prompt wording is fixed apart from the job description branch."""

    def test_requires_projection(self) -> None:
        with self.assertRaises(InputError):
            compile_prompt(None, JOB_DESCRIPTION)

        with self.assertRaises(InputError):
            compile_prompt({"skills": ["Python"]}, JOB_DESCRIPTION)

    def test_compilation_is_deterministic(self) -> None:
        self.assertEqual(
            compile_prompt(sample_projection(), JOB_DESCRIPTION),
            compile_prompt(sample_projection(), JOB_DESCRIPTION),
        )
        self.assertEqual(compile_prompt(sample_projection()), compile_prompt(sample_projection()))

    def test_structure_and_allowed_markup(self) -> None:
        prompt = compile_prompt(sample_projection(), JOB_DESCRIPTION)
        system = prompt.system_instruction

        self.assertIn(f"<h4>{SCORE_HEADING}</h4>", system)
        self.assertIn(f"<h4>{FIXES_HEADING}</h4>", system)
        self.assertIn(f"<h4>{MISSING_KEYWORDS_HEADING}</h4>", system)
        self.assertIn("<h4>, <p>, <ul>, <li>, <strong>", system)
        self.assertIn("MUST be <ul> lists", system)
        self.assertIn("Do NOT use Markdown", system)

    def test_rubric_caps(self) -> None:
        system = compile_prompt(sample_projection(), JOB_DESCRIPTION).system_instruction

        self.assertIn("Start from 100 points", system)
        for cap in ("Up to 40 points", "Up to 30 points", "Up to 20 points", "Up to 10 points"):
            self.assertIn(cap, system)

    def test_keywords_are_closed_world_with_job_description(self) -> None:
        system = compile_prompt(sample_projection(), JOB_DESCRIPTION).system_instruction

        self.assertIn("MUST appear word-for-word in the TARGET JOB DESCRIPTION", system)
        self.assertIn("Do NOT infer, generalize", system)
        self.assertIn("taken ONLY from the job description", system)

    def test_fix_rules_forbid_fabrication(self) -> None:
        for prompt in (compile_prompt(sample_projection(), JOB_DESCRIPTION), compile_prompt(sample_projection())):
            system = prompt.system_instruction
            self.assertIn("NEVER suggest inventing or extending experience duration", system)
            self.assertIn("NEVER suggest adding degrees, certifications, or credentials", system)
            self.assertIn("NEVER suggest matching the years of experience", system)

    def test_user_message_with_job_description(self) -> None:
        projection = sample_projection()
        message = compile_prompt(projection, JOB_DESCRIPTION).user_message

        resume_part, jd_part = message.split(f"\n\n{JOB_DESCRIPTION_LABEL}\n")
        self.assertTrue(resume_part.startswith(f"{RESUME_LABEL}\n"))
        self.assertEqual(json.loads(resume_part[len(RESUME_LABEL) + 1:]), projection.to_dict())
        self.assertEqual(jd_part, JOB_DESCRIPTION)

    def test_without_job_description(self) -> None:
        prompt = compile_prompt(sample_projection())

        self.assertIn(f"<h4>{KEYWORD_GAPS_HEADING}</h4>", prompt.system_instruction)
        self.assertNotIn(MISSING_KEYWORDS_HEADING, prompt.system_instruction)
        self.assertIn("general ATS best practices", prompt.system_instruction)
        self.assertNotIn(JOB_DESCRIPTION_LABEL, prompt.user_message)

    def test_blank_job_description_counts_as_absent(self) -> None:
        self.assertEqual(compile_prompt(sample_projection(), "   \n "), compile_prompt(sample_projection()))
