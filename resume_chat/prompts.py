"""Prompt construction for résumé questions."""
from __future__ import annotations

RESUME_QA_TEMPLATE = """\
You are an expert career assistant. Analyze the following resume and answer the user's question with precision, clearly, and in a professional tone.

Resume:
{resume_text}

Instructions:
- Answer in full sentences.
- Highlight roles, companies, skills, and achievements when relevant.
- If the question asks for lists (e.g., skills, responsibilities), format them as bullet points.
- If information is missing from the resume, say "Not specified in resume."
- Keep answers concise but informative.

Question: {question}"""


def build_resume_prompt(resume_text: str, question: str) -> str:
    return RESUME_QA_TEMPLATE.format(resume_text=resume_text, question=question.strip())
