"""Placeholder tokens, default prompts, and workflow step definitions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from ..models import StepType, WorkflowStepConfig

ORIGINAL_CONTENT_PLACEHOLDER = "ORIGINAL_CONTENT_PLACEHOLDER"
PARSED_FILES_PLACEHOLDER = "PARSED_FILES_PLACEHOLDER"
CODE_PLACEHOLDER = "CODE_PLACEHOLDER"

NO_PARSED_FILES_MARKER = "None"
NO_NOTES_MARKER = "No additional documentation notes were extracted."

FILE_FINDER_PROMPT = """
You are an AI assistant completing a file extraction process.
You will receive the original text of a project description and a list of file paths that a script has already extracted.

Your tasks are:
1.  **Analyse the original content**: Read the whole original text carefully.
2.  **Identify missing files**: Find any complete file (with a clear path and content, often inside code blocks) in the original text that is NOT in the list of already extracted files.
3.  **Return a JSON object**: Your output MUST be a single valid JSON object that follows the provided schema. It must contain one key, "additionalFiles", holding an array of file objects. If no new files are found, return an empty array. Do not add any text before or after the JSON object.

The original content follows:
---
ORIGINAL_CONTENT_PLACEHOLDER
---

Files already extracted by the script (by path):
---
PARSED_FILES_PLACEHOLDER
---
"""

DOC_EXTRACTOR_PROMPT = """
You are an AI assistant that extracts documentation from unstructured text.
You will receive the original text of a project description.

Your tasks are:
1.  **Analyse the original content**: Read the whole text carefully.
2.  **Extract "orphan" content**: Identify any important descriptive text, project goals, setup instructions or other relevant information that is NOT part of a specific file's code block. This orphan content is valuable for writing a high quality README.md.
3.  **Summarise the notes**: Condense everything you extracted into a single coherent string of notes.
4.  **Return a JSON object**: Your output MUST be a single valid JSON object that follows the provided schema. It must contain one key, "documentationNotes", holding a string. If nothing relevant is found, return an empty string. Do not add any text before or after the JSON object.

The original content follows:
---
ORIGINAL_CONTENT_PLACEHOLDER
---
"""

README_GENERATION_PROMPT = """
You are an expert technical writer who specialises in clear, high quality documentation for open-source projects.

Analyse the project information below. It consists of the full original project description and may also include notes extracted by an assistant. Synthesise all of it into a complete, well structured README.md for this project using Markdown syntax.

The README.md should include the following sections:
- **Project Title**: A clear and concise title.
- **Description**: A short paragraph explaining what the project does and its main purpose.
- **Key Features**: A bulleted list of the most important features.
- **Technologies Used**: The key technologies, libraries or frameworks mentioned.
- **Project Structure**: A short explanation of the file layout if it is not obvious.
- **Installation and Usage**: Clear step-by-step instructions to set up and run the project.
- **Contributing**: A welcoming section for potential contributors.
- **License**: The license (for example MIT).

**CRITICAL INSTRUCTIONS**:
1.  **Synthesise everything**: Combine the original content and the additional notes. The additional notes often carry the most important context.
2.  **EXCLUDE code**: Do NOT include full code blocks. Inline snippets for commands (for example `npm install`) are fine.
3.  **Markdown only**: The whole output MUST be a single valid Markdown document.

The complete information to analyse follows:
---
"""

CODE_REFACTORING_PROMPT = """
You are an expert programmer and an AI assistant focused on code quality.
A user supplied a piece of code and wants you to refactor it.

Your tasks are:
1.  **Analyse the code**: Understand its purpose, logic and structure.
2.  **Refactor to improve it**: Improve readability and clarity, optimise performance where it does not change behaviour, add concise comments where the logic is complex, keep the style consistent, and split complex logic into smaller functions where appropriate.
3.  **Preserve behaviour**: The refactored code must have exactly the same functionality and external behaviour. Do not add or remove features.
4.  **Return only code**: Your output MUST be only the complete refactored code for the file. No explanations or text outside the code.

The code to refactor follows:
---
CODE_PLACEHOLDER
---
"""


@dataclass(frozen=True)
class StepDefinition:
    """Display name, description and default prompt for a step type."""

    name: str
    description: str
    prompt: str


WORKFLOW_STEP_DEFINITIONS: Dict[StepType, StepDefinition] = {
    StepType.FIND_FILES: StepDefinition(
        name="Find Additional Files",
        description="Use the model to find files the heading parser missed.",
        prompt=FILE_FINDER_PROMPT,
    ),
    StepType.EXTRACT_DOCS: StepDefinition(
        name="Extract Documentation Notes",
        description="Use the model to extract documentation notes from the input.",
        prompt=DOC_EXTRACTOR_PROMPT,
    ),
    StepType.GENERATE_README: StepDefinition(
        name="Generate README.md",
        description="Use the model to write a complete README.md.",
        prompt=README_GENERATION_PROMPT,
    ),
}

DEFAULT_STEP_ORDER: tuple[StepType, ...] = (
    StepType.FIND_FILES,
    StepType.EXTRACT_DOCS,
    StepType.GENERATE_README,
)


def step_definition(step_type: StepType) -> StepDefinition:
    return WORKFLOW_STEP_DEFINITIONS[StepType(step_type)]


def default_workflow_steps() -> List[WorkflowStepConfig]:
    """Return a fresh copy of the default, fully enabled workflow."""
    return [
        WorkflowStepConfig(
            id=f"{step_type.value.lower()}-{index + 1}",
            type=step_type,
            name=WORKFLOW_STEP_DEFINITIONS[step_type].name,
            prompt=WORKFLOW_STEP_DEFINITIONS[step_type].prompt,
            enabled=True,
        )
        for index, step_type in enumerate(DEFAULT_STEP_ORDER)
    ]


__all__ = [
    "CODE_PLACEHOLDER",
    "CODE_REFACTORING_PROMPT",
    "DEFAULT_STEP_ORDER",
    "DOC_EXTRACTOR_PROMPT",
    "FILE_FINDER_PROMPT",
    "NO_NOTES_MARKER",
    "NO_PARSED_FILES_MARKER",
    "ORIGINAL_CONTENT_PLACEHOLDER",
    "PARSED_FILES_PLACEHOLDER",
    "README_GENERATION_PROMPT",
    "StepDefinition",
    "WORKFLOW_STEP_DEFINITIONS",
    "default_workflow_steps",
    "step_definition",
]
