"""Prompt rendering.

``render_prompt`` is a pure function of its inputs: no I/O, no clock, no
randomness. The same facts and context always render byte-identical text.
"""

from __future__ import annotations

from smart_error_lens.models.report import ErrorFacts, InvocationContext

STACK_TRACE_UNAVAILABLE = "Not available"

REQUEST_LIST = """Please provide:
1. Root cause analysis
2. Potential solutions
3. Best practices to prevent this error
4. Code example for fix if possible"""


def render_prompt(
    facts: ErrorFacts,
    context: InvocationContext,
    custom_prompt: str | None = None,
) -> str:
    """Render the analysis request for one failure.

    Args:
        facts: The captured error.
        context: The failing call.
        custom_prompt: Extra instructions appended after the request list.

    Returns:
        Prompt text.
    """
    sections = [
        "As an AI debugging assistant, analyze this error:",
        "\n".join(
            [
                f"Error Type: {facts.type}",
                f"Error Message: {facts.message}",
                f"Method: {context.qualified_method}",
                f"Stack Trace: {facts.stack_trace or STACK_TRACE_UNAVAILABLE}",
            ]
        ),
    ]

    if context.source_snippet:
        sections.append(f"Source Code:\n```python\n{context.source_snippet}\n```")

    sections.append(REQUEST_LIST)

    if custom_prompt and custom_prompt.strip():
        sections.append(f"Additional Instructions:\n{custom_prompt.strip()}")

    return "\n\n".join(sections)
