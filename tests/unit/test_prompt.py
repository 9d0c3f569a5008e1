"""Tests for prompt rendering."""

from smart_error_lens.core.prompt import STACK_TRACE_UNAVAILABLE, render_prompt
from smart_error_lens.models.report import ErrorFacts, InvocationContext


class TestRenderPrompt:
    """Test render_prompt output."""

    def test_exact_rendering(self) -> None:
        """Test the full template for a failure without source."""
        facts = ErrorFacts(type="ValueError", message="boom", stack_trace="")
        context = InvocationContext(owner_name="Service", method_name="run")

        assert render_prompt(facts, context) == (
            "As an AI debugging assistant, analyze this error:\n"
            "\n"
            "Error Type: ValueError\n"
            "Error Message: boom\n"
            "Method: Service.run\n"
            "Stack Trace: Not available\n"
            "\n"
            "Please provide:\n"
            "1. Root cause analysis\n"
            "2. Potential solutions\n"
            "3. Best practices to prevent this error\n"
            "4. Code example for fix if possible"
        )

    def test_is_deterministic(
        self, error_facts: ErrorFacts, invocation_context: InvocationContext
    ) -> None:
        """Test that identical inputs render identical text."""
        first = render_prompt(error_facts, invocation_context, "Be brief.")
        second = render_prompt(error_facts, invocation_context, "Be brief.")
        assert first == second

    def test_includes_stack_trace(
        self, error_facts: ErrorFacts, invocation_context: InvocationContext
    ) -> None:
        """Test that a captured stack trace is embedded."""
        prompt = render_prompt(error_facts, invocation_context)
        assert f"Stack Trace: {error_facts.stack_trace}" in prompt
        assert STACK_TRACE_UNAVAILABLE not in prompt

    def test_includes_fenced_source(
        self, error_facts: ErrorFacts, invocation_context: InvocationContext
    ) -> None:
        """Test that source code is fenced."""
        prompt = render_prompt(error_facts, invocation_context)
        assert "Source Code:\n```python\ndef divide(self, a, b):\n    return a / b\n```" in prompt

    def test_source_block_omitted_without_snippet(self, error_facts: ErrorFacts) -> None:
        """Test that no empty fence is rendered."""
        context = InvocationContext(owner_name="mod", method_name="fn")
        assert "```" not in render_prompt(error_facts, context)

    def test_request_list_precedes_custom_prompt(
        self, error_facts: ErrorFacts, invocation_context: InvocationContext
    ) -> None:
        """Test custom instructions are appended after the request list."""
        prompt = render_prompt(error_facts, invocation_context, "  Answer in French.  ")
        assert prompt.endswith(
            "4. Code example for fix if possible\n\nAdditional Instructions:\nAnswer in French."
        )

    def test_blank_custom_prompt_ignored(
        self, error_facts: ErrorFacts, invocation_context: InvocationContext
    ) -> None:
        """Test that a whitespace-only custom prompt adds nothing."""
        assert render_prompt(error_facts, invocation_context, "   ") == render_prompt(
            error_facts, invocation_context
        )
