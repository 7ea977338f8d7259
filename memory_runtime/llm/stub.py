"""Deterministic stub model client for offline use and tests."""

from .base import ModelClient, ModelResponse, register_model_client

STUB_RESPONSES = (
    'I understand you\'re asking about: "{message}"\n\n'
    "Decision: Use TypeScript for type safety\n"
    "Constraint: Must maintain backward compatibility\n"
    "Open: Should we add integration tests?\n\n"
    "Based on the context provided, I recommend focusing on the core functionality first.",
    'Thanks for the question about "{message}".\n\n'
    "Decision: Implement feature incrementally\n"
    "Glossary: MVP - Minimum Viable Product\n\n"
    "Let me help you with that. The key consideration here is to balance speed with quality.",
    'Regarding "{message}":\n\n'
    "Constraint: API must be RESTful\n"
    "Decision: Use JSON for data exchange\n"
    "Open: What authentication method should we use?\n\n"
    "I'd suggest starting with a simple implementation and iterating based on feedback.",
)


def stub_reply(messages: list[dict[str, str]]) -> str:
    """Pick a canned reply by the length of the first user message."""
    user_message = next((m["content"] for m in messages if m.get("role") == "user"), "")
    template = STUB_RESPONSES[len(user_message) % len(STUB_RESPONSES)]
    return template.format(message=user_message)


@register_model_client("stub")
class StubModelClient(ModelClient):
    """Returns canned, marker-bearing replies; never touches the network."""

    async def generate(self, messages: list[dict[str, str]], **kwargs) -> ModelResponse:
        return ModelResponse(content=stub_reply(messages), model="stub", stop_reason="stop")
