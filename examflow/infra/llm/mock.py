from __future__ import annotations

import json

from examflow.infra.ports.llm import ChatMessage, LLMPort

_MOCK_QUESTIONS = [
    {
        "question": "[mock] What is 2 + 2?",
        "options": ["3", "4", "5", "6"],
        "correctAnswer": "B",
    }
]


class MockLLM(LLMPort):
    provider_name = "mock"
    model_name = "mock-llm"

    def chat(
        self,
        *,
        messages: list[ChatMessage],
        model: str | None = None,
        timeout_seconds: float | None = None,
    ) -> str:
        system = str(messages[0].get("content") or "") if messages else ""
        if "JSON array" in system:
            return json.dumps(_MOCK_QUESTIONS)
        return "[mock] 1. What is 2 + 2? A) 3 B) 4 C) 5 D) 6 Answer: B"
