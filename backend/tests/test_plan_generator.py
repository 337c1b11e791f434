import unittest
from unittest.mock import MagicMock, patch

from langchain_core.messages import AIMessage, HumanMessage

from fitplan.exceptions import GenerationError
from fitplan.services import llm_service
from fitplan.services.plan_generator import FALLBACK_PLAN, PlanGenerator, build_prompt

from support import alice_fields


def llm_returning(content, metadata=None):
    llm = MagicMock()
    llm.invoke.return_value = AIMessage(content=content, response_metadata=metadata or {})
    return llm


class TestBuildPrompt(unittest.TestCase):

    def test_prompt_embeds_profile(self):
        prompt = build_prompt(alice_fields())

        self.assertIn("- Name: Alice", prompt)
        self.assertIn("- Age: 30", prompt)
        self.assertIn("- Weight: 65 kg", prompt)
        self.assertIn("- Dietary Preference: Vegetarian", prompt)
        self.assertIn("- Target Body Type: lean", prompt)
        self.assertIn("7-day", prompt)
        for word in ("exercises", "sets", "reps", "rest periods", "dietary suggestions"):
            self.assertIn(word, prompt)

    def test_prompt_is_deterministic(self):
        self.assertEqual(build_prompt(alice_fields()), build_prompt(alice_fields()))

    def test_fractional_weight_and_nonveg(self):
        prompt = build_prompt(alice_fields(weight=72.5, dietary_preference="nonveg"))

        self.assertIn("- Weight: 72.5 kg", prompt)
        self.assertIn("- Dietary Preference: Non-vegetarian", prompt)


class TestPlanGenerator(unittest.TestCase):

    def test_returns_model_text_verbatim(self):
        llm = llm_returning("Day 1: Squats 3x12, rest 60s\n")
        generator = PlanGenerator(llm_factory=lambda: llm)

        plan = generator.generate_plan(alice_fields())

        self.assertEqual(plan, "Day 1: Squats 3x12, rest 60s\n")
        messages = llm.invoke.call_args[0][0]
        self.assertEqual(len(messages), 1)
        self.assertIsInstance(messages[0], HumanMessage)
        self.assertEqual(messages[0].content, build_prompt(alice_fields()))

    def test_model_error_falls_back(self):
        llm = MagicMock()
        llm.invoke.side_effect = ConnectionError("network unreachable")
        generator = PlanGenerator(llm_factory=lambda: llm)

        with self.assertLogs("fitplan.services.plan_generator", level="ERROR") as logs:
            plan = generator.generate_plan(alice_fields())

        self.assertEqual(plan, FALLBACK_PLAN)
        self.assertIn("network unreachable", logs.output[0])
        llm.invoke.assert_called_once()

    def test_empty_reply_falls_back(self):
        generator = PlanGenerator(llm_factory=lambda: llm_returning("   "))
        self.assertEqual(generator.generate_plan(alice_fields()), FALLBACK_PLAN)

    def test_broken_client_setup_falls_back(self):
        def factory():
            raise ValueError("invalid api key")

        generator = PlanGenerator(llm_factory=factory)
        self.assertEqual(generator.generate_plan(alice_fields()), FALLBACK_PLAN)


class TestCallLlm(unittest.TestCase):

    def test_reads_usage_metadata(self):
        llm = llm_returning("plan", {"token_usage": {"prompt_tokens": 12, "completion_tokens": 30}})

        with self.assertLogs("fitplan.services.llm_service", level="INFO") as logs:
            content = llm_service.call_llm(llm, "prompt")

        self.assertEqual(content, "plan")
        self.assertIn("Total: 42", logs.output[0])

    def test_non_text_content_is_an_error(self):
        llm = MagicMock()
        llm.invoke.return_value = AIMessage(content=[{"type": "image_url", "image_url": "x"}])

        with self.assertRaises(GenerationError):
            llm_service.call_llm(llm, "prompt")


class TestGetLlm(unittest.TestCase):

    def test_openrouter_client_has_timeout_and_no_retries(self):
        with patch.object(llm_service, "LLM_API_KEY", "test-key"):
            llm = llm_service.get_llm(provider="openrouter", model="google/gemini-2.0-flash-001", timeout=15.0)

        self.assertEqual(llm.model_name, "google/gemini-2.0-flash-001")
        self.assertEqual(llm.request_timeout, 15.0)
        self.assertEqual(llm.max_retries, 0)

    def test_ollama_is_the_default(self):
        llm = llm_service.get_llm(provider="ollama", model="llama3")
        self.assertEqual(llm.model, "llama3")


if __name__ == '__main__':
    unittest.main()
