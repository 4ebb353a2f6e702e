"""Tests for the repair prompt text."""
from __future__ import annotations

import json

from flowbridge.diagnostics import DiagnosticReport
from flowbridge.graph import NodeType, TargetNode, XscpPayload
from flowbridge.repair import RETRY_INSTRUCTION, SYSTEM_PROMPT, build_prompt
from flowbridge.repair.prompt import RESPONSE_SKELETON


def _prompt() -> str:
    payload = XscpPayload(nodes=[TargetNode("n1", NodeType.BLOCK, classes=["hero"])])
    report = DiagnosticReport(missing_fonts=[".hero missing font-family"])
    return build_prompt('<div class="hero">Hi</div>', ".hero { color: red; }", payload, report)


class TestBuildPrompt:
    def test_sections_in_order(self) -> None:
        prompt = _prompt()
        markers = [
            "INPUTS:",
            "1. ORIGINAL_HTML",
            "2. ORIGINAL_CSS",
            "3. GENERATED_WEBFLOW_OUTPUT",
            "4. DIAGNOSTIC_REPORT",
            "OBJECTIVE:",
            "SCHEMA:",
            "RETURN JSON MATCHING THE SCHEMA EXACTLY.",
        ]
        positions = [prompt.index(marker) for marker in markers]
        assert positions == sorted(positions)

    def test_inputs_are_fenced(self) -> None:
        prompt = _prompt()
        assert '<<<HTML\n<div class="hero">Hi</div>\nHTML' in prompt
        assert "<<<CSS\n.hero { color: red; }\nCSS" in prompt

    def test_payload_embedded_as_json(self) -> None:
        prompt = _prompt()
        start = prompt.index("<<<WEBFLOW\n") + len("<<<WEBFLOW\n")
        end = prompt.index("\nWEBFLOW", start)
        embedded = json.loads(prompt[start:end])
        assert embedded["type"] == "@webflow/XscpData"
        assert embedded["payload"]["nodes"][0]["_id"] == "n1"

    def test_report_embedded(self) -> None:
        prompt = _prompt()
        assert '"missingFonts": [\n    ".hero missing font-family"\n  ]' in prompt

    def test_schema_skeleton(self) -> None:
        assert json.dumps(RESPONSE_SKELETON, indent=2) in _prompt()
        assert set(RESPONSE_SKELETON) == {
            "summary",
            "typography_fixes",
            "layout_fixes",
            "spacing_fixes",
            "parent_child_repairs",
            "phantom_elements",
            "requires_human_review",
        }


class TestFixedText:
    def test_system_prompt(self) -> None:
        assert SYSTEM_PROMPT.startswith("You are a Webflow Semantic Transcoding Assistant.")
        assert "VALID JSON ONLY" in SYSTEM_PROMPT

    def test_retry_instruction(self) -> None:
        assert RETRY_INSTRUCTION == (
            "Previous response failed schema validation. "
            "Return JSON that matches the schema exactly. No prose."
        )
