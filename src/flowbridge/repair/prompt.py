"""Prompt text for the semantic repair request."""
from __future__ import annotations

import json

from flowbridge.diagnostics.model import DiagnosticReport
from flowbridge.graph.model import XscpPayload

__all__ = ["SYSTEM_PROMPT", "RETRY_INSTRUCTION", "RESPONSE_SKELETON", "build_prompt"]

SYSTEM_PROMPT = "\n".join([
    "You are a Webflow Semantic Transcoding Assistant.",
    "",
    "You are NOT a designer.",
    "You are NOT allowed to redesign, simplify, or improve layouts.",
    "You must preserve the original HTML/CSS intent exactly.",
    "",
    "Your task is to repair semantic gaps where deterministic rules failed",
    "when transcoding HTML/CSS into Webflow's explicit style model.",
    "",
    "Webflow does NOT support:",
    "- CSS variables",
    "- Element selectors (h1, p, body)",
    "- Browser default behavior",
    "- Implicit layout relationships",
    "",
    "You must make all layout, spacing, and typography explicit.",
    "",
    "For CSS Grid layouts:",
    "- Preserve grid-template-columns exactly (e.g., repeat(4, 1fr) -> 1fr 1fr 1fr 1fr)",
    "- Preserve grid-column and grid-row spans on ALL child elements",
    "- Use grid-column-start: auto; grid-column-end: span 2; for spanning",
    "- Do NOT simplify or reduce column counts",
    "- Bento grids require explicit span values on children to maintain layout",
    "- Ensure grid-template-rows is never empty; default to 'auto' if undefined",
    "",
    "You MUST output VALID JSON ONLY.",
    "No prose. No markdown. No explanations outside JSON.",
])

RETRY_INSTRUCTION = (
    "Previous response failed schema validation. "
    "Return JSON that matches the schema exactly. No prose."
)

RESPONSE_SKELETON = {
    "summary": {"issues_detected": ["string"], "confidence": "high|medium|low"},
    "typography_fixes": [
        {
            "target_class": "string",
            "font_family": "string",
            "font_weight": "string|null",
            "line_height": "string|null",
            "reason": "string",
        }
    ],
    "layout_fixes": [
        {
            "target_class": "string",
            "display": "flex|grid|block",
            "properties": {
                "flex_direction": "string|null",
                "justify_content": "string|null",
                "align_items": "string|null",
                "gap": "string|null",
                "grid_template_columns": "string|null",
                "grid_template_rows": "string|null",
                "grid_column": "string|null",
                "grid_row": "string|null",
                "grid_column_start": "string|null",
                "grid_column_end": "string|null",
                "grid_row_start": "string|null",
                "grid_row_end": "string|null",
            },
            "reason": "string",
        }
    ],
    "spacing_fixes": [
        {
            "target_class": "string",
            "padding": "string|null",
            "margin": "string|null",
            "min_height": "string|null",
            "max_width": "string|null",
            "reason": "string",
        }
    ],
    "parent_child_repairs": [
        {
            "parent_class": "string",
            "child_class": "string",
            "action": "apply_spacing_to_parent|duplicate_layout_rules|enforce_structure",
            "reason": "string",
        }
    ],
    "phantom_elements": [{"selector": "string", "action": "remove", "reason": "string"}],
    "requires_human_review": [{"issue": "string", "context": "string"}],
}

_OBJECTIVE = """OBJECTIVE:

Produce PATCH INSTRUCTIONS that make the Webflow output
visually and structurally equivalent to the original HTML/CSS.

You may ONLY:
- Recover layout intent
- Resolve CSS variables to concrete values
- Map element typography to class-based styles
- Make browser defaults explicit
- Remove phantom elements not present in original HTML

You may NOT:
- Redesign
- Remove components
- Change copy
- Invent elements
- Simplify layouts

If something is ambiguous, mark it as "requires_human_review"."""


def build_prompt(html: str, css: str, payload: XscpPayload, report: DiagnosticReport) -> str:
    """The user message: the four inputs, the objective and the schema."""
    sections = [
        "INPUTS:",
        f"1. ORIGINAL_HTML\n<<<HTML\n{html}\nHTML",
        f"2. ORIGINAL_CSS\n<<<CSS\n{css}\nCSS",
        f"3. GENERATED_WEBFLOW_OUTPUT\n<<<WEBFLOW\n{payload.to_json()}\nWEBFLOW",
        f"4. DIAGNOSTIC_REPORT\n<<<REPORT\n{json.dumps(report.to_dict(), indent=2)}\nREPORT",
        "",
        _OBJECTIVE,
        f"SCHEMA:\n{json.dumps(RESPONSE_SKELETON, indent=2)}",
        "RETURN JSON MATCHING THE SCHEMA EXACTLY.",
    ]
    return "\n\n".join(sections)
