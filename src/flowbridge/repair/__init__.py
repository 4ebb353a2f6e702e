"""LLM-assisted semantic repair of the emitted graph."""

from flowbridge.repair.client import RepairClient, extract_json
from flowbridge.repair.errors import (
    EmptyResponseError,
    RepairAuthenticationError,
    RepairError,
    RepairNetworkError,
    RepairRateLimitError,
    RepairRequestError,
    RepairServerError,
    RepairServiceError,
    RepairTimeoutError,
    SchemaValidationError,
    error_from_status_code,
)
from flowbridge.repair.loop import MAX_ATTEMPTS, RepairOutcome, RepairState, SemanticRepairLoop
from flowbridge.repair.patches import (
    AddClassToNode,
    MergeStyle,
    MergeVariant,
    PatchInstruction,
    RemoveNode,
    SetStyle,
    SetVariant,
    apply_patches,
)
from flowbridge.repair.prompt import RETRY_INSTRUCTION, SYSTEM_PROMPT, build_prompt
from flowbridge.repair.schema import validate_semantic_response
from flowbridge.repair.translate import PatchSet, ReviewItem, translate_response

__all__ = [
    "MAX_ATTEMPTS",
    "RETRY_INSTRUCTION",
    "SYSTEM_PROMPT",
    "AddClassToNode",
    "EmptyResponseError",
    "MergeStyle",
    "MergeVariant",
    "PatchInstruction",
    "PatchSet",
    "RemoveNode",
    "RepairAuthenticationError",
    "RepairClient",
    "RepairError",
    "RepairNetworkError",
    "RepairOutcome",
    "RepairRateLimitError",
    "RepairRequestError",
    "RepairServerError",
    "RepairServiceError",
    "RepairState",
    "RepairTimeoutError",
    "ReviewItem",
    "SchemaValidationError",
    "SemanticRepairLoop",
    "SetStyle",
    "SetVariant",
    "apply_patches",
    "build_prompt",
    "error_from_status_code",
    "extract_json",
    "translate_response",
    "validate_semantic_response",
]
