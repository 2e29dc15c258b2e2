"""
Model export for downstream renderers.

The exported model is the ordered list of struct entries in discovery order.
Exporting freezes the registry.
"""

import logging
from typing import Any, Dict, List, Tuple

from typegraph.models import TypeDescriptor
from typegraph.registry import TypeRegistry

logger = logging.getLogger(__name__)

ExportedModel = List[Tuple[str, TypeDescriptor]]


def export_model(registry: TypeRegistry) -> ExportedModel:
    """Return the struct entries of ``registry`` in discovery order.

    Non-struct entries (primitives and function signatures) are omitted. The
    registry is frozen, so no further mutation can happen after export.
    """
    registry.freeze()
    model = registry.structs()
    logger.info(
        "Exported %d structs (%d compatible)",
        len(model),
        sum(1 for _, d in model if d.compatible),
    )
    return model


def _field_to_dict(registry: TypeRegistry, field_type: str, field_name: str) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"type": field_type, "name": field_name}
    field_descriptor = registry[field_type]
    if field_descriptor.is_signature:
        payload["signature"] = {
            "return_type": field_descriptor.return_type,
            "arg_types": list(field_descriptor.arg_types),
        }
    return payload


def model_to_dict(registry: TypeRegistry, model: ExportedModel) -> Dict[str, Any]:
    """Render an exported model as a JSON-ready dictionary.

    Function-pointer fields carry their signature so a renderer does not need
    the registry itself.
    """
    structs = []
    for name, descriptor in model:
        structs.append(
            {
                "name": name,
                "compatible": descriptor.compatible,
                "fields": [
                    _field_to_dict(registry, f.field_type, f.field_name)
                    for f in descriptor.fields
                ],
            }
        )
    return {
        "structs": structs,
        "primitives": [
            d.to_dict() for _, d in registry.items() if not d.is_struct and not d.is_signature
        ],
    }
