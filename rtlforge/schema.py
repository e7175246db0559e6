"""Response Schema Builder — structured-output schema for generate mode.

Every registry id is advertised as an optional property, whatever the
selection. The prompt tells the model which keys to fill; keeping the schema
selection-independent keeps it static.
"""

import copy
from typing import Iterable

from rtlforge.deliverables import all_ids

FILE_FIELDS = ("filename", "language", "code")

FILE_SCHEMA = {
    "type": "object",
    "properties": {
        "filename": {
            "type": "string",
            "description": "The filename for the content, e.g., 'counter.v' or 'spec.md'.",
        },
        "language": {
            "type": "string",
            "description": "The language identifier, e.g., 'Verilog', 'Markdown', 'Mermaid', 'Text'.",
        },
        "code": {
            "type": "string",
            "description": "The complete, syntactically correct code or document content.",
        },
    },
    "required": list(FILE_FIELDS),
}


def build_response_schema(deliverables: Iterable[str] | None = None) -> dict:
    """Return the response schema covering every known deliverable.

    ``deliverables`` is accepted for call-site symmetry with the prompt
    builder and does not affect the result.
    """
    return {
        "type": "object",
        "properties": {d: copy.deepcopy(FILE_SCHEMA) for d in all_ids()},
    }
