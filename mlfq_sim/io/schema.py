"""JSON schema for scheduler configuration structure validation."""

from __future__ import annotations

CONFIG_SCHEMA: dict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "MLFQ Scheduler Config",
    "type": "object",
    "required": ["version", "scheduler"],
    "properties": {
        "version": {"type": "string"},
        "scheduler": {
            "type": "object",
            "properties": {
                "quantum": {
                    "type": "array",
                    "minItems": 3,
                    "maxItems": 3,
                    "items": {"type": "integer", "minimum": 1},
                },
                "promotion": {"$ref": "#/$defs/CeilingTable"},
                "demotion": {"$ref": "#/$defs/CeilingTable"},
                "max_ticks": {"type": ["integer", "null"], "minimum": 1},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
    "$defs": {
        "CeilingTable": {
            "type": "array",
            "minItems": 3,
            "maxItems": 3,
            "items": {"type": ["integer", "null"], "minimum": 1},
        },
    },
}
