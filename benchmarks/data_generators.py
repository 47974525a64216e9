"""
Test data generators for location-tracking parser benchmarks.

Documents are pretty-printed so values spread over many lines, the way
hand-edited configuration files do:
- Different sizes (small/large)
- Different shapes (flat/nested/array-heavy)
- String-heavy content with escape sequences
"""

import json
import random
import string
from typing import Any

_ESCAPE_PROBABILITY = 0.3
_ESCAPES = ['\\"', "\\\\", "\\/", "\\b", "\\f", "\\n", "\\r", "\\t"]

DATA_TYPES = [
    "small_object",
    "large_object",
    "mixed_array",
    "nested_structure",
    "string_heavy",
]


def generate_test_data(data_type: str) -> str:
    """Generates pretty-printed JSON test data of the given type."""
    generators = {
        "small_object": _generate_small_object,
        "large_object": _generate_large_object,
        "mixed_array": _generate_mixed_array,
        "nested_structure": _generate_nested_structure,
        "string_heavy": _generate_string_heavy,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    data = generators[data_type]()
    if isinstance(data, str):
        return data
    return json.dumps(data, indent=2)


def _generate_small_object() -> dict[str, Any]:
    """A small service configuration (< 1KB)."""
    return {
        "service": "billing",
        "port": 8443,
        "debug": False,
        "timeout": 2.5,
        "upstreams": ["10.0.0.1", "10.0.0.2"],
        "tls": {"cert": "/etc/ssl/billing.pem", "verify": True},
        "owner": None,
    }


def _generate_large_object() -> dict[str, Any]:
    """A wide object (> 10KB) with many keyed sections."""
    return {
        f"section_{i}": {
            "enabled": random.choice([True, False]),
            "weight": round(random.uniform(0, 1), 4),
            "name": _random_string(12),
            "tags": [_random_string(5) for _ in range(3)],
        }
        for i in range(120)
    }


def _generate_mixed_array() -> list[Any]:
    """A long array mixing every scalar type and small objects."""
    makers = [
        lambda i: random.randint(-1000, 1000),
        lambda i: round(random.uniform(-100.0, 100.0), 3),
        lambda i: _random_string(random.randint(5, 30)),
        lambda i: random.choice([True, False]),
        lambda i: None,
        lambda i: {"index": i, "value": _random_string(10)},
    ]
    return [random.choice(makers)(i) for i in range(300)]


def _generate_nested_structure() -> dict[str, Any]:
    """A tree eight levels deep."""

    def node(depth: int) -> dict[str, Any]:
        if depth <= 0:
            return {"value": _random_string(10)}
        return {
            "level": depth,
            "items": [node(depth - 1) for _ in range(2)],
            "nested": node(depth - 1),
        }

    return node(7)


def _generate_string_heavy() -> str:
    """Strings full of escape sequences, emitted as raw JSON text."""

    def escaped(length: int) -> str:
        return "".join(
            random.choice(_ESCAPES)
            if random.random() < _ESCAPE_PROBABILITY
            else random.choice(string.ascii_letters + " ")
            for _ in range(length)
        )

    lines = [f'  "key_{i}": "{escaped(60)}"' for i in range(200)]
    return "{\n" + ",\n".join(lines) + "\n}"


def _random_string(length: int) -> str:
    """Generates a random string of specified length."""
    return "".join(random.choices(string.ascii_letters, k=length))
