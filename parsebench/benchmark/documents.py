"""
Sample Documents

Loads the configured sample files into memory before any timing starts, and
generates the reference sample set (a small nested object, a large array and
a large object) from a fixed seed.
"""

import json
import logging
import random
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

from .models import SampleDocument

logger = logging.getLogger(__name__)


def load_documents(paths: Iterable[Path]) -> Tuple[List[SampleDocument], List[str]]:
    """
    Read every path fully as UTF-8 text.

    Returns:
        ``(documents, skipped)``: the loaded documents in input order and the
        names of the files that were missing or unreadable.
    """
    documents: List[SampleDocument] = []
    skipped: List[str] = []

    for path in paths:
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Skipping sample document {path}: {e}")
            skipped.append(path.name)
            continue
        documents.append(SampleDocument(name=path.name, text=text))
        logger.debug(f"Loaded {path.name} ({len(text)} chars)")

    return documents, skipped


# =============================================================================
# Reference sample generation
# =============================================================================

_WORDS = [
    "alpha", "bravo", "charlie", "delta", "echo", "foxtrot", "golf", "hotel",
    "india", "juliet", "kilo", "lima", "mike", "november", "oscar", "papa",
]


def _record(rng: random.Random, idx: int) -> Dict[str, Any]:
    name = f"{rng.choice(_WORDS).title()} {rng.choice(_WORDS).title()}"
    return {
        "id": idx,
        "name": name,
        "email": f"{name.lower().replace(' ', '.')}{idx}@example.com",
        "active": rng.random() < 0.5,
        "score": round(rng.uniform(0, 100), 3),
        "tags": rng.sample(_WORDS, 3),
        "address": {
            "street": f"{rng.randint(1, 9999)} {rng.choice(_WORDS).title()} St",
            "zip": f"{rng.randint(10000, 99999)}",
            "geo": {"lat": round(rng.uniform(-90, 90), 6), "lng": round(rng.uniform(-180, 180), 6)},
        },
        "note": None if rng.random() < 0.3 else "café ☃ \"quoted\" \\ line\nbreak",
    }


def build_samples(seed: int = 42, records: int = 5000) -> Dict[str, Any]:
    """Build the three reference documents as Python values, keyed by file name."""
    rng = random.Random(seed)
    return {
        "sample.json": {
            "users": [_record(rng, i) for i in range(3)],
            "total": 3,
            "timestamp": 1234567890,
        },
        "sample-big-array.json": [_record(rng, i) for i in range(records)],
        "sample-big-object.json": {f"key_{i:06d}": _record(rng, i) for i in range(records)},
    }


def generate_samples(output_dir: Path, seed: int = 42, records: int = 5000) -> List[Path]:
    """Write the reference documents into ``output_dir`` and return their paths."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for name, value in build_samples(seed=seed, records=records).items():
        path = output_dir / name
        with open(path, "w", encoding="utf-8") as f:
            json.dump(value, f, indent=2, ensure_ascii=False)
        written.append(path)
        logger.info(f"Wrote {path}")
    return written
