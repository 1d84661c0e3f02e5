"""Export the operations API's OpenAPI document."""

from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from gelato_ops.main import create_application


def main(argv: list[str]) -> None:
    destination = Path(argv[0]) if argv else Path("docs/openapi.json")
    destination.parent.mkdir(parents=True, exist_ok=True)
    spec = create_application().openapi()
    destination.write_text(json.dumps(spec, indent=2, sort_keys=True), encoding="utf-8")
    print(f"Wrote {len(spec.get('paths', {}))} paths to {destination}")


if __name__ == "__main__":
    main(sys.argv[1:])
