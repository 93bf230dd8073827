"""Write the API's OpenAPI document to disk for client code generation."""

import argparse
import json
from pathlib import Path

from app.main import app


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "output",
        nargs="?",
        type=Path,
        default=Path("openapi.json"),
        help="Destination file (default: openapi.json)",
    )
    args = parser.parse_args()

    schema = app.openapi()
    args.output.write_text(json.dumps(schema, indent=2, ensure_ascii=False) + "\n")
    print(f"Generated {args.output} ({len(schema['paths'])} paths)")


if __name__ == "__main__":
    main()
