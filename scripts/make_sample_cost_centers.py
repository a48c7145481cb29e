#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
from pathlib import Path

from cost_center_report.core.sample import sample_document


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a sample cost-center upload document")
    parser.add_argument("--output", required=True, help="Output file path (.json)")
    parser.add_argument(
        "--shape",
        choices=["costCenters", "data", "array"],
        default="costCenters",
        help="Top-level layout of the generated document",
    )
    args = parser.parse_args()

    centers = sample_document()["costCenters"]
    document = centers if args.shape == "array" else {args.shape: centers}

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(document, indent=2), encoding="utf-8")

    print(f"Sample cost center document written to: {output}")


if __name__ == "__main__":
    main()
