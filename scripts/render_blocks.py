#!/usr/bin/env python3
"""
Render Blocks

Runs the document reconstructions over a saved Textract response and
prints or writes the artifacts the ExtractionResults Lambda would produce.

Usage:
    python scripts/render_blocks.py response.json
    python scripts/render_blocks.py page1.json page2.json --out ./artifacts --name invoice.pdf
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from lambdas.extraction_results.artifacts import build_artifacts
from textract_pipeline.config import TEXT_DETECTION_API
from textract_pipeline.models.blocks import BlockGraph
from textract_pipeline.reconstruction import reconstruct_document


def load_blocks(paths: list[Path]) -> list[dict]:
    """Concatenate the Blocks of one or more saved result pages, in argument order."""
    blocks: list[dict] = []
    for path in paths:
        with path.open(encoding="utf-8") as f:
            response = json.load(f)
        blocks.extend(response.get("Blocks", []))
    return blocks


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Render text, form and table artifacts from saved Textract results",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s response.json                    Print artifacts to stdout
  %(prog)s p1.json p2.json --out ./out      Write artifacts to ./out
""",
    )
    parser.add_argument(
        "responses",
        nargs="+",
        type=Path,
        help="GetDocumentTextDetection/GetDocumentAnalysis response files, in page order",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Directory to write artifacts to (prints to stdout if omitted)",
    )
    parser.add_argument(
        "--name",
        default="document.pdf",
        help="Source object name used to derive artifact names",
    )
    parser.add_argument(
        "--api",
        default=TEXT_DETECTION_API,
        choices=["StartDocumentTextDetection", "StartDocumentAnalysis"],
        help="API suffix used in artifact names",
    )

    args = parser.parse_args(argv)

    graph = BlockGraph.from_textract(load_blocks(args.responses))
    reconstruction = reconstruct_document(graph)
    artifacts = build_artifacts(
        reconstruction,
        bucket="local",
        source_key=args.name,
        api=args.api,
    )

    if not artifacts:
        print("No text, form data or tables found", file=sys.stderr)
        return 1

    for artifact in artifacts:
        if args.out:
            args.out.mkdir(parents=True, exist_ok=True)
            target = args.out / Path(artifact.key).name
            target.write_text(artifact.body, encoding="utf-8")
            print(f"Wrote {artifact.kind.value}: {target}")
        else:
            print(f"===== {artifact.kind.value} ({artifact.key}) =====")
            print(artifact.body)

    return 0


if __name__ == "__main__":
    sys.exit(main())
