#!/usr/bin/env python
"""
Artwork Preflight Script

Runs the same validation the upload form uses against files on disk. Handy
for checking customer files sent by email, or a batch of sample decks.

Usage:
    python scripts/artwork_preflight.py path/to/deck.png
    python scripts/artwork_preflight.py samples/*.pdf --json
    python scripts/artwork_preflight.py deck.jpg --write-processed out/
"""
import sys
import json
import argparse
import mimetypes
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from services.printing import ArtworkRequirements, UploadedFile, validate_artwork  # noqa: E402


def load_upload(path: Path) -> UploadedFile:
    content_type, _ = mimetypes.guess_type(path.name)
    if path.suffix.lower() == ".psd":
        content_type = "image/vnd.adobe.photoshop"
    return UploadedFile(content=path.read_bytes(), content_type=content_type or "", filename=path.name)


def print_report(path: Path, result) -> None:
    status = "PASS" if result.valid else "FAIL"
    print(f"[{status}] {path}: {result.message}")
    for suggestion in result.suggestions:
        print(f"    - {suggestion}")
    if result.processed_file is not None:
        print(f"    * processed copy available: {result.processed_file.filename} "
              f"({result.processed_file.size:,} bytes)")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Validate deck artwork against print requirements")
    parser.add_argument("paths", nargs="+", type=Path, help="Artwork files to check")
    parser.add_argument("--json", action="store_true", help="Emit one JSON result per line")
    parser.add_argument("--write-processed", type=Path, metavar="DIR",
                        help="Write DPI-normalized copies into DIR")
    parser.add_argument("--width", type=int, default=ArtworkRequirements.width)
    parser.add_argument("--height", type=int, default=ArtworkRequirements.height)
    parser.add_argument("--resolution", type=int, default=ArtworkRequirements.resolution)
    args = parser.parse_args(argv)

    requirements = ArtworkRequirements(width=args.width, height=args.height, resolution=args.resolution)

    if args.write_processed:
        args.write_processed.mkdir(parents=True, exist_ok=True)

    failures = 0
    for path in args.paths:
        if not path.is_file():
            print(f"ERROR: Not a file: {path}", file=sys.stderr)
            failures += 1
            continue

        result = validate_artwork(load_upload(path), requirements)
        if not result.valid:
            failures += 1

        if args.json:
            payload = result.to_dict(include_content=False)
            payload["path"] = str(path)
            print(json.dumps(payload))
        else:
            print_report(path, result)

        if args.write_processed and result.processed_file is not None:
            out_path = args.write_processed / result.processed_file.filename
            out_path.write_bytes(result.processed_file.content)

    if not args.json:
        print()
        print(f"{len(args.paths) - failures}/{len(args.paths)} files passed")

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
