"""
Automancy CLI.

Commands:
  convert       Convert one ability (text argument or --file)
  batch         Convert every ability in a text file
  validate      Check a saved conversion result against the output contract
  demo          Convert the bundled sample abilities
  capabilities  Show what the converter recognizes and generates
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from automancy.config import load_config
from automancy.converter import AbilityConverter, ConversionResult, get_capabilities
from automancy.errors import AutomancyError
from automancy.validate import validate_result

DEMO_ABILITIES = [
    {
        "name": "Flame Sword",
        "text": (
            "Flame Sword: Melee Weapon Attack: +7 to hit, reach 5 ft., one target. "
            "Hit: 8 (1d8 + 4) slashing damage plus 4 (1d4) fire damage."
        ),
    },
    {
        "name": "Lightning Bolt",
        "text": "Lightning Bolt: DC 15 Dex save, 60-foot line. 28 (8d6) lightning damage, half on save.",
    },
    {
        "name": "Bear Hug",
        "text": (
            "Bear Hug (Recharge 4-6). The owlbear attempts to grab and crush a creature they "
            "can see within 5 feet of them. The target must make a DC 15 Dexterity saving "
            "throw. On a failed save, the target takes 22 (4d10) bludgeoning damage and is "
            "grappled (escape DC 15). On a successful save, the target takes half as much "
            "damage and is not grappled. Until this grapple ends, the target is restrained "
            "and takes 5 (1d10) bludgeoning damage at the start of each of their turns."
        ),
    },
]


def parse_batch_file(content: str) -> list[dict]:
    """Split a batch file into abilities.

    Abilities are separated by blank lines. A ``# Name`` line names the
    ability that follows; other ``#`` lines are comments.
    """
    abilities = []
    text_lines: list[str] = []
    name = None

    def flush():
        nonlocal text_lines, name
        if text_lines:
            abilities.append({"text": " ".join(text_lines), "name": name})
        text_lines = []
        name = None

    for line in content.splitlines():
        stripped = line.strip()
        if not stripped:
            flush()
        elif stripped.startswith("# "):
            name = stripped[2:].strip()
        elif not stripped.startswith("#"):
            text_lines.append(stripped)
    flush()
    return abilities


def _write_json(data, output: str | None):
    rendered = json.dumps(data, indent=2)
    if output:
        Path(output).write_text(rendered + "\n", encoding="utf-8")
        print(f"Wrote {output}")
    else:
        print(rendered)


def _make_converter(args) -> AbilityConverter:
    return AbilityConverter(config=load_config(args.config))


def _print_summary(result: ConversionResult):
    artifact = result.artifact
    print(f"  Name: {result.name}")
    print(f"  Type: {artifact.item['type']}")
    print(f"  Complexity: {artifact.complexity}/4")
    print(f"  Quality: {artifact.quality_score}")
    print(f"  Effects: {len(artifact.effects)}")
    print(f"  Flag namespaces: {len(artifact.flags)}")
    print(f"  Scripts: {len(artifact.scripts)}")
    if artifact.applied_systems:
        print(f"  Systems: {', '.join(artifact.applied_systems)}")
    if not result.enhancement.applied:
        print(f"  Enhancement skipped: {result.enhancement.reason}")


def convert_cmd(args):
    """Convert a single ability."""
    if args.file:
        text = Path(args.file).read_text(encoding="utf-8").strip()
    elif args.text:
        text = args.text
    else:
        print("Error: provide ability text or --file")
        sys.exit(1)

    result = _make_converter(args).convert(text, args.name)
    if not result.success:
        print(f"Conversion failed: {result.error}")
        sys.exit(1)

    if args.output:
        _print_summary(result)
    _write_json(result.to_dict(), args.output)


def batch_cmd(args):
    """Convert every ability in a batch file."""
    path = Path(args.input)
    if not path.exists():
        print(f"Error: {path} not found")
        sys.exit(1)

    abilities = parse_batch_file(path.read_text(encoding="utf-8"))
    print(f"Processing {len(abilities)} abilities from {path}")

    results = _make_converter(args).convert_multiple(abilities)
    succeeded = [r for r in results if r.success]
    failed = [r for r in results if not r.success]

    print(f"Converted {len(succeeded)}/{len(results)} abilities")
    for i, result in enumerate(failed, 1):
        print(f"  {i}. {result.name or '<unnamed>'}: {result.error}")

    _write_json([r.to_dict() for r in succeeded], args.output)


def validate_cmd(args):
    """Validate a saved conversion result."""
    data = json.loads(Path(args.input).read_text(encoding="utf-8"))
    results = data if isinstance(data, list) else [data]

    failed = 0
    for entry in results:
        report = validate_result(entry)
        status = "PASSED" if report.valid else "FAILED"
        print(f"{entry.get('name', '<unnamed>')}: {status}")
        for err in report.errors:
            print(f"    - {err}")
        for w in report.warnings:
            print(f"    ~ {w}")
        failed += not report.valid

    if failed:
        sys.exit(1)


def demo_cmd(args):
    """Convert the bundled sample abilities."""
    converter = _make_converter(args)
    for i, ability in enumerate(DEMO_ABILITIES, 1):
        print(f"\n--- {i}. {ability['name']} ---")
        result = converter.convert(ability["text"], ability["name"])
        if result.success:
            _print_summary(result)
        else:
            print(f"  Failed: {result.error}")


def capabilities_cmd(args):
    """Show converter capabilities."""
    _write_json(get_capabilities(), None)


def build_parser():
    parser = argparse.ArgumentParser(
        description="Automancy - convert ability text into automation artifacts"
    )
    parser.add_argument("--config", help="YAML config override file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log pipeline progress")

    sub = parser.add_subparsers(dest="command")

    convert_parser = sub.add_parser("convert", help="Convert one ability")
    convert_parser.add_argument("text", nargs="?", help="Ability text")
    convert_parser.add_argument("--file", "-f", help="Read ability text from a file")
    convert_parser.add_argument("--name", "-n", help="Ability name (default: taken from text)")
    convert_parser.add_argument("--output", "-o", help="Write result JSON to this file")
    convert_parser.set_defaults(func=convert_cmd)

    batch_parser = sub.add_parser("batch", help="Convert abilities from a text file")
    batch_parser.add_argument("input", help="Text file, abilities separated by blank lines")
    batch_parser.add_argument(
        "--output", "-o", default="batch-output.json",
        help="Output JSON file (default: batch-output.json)",
    )
    batch_parser.set_defaults(func=batch_cmd)

    validate_parser = sub.add_parser("validate", help="Validate saved conversion results")
    validate_parser.add_argument("input", help="JSON file written by convert or batch")
    validate_parser.set_defaults(func=validate_cmd)

    demo_parser = sub.add_parser("demo", help="Convert the sample abilities")
    demo_parser.set_defaults(func=demo_cmd)

    capabilities_parser = sub.add_parser("capabilities", help="Show converter capabilities")
    capabilities_parser.set_defaults(func=capabilities_cmd)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return

    try:
        args.func(args)
    except AutomancyError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
