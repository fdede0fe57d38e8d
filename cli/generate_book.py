#!/usr/bin/env python3
"""
CLI for generating illustrated children's books.

Usage:
    python cli/generate_book.py Mia Space --adjectives brave,curious
    python cli/generate_book.py Leo Ocean -a kind --age 4 --hair-color brown --hair-style curly
    python cli/generate_book.py Ava Fantasy -a clever --photo ava.jpg --concurrency 3
    python cli/generate_book.py Sam Dinosaurs -a funny --text-only
"""

import argparse
import asyncio
import base64
import json
import logging
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from storyweaver.core.errors import BookGenerationError, ProviderError
from storyweaver.core.modules.story_templates import STORY_TEMPLATES
from storyweaver.core.programs import generate_illustrated_book, generate_story, generate_story_title
from storyweaver.core.provider_manager import ProviderManager
from storyweaver.core.types import ChildAppearance, IllustratedBookParams, TextGenerationRequest
from storyweaver.logging import configure_logging


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate an illustrated children's book starring a child",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python cli/generate_book.py Mia Space --adjectives brave,curious
    python cli/generate_book.py Leo Ocean -a kind --moral "Sharing makes everyone happy"
    python cli/generate_book.py Ava Fantasy -a clever --photo ava.jpg --json
        """,
    )

    parser.add_argument("child_name", help="The child's name (the story's hero)")
    parser.add_argument("theme", help="Story theme, e.g. Space, Ocean, Fantasy, Dinosaurs")

    parser.add_argument(
        "--adjectives", "-a",
        type=str,
        default="",
        help="Comma-separated personality traits (e.g. brave,curious)",
    )
    parser.add_argument("--moral", type=str, default=None, help="Lesson to weave into the story")
    parser.add_argument(
        "--template",
        type=str,
        default=None,
        choices=[t.id for t in STORY_TEMPLATES],
        help="Story template id",
    )
    parser.add_argument("--age", type=int, default=None, help="Child's age in years")

    character = parser.add_argument_group("character appearance")
    character.add_argument("--description", type=str, default=None, help="Written description of the child")
    character.add_argument("--photo", type=Path, default=None, help="Photo of the child to describe")
    character.add_argument("--skin-tone", type=str, default=None, help="light, medium-light, medium, medium-dark, dark")
    character.add_argument("--hair-color", type=str, default=None)
    character.add_argument("--hair-style", type=str, default=None)

    parser.add_argument(
        "--text-only",
        action="store_true",
        help="Write the story without illustrations",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=1,
        help="Illustrations generated at once (default: 1, sequential)",
    )
    parser.add_argument("--text-providers", type=str, default=None, help="Overrides AI_PROVIDER")
    parser.add_argument("--image-providers", type=str, default=None, help="Overrides IMAGE_PROVIDER")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output file name (saved to output/ directory). Printed to terminal if not given.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Print progress information")

    return parser.parse_args(argv)


def _adjectives(value: str) -> list[str]:
    return [adj.strip() for adj in value.split(",") if adj.strip()]


def _print_progress(stage: str, detail: str, completed: int, total: int) -> None:
    print(f"  [{stage}] {detail} ({completed}/{total})", file=sys.stderr)


async def _describe_photo(manager: ProviderManager, photo: Path) -> str:
    encoded = base64.b64encode(photo.read_bytes()).decode("ascii")
    return await manager.analyze_image(encoded)


async def run(args: argparse.Namespace) -> dict:
    manager = ProviderManager(
        text_providers=args.text_providers,
        image_providers=args.image_providers,
    )

    if args.verbose:
        info = manager.get_provider_info()
        print(f"Text providers: {', '.join(info['text']['available']) or 'none'}", file=sys.stderr)
        print(f"Image providers: {', '.join(info['image']['available']) or 'none'}", file=sys.stderr)

    adjectives = _adjectives(args.adjectives)

    if args.text_only:
        content = await generate_story(
            manager,
            TextGenerationRequest(
                theme=args.theme,
                child_name=args.child_name,
                adjectives=adjectives,
                moral=args.moral,
                template_id=args.template,
            ),
            child_age=args.age,
        )
        return {
            "title": generate_story_title(content, args.child_name, args.theme),
            "content": content,
        }

    description = args.description
    if args.photo:
        if args.verbose:
            print(f"Describing photo {args.photo}...", file=sys.stderr)
        description = await _describe_photo(manager, args.photo)

    result = await generate_illustrated_book(
        IllustratedBookParams(
            child_name=args.child_name,
            theme=args.theme,
            adjectives=adjectives,
            moral=args.moral,
            template_id=args.template,
            ai_description=description,
            appearance=ChildAppearance(
                skin_tone=args.skin_tone,
                hair_color=args.hair_color,
                hair_style=args.hair_style,
            ),
            child_age=args.age,
        ),
        manager,
        max_concurrency=args.concurrency,
        on_progress=_print_progress if args.verbose else None,
    )

    output = result.to_dict()
    output["title"] = generate_story_title(result.content, args.child_name, args.theme)
    output["characterTier"] = result.character_tier.value
    return output


def format_markdown(result: dict) -> str:
    lines = [f"# {result['title']}", ""]
    if "bookPages" not in result:
        lines.append(result["content"])
        return "\n".join(lines)

    for page in result["bookPages"]:
        lines.append(f"## Page {page['pageNumber']}")
        lines.append("")
        lines.append(page["text"])
        lines.append("")
        url = page["illustration_url"]
        if url.startswith("data:"):
            lines.append("_(embedded illustration)_")
        else:
            lines.append(f"![Page {page['pageNumber']}]({url})")
        lines.append("")
    return "\n".join(lines)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(json_format=False, level=logging.INFO if args.verbose else logging.WARNING)

    try:
        result = asyncio.run(run(args))
    except (ProviderError, BookGenerationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    formatted = json.dumps(result, indent=2) if args.json else format_markdown(result)

    if args.output:
        output_dir = Path(__file__).parent.parent / "output"
        output_dir.mkdir(exist_ok=True)
        suffix = ".json" if args.json else ".md"
        filename = args.output if args.output.endswith(suffix) else f"{args.output}{suffix}"
        output_path = output_dir / filename
        output_path.write_text(formatted)
        print(f"Book saved to: {output_path}")
    else:
        print(formatted)

    if args.verbose:
        print("\n--- Generation Summary ---", file=sys.stderr)
        print(f"Title: {result['title']}", file=sys.stderr)
        if "bookPages" in result:
            print(f"Pages delivered: {len(result['bookPages'])}/{len(result['scenes'])}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
