"""
bootstrap/entrypoints.py - Application entry points v1.0

Bootstrap Layer

Logging setup, service construction and the `pharmaplan` CLI.
"""

from __future__ import annotations
from typing import List, Optional
import argparse
import asyncio
import json
import logging
import sys

from .config import PharmaPlanConfig, load_config

logger = logging.getLogger("bootstrap.entrypoints")

__all__ = [
    'setup_logging',
    'build_service',
    'cli_main',
]


class JSONFormatter(logging.Formatter):
    def format(self, record):
        return json.dumps({
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        })


def setup_logging(level: str = "INFO", log_file: str = None, json_format: bool = False) -> None:
    """
    Configure application logging.

    Console logs go to stderr; stdout carries command output.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path
        json_format: Use JSON format for logs
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in [h for h in root_logger.handlers if getattr(h, "pharmaplan", False)]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    console_handler.pharmaplan = True
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        file_handler.pharmaplan = True
        root_logger.addHandler(file_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)


def build_service(config: PharmaPlanConfig, rule_based: bool = False):
    """
    Construct a LayoutGenerationService from configuration.

    Args:
        config: Loaded configuration
        rule_based: Use the deterministic assistant regardless of provider
    """
    from pharmaplan.facility.generator.layout_service import LayoutGenerationService
    from pharmaplan.facility.knowledge.relationship_store import RelationshipStore
    from pharmaplan.llm.services.layout_assistant import (
        RuleBasedLayoutAssistant,
        create_layout_assistant,
    )

    store = RelationshipStore.with_default_rules()
    if config.relationships.rules_file:
        added = store.load_json(config.relationships.rules_file)
        logger.info(f"Loaded {added} relationship rules from {config.relationships.rules_file}")

    assistant = RuleBasedLayoutAssistant() if rule_based else create_layout_assistant(config.llm)
    return LayoutGenerationService(store=store, assistant=assistant, config=config)


def _build_parser() -> argparse.ArgumentParser:
    from pharmaplan.facility.schema.request import LayoutStyle, PrioritizeFlow

    parser = argparse.ArgumentParser(
        description="PharmaPlan GMP facility layout generator",
        prog="pharmaplan",
    )
    parser.add_argument(
        "-c", "--config",
        help="Path to configuration file",
        default=None,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--log-file",
        help="Log file path",
        default=None,
    )

    commands = parser.add_subparsers(dest="command", required=True)

    generate = commands.add_parser("generate", help="Generate a facility layout")
    source = generate.add_mutually_exclusive_group(required=True)
    source.add_argument("-d", "--description", help="Natural-language facility description")
    source.add_argument("-r", "--rooms", nargs="+", metavar="NAME", help="Explicit room types")
    generate.add_argument("--batch-size", type=float, default=None, help="Batch size (L)")
    generate.add_argument("--throughput", type=float, default=None, help="Throughput (units/day)")
    generate.add_argument(
        "--layout-style",
        choices=[s.value for s in LayoutStyle],
        default=None,
    )
    generate.add_argument(
        "--prioritize-flow",
        choices=[f.value for f in PrioritizeFlow],
        default=None,
    )
    generate.add_argument("--seed", type=int, default=None, help="Random seed for placement")
    generate.add_argument("-o", "--output", default=None, help="Write layout JSON to file")
    generate.add_argument(
        "--rule-based",
        action="store_true",
        help="Use the deterministic assistant instead of an LLM",
    )
    generate.add_argument(
        "--validate",
        action="store_true",
        help="Include validation results in the output",
    )

    room_types = commands.add_parser("room-types", help="List reference room types")
    room_types.add_argument("--category", default=None, help="Filter by category name")
    room_types.add_argument("--json", action="store_true", help="Output in JSON format")

    return parser


def _run_generate(parsed: argparse.Namespace, config: PharmaPlanConfig) -> int:
    from pharmaplan.facility.schema.request import LayoutGenerationRequest

    if parsed.seed is not None:
        config.layout.seed = parsed.seed

    request = LayoutGenerationRequest(
        description=parsed.description,
        explicit_rooms=parsed.rooms,
        capacity={"batch_size": parsed.batch_size, "throughput": parsed.throughput},
        constraints={
            "layout_style": parsed.layout_style,
            "prioritize_flow": parsed.prioritize_flow,
        },
    )

    service = build_service(config, rule_based=parsed.rule_based)
    layout = asyncio.run(service.generate(request))

    output = layout.to_dict()
    if parsed.validate:
        output["validation"] = service.validate(layout).to_dict()

    text = json.dumps(output, indent=2)
    if parsed.output:
        with open(parsed.output, "w") as f:
            f.write(text)
        logger.info(f"Layout written to {parsed.output}")
    else:
        print(text)
    return 0


def _run_room_types(parsed: argparse.Namespace) -> int:
    from pharmaplan.facility.schema.room_sizes import ROOM_SIZE_TABLE

    records = [
        r for r in ROOM_SIZE_TABLE
        if parsed.category is None or r.category.value.lower() == parsed.category.lower()
    ]
    if parsed.json:
        print(json.dumps([r.to_dict() for r in records], indent=2))
        return 0

    for r in records:
        grade = r.cleanroom_class.value if r.cleanroom_class else "-"
        print(f"{r.room_type:<30} {r.category.value:<16} {grade:<4} {r.width:g}m x {r.height:g}m")
    return 0


def cli_main(args: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Args:
        args: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code
    """
    from pharmaplan.facility.exceptions import LayoutGenerationError

    parsed = _build_parser().parse_args(args)
    config = load_config(parsed.config)

    log_level = "DEBUG" if parsed.verbose else (parsed.log_level or config.logging.level)
    setup_logging(
        level=log_level,
        log_file=parsed.log_file or config.logging.log_file,
        json_format=config.logging.json_logs,
    )

    try:
        if parsed.command == "generate":
            return _run_generate(parsed, config)
        return _run_room_types(parsed)

    except LayoutGenerationError as e:
        logger.error(f"Layout generation failed: {e}")
        return 2
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(cli_main())
