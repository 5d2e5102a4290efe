# generator.py
import argparse
import json
import logging
from pathlib import Path

from . import api_parser
from .code_gen.output import CodeGenerator
from .config import DEFAULT_REPORT_PATH, OPTION_EXCLUDED_PATHS, OPTION_REPORT_PATH
from .fix_visibility import fix_visibility
from .resolver import SymbolTableResolver
from .unified_processor.base_processor import SymbolProcessorEnvironment
from .unified_processor.screenshot_processor import ScreenshotProcessorProvider

logger = logging.getLogger(__name__)

OUTPUT_DIR_DEFAULT = "build/generated/autoshot/kotlin"


def load_options(options_json_path):
    """Reads a JSON object of processor options. Returns None on failure."""
    try:
        with open(options_json_path, 'r', encoding='utf-8') as f:
            options = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load processor options from {options_json_path}: {e}")
        return None
    if not isinstance(options, dict):
        logger.error(f"Processor options in {options_json_path} must be a JSON object.")
        return None
    return {str(k): str(v) for k, v in options.items()}


def run_processing(table, output_dir, options=None, manifest_path=None):
    """
    Runs the screenshot processor over a symbol table.
    Returns (generated file paths, deferred declarations).
    """
    code_generator = CodeGenerator(output_dir)
    environment = SymbolProcessorEnvironment(code_generator=code_generator, options=dict(options or {}))
    processor = ScreenshotProcessorProvider().create(environment)

    try:
        deferred = processor.process(SymbolTableResolver(table))
    except Exception:
        processor.on_error()
        raise
    # Generated Kotlin is not fed back as symbols, so there is no second round to retry in
    for declaration in deferred:
        logger.warning(f"Unable to process {declaration.qualified_name}: unresolved types.")
    processor.finish()

    if manifest_path:
        code_generator.write_manifest(manifest_path)
    return list(code_generator.generated_files), deferred


def main(argv=None):
    parser = argparse.ArgumentParser(description="Screenshot test generator for Compose previews")
    parser.add_argument(
        "--mode",
        choices=["generate", "fix-visibility"],
        default="generate",
        help="'generate' writes screenshot tests from a symbol dump; 'fix-visibility' applies the visibility report."
    )
    parser.add_argument("-s", "--symbols", default=None, help="Path to the JSON symbol dump (required for 'generate').")
    parser.add_argument("-o", "--output-dir", default=OUTPUT_DIR_DEFAULT, help="Root directory for generated sources.")
    parser.add_argument("--report", default=None, help=f"Visibility report path. Defaults to {DEFAULT_REPORT_PATH}.")
    parser.add_argument("-e", "--exclude", action="append", default=None,
                        help="Path fragment to skip (repeatable). Replaces the default exclusions.")
    parser.add_argument("--options-json", default=None, help="JSON file with processor options (autoshot.* keys).")
    parser.add_argument("--manifest", default=None, help="Write the generated-file dependency manifest here.")
    parser.add_argument("--root", default=None, help="Base directory for relative paths in the report (fix-visibility).")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO,
                        format='%(levelname)s: [%(filename)s:%(lineno)d] %(message)s')

    options = {}
    if args.options_json:
        options = load_options(args.options_json)
        if options is None:
            return 1
    if args.exclude is not None:
        options[OPTION_EXCLUDED_PATHS] = ",".join(args.exclude)
    if args.report:
        options[OPTION_REPORT_PATH] = args.report

    if args.mode == "fix-visibility":
        fix_visibility(options.get(OPTION_REPORT_PATH, DEFAULT_REPORT_PATH), root=args.root)
        return 0

    if not args.symbols:
        logger.error("--symbols is required in 'generate' mode.")
        return 1

    logger.info(f"Loading symbols from: {args.symbols}")
    table = api_parser.load_symbol_table(args.symbols)
    if table is None:
        logger.critical("Failed to load the symbol dump. Exiting.")
        return 1

    output_path = Path(args.output_dir)
    generated, deferred = run_processing(table, output_path, options, args.manifest)
    logger.info(f"Generation complete: {len(generated)} files in {output_path}, {len(deferred)} deferred.")
    return 0


if __name__ == "__main__":
    exit(main())
