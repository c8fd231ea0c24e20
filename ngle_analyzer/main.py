"""
main.py

Entry points for the syntactic analysis client: the FastAPI application and
the `ngle-analyzer` command-line tool.

CLI usage:
    ngle-analyzer "El perro que ladra no muerde"
    ngle-analyzer --format tree --provider openai "Llueve."
"""

import argparse
import asyncio
import json
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional

from fastapi import FastAPI

from ngle_analyzer import __version__
from ngle_analyzer.agents.errors import AnalyzerError
from ngle_analyzer.agents.sentence_analyzer import SentenceAnalyzer
from ngle_analyzer.api.routers import analysis as analysis_router
from ngle_analyzer.config import config
from ngle_analyzer.models.syntax_tree import SentenceAnalysis, SyntacticElement
from ngle_analyzer.utils.helpers import save_json
from ngle_analyzer.utils.logger import get_logger
from ngle_analyzer.utils.metrics import metrics_tracker

logger = get_logger()

EXIT_OK = 0
EXIT_NO_RESULT = 1
EXIT_ERROR = 2


def create_app(analyzer: Optional[SentenceAnalyzer] = None) -> FastAPI:
    """
    Builds the FastAPI application.

    Args:
        analyzer (Optional[SentenceAnalyzer]): Analyzer to serve. When None, one
            is created from configuration at startup.

    Returns:
        FastAPI: The configured application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "analyzer", None) is None:
            app.state.analyzer = SentenceAnalyzer.from_config()
        yield

    app = FastAPI(
        title=config.get("api", {}).get("title", "NGLE Syntactic Analysis API"),
        description="API for requesting syntactic analyses of Spanish sentences.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.analyzer = analyzer
    app.include_router(analysis_router.router)

    @app.get("/", tags=["Health Check"])
    async def read_root():
        """Basic health check endpoint."""
        return {"status": "ok"}

    return app


app = create_app()


def _render_element(element: SyntacticElement, depth: int, lines: List[str]):
    lines.append(f"{'  ' * depth}[{element.label}] {element.text}")
    for child in element.children or []:
        _render_element(child, depth + 1, lines)


def render_outline(analysis: SentenceAnalysis) -> str:
    """Renders the tree as an indented outline, one node per line."""
    lines = [analysis.full_sentence, f"Clasificación: {analysis.classification}"]
    for element in analysis.structure:
        _render_element(element, 1, lines)
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Syntactic analysis of a Spanish sentence (NGLE)"
    )
    parser.add_argument("sentence", help="Sentence to analyze")
    parser.add_argument(
        "--provider",
        default=None,
        help="LLM provider (gemini, openai, anthropic); defaults to llm.provider in config",
    )
    parser.add_argument(
        "--format",
        choices=["json", "tree"],
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional path to save the JSON analysis",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Runs one analysis from the command line.

    Returns:
        int: 0 on success, 1 when the service returned no usable result,
        2 on configuration or service errors.
    """
    args = build_parser().parse_args(argv)

    metrics_tracker.reset()
    metrics_tracker.start_timer()

    analyzer = SentenceAnalyzer.from_config(args.provider)
    exit_code = EXIT_OK
    try:
        analysis = asyncio.run(analyzer.analyze(args.sentence))
        if analysis is None:
            print("Análisis no disponible: la respuesta del servicio no es utilizable.")
            exit_code = EXIT_NO_RESULT
        else:
            if args.output:
                save_json(analysis.to_wire(), args.output)
                logger.info(f"Analysis saved to {args.output}")
            if args.format == "tree":
                print(render_outline(analysis))
            else:
                print(json.dumps(analysis.to_wire(), indent=2, ensure_ascii=False))
    except AnalyzerError as e:
        logger.error(f"Analysis failed: {e}")
        print(str(e), file=sys.stderr)
        exit_code = EXIT_ERROR
    finally:
        metrics_tracker.stop_timer()
        logger.info(f"Execution Summary: {json.dumps(metrics_tracker.get_summary(), indent=2)}")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
