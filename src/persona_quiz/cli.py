"""
Command-line interface for persona-quiz

Runs the HTTP API, and doubles as a terminal client that plays a full quiz
against the same generators the API uses.
"""

import asyncio
import sys
import argparse
import json
import logging
from typing import Optional

from .config import Config, config as default_config
from .errors import ConfigurationError, QuizError
from .providers import ModelProvider
from .quiz.analysis import AnalysisGenerator
from .quiz.followup import FollowupGenerator
from .quiz.questions import QuestionGenerator
from .quiz.schema import OPTION_LETTERS, AnalysisDocument, Question, QuizSession
from .quiz.themes import THEMES, resolve_theme

logger = logging.getLogger(__name__)

BOLD = "\033[1m"
DIM = "\033[2m"
CYAN = "\033[96m"
RESET = "\033[0m"


def format_question(number: int, total: int, question: Question) -> str:
    """Format a single question for terminal output."""
    lines = [f"\n{BOLD}Question {number}/{total}{RESET}", question.question]
    for letter, option in zip(OPTION_LETTERS, question.options):
        lines.append(f"  {CYAN}{letter}){RESET} {option}")
    lines.append(f"{DIM}Pick a-d, type your own answer, or '<' to go back{RESET}")
    return "\n".join(lines)


def format_document(document: AnalysisDocument) -> str:
    """Format an analysis or follow-up document for terminal output."""
    parts = []
    for section in document.sections:
        if section.heading:
            parts.append(f"{BOLD}{section.heading}{RESET}\n{section.body}".rstrip())
        else:
            parts.append(section.body)
    return "\n\n".join(parts)


def build_config(args) -> Config:
    cfg = Config.offline_mode() if getattr(args, "mock", False) else default_config
    if getattr(args, "provider", None):
        cfg.models.provider = args.provider
    if getattr(args, "model", None):
        cfg.models.model = args.model
    return cfg


def make_provider(cfg: Config) -> ModelProvider:
    from .api.app import build_provider
    return build_provider(cfg)


async def run_questions(args, cfg: Config) -> None:
    theme = resolve_theme(args.theme, args.custom_prompt, cfg.quiz.custom_response_max_length)
    generator = QuestionGenerator(make_provider(cfg), cfg=cfg)
    questions = await generator.generate(theme.system_prompt, theme.id, theme.question_guidance)

    if args.json:
        print(json.dumps([q.to_dict() for q in questions], indent=2))
        return

    for number, question in enumerate(questions, start=1):
        print(format_question(number, len(questions), question))


def _ask(prompt: str) -> str:
    try:
        return input(prompt)
    except EOFError:
        return ""


async def run_play(args, cfg: Config) -> None:
    theme = resolve_theme(args.theme, args.custom_prompt, cfg.quiz.custom_response_max_length)
    provider = make_provider(cfg)

    print(f"\n{BOLD}{theme.title}{RESET}\n{theme.description}")
    print(f"{DIM}Generating questions...{RESET}")
    questions = await QuestionGenerator(provider, cfg=cfg).generate(
        theme.system_prompt, theme.id, theme.question_guidance
    )

    session = QuizSession(
        theme_id=theme.id,
        questions=questions,
        custom_prompt=args.custom_prompt,
        interaction_cap=cfg.quiz.interaction_cap,
    )

    while not session.is_complete:
        print(format_question(session.current_index + 1, len(questions), session.current_question))
        reply = _ask("> ").strip()
        try:
            if reply == "<":
                session.go_back()
            elif len(reply) == 1 and reply.lower() in OPTION_LETTERS:
                session.select_option(reply)
            elif reply:
                session.answer_custom(reply, cfg.quiz.custom_response_max_length)
        except QuizError as e:
            print(f"  {e.message}")

    print(f"\n{DIM}Analyzing your answers...{RESET}\n")
    result = await AnalysisGenerator(provider, cfg=cfg).generate(
        theme.system_prompt,
        session.answer_list(),
        session.interaction_count,
        extra_sections=theme.extra_sections,
        questions=questions,
    )
    analysis_text = result.document.to_text()
    session.record_analysis(analysis_text)
    print(format_document(result.document))

    followups = FollowupGenerator(provider, cfg=cfg)
    while session.can_follow_up:
        print(f"\n{DIM}{session.remaining_interactions} follow-up question(s) left. Press enter to finish.{RESET}")
        follow_up = _ask("? ").strip()
        if not follow_up:
            break
        try:
            answer = await followups.generate(analysis_text, follow_up, session.interaction_count)
        except ConfigurationError:
            raise
        except QuizError as e:
            # The budget is only spent on a successful answer
            print(f"  {e.message}")
            continue
        session.record_follow_up()
        print()
        print(format_document(answer.document))

    if args.save:
        with open(args.save, "w") as f:
            f.write(session.to_json())
        print(f"\nSession saved to {args.save}")


def run_serve(args, cfg: Config) -> None:
    import uvicorn
    from .api.app import create_app

    if args.host:
        cfg.server.host = args.host
    if args.port:
        cfg.server.port = args.port

    app = create_app(cfg)
    uvicorn.run(app, host=cfg.server.host, port=cfg.server.port, log_level="debug" if args.verbose else "info")


def main(argv: Optional[list[str]] = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="persona-quiz",
        description="Themed quizzes with generative-model personality analysis",
        epilog="Example: persona-quiz play PERSONALITY_ANALYSIS --mock"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument(
        "--provider",
        choices=["gemini", "claude", "deepseek", "mock"],
        help="Oracle provider (default: QUIZ_PROVIDER or gemini)"
    )
    parser.add_argument("--model", help="Model override for the provider")
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use the mock oracle (no API key needed)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", help="Bind address (default: HOST or 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, help="Port (default: PORT or 3000)")

    # Themes command
    subparsers.add_parser("themes", help="List quiz themes")

    # Questions command
    questions_parser = subparsers.add_parser("questions", help="Generate and print a question set")
    questions_parser.add_argument("theme", choices=sorted(THEMES), help="Theme identifier")
    questions_parser.add_argument("--custom-prompt", help="Instruction text for the CUSTOM theme")
    questions_parser.add_argument("--json", action="store_true", help="Output questions as JSON")

    # Play command
    play_parser = subparsers.add_parser("play", help="Take a quiz in the terminal")
    play_parser.add_argument("theme", choices=sorted(THEMES), help="Theme identifier")
    play_parser.add_argument("--custom-prompt", help="Instruction text for the CUSTOM theme")
    play_parser.add_argument("--save", help="Write the finished session to this JSON file")

    # Parse arguments
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        sys.exit(1)

    cfg = build_config(args)

    try:
        if args.command == "serve":
            run_serve(args, cfg)
        elif args.command == "themes":
            for theme_id, theme in THEMES.items():
                print(f"{BOLD}{theme_id}{RESET}: {theme.title}\n    {theme.description}")
        elif args.command == "questions":
            asyncio.run(run_questions(args, cfg))
        elif args.command == "play":
            asyncio.run(run_play(args, cfg))
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    except QuizError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
