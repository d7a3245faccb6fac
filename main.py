from __future__ import annotations

import argparse
import json
import logging
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from nfa_form.core.config import AppConfig
from nfa_form.documents.generation_service import (
    RecordValidationError,
    build_generation_service,
)
from nfa_form.mapping.engine import map_record_to_fields
from nfa_form.pdf.catalog_check import check_template_catalog
from nfa_form.pdf.template import TemplateLoadError, TemplateSource
from nfa_form.questionnaire.record import AnswerRecord
from nfa_form.state.token import StateDecodeError, decode, encode, fragment_for

APP_ROOT = Path(__file__).resolve().parent


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def _require_path_or_json(raw: str) -> Any:
    if raw.lstrip().startswith(("{", "[")):
        return json.loads(raw)
    possible_path = Path(raw)
    try:
        is_file = possible_path.is_file()
    except OSError:
        is_file = False
    if is_file:
        return json.loads(possible_path.read_text(encoding="utf-8"))
    return json.loads(raw)


def load_record(raw_json_or_path: str) -> AnswerRecord:
    try:
        payload = _require_path_or_json(raw_json_or_path)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Invalid JSON input: {exc}") from exc
    if not isinstance(payload, dict):
        raise SystemExit("Input JSON must be an object.")
    try:
        return AnswerRecord.model_validate(payload)
    except ValidationError as exc:
        raise SystemExit(f"Input validation failed:\n{exc}") from exc


def _parse_today(raw: str) -> date:
    if not raw:
        return date.today()
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise SystemExit(f"--today must be YYYY-MM-DD: {raw}") from exc


def _with_template_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    template = config.template
    if getattr(args, "template", ""):
        template = replace(template, path=Path(args.template), url="")
    if getattr(args, "template_url", ""):
        template = replace(template, url=args.template_url)
    return replace(config, template=template)


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fill ATF Form 5320.23 (NFA Responsible Person Questionnaire)."
    )
    commands = parser.add_subparsers(dest="command", required=True)

    encode_cmd = commands.add_parser("encode", help="Encode a record as a state token.")
    encode_cmd.add_argument(
        "--json", required=True, help="Answer record. Either a file path or raw JSON."
    )

    decode_cmd = commands.add_parser("decode", help="Decode a state token or fragment.")
    decode_cmd.add_argument("token", help="Token, with or without the leading '#'.")

    map_cmd = commands.add_parser("map", help="Print the template field operations.")
    map_cmd.add_argument("--json", required=True, help="Answer record (path or JSON).")
    map_cmd.add_argument("--today", default="", help="Signing date default, YYYY-MM-DD.")

    generate_cmd = commands.add_parser("generate", help="Generate the filled PDF.")
    generate_cmd.add_argument("--json", required=True, help="Answer record (path or JSON).")
    generate_cmd.add_argument("--output", default="", help="Output PDF path.")
    generate_cmd.add_argument("--template", default="", help="Template PDF path.")
    generate_cmd.add_argument("--template-url", default="", help="Template PDF URL.")
    generate_cmd.add_argument("--today", default="", help="Signing date default, YYYY-MM-DD.")

    check_cmd = commands.add_parser(
        "check-template", help="Check the template against the field catalog."
    )
    check_cmd.add_argument("--template", default="", help="Template PDF path.")
    check_cmd.add_argument("--template-url", default="", help="Template PDF URL.")
    return parser


def run_generate(config: AppConfig, args: argparse.Namespace) -> dict[str, Any]:
    record = load_record(args.json)
    today = _parse_today(args.today)
    service = build_generation_service(config, root=APP_ROOT, today=lambda: today)
    try:
        document = service.generate_sync(record)
    except RecordValidationError as exc:
        raise SystemExit(f"{exc.message} (field: {exc.field_name})") from exc
    except TemplateLoadError as exc:
        raise SystemExit(f"Template unavailable: {exc}") from exc
    finally:
        service.shutdown()

    output = Path(args.output or document.filename)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(document.content)
    return {
        "status": "generated",
        "output": str(output),
        "bytes": len(document.content),
        "issues": [
            {"field_name": issue.field_name, "reason": issue.reason}
            for issue in document.issues
        ],
    }


def run_check_template(config: AppConfig) -> dict[str, Any]:
    template_path = config.template.path
    if not template_path.is_absolute():
        template_path = APP_ROOT / template_path
    source = TemplateSource(
        path=template_path,
        url=config.template.url,
        timeout_seconds=config.template.fetch_timeout_seconds,
    )
    try:
        report = check_template_catalog(source.load())
    except TemplateLoadError as exc:
        raise SystemExit(f"Template unavailable: {exc}") from exc
    report["template"] = source.location
    return report


def main() -> None:
    load_dotenv()
    config = AppConfig.from_env()
    setup_logging(config.logging.level)
    logger = logging.getLogger("main")
    args = build_parser().parse_args()
    config = _with_template_overrides(config, args)

    if args.command == "encode":
        record = load_record(args.json)
        _print_json({"token": encode(record), "fragment": fragment_for(record)})
    elif args.command == "decode":
        try:
            record = decode(args.token.removeprefix("#"))
        except StateDecodeError as exc:
            raise SystemExit(str(exc)) from exc
        _print_json(record.as_dict())
    elif args.command == "map":
        record = load_record(args.json)
        mapping = map_record_to_fields(record, today=_parse_today(args.today))
        _print_json(mapping.as_list())
    elif args.command == "generate":
        summary = run_generate(config, args)
        logger.info("PDF generated: %s", summary["output"])
        _print_json(summary)
    elif args.command == "check-template":
        report = run_check_template(config)
        _print_json(report)
        if not report["ok"]:
            raise SystemExit(1)


if __name__ == "__main__":
    main()
