"""Command-line runner for the policy engine."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
import json
import logging

from navguard.config.settings import AppConfig, load_config
from navguard.core.errors import NavguardError
from navguard.infra.blocklist_store import save_custom_blocklist
from navguard.orchestrator.build import create_engine
from navguard.orchestrator.engine import PolicyEngine

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class InMemorySession:
    history: list[dict[str, object]] = field(default_factory=list)

    def add(self, item: dict[str, object]) -> None:
        self.history.append(item)


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def _persisting_engine(cfg: AppConfig) -> tuple[PolicyEngine, dict[str, object]]:
    def _save(domains: frozenset[str]) -> None:
        if cfg.custom_blocklist_path:
            save_custom_blocklist(cfg.custom_blocklist_path, domains)

    return create_engine(cfg, on_blocklist_change=_save)


def _dump(payload: object) -> str:
    if hasattr(payload, "model_dump"):
        payload = payload.model_dump(mode="json")
    return json.dumps(payload, ensure_ascii=True)


def run_once(url: str, *, engine: PolicyEngine | None = None) -> str:
    active = engine or create_engine()[0]
    return _dump(active.evaluate(url))


def handle_line(engine: PolicyEngine, raw: str) -> str:
    line = raw.strip()
    if line.startswith(":profile "):
        settings = engine.switch_profile(line.split(" ", 1)[1])
        return _dump({"profile": engine.active_profile.value, "display_name": settings.display_name})
    if line.startswith(":download "):
        return _dump(engine.classify_download(line.split(" ", 1)[1].strip()))
    if line.startswith(":phishing "):
        return _dump(engine.check_phishing(line.split(" ", 1)[1].strip()))
    if line == ":state":
        return _dump({"state": engine.state.to_dict(), "stats": engine.stats()})
    return _dump(engine.evaluate(line))


def run_chat(engine: PolicyEngine, runtime: dict[str, object]) -> None:
    session = InMemorySession()
    print(f"navguard started profile={runtime['profile']} blocked_domains={runtime['blocked_domains']}")
    while True:
        try:
            raw = input("> ").strip()
        except EOFError:
            break
        if raw.lower() in {"exit", "quit"}:
            break
        if not raw:
            continue
        try:
            output = handle_line(engine, raw)
        except NavguardError as exc:
            output = _dump({"error": str(exc)})
        session.add({"input": raw, "output": output})
        print(output)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="navguard")
    parser.add_argument("--url", help="Evaluate one address-bar entry and print the decision.")
    parser.add_argument("--download", help="Classify a download filename.")
    parser.add_argument("--phishing", help="Run only the phishing checks on a URL.")
    parser.add_argument("--block", help="Add a domain to the custom blocklist.")
    parser.add_argument("--profile", help="Profile to start in (default, gaming, work, coding, secure).")
    parser.add_argument("--config", help="YAML config file layered over the packaged defaults.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg, _ = load_config(args.config, profile_override=args.profile)
        configure_logging(cfg.log_level)
        engine, runtime = _persisting_engine(cfg)
    except NavguardError as exc:
        print(_dump({"error": str(exc)}))
        return 2

    if args.block:
        added = engine.add_blocked_domain(args.block)
        print(_dump({"domain": args.block.strip().lower(), "added": added}))
        return 0
    if args.download:
        print(_dump(engine.classify_download(args.download)))
        return 0
    if args.phishing:
        print(_dump(engine.check_phishing(args.phishing)))
        return 0
    if args.url:
        print(run_once(args.url, engine=engine))
        return 0
    run_chat(engine, runtime)
    return 0
