from __future__ import annotations
import argparse, json, logging, sys
from typing import Any, Dict, List, Optional, Sequence

from .config import ENV_PREFIX, configure_logging, load_settings
from .data.loaders import RuleTableError, load_tables
from .models import ScoringTables
from .name_matcher import describe_hand, match
from .scoring.engine import evaluate
from .wildcard import InvalidSelection, SelectionCancelled, resolve

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="donjara",
        description="Score Donjara hands"
    )
    sub = p.add_subparsers(dest="cmd")

    # score
    sc = sub.add_parser("score", help="Score a comma-separated hand of tile names")
    _add_common_args(sc)
    sc.add_argument("hand", type=str, help="Nine tile names separated by commas")
    sc.add_argument("--choose", action="append", default=[],
                    help="Tile to bind to the next wildcard (repeat, in hand order)")
    sc.add_argument("--interactive", action="store_true",
                    help="Prompt for wildcard choices not given with --choose")
    sc.add_argument("--output", type=str, default=None, help="Write the JSON result here")

    # match
    mt = sub.add_parser("match", help="Match recognized text to catalog tile names")
    _add_common_args(mt)
    mt.add_argument("text", nargs="?", default=None, help="Recognized text")
    mt.add_argument("--text-file", type=str, default=None, help="Read recognized text from a file")

    # recognize
    rc = sub.add_parser("recognize", help="Read tile names from a photo of a hand")
    _add_common_args(rc)
    rc.add_argument("image", type=str, help="Path to the photo")

    # catalog
    ct = sub.add_parser("catalog", help="List the tile catalog")
    _add_common_args(ct)

    args = p.parse_args(argv)
    if getattr(args, "cmd", None) is None:
        p.print_help()
        sys.exit(2)
    return args


def _add_common_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--config", type=str, action="append", default=[], help="YAML/JSON config files (merged)")
    ap.add_argument("--env-prefix", type=str, default=ENV_PREFIX, help="Env prefix for overrides")
    ap.add_argument("--log-level", type=str, default=None, help="DEBUG, INFO, WARNING, ...")


def _split_hand(text: str) -> List[str]:
    return [part.strip() for part in text.split(",") if part.strip()]


class _ScriptedChooser:
    """Answers wildcard prompts from --choose values, then optionally from stdin."""

    def __init__(self, choices: Sequence[str], interactive: bool):
        self.pending = list(choices)
        self.interactive = interactive
        self.asked = 0

    def __call__(self, candidates: Sequence[str]) -> str:
        self.asked += 1
        if self.pending:
            return self.pending.pop(0)
        if not self.interactive:
            raise SelectionCancelled(f"no choice given for wildcard #{self.asked}")
        return _prompt(candidates, self.asked)


def _prompt(candidates: Sequence[str], ordinal: int) -> str:
    print(f"Choose a tile for wildcard #{ordinal}:", file=sys.stderr)
    for i, name in enumerate(candidates, 1):
        print(f"  {i:>3}. {name}", file=sys.stderr)
    while True:
        try:
            answer = input("> ").strip()
        except EOFError:
            raise SelectionCancelled("input closed") from None
        if answer.isdigit() and 1 <= int(answer) <= len(candidates):
            return candidates[int(answer) - 1]
        if answer in candidates:
            return answer
        print("Enter a number from the list.", file=sys.stderr)


def _load(args: argparse.Namespace) -> tuple[Dict[str, Any], ScoringTables]:
    settings = load_settings(args.config, env_prefix=args.env_prefix)
    configure_logging(settings, args.log_level)
    return settings, load_tables(settings)


def _emit(payload: Any, output: Optional[str] = None) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text + "\n")
    else:
        print(text)


def _score(args: argparse.Namespace, settings: Dict[str, Any], tables: ScoringTables) -> int:
    hand = _split_hand(args.hand)
    hand_size = int(settings["matcher"]["hand_size"])
    if len(hand) != hand_size:
        print(f"A hand needs exactly {hand_size} tiles, got {len(hand)}.", file=sys.stderr)
        return 2
    chooser = _ScriptedChooser(args.choose, args.interactive)
    try:
        bound = resolve(hand, tables.catalog, chooser, wildcard=settings["tokens"]["wildcard"])
    except SelectionCancelled as exc:
        print(f"Wildcard selection cancelled: {exc}", file=sys.stderr)
        return 2
    except InvalidSelection as exc:
        print(str(exc), file=sys.stderr)
        return 2
    result = evaluate(bound, tables.catalog, tables.rules)
    _emit(result.to_dict(), args.output)
    return 0


def _match(args: argparse.Namespace, settings: Dict[str, Any], tables: ScoringTables) -> int:
    if args.text_file:
        with open(args.text_file, "r", encoding="utf-8") as f:
            text = f.read()
    elif args.text is not None:
        text = args.text
    else:
        text = sys.stdin.read()
    return _print_hand(_match_text(text, settings, tables), settings, tables)


def _match_text(text: str, settings: Dict[str, Any], tables: ScoringTables) -> List[str]:
    return match(
        text,
        tables.catalog,
        hand_size=int(settings["matcher"]["hand_size"]),
        min_overlap=int(settings["matcher"]["min_overlap"]),
        unknown=settings["tokens"]["unknown"],
    )


def _print_hand(hand: List[str], settings: Dict[str, Any], tables: ScoringTables) -> int:
    rows = describe_hand(hand, tables.catalog, unknown=settings["tokens"]["unknown"])
    _emit({
        "hand": list(hand),
        "tiles": [{"name": name, "attribute": attr} for name, attr in rows],
    })
    return 0


def _recognize(args: argparse.Namespace, settings: Dict[str, Any], tables: ScoringTables) -> int:
    # OpenCV/Tesseract are only needed here
    from .recognition import TesseractRecognizer, recognize_hand

    rec_cfg = settings.get("recognition", {})
    recognizer = TesseractRecognizer(lang=rec_cfg.get("lang", "jpn"), psm=int(rec_cfg.get("psm", 6)))
    hand = recognize_hand(
        args.image,
        tables.catalog,
        recognizer,
        hand_size=int(settings["matcher"]["hand_size"]),
        min_overlap=int(settings["matcher"]["min_overlap"]),
        unknown=settings["tokens"]["unknown"],
    )
    return _print_hand(hand, settings, tables)


def _catalog(args: argparse.Namespace, settings: Dict[str, Any], tables: ScoringTables) -> int:
    _emit(tables.catalog.to_list())
    return 0


_COMMANDS = {
    "score": _score,
    "match": _match,
    "recognize": _recognize,
    "catalog": _catalog,
}


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        settings, tables = _load(args)
    except (FileNotFoundError, RuleTableError) as exc:
        print(f"Cannot load scoring tables: {exc}", file=sys.stderr)
        return 1
    return _COMMANDS[args.cmd](args, settings, tables)


if __name__ == "__main__":
    raise SystemExit(main())
