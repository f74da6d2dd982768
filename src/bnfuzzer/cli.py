"""
Command-line entrypoint: load a grammar file and generate random messages.

Usage:
    bnfuzzer -file grammar.bnf -entry postal-address -count 10
    bnfuzzer -file grammar.bnf -entry '!'            # list rule names
    bnfuzzer -file grammar.bnf -entry message -verify -unused
    bnfuzzer -file grammar.bnf -entry message -dump
    python -m bnfuzzer -file grammar.bnf -entry message -seed 42 -out samples.parquet

Exit codes:
    0 on success; 1 on a missing required flag, any grammar error, a failed
    -verify/-unused check, an undefined entry, a generation error or an IO error.
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from dataclasses import replace

from dotenv import find_dotenv, load_dotenv

from bnfuzzer.core.errors import GenerationError
from bnfuzzer.core.generate import generate
from bnfuzzer.core.grammar import Grammar
from bnfuzzer.core.hashing import grammar_digest
from bnfuzzer.core.schema import SampleRow
from bnfuzzer.core.validate import check_defined, check_reachable
from bnfuzzer.io.config import GenSettings
from bnfuzzer.io.errors import IoError
from bnfuzzer.io.read import read_grammar
from bnfuzzer.io.write import write_samples

LOG = logging.getLogger("bnfuzzer")

LIST_ENTRY = "!"


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="bnfuzzer",
        description="Generate random messages from a BNF/ABNF grammar.",
    )
    p.add_argument("-file", "--file", dest="file", default="", help="Path to the BNF file.")
    p.add_argument(
        "-entry",
        "--entry",
        dest="entry",
        default="",
        help=(
            "The symbol name to start generating from. Passing '!' as the symbol name "
            "lists all of the available symbols in the -file."
        ),
    )
    p.add_argument(
        "-count", "--count", dest="count", type=int, default=None, help="How many messages to generate."
    )
    p.add_argument(
        "-verify",
        "--verify",
        dest="verify",
        action="store_true",
        help="Verify that all the symbols are defined.",
    )
    p.add_argument(
        "-unused",
        "--unused",
        dest="unused",
        action="store_true",
        help="Report symbols that are not reachable from the -entry.",
    )
    p.add_argument(
        "-dump",
        "--dump",
        dest="dump",
        action="store_true",
        help="Print the -entry rule as parsed instead of generating messages.",
    )
    p.add_argument("-seed", "--seed", dest="seed", type=int, default=None, help="Random seed.")
    p.add_argument(
        "-max-repetition",
        "--max-repetition",
        dest="max_repetition",
        type=int,
        default=None,
        help="Upper bound for { ... } and open-ended * repetitions.",
    )
    p.add_argument(
        "-out",
        "--out",
        dest="out",
        default=None,
        help="Write messages to this file (.txt, .jsonl, .csv, .parquet) instead of stdout.",
    )
    p.add_argument("-config", "--config", dest="config", default=None, help="Path to a TOML config.")
    p.add_argument(
        "-no-env", "--no-env", dest="no_env", action="store_true", help="Do not load .env."
    )
    p.add_argument(
        "-v", "-verbose", "--verbose", dest="verbose", action="store_true", help="Debug logging."
    )
    return p


def _join_entry_value(argv: list[str]) -> list[str]:
    """
    Rewrite `-entry NAME` as `-entry=NAME`.

    Rule names may start with `-`, which argparse would otherwise read as an
    unknown option instead of the value of -entry.
    """
    out: list[str] = []
    it = iter(argv)
    for arg in it:
        if arg in ("-entry", "--entry"):
            value = next(it, None)
            out.append(arg if value is None else f"{arg}={value}")
        else:
            out.append(arg)
    return out


def _error(message: str) -> None:
    print(f"ERROR: {message}", file=sys.stderr)


def _settings(args: argparse.Namespace) -> GenSettings:
    s = GenSettings.load(args.config)
    overrides = {
        k: getattr(args, k)
        for k in ("count", "seed", "max_repetition")
        if getattr(args, k) is not None
    }
    return replace(s, **overrides) if overrides else s


def _check(grammar: Grammar, entry: str, *, verify: bool, unused: bool) -> bool:
    ok = True
    if verify:
        for diag in check_defined(grammar):
            print(diag, file=sys.stderr)
            ok = False
    if unused:
        for diag in check_reachable(grammar, entry):
            print(diag, file=sys.stderr)
            ok = False
    return ok


def _generate(grammar: Grammar, entry: str, settings: GenSettings, out: str | None) -> int:
    rng = random.Random(settings.seed)
    digest = grammar_digest(grammar)
    rows: list[SampleRow] = []
    for index in range(settings.count):
        try:
            text = generate(grammar, entry, rng)
        except GenerationError as exc:
            print(exc, file=sys.stderr)
            return 1
        except RecursionError:
            _error(f"expansion of <{entry}> exceeded the interpreter recursion limit")
            return 1
        if out is None:
            print(text)
        else:
            rows.append(
                SampleRow(
                    entry=entry, index=index, seed=settings.seed, grammar_digest=digest, text=text
                )
            )

    if out is not None:
        path = write_samples(rows, out, settings.out_format)
        LOG.info("wrote %d message(s) to %s", len(rows), path)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_argparser()
    try:
        args = parser.parse_args(_join_entry_value(list(sys.argv[1:] if argv is None else argv)))
    except SystemExit as exc:
        return 0 if exc.code in (0, None) else 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if not args.no_env:
        load_dotenv(find_dotenv(usecwd=True))

    if not args.file:
        _error("-file is not provided")
        parser.print_usage(sys.stderr)
        return 1
    if not args.entry:
        _error("-entry is not provided")
        parser.print_usage(sys.stderr)
        return 1

    try:
        settings = _settings(args)
        result = read_grammar(args.file, max_repetition=settings.max_repetition)
    except IoError as exc:
        _error(str(exc))
        return 1

    for err in result.errors:
        print(err, file=sys.stderr)
    if not result.ok:
        return 1
    grammar = result.grammar

    if args.entry == LIST_ENTRY:
        for name in grammar.names(sort=True):
            print(name)
        return 0

    rule = grammar.lookup(args.entry)
    if rule is None:
        _error(f"Symbol <{args.entry}> is not defined")
        return 1

    if not _check(grammar, args.entry, verify=args.verify, unused=args.unused):
        return 1

    if args.dump:
        print(rule.render())
        return 0

    try:
        return _generate(grammar, args.entry, settings, args.out)
    except IoError as exc:
        _error(str(exc))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
