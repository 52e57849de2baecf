"""Command-line interface: **engine-equiv seed / check**"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Iterable, List

from tqdm import tqdm

from .comparator import BlockComparator, DualComparator, ForkchoiceComparator, HeaderComparator
from .config import CHECK_CONFIG
from .models import Outcome, fingerprint
from .seed_generator import SeedGenerator

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Target registry
# -----------------------------------------------------------------------------
TARGETS: Dict[str, type] = {
    "forkchoice": ForkchoiceComparator,
    "header":     HeaderComparator,
    "block":      BlockComparator,
}


def _get_comparator(ns) -> DualComparator:
    if ns.target == "block":
        return BlockComparator(strict_tx_hashes=ns.strict_tx_hash)
    return TARGETS[ns.target]()


def entry_name(target: str, blob: bytes) -> str:
    return f"{target}-{fingerprint(blob)}"


def _inputs(paths: Iterable[Path]) -> List[Path]:
    out: List[Path] = []
    for p in paths:
        out.extend(sorted(q for q in p.iterdir() if q.is_file()) if p.is_dir() else [p])
    return out


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------
def cmd_seed(ns) -> int:
    out_dir: Path = ns.output
    out_dir.mkdir(parents=True, exist_ok=True)
    for target, blob in SeedGenerator().generate().items():
        if ns.target and target != ns.target:
            continue
        path = out_dir / entry_name(target, blob)
        path.write_bytes(blob)
        print(f"✓ {target} seed → {path}")
    return 0


def cmd_check(ns) -> int:
    comparator = _get_comparator(ns)
    files = _inputs(ns.inputs)
    logger.info("replaying %d inputs through the %s comparator", len(files), ns.target)
    findings = 0
    counts = {o: 0 for o in Outcome}
    for path in tqdm(files, desc=ns.target, disable=not ns.progress):
        result = comparator.check(path.read_bytes())
        counts[result.outcome] += 1
        if result.finding is None:
            continue
        findings += 1
        print(f"✗ {path}: {result.finding.describe()}")
        if ns.findings_dir is not None:
            ns.findings_dir.mkdir(parents=True, exist_ok=True)
            (ns.findings_dir / entry_name(ns.target, result.finding.blob)).write_bytes(
                result.finding.blob)

    print(" | ".join(f"{o.value} {counts[o]}" for o in Outcome) + f" | inputs {len(files)}")
    return 1 if findings else 0


# -----------------------------------------------------------------------------
# Argument parsing
# -----------------------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="engine-equiv",
                                 description="engine API encoding-equivalence checker")
    ap.add_argument("--verbose", "-v", action="count", default=0)
    sub = ap.add_subparsers(dest="cmd", required=True)

    # seed -----------------------------------------------------------
    sp = sub.add_parser("seed", help="write the seed corpus")
    sp.add_argument("--output", "-o", type=Path, default=Path(CHECK_CONFIG["corpus_dir"]))
    sp.add_argument("--target", "-t", choices=list(TARGETS), help="only this target")
    sp.set_defaults(func=cmd_seed)

    # check ----------------------------------------------------------
    sp = sub.add_parser("check", help="replay saved inputs through a comparator")
    sp.add_argument("inputs", nargs="+", type=Path, help="input files or directories")
    sp.add_argument("--target", "-t", required=True, choices=list(TARGETS))
    sp.add_argument("--findings-dir", type=Path, help="copy diverging inputs here")
    sp.add_argument("--strict-tx-hash", action="store_true",
                    help="block target: report wrong transaction hashes instead of skipping")
    sp.add_argument("--progress", action="store_true", help="show progress bar with tqdm")
    sp.set_defaults(func=cmd_check)
    return ap


def main(argv=None) -> int:
    ns = build_parser().parse_args(argv)
    level = logging.WARNING if ns.verbose == 0 else logging.INFO if ns.verbose == 1 else logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    return ns.func(ns)


if __name__ == "__main__":
    sys.exit(main())
