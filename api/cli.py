#!/usr/bin/env python3
"""
CLI for finding triplet sequences in an SRT subtitle file.
"""

import argparse
import dataclasses
import logging
import random
import sys
from pathlib import Path

from config import DEFAULT_CONFIG
from pipeline import run_pipeline
from stages.export import format_sequence, rebase_triplet_srt
from stages.rarity import get_oracle


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Find keyword-linked triplet sequences in an SRT file")
    parser.add_argument("srt_file", help="Path to SRT subtitle file")
    parser.add_argument("--out", default=".", help="Directory for the triplet files")
    parser.add_argument("--max-sequences", type=int, default=DEFAULT_CONFIG.target_n, help="Maximum number of sequences")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible selection")
    parser.add_argument("--provider", default=None, help="Commonness provider: wordlist, wordfreq or mock")
    parser.add_argument("--export-srt", action="store_true", help="Also write a blanked, rebased SRT per triplet")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s — %(message)s",
    )

    srt_path = Path(args.srt_file)
    out_dir = Path(args.out)
    config = dataclasses.replace(DEFAULT_CONFIG, target_n=args.max_sequences)

    try:
        content = srt_path.read_text(encoding="utf-8")
        sequences = run_pipeline(
            content,
            oracle=get_oracle(args.provider),
            config=config,
            rng=random.Random(args.seed),
        )
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not sequences:
        print("No valid triplet sequences found.")
        return 0

    out_dir.mkdir(parents=True, exist_ok=True)
    for n, sequence in enumerate(sequences, start=1):
        txt_path = out_dir / f"{srt_path.name}.{n}.txt"
        txt_path.write_text(format_sequence(sequence), encoding="utf-8")
        print(f"Wrote {txt_path}  (keyword: {sequence.keyword})")

        if args.export_srt:
            for k, triplet in enumerate(sequence.triplets, start=1):
                clip_path = out_dir / f"{srt_path.name}.{n}-triplet{k}.srt"
                clip_path.write_text(rebase_triplet_srt(triplet, k, sequence.keyword), encoding="utf-8")

    print(f"Done! {len(sequences)} sequence(s) written to {out_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
