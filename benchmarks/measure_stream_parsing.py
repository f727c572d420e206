"""Benchmark helper for chunked change-block parsing latency."""
from __future__ import annotations

import argparse
import statistics
import time
from typing import Sequence

from ghostline.core.document import TextDocument
from ghostline.core.models import SuggestionContext
from ghostline.suggestions.streaming_parser import StreamingSuggestionParser


def _build_document(block_count: int) -> TextDocument:
    lines = [f"def handler_{idx}(value):\n    return value + {idx}\n" for idx in range(block_count)]
    return TextDocument(text="\n".join(lines), uri="bench/handlers.py")


def _build_response(block_count: int) -> str:
    parts = ["Here are the requested edits:\n"]
    for idx in range(block_count):
        parts.append(
            "<change>\n"
            f"  <search><![CDATA[    return value + {idx}\n]]></search>\n"
            f"  <replace><![CDATA[    return value * {idx}\n]]></replace>\n"
            "</change>\n"
        )
    return "".join(parts)


def _measure(response: str, document: TextDocument, *, chunk_size: int, iterations: int) -> dict[str, float]:
    parser = StreamingSuggestionParser()
    context = SuggestionContext(document=document)
    samples: list[float] = []
    accepted = 0
    for _ in range(iterations):
        parser.initialize(context)
        start = time.perf_counter()
        for offset in range(0, len(response), chunk_size):
            parser.process_chunk(response[offset : offset + chunk_size])
        accepted = len(parser.finish_stream().changes)
        samples.append((time.perf_counter() - start) * 1_000)
    avg = statistics.fmean(samples) if samples else 0.0
    if len(samples) >= 2:
        p95 = statistics.quantiles(samples, n=20, method="inclusive")[18]
    else:
        p95 = samples[0] if samples else 0.0
    return {
        "chunk_size": float(chunk_size),
        "avg_ms": avg,
        "p95_ms": p95,
        "min_ms": min(samples) if samples else 0.0,
        "max_ms": max(samples) if samples else 0.0,
        "accepted": float(accepted),
    }


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Measure StreamingSuggestionParser latency across chunk sizes")
    parser.add_argument("--iterations", type=int, default=30, help="Samples per chunk size")
    parser.add_argument("--blocks", type=int, default=50, help="Change blocks in the synthetic response")
    parser.add_argument(
        "--chunk-sizes",
        type=int,
        nargs="+",
        default=(1, 8, 64, 512),
        help="Chunk sizes (characters) to benchmark",
    )
    return parser.parse_args()


def _render_table(rows: Sequence[dict[str, float]]) -> str:
    headers = ("chunk", "avg ms", "p95 ms", "min ms", "max ms", "kept")
    lines = [" | ".join(headers), " | ".join("-" * len(h) for h in headers)]
    for row in rows:
        lines.append(
            " | ".join(
                [
                    f"{int(row['chunk_size']):>5}",
                    f"{row['avg_ms']:>7.2f}",
                    f"{row['p95_ms']:>7.2f}",
                    f"{row['min_ms']:>7.2f}",
                    f"{row['max_ms']:>7.2f}",
                    f"{int(row['accepted']):>4}",
                ]
            )
        )
    return "\n".join(lines)


def main() -> None:
    args = _parse_args()
    blocks = max(1, args.blocks)
    document = _build_document(blocks)
    response = _build_response(blocks)
    rows = [
        _measure(response, document, chunk_size=max(1, size), iterations=max(1, args.iterations))
        for size in args.chunk_sizes
    ]
    print("Streaming parse latency (%d blocks, %d chars)" % (blocks, len(response)))
    print(_render_table(rows))


if __name__ == "__main__":  # pragma: no cover - script entry point
    main()
