"""
Resonance Field — CLI Entry Point

Commands:
  simulate [--steps=N] [--file=PATH]   Feed intents through a fresh engine
                                       and print the final snapshot as JSON.
                                       PATH holds one JSON object per line:
                                       {"type", "text", "coherence_delta",
                                        "dissonance_delta"}
  snapshot                             Print a fresh engine snapshot
"""

import asyncio
import json
import logging
import random
import sys

from .consumers import EthicsThresholdAdapter, SecurityMonitor
from .engine import FieldEngine
from .types import FieldImpact, Intent

SAMPLE_TEXTS = [
    "Help me understand this design",
    "Build a small prototype",
    "Analyze the failure logs",
    "How do you feel about this?",
    "Share the notes with the team",
    "",
]


def setup_logging():
    from .logging_config import setup_logging as _setup
    _setup()


def _arg(name: str, default=None):
    prefix = f"--{name}="
    for arg in sys.argv[2:]:
        if arg.startswith(prefix):
            return arg[len(prefix):]
    return default


def _load_intents(path: str):
    with open(path) as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            row = json.loads(line)
            yield (
                Intent(type=row.get("type", "general"), text=row.get("text")),
                FieldImpact(row["coherence_delta"], row["dissonance_delta"]),
            )


def _synthetic_intents(steps: int):
    rng = random.Random(7)
    for _ in range(steps):
        yield (
            Intent(type="general", text=rng.choice(SAMPLE_TEXTS)),
            FieldImpact(rng.uniform(-0.15, 0.1), rng.uniform(-0.1, 0.2)),
        )


async def cmd_simulate():
    """Run intents through an engine with the standard consumers attached."""
    engine = FieldEngine().initialize()
    ethics = EthicsThresholdAdapter()
    security = SecurityMonitor(stabilize=engine.activate_oscillatory_buffer)
    engine.subscribe(ethics.observe)
    engine.subscribe(security.observe)

    path = _arg("file")
    intents = _load_intents(path) if path else _synthetic_intents(int(_arg("steps", "25")))

    for intent, impact in intents:
        await engine.process_intent(intent, impact)

    snapshot = engine.snapshot()
    print(json.dumps(snapshot.to_dict(), indent=2, default=str))
    print()
    print(f"Intents processed:   {engine.processed_count}")
    print(f"Harm threshold:      {ethics.harm_threshold:.2f}")
    print(f"Security escalations: {security.escalation_count}")


async def cmd_snapshot():
    """Show the snapshot of a freshly initialized engine."""
    engine = FieldEngine().initialize()
    print(json.dumps(engine.snapshot().to_dict(), indent=2, default=str))


def main():
    setup_logging()

    if len(sys.argv) < 2:
        print("Usage: python3 -m resonance_field <command>")
        print()
        print("Commands:")
        print("  simulate          Feed intents through a fresh engine")
        print("    --steps=N       Number of synthetic intents (default 25)")
        print("    --file=PATH     JSON-lines file of intents and impacts")
        print("  snapshot          Print a fresh engine snapshot")
        sys.exit(1)

    cmd = sys.argv[1]

    commands = {
        "simulate": cmd_simulate,
        "snapshot": cmd_snapshot,
    }

    handler = commands.get(cmd)
    if not handler:
        print(f"Unknown command: {cmd}")
        print(f"Available: {', '.join(commands.keys())}")
        sys.exit(1)

    logging.getLogger("resonance").debug(f"Running command '{cmd}'")
    asyncio.run(handler())


main()
