"""
Working example: Direct production without Celery.
Requires provider keys in .env (see .env.example).
"""
import asyncio
import logging
import sys

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

from studio.config import config
from studio.production import CancellationToken, ProductionProgress
from studio.production.pipeline import ProductionPipeline


def on_progress(progress: ProductionProgress):
    """Progress callback."""
    bar_length = 30
    filled = int(bar_length * progress.progress / 100)
    bar = "=" * filled + "-" * (bar_length - filled)
    print(f"\r[{bar}] {progress.progress:3d}% | {progress.stage.display_name}: {progress.current_step}", end="", flush=True)
    if progress.progress >= 100:
        print()


async def run(prompt: str, duration: float):
    pipeline = ProductionPipeline()
    token = CancellationToken(timeout=config.limits.max_poll_seconds * 2)
    return await pipeline.quick_produce(
        project_id="demo_project_001",
        prompt=prompt,
        duration_seconds=duration,
        on_progress=on_progress,
        token=token,
    )


def main():
    """Run example production."""
    print("=" * 60)
    print("PRODUCTION PIPELINE - TEST")
    print("=" * 60)

    config.log_status()

    prompt = " ".join(sys.argv[1:]) or "A lone lighthouse keeper watches a storm roll in at dusk"
    print(f"\nPrompt: {prompt}")
    print("Starting production...")
    print("-" * 60)

    result = asyncio.run(run(prompt, 30))

    print("-" * 60)

    if result.success:
        print(f"\nSUCCESS!")
        print(f"Video: {result.video_url}")
        print(f"Duration: {result.duration}s")
        print(f"Credits: {result.credits_used}/{result.estimated_credits}")
        for error in result.errors:
            print(f"  warning: {error}")
    else:
        print(f"\nFAILED: {result.error}")

    return result


if __name__ == "__main__":
    main()
