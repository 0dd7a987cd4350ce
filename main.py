"""Analyse a selfie from the command line and print the resulting profile."""

import argparse
import json
from pathlib import Path

from styleai_app.app import StyleAIApp


def main() -> None:
    parser = argparse.ArgumentParser(description="Estimate skin tone and flattering colors from a photo.")
    parser.add_argument("image", type=Path, help="Path to a selfie (JPEG, PNG, ...)")
    args = parser.parse_args()

    app = StyleAIApp()
    profile = app.analyze_skin_tone(args.image.read_bytes())
    print(json.dumps({**profile.to_storage(), "description": profile.description}, indent=2))


if __name__ == "__main__":
    main()
