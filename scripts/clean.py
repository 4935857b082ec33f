import argparse
import json
import sys

from dataclysm.pipeline.collaborators import SessionConfig
from dataclysm.pipeline.session import CleaningSession


def main() -> int:
    parser = argparse.ArgumentParser(description="Analyze, clean and validate a CSV file with Gemini")

    parser.add_argument("csv", help="Path to the CSV file to clean")
    parser.add_argument("--out", default=None, help="Output path (defaults to the fixed export filename)")
    parser.add_argument(
        "--action",
        action="append",
        default=[],
        help="Id of a recommended action to execute (repeatable)",
    )
    parser.add_argument("--apply-all", action="store_true", help="Run every cleaning operation at once")
    parser.add_argument("--repair", action="store_true", help="Auto-repair validation errors before export")
    parser.add_argument("--quiet", action="store_true", help="Only print the validation summary")

    args = parser.parse_args()

    with open(args.csv, "r", encoding="utf-8-sig") as f:
        text = f.read()

    session = CleaningSession(config=SessionConfig(verbose=not args.quiet))
    if not session.load(text, args.csv):
        print("[ERROR] Analysis failed; nothing was written.")
        return 1

    if not args.quiet:
        for action in session.actions:
            print(f"   [{action.id}] {action.title} ({action.type}, {action.impact})")

    for action_id in args.action:
        try:
            session.execute_action(action_id)
        except KeyError:
            print(f"[WARN] Unknown action id: {action_id}")

    if args.apply_all:
        session.apply_all()

    result = session.validate()
    if args.repair and result.errors:
        session.auto_repair()
        result = session.validation

    print(json.dumps(result.to_dict(), indent=2))

    filename, csv_text = session.export()
    out_path = args.out or filename
    with open(out_path, "w", encoding="utf-8", newline="") as f:
        f.write(csv_text)
    print(f"Cleaned CSV saved to: {out_path}")

    return 0 if result.is_valid else 2


if __name__ == "__main__":
    sys.exit(main())
