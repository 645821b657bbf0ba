# app/smoke.py
"""Submit the example survey response to a running server.

    python -m app.smoke --url http://localhost:8000
"""
import argparse
import logging
import sys

from dotenv import load_dotenv

from app.services.form import SurveyForm

EXAMPLE = {
    "name": "Budi",
    "email": "budi@example.com",
    "rating": "5",
    "feedback": "Layanan sangat memuaskan",
}


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Send one survey response to /api/survey")
    parser.add_argument("--url", default=None, help="Base URL of the survey server (default: $SURVEY_API_URL)")
    parser.add_argument("--timeout", type=float, default=30)
    for field, value in EXAMPLE.items():
        parser.add_argument(f"--{field}", default=value)
    return parser.parse_args(argv)


def main(argv=None) -> int:
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    args = parse_args(argv)

    form = SurveyForm(base_url=args.url, timeout=args.timeout)
    for field in EXAMPLE:
        form.set_field(field, getattr(args, field))

    ok = form.submit()
    print(("✓ " if ok else "✗ ") + form.status)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
