"""
WSGI entry point for the site calculators.

Serve ``wsgi:app`` with any WSGI server; ``python wsgi.py --port 8000`` runs
the Flask development server.
"""

import argparse
import os

from moneylab import create_app
from moneylab.config import get_global_settings

app = create_app()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run the calculators locally")
    # PORT is set by most hosting platforms
    parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", 5000)))
    parser.add_argument("--host", default="0.0.0.0")
    args = parser.parse_args(argv)

    app.run(debug=get_global_settings().is_development, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
