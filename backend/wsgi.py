"""WSGI entry for the booking API.

Serve it with any WSGI server from the backend directory, e.g.
``gunicorn wsgi:application``. Deployment settings (DATABASE_URL,
FRONTEND_URL, SECRET_KEY, DB_POOL_*) come from the environment or from
``backend/.env``; real environment variables win over the file.
"""

import os
import sys
from pathlib import Path

from dotenv import load_dotenv

BACKEND_DIR = Path(__file__).resolve().parent

if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

# Settings are read when rentacar is first imported
load_dotenv(BACKEND_DIR / ".env", override=False)
os.environ.setdefault("FLASK_ENV", "production")

from rentacar.main import app as application  # noqa: E402

__all__ = ["application"]
